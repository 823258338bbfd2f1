# streamprep/domain/dataclasses/reports.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from streamprep.domain.dataclasses.rendition import RenditionPlan
from streamprep.domain.dataclasses.warnings import PipelineWarning
from streamprep.domain.entities.geometry import Geometry


# ---------------------------------------------------------------------------
# Base report (shared fields + utilities)
# ---------------------------------------------------------------------------
@dataclass
class BaseReport:
    """Common report base:
    - timing: started_at / finished_at
    - error capture: error_details
    - helpers: start(), stop(), add_error()
    """
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    # Each tuple is (subject/id/path, message)
    error_details: List[Tuple[str, str]] = field(default_factory=list)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = datetime.now()

    def stop(self) -> None:
        self.finished_at = datetime.now()

    def add_error(self, subject: str, message: str) -> None:
        self.error_details.append((subject, message))

    @property
    def elapsed_sec(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


# ---------------------------------------------------------------------------
# Conversion report
# ---------------------------------------------------------------------------
@dataclass
class ConversionReport(BaseReport):
    geometry: Optional[Geometry] = None
    planned: int = 0          # enabled profiles considered
    encoded: int = 0          # renditions written to their final path
    skipped: int = 0          # output existed and force was off
    published: int = 0        # playback pages written

    plans: List[RenditionPlan] = field(default_factory=list)
    commands: List[List[str]] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    warnings: List[PipelineWarning] = field(default_factory=list)

    def warn(self, warning: PipelineWarning) -> None:
        self.warnings.append(warning)

    def extend_warnings(self, warnings) -> None:
        self.warnings.extend(warnings)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "planned": self.planned,
            "encoded": self.encoded,
            "skipped": self.skipped,
            "published": self.published,
            "outputs": [str(p) for p in self.outputs],
            "renditions": [p.as_dict() for p in self.plans],
            "warnings": [
                {"kind": str(w.kind), "subject": w.subject, "message": w.message}
                for w in self.warnings
            ],
            "errors": [list(e) for e in self.error_details],
        }
