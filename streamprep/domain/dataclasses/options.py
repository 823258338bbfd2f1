# streamprep/domain/dataclasses/options.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from streamprep.domain.entities.watermark import WatermarkSpec


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation switches, built once by the CLI and passed down unchanged."""
    input_file: Path
    output_prefix: Optional[Path] = None
    force: bool = False          # replace existing outputs instead of skipping them
    test: bool = False           # only encode the first 30 seconds
    quiet: bool = False
    dry_run: bool = False        # build commands, run nothing
    audio_delay: float = 0.0     # seconds
    keyframe_file: Optional[Path] = None     # HH:MM:SS.mmm per line
    watermark: Optional[WatermarkSpec] = None

    def resolved_output_prefix(self) -> Path:
        """Explicit prefix, else the input path without its extension."""
        if self.output_prefix:
            return Path(self.output_prefix)
        src = Path(self.input_file)
        return src.with_suffix("") if src.suffix else src
