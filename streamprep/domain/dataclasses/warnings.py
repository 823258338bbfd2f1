# streamprep/domain/dataclasses/warnings.py
from __future__ import annotations

from dataclasses import dataclass

from streamprep.domain.enums.warning_kind import WarningKind


@dataclass(frozen=True)
class PipelineWarning:
    """A recoverable condition surfaced to the caller (logged and kept in the report)."""
    kind: WarningKind
    subject: str      # file path, profile label or input line
    message: str

    def __str__(self) -> str:
        return self.message
