# streamprep/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


class StreamprepError(RuntimeError):
    """Base class for every error that aborts a conversion run."""


class GeometryError(StreamprepError):
    """Probe metadata cannot be reconciled into one consistent frame geometry."""


class ProfileError(StreamprepError):
    """An encoding profile definition is missing, unreadable or malformed."""


class ConfigError(StreamprepError):
    """Bad configuration or command-line input (tool paths, files, watermark)."""


class ProbeError(StreamprepError):
    """A probe tool produced output that cannot be parsed."""


@dataclass(eq=False)
class CommandError(StreamprepError):
    """An external program exited with a failing status."""
    message: str
    cmd: Sequence[str] = ()
    output: Optional[str] = None
    rc: Optional[int] = None

    def __str__(self) -> str:
        text = f"{self.message} (status: {self.rc})"
        if self.output:
            text += f", output: {self.output.strip()}"
        return text
