from __future__ import annotations
from pathlib import Path
from typing import Any, Protocol
from streamprep.domain.entities.probe import ProbeResult
from streamprep.domain.enums.probe_source import ProbeSource

class MetadataSourcePort(Protocol):
    source: ProbeSource
    def get(self, name: str) -> Any: ...

class MediaProbePort(Protocol):
    source: ProbeSource
    def probe(self, path: Path) -> ProbeResult: ...
