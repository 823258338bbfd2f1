# streamprep/domain/entities/probe.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from streamprep.domain.enums.probe_source import ProbeSource


class _Unset:
    """Marker for a field the probe did not report. Falsy, never equal to 0."""
    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):
        return (_Unset, ())


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


def _normalize(value: Any) -> Any:
    if value is None:
        return UNSET
    if isinstance(value, str):
        value = value.strip()
        return value if value else UNSET
    return value


@dataclass(frozen=True)
class ProbeResult:
    """
    Normalized, framework-free result of one metadata probe.
    A flat, read-only lookup from logical field name to the value the tool
    reported; anything the tool left out reads back as UNSET.
    """
    source: ProbeSource
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        cleaned = {}
        for k, v in dict(self.fields).items():
            v = _normalize(v)
            if v is not UNSET:
                cleaned[str(k)] = v
        object.__setattr__(self, "fields", MappingProxyType(cleaned))

    def get(self, name: str) -> Any:
        return self.fields.get(name, UNSET)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def track_key(track_id: Any, name: str) -> str:
    """exiftool -G1 key for a per-track QuickTime tag, e.g. "Track1:CleanApertureDimensions"."""
    return f"Track{track_id}:{name}"


def has_track(tags: ProbeResult, track_id: Any) -> bool:
    if not is_set(track_id):
        return False
    return is_set(tags.get(track_key(track_id, "TrackID")))


def track_field(tags: ProbeResult, track_id: Any, name: str) -> Any:
    """Per-track tag lookup; a missing track or field is UNSET, never an error."""
    if not is_set(track_id):
        return UNSET
    return tags.get(track_key(track_id, name))
