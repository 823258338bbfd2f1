# streamprep/common/numeric/bitrates.py
from __future__ import annotations

import re

_BITRATE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*k?\s*$", re.IGNORECASE)


def bitrate_magnitude(value: str | int | float) -> float:
    """
    Numeric part of an ffmpeg bitrate like "1000k" (the k unit is implied).
    Raises ValueError for anything else.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    m = _BITRATE_RE.match(str(value))
    if not m:
        raise ValueError(f"invalid bitrate {value!r}; expected e.g. '1000k'")
    return float(m.group(1))


def format_kbps(magnitude: float) -> str:
    if float(magnitude).is_integer():
        return f"{int(magnitude)}k"
    return f"{magnitude:g}k"
