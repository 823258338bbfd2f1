# streamprep/common/numeric/ratios.py
from __future__ import annotations

from typing import Any


def parse_ratio(raw: Any) -> float:
    """
    Parse an aspect ratio like "16:9" (ffprobe) or "1.067" (mediainfo) to a float.

    A zero denominator yields the numerator unchanged, so "0:0" is 0.0 and
    "4:0" is 4.0. Raises ValueError for anything that is not a number or N:D pair.
    """
    if isinstance(raw, bool):
        raise ValueError(f"not an aspect ratio: {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip() if raw is not None else ""
    if not text:
        raise ValueError("empty aspect ratio")
    if ":" not in text and "/" not in text:
        return float(text)
    sep = ":" if ":" in text else "/"
    num_s, den_s = text.split(sep, 1)
    num = float(num_s)
    den = float(den_s)
    if den == 0:
        return num
    return num / den


def is_degenerate_ratio(raw: Any) -> bool:
    """True for the "0:1" placeholder ffprobe writes when it has no ratio."""
    return str(raw).strip() == "0:1"
