# streamprep/domain/entities/profile.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from streamprep.common.numeric.bitrates import bitrate_magnitude, format_kbps
from streamprep.common.strings.splitters import split_dimensions

AUTO = -1


def parse_target_dimensions(raw: str) -> Tuple[int, int]:
    """
    "640x360" -> (640, 360); "640xauto" -> (640, -1); "autox480" -> (-1, 480).
    At most one axis may be auto.
    """
    w_raw, h_raw = split_dimensions(raw)
    axes = []
    for axis in (w_raw, h_raw):
        if axis == "auto":
            axes.append(AUTO)
            continue
        if not axis.isdigit() or int(axis) <= 0:
            raise ValueError(f"invalid dimension {axis!r} in {raw!r}")
        axes.append(int(axis))
    if axes[0] == AUTO and axes[1] == AUTO:
        raise ValueError(f"only one axis may be 'auto' in {raw!r}")
    return axes[0], axes[1]


@dataclass(frozen=True)
class EncodingProfile:
    """
    One output rendition definition, read-only after load.
    `device` is free text; anything containing "mobile" gets the
    baseline-friendly codec settings.
    """
    dimensions: str
    vbitrate: str
    abitrate: str
    enabled: bool = True
    device: str = ""
    vbufsize: Optional[str] = None

    def __post_init__(self):
        try:
            parse_target_dimensions(self.dimensions)
            bitrate_magnitude(self.vbitrate)
            bitrate_magnitude(self.abitrate)
            if self.vbufsize:
                bitrate_magnitude(self.vbufsize)
        except ValueError as exc:
            raise ValueError(f"EncodingProfile: {exc}") from exc

    @property
    def target_dimensions(self) -> Tuple[int, int]:
        return parse_target_dimensions(self.dimensions)

    @property
    def is_mobile(self) -> bool:
        return "mobile" in (self.device or "").lower()

    @property
    def video_bufsize(self) -> str:
        """Explicit buffer size, or twice the video bitrate."""
        if self.vbufsize:
            return self.vbufsize
        return format_kbps(bitrate_magnitude(self.vbitrate) * 2)

    @property
    def total_bitrate(self) -> str:
        total = bitrate_magnitude(self.vbitrate) + bitrate_magnitude(self.abitrate)
        return format_kbps(total)
