from __future__ import annotations
from enum import StrEnum

class WarningKind(StrEnum):
    upscale = "upscale"
    malformed_timecode = "malformed_timecode"
    output_exists = "output_exists"
    tag_probe_unavailable = "tag_probe_unavailable"
