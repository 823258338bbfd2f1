from __future__ import annotations
from enum import StrEnum

class ProbeSource(StrEnum):
    container = "container"   # mediainfo
    stream = "stream"         # ffprobe
    tag = "tag"               # exiftool
