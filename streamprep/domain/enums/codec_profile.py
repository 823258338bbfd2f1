# streamprep/domain/enums/codec_profile.py
from __future__ import annotations

from enum import StrEnum


class H264Profile(StrEnum):
    main = "main"
    high = "high"


class H264Level(StrEnum):
    L3_1 = "3.1"
    L4_1 = "4.1"


class AacProfile(StrEnum):
    # values are libfdk_aac -profile:a names
    HE = "aac_he"
    LC = "aac_low"
