from streamprep.domain.enums.codec_profile import AacProfile, H264Level, H264Profile
from streamprep.domain.enums.probe_source import ProbeSource
from streamprep.domain.enums.warning_kind import WarningKind
from streamprep.domain.enums.watermark_position import WatermarkPosition
__all__ = [
    "AacProfile",
    "H264Level",
    "H264Profile",
    "ProbeSource",
    "WarningKind",
    "WatermarkPosition",
]
