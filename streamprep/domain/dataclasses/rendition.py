# streamprep/domain/dataclasses/rendition.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from streamprep.domain.dataclasses.warnings import PipelineWarning
from streamprep.domain.entities.profile import EncodingProfile
from streamprep.domain.enums.codec_profile import AacProfile, H264Level, H264Profile


@dataclass(frozen=True)
class RenditionPlan:
    """
    Dataclass returned by ProfileExpander.expand(): everything the command
    builder needs for one output file.
    """
    profile: EncodingProfile
    width: int                 # even
    height: int                # even
    scale_ratio: float
    h264_profile: H264Profile
    h264_level: H264Level
    aac_profile: AacProfile
    video_bitrate: str         # "1000k"
    video_bufsize: str         # "2000k" unless the profile says otherwise
    audio_bitrate: str         # "128k"
    total_bitrate: str         # "1128k"
    output_path: Path          # <prefix>_<total>[_<device>][_<suffix>].mp4
    warnings: Tuple[PipelineWarning, ...] = field(default_factory=tuple)

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def short_name(self) -> str:
        return self.output_path.stem

    def as_dict(self) -> dict:
        return {
            "device": self.profile.device,
            "dimensions": self.dimensions,
            "scale_ratio": self.scale_ratio,
            "h264_profile": str(self.h264_profile),
            "h264_level": str(self.h264_level),
            "aac_profile": str(self.aac_profile),
            "video_bitrate": self.video_bitrate,
            "video_bufsize": self.video_bufsize,
            "audio_bitrate": self.audio_bitrate,
            "total_bitrate": self.total_bitrate,
            "output_path": str(self.output_path),
        }
