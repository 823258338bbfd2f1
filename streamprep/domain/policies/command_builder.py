# streamprep/domain/policies/command_builder.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from streamprep.common.logging import get_logger
from streamprep.common.numeric.rounding import round_even
from streamprep.domain.dataclasses.rendition import RenditionPlan
from streamprep.domain.entities.geometry import Geometry
from streamprep.domain.entities.watermark import WatermarkSpec
from streamprep.domain.enums.watermark_position import WatermarkPosition
from streamprep.domain.policies.keyframes import force_keyframes_expr

logger = get_logger(__name__)

# Overlay coordinates with a 10 pixel margin. C subtracts the margin before
# halving, so it sits 5px up and left of true center.
WATERMARK_COORDS: Dict[WatermarkPosition, str] = {
    WatermarkPosition.TL: "10:10",
    WatermarkPosition.TR: "main_w-overlay_w-10:10",
    WatermarkPosition.BL: "10:main_h-overlay_h-10",
    WatermarkPosition.BR: "main_w-overlay_w-10:main_h-overlay_h-10",
    WatermarkPosition.C: "(main_w-overlay_w-10)/2:(main_h-overlay_h-10)/2",
}

TEST_DURATION_SEC = 30


class CommandBuilder:
    """
    Builds the ffmpeg argument list for one RenditionPlan.
    Pure: nothing is executed or touched on disk here.
    """

    def __init__(
        self,
        geometry: Geometry,
        input_file: Path | str,
        *,
        ffmpeg_bin: Path | str = "ffmpeg",
        video_preset: Optional[str] = None,
        watermark: Optional[WatermarkSpec] = None,
        keyframe_timecodes: Sequence[str] = (),
        audio_delay: float = 0.0,
        quiet: bool = False,
        test: bool = False,
    ) -> None:
        self.geometry = geometry
        self.input_file = str(input_file)
        self.ffmpeg_bin = str(ffmpeg_bin)
        self.video_preset = video_preset
        self.watermark = watermark
        self.keyframe_timecodes = tuple(keyframe_timecodes)
        self.audio_delay = float(audio_delay or 0.0)
        self.quiet = quiet
        self.test = test

    # ---------------- public ----------------

    def watermark_width(self, plan: RenditionPlan) -> Optional[int]:
        if self.watermark is None:
            return None
        return round_even(plan.width * (self.watermark.width_percent / 100))

    def video_filter(self, plan: RenditionPlan) -> str:
        vf = ""
        if self.watermark is not None:
            vf += f"movie={self.watermark.path},scale={self.watermark_width(plan)}:-1 [watermark]; [in] "
        if self.geometry.crop is not None:
            vf += f"crop={self.geometry.crop.filter_params},"
        vf += f"scale={plan.width}:{plan.height},setsar=1:1"
        if self.watermark is not None:
            coords = WATERMARK_COORDS[self.watermark.position]
            vf += f" [tmp]; [tmp][watermark] overlay={coords} [out]"
        return vf

    def force_keyframes(self) -> str:
        return force_keyframes_expr(self.keyframe_timecodes)

    def build(self, plan: RenditionPlan, output_file: Path | str) -> List[str]:
        cmd: List[str] = [self.ffmpeg_bin]

        if self.quiet:
            cmd += ["-nostats", "-loglevel", "warning"]

        cmd += ["-i", self.input_file]

        if self.audio_delay > 0:
            cmd += [
                "-itsoffset", f"{self.audio_delay:.3f}",
                "-i", self.input_file,
                "-map", f"0:{self._stream_index(self.geometry.video_index, 'v:0')}",
                "-map", f"1:{self._stream_index(self.geometry.audio_index, 'a:0')}",
            ]

        cmd += [
            "-sn",
            "-map_metadata", "-1",
            "-map_chapters", "-1",
            "-vcodec", "libx264",
            "-profile:v", str(plan.h264_profile),
            "-level", str(plan.h264_level),
            "-b:v", plan.video_bitrate,
            "-minrate", plan.video_bitrate,
            "-maxrate", plan.video_bitrate,
            "-bufsize", plan.video_bufsize,
            "-vf", self.video_filter(plan),
            "-pix_fmt", "yuv420p",
            "-force_key_frames", self.force_keyframes(),
        ]

        if self.video_preset:
            cmd += ["-vpre", self.video_preset]

        if self.geometry.interlaced:
            logger.debug("Setting ffmpeg to deinterlace video")
            cmd.append("-deinterlace")

        cmd += [
            "-acodec", "libfdk_aac",
            "-profile:a", str(plan.aac_profile),
            "-ab", plan.audio_bitrate,
            "-ac", "2",
            "-ar", "44100",
            "-cutoff", "18000",
            "-movflags", "+faststart",
            "-threads", "0",
        ]

        if self.test:
            cmd += ["-t", str(TEST_DURATION_SEC)]

        cmd.append(str(output_file))
        return cmd

    # ---------------- internals ----------------

    @staticmethod
    def _stream_index(index: Optional[int], fallback: str) -> str:
        # ffprobe could not tell; select the first stream of the type instead
        return str(index) if index is not None else fallback
