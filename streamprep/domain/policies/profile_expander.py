# streamprep/domain/policies/profile_expander.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from streamprep.common.logging import get_logger
from streamprep.common.numeric.rounding import round_even
from streamprep.domain.dataclasses.rendition import RenditionPlan
from streamprep.domain.dataclasses.warnings import PipelineWarning
from streamprep.domain.entities.geometry import Geometry
from streamprep.domain.entities.profile import AUTO, EncodingProfile
from streamprep.domain.enums.codec_profile import AacProfile, H264Level, H264Profile
from streamprep.domain.enums.warning_kind import WarningKind
from streamprep.domain.ports.files import FileOpsPort

logger = get_logger(__name__)

OUTPUT_EXT = ".mp4"


class ProfileExpander:
    """
    Turns one EncodingProfile plus the shared Geometry into a RenditionPlan:
    final even dimensions (aspect preserved, at most one free axis), codec
    tiers for the device class, bitrate totals and the output file name.
    """

    def __init__(
        self,
        geometry: Geometry,
        output_prefix: Path | str,
        *,
        name_suffix: Optional[str] = None,
        force: bool = False,
        file_ops: Optional[FileOpsPort] = None,
    ) -> None:
        self.geometry = geometry
        self.output_prefix = str(output_prefix)
        self.name_suffix = name_suffix or ""
        self.force = force
        self.file_ops = file_ops

    # ---------------- public ----------------

    def expand(self, profile: EncodingProfile) -> RenditionPlan:
        warnings: List[PipelineWarning] = []
        sq_w = self.geometry.square_width
        sq_h = self.geometry.square_height

        scale_ratio = self.scale_ratio(profile)
        logger.debug("Scale Ratio: %s", scale_ratio)

        width = round_even(sq_w * scale_ratio)
        height = round_even(sq_h * scale_ratio)
        dims = f"{width}x{height}"

        if scale_ratio > 1:
            msg = (
                f"Output dimensions ({dims}) are greater than original "
                f"dimensions ({sq_w}x{sq_h})."
            )
            logger.warning(msg)
            warnings.append(PipelineWarning(WarningKind.upscale, profile.dimensions, msg))
        logger.debug("New Dimensions: %s", dims)

        if profile.is_mobile:
            h264_profile, h264_level, aac_profile = H264Profile.main, H264Level.L3_1, AacProfile.HE
        else:
            h264_profile, h264_level, aac_profile = H264Profile.high, H264Level.L4_1, AacProfile.LC

        total_bitrate = profile.total_bitrate
        logger.debug("Total bitrate: %s", total_bitrate)

        output_path = self.output_path(profile)
        logger.debug("Output file: %s", output_path)

        return RenditionPlan(
            profile=profile,
            width=width,
            height=height,
            scale_ratio=scale_ratio,
            h264_profile=h264_profile,
            h264_level=h264_level,
            aac_profile=aac_profile,
            video_bitrate=profile.vbitrate,
            video_bufsize=profile.video_bufsize,
            audio_bitrate=profile.abitrate,
            total_bitrate=total_bitrate,
            output_path=output_path,
            warnings=tuple(warnings),
        )

    def scale_ratio(self, profile: EncodingProfile) -> float:
        max_width, max_height = profile.target_dimensions
        ratio_w = max_width / self.geometry.square_width
        ratio_h = max_height / self.geometry.square_height
        logger.debug("Ratio width: %s", ratio_w)
        logger.debug("Ratio height: %s", ratio_h)
        if max_width == AUTO:
            return ratio_h
        if max_height == AUTO:
            return ratio_w
        return min(ratio_w, ratio_h)

    def output_path(self, profile: EncodingProfile) -> Path:
        name = f"{self.output_prefix}_{profile.total_bitrate}"
        if profile.device:
            name += f"_{profile.device}"
        if self.name_suffix:
            name += f"_{self.name_suffix}"
        return Path(name + OUTPUT_EXT)

    def claim_output(self, plan: RenditionPlan) -> Optional[PipelineWarning]:
        """
        Make sure the plan may write its output file.
        Returns None when the profile can proceed (removing an existing file if
        force is set), or the warning explaining why it is skipped.
        """
        if self.file_ops is None or not self.file_ops.file_exists(plan.output_path):
            return None
        if self.force:
            logger.info("Force option set, forcing removal of '%s'", plan.output_path)
            self.file_ops.remove_file(plan.output_path)
            return None
        msg = f"Output file '{plan.output_path}' already exists."
        logger.warning(msg)
        return PipelineWarning(WarningKind.output_exists, str(plan.output_path), msg)
