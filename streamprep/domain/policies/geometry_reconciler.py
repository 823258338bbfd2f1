# streamprep/domain/policies/geometry_reconciler.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from streamprep.common.logging import get_logger
from streamprep.common.numeric.ratios import is_degenerate_ratio, parse_ratio
from streamprep.common.numeric.rounding import round_even, round_half_away
from streamprep.domain.dataclasses.warnings import PipelineWarning
from streamprep.domain.entities.geometry import CropRect, Geometry
from streamprep.domain.entities.probe import (
    ProbeResult,
    has_track,
    is_set,
    track_field,
)
from streamprep.domain.enums.warning_kind import WarningKind
from streamprep.domain.errors import GeometryError
from streamprep.domain.ports.probe import MetadataSourcePort

logger = get_logger(__name__)

_INTERLACE_RE = re.compile(r"interlace", re.IGNORECASE)


@dataclass(frozen=True)
class _Apertures:
    clean: str
    production: str
    encoded: str
    # tag-probe widths are in stored pixels and still need the PAR applied
    needs_par_correction: bool


class GeometryReconciler:
    """
    Cross-checks the container (mediainfo), stream (ffprobe) and tag
    (exiftool) probes and derives one Geometry for the whole run.

    Resolution rules:
      - PAR comes from ffprobe; when ffprobe only has the "0:1" placeholder
        for both SAR and DAR, mediainfo's PixelAspectRatio is used instead.
      - Clean-aperture data comes from the exiftool track tags when the
        track exists there, otherwise from mediainfo's *_CleanAperture fields.
      - A crop whose size does not match mediainfo's display size is fatal.
    """

    def __init__(self) -> None:
        self.warnings: List[PipelineWarning] = []

    # ---------------- public ----------------

    def reconcile(
        self, container: MetadataSourcePort, stream: MetadataSourcePort, tags: ProbeResult
    ) -> Geometry:
        self.warnings = []

        real_width = self._require_int(stream, "width")
        real_height = self._require_int(stream, "height")
        logger.debug("ffprobe Real Width: %s", real_width)
        logger.debug("ffprobe Real Height: %s", real_height)

        par = self._pixel_aspect_ratio(container, stream)

        src_width = self._first_int(container, "clean_aperture_width", "width")
        src_height = self._first_int(container, "clean_aperture_height", "height")
        if src_width is None or src_height is None:
            raise GeometryError(
                f"mediainfo reported no frame size (Width={container.get('width')!r}, "
                f"Height={container.get('height')!r})"
            )
        logger.debug("mediainfo Width: %s", src_width)
        logger.debug("mediainfo Height: %s", src_height)

        scan_type = container.get("scan_type")
        interlaced = bool(is_set(scan_type) and _INTERLACE_RE.search(str(scan_type)))
        logger.debug("Scan Type: %s", scan_type)
        logger.debug("Chroma Subsampling: %s", container.get("chroma_subsampling"))

        square_width = round_even(src_width * par)
        square_height = src_height
        logger.debug("Square pixel dimensions: %sx%s", square_width, square_height)

        apertures = self._apertures(container, tags)
        logger.debug("Clean Aperture Dimensions:      %s", apertures.clean)
        logger.debug("Production Aperture Dimensions: %s", apertures.production)
        logger.debug("Encoded Pixels Dimensions:      %s", apertures.encoded)

        crop = self._crop(apertures, par, src_width, src_height, real_width, real_height)

        return Geometry(
            real_width=real_width,
            real_height=real_height,
            source_width=src_width,
            source_height=src_height,
            pixel_aspect_ratio=par,
            square_width=square_width,
            square_height=square_height,
            interlaced=interlaced,
            crop=crop,
            video_index=self._optional_int(stream.get("video_index")),
            audio_index=self._optional_int(stream.get("audio_index")),
            pixel_format=self._optional_str(stream.get("pixel_format")),
            chroma_subsampling=self._optional_str(container.get("chroma_subsampling")),
            clean_aperture=apertures.clean,
            production_aperture=apertures.production,
            encoded_pixels=apertures.encoded,
        )

    # ---------------- internals ----------------

    def _pixel_aspect_ratio(self, container: MetadataSourcePort, stream: MetadataSourcePort) -> float:
        sar_raw = stream.get("sample_aspect_ratio")
        dar_raw = stream.get("display_aspect_ratio")
        logger.debug("ffprobe PAR string: %s", sar_raw)
        logger.debug("ffprobe DAR string: %s", dar_raw)

        par = self._ratio_or_none(sar_raw)
        both_degenerate = is_degenerate_ratio(sar_raw) and is_degenerate_ratio(dar_raw)
        if both_degenerate or not par:
            fallback = self._ratio_or_none(container.get("pixel_aspect_ratio"))
            logger.debug("mediainfo PAR: %s", container.get("pixel_aspect_ratio"))
            par = fallback if fallback else None
        if not par:
            logger.debug("No usable pixel aspect ratio reported; assuming square pixels")
            par = 1.0
        logger.debug("PAR: %.5f", par)
        return par

    def _apertures(self, container: MetadataSourcePort, tags: ProbeResult) -> _Apertures:
        track_id = container.get("track_id")
        logger.debug("Video Track ID: %s", track_id)

        clean = production = encoded = ""
        if has_track(tags, track_id):
            clean = self._text(track_field(tags, track_id, "CleanApertureDimensions"))
            production = self._text(track_field(tags, track_id, "ProductionApertureDimensions"))
            encoded = self._text(track_field(tags, track_id, "EncodedPixelsDimensions"))
            bad = [s for s in (clean, encoded) if s and not self._is_dims(s)]
            if bad:
                self._tag_data_unusable(
                    track_id, f"exiftool aperture {bad[0]!r} for video track {track_id} is malformed"
                )
                clean = production = encoded = ""
        else:
            self._tag_data_unusable(track_id, f"exiftool has no data for video track {track_id}")

        if clean:
            return _Apertures(clean, production, encoded, needs_par_correction=True)

        ca_width = container.get("clean_aperture_width")
        ca_height = container.get("clean_aperture_height")
        if is_set(ca_width) and is_set(ca_height):
            clean = f"{ca_width}x{ca_height}"
        encoded = f"{self._text(container.get('width'))}x{self._text(container.get('height'))}"
        return _Apertures(clean, production, encoded, needs_par_correction=False)

    def _crop(
        self,
        apertures: _Apertures,
        par: float,
        src_width: int,
        src_height: int,
        real_width: int,
        real_height: int,
    ) -> Optional[CropRect]:
        if not apertures.clean or not apertures.encoded or apertures.clean == apertures.encoded:
            return None

        clean_width, clean_height = self._split_dims(apertures.clean)
        if apertures.needs_par_correction:
            crop_width = round_half_away((1 / par) * clean_width)
        else:
            crop_width = round_half_away(clean_width)
        crop_height = round_half_away(clean_height)

        src_dim = f"{src_width}x{src_height}"
        crop_dim = f"{crop_width}x{crop_height}"
        if src_dim != crop_dim:
            raise GeometryError(
                f"Dimensions reported by mediainfo ({src_dim}) != Crop dimensions ({crop_dim})"
            )

        diff_w = real_width - crop_width
        diff_h = real_height - crop_height
        if diff_w < 0 or diff_h < 0:
            raise GeometryError(
                f"Crop dimensions ({crop_dim}) exceed encoded frame ({real_width}x{real_height})"
            )
        if diff_w % 2 or diff_h % 2:
            raise GeometryError(
                f"Crop dimensions ({crop_dim}) cannot be centered in encoded frame "
                f"({real_width}x{real_height})"
            )

        crop = CropRect(width=crop_width, height=crop_height, x=diff_w // 2, y=diff_h // 2)
        logger.debug("Crop filter parameters: %s", crop.filter_params)
        return crop

    def _tag_data_unusable(self, track_id: Any, reason: str) -> None:
        msg = f"{reason}; using mediainfo apertures"
        logger.warning(msg)
        self.warnings.append(PipelineWarning(WarningKind.tag_probe_unavailable, f"Track{track_id}", msg))

    # --- value helpers ---

    @classmethod
    def _is_dims(cls, text: str) -> bool:
        try:
            cls._split_dims(text)
        except GeometryError:
            return False
        return True

    @staticmethod
    def _split_dims(text: str) -> Tuple[float, float]:
        parts = text.lower().replace(" ", "").split("x")
        try:
            if len(parts) != 2:
                raise ValueError
            return float(parts[0]), float(parts[1])
        except ValueError:
            raise GeometryError(f"Malformed aperture dimensions {text!r}; expected WxH") from None

    @staticmethod
    def _ratio_or_none(raw: Any) -> Optional[float]:
        if not is_set(raw):
            return None
        try:
            value = parse_ratio(raw)
        except ValueError:
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return value

    @staticmethod
    def _text(value: Any) -> str:
        return "" if not is_set(value) else str(value).strip()

    @staticmethod
    def _optional_int(value: Any) -> Optional[int]:
        if not is_set(value):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _optional_str(value: Any) -> Optional[str]:
        return None if not is_set(value) else str(value)

    def _first_int(self, probe: MetadataSourcePort, *names: str) -> Optional[int]:
        for name in names:
            value = self._optional_int(probe.get(name))
            if value:
                return value
        return None

    def _require_int(self, probe: MetadataSourcePort, name: str) -> int:
        value = self._optional_int(probe.get(name))
        if value is None or value <= 0:
            raise GeometryError(f"{probe.source} probe reported no usable {name} ({probe.get(name)!r})")
        return value


def reconcile_geometry(
    container: MetadataSourcePort, stream: MetadataSourcePort, tags: ProbeResult
) -> Geometry:
    return GeometryReconciler().reconcile(container, stream, tags)
