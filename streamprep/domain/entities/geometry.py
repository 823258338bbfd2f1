# streamprep/domain/entities/geometry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CropRect:
    width: int
    height: int
    x: int
    y: int

    @property
    def filter_params(self) -> str:
        """Argument string for the ffmpeg crop filter (w:h:x:y)."""
        return f"{self.width}:{self.height}:{self.x}:{self.y}"


@dataclass(frozen=True)
class Geometry:
    """
    Frame geometry derived once per run from the three probes and shared
    read-only by every rendition.

    real_*    encoded frame size as decoded by ffprobe
    source_*  display size reported by mediainfo (clean aperture when known)
    square_*  source size corrected by the pixel aspect ratio
    """
    real_width: int
    real_height: int
    source_width: int
    source_height: int
    pixel_aspect_ratio: float
    square_width: int
    square_height: int
    interlaced: bool = False
    crop: Optional[CropRect] = None

    video_index: Optional[int] = None
    audio_index: Optional[int] = None
    pixel_format: Optional[str] = None
    chroma_subsampling: Optional[str] = None

    clean_aperture: str = ""
    production_aperture: str = ""
    encoded_pixels: str = ""

    @property
    def square_dimensions(self) -> str:
        return f"{self.square_width}x{self.square_height}"
