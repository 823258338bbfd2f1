# streamprep/domain/entities/watermark.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from streamprep.domain.enums.watermark_position import WatermarkPosition

DEFAULT_POSITION = WatermarkPosition.BR
DEFAULT_WIDTH_PERCENT = 40.0


@dataclass(frozen=True)
class WatermarkSpec:
    """
    Overlay image burned into every rendition. The image is scaled to
    `width_percent` of the output width and placed at `position`.
    """
    path: Path
    position: WatermarkPosition = DEFAULT_POSITION
    width_percent: float = DEFAULT_WIDTH_PERCENT

    def __post_init__(self):
        if not str(self.path).strip():
            raise ValueError("You must specify a watermark file.")
        if not (0 < self.width_percent <= 100):
            raise ValueError(
                f"Watermark width percentage must be in (0, 100], got {self.width_percent:g}"
            )

    @classmethod
    def parse(cls, text: str) -> "WatermarkSpec":
        """Parse FILE[:ORIENTATION[:WIDTH_PERCENT]]; empty parts take the defaults."""
        parts = (text or "").split(":")
        file_part = parts[0].strip() if parts else ""
        orient_part = parts[1].strip() if len(parts) > 1 else ""
        pct_part = parts[2].strip() if len(parts) > 2 else ""
        if len(parts) > 3:
            raise ValueError(f"Malformed watermark option {text!r}; expected FILE[:ORIENTATION[:WIDTH_PERCENT]]")
        if not file_part:
            raise ValueError("You must specify a watermark file.")

        position = DEFAULT_POSITION
        if orient_part:
            try:
                position = WatermarkPosition(orient_part.upper())
            except ValueError:
                raise ValueError(
                    f"Incorrect watermark orientation '{orient_part}'. Must be one of TL|TR|BL|BR|C"
                ) from None

        width_percent = DEFAULT_WIDTH_PERCENT
        if pct_part:
            try:
                width_percent = float(pct_part)
            except ValueError:
                raise ValueError(f"Watermark width percentage must be a number, got {pct_part!r}") from None

        return cls(path=Path(file_part), position=position, width_percent=width_percent)
