# streamprep/services/watermark/validator.py
from __future__ import annotations

from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from streamprep.common.logging import get_logger
from streamprep.domain.entities.watermark import WatermarkSpec
from streamprep.domain.errors import ConfigError

logger = get_logger(__name__)


def image_size(path: Path) -> Tuple[int, int]:
    with Image.open(path) as im:
        im.verify()
        return im.size


def load_watermark(text: str) -> WatermarkSpec:
    """
    Parse FILE[:ORIENTATION[:WIDTH_PERCENT]] and check the image once, up
    front, so a bad watermark aborts the run before any encoding starts.
    """
    try:
        spec = WatermarkSpec.parse(text)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    if not spec.path.is_file():
        raise ConfigError(f"Watermark file '{spec.path}' doesn't exist.")
    try:
        width, height = image_size(spec.path)
    except (UnidentifiedImageError, OSError) as e:
        raise ConfigError(f"Watermark file '{spec.path}' is not a readable image: {e}") from e

    logger.debug(
        "Watermark %s (%sx%s) at %s, %g%% of output width",
        spec.path, width, height, spec.position, spec.width_percent,
    )
    return spec
