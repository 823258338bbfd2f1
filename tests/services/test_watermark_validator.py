import pytest
from PIL import Image

from streamprep.domain.enums.watermark_position import WatermarkPosition
from streamprep.domain.errors import ConfigError
from streamprep.services.watermark.validator import image_size, load_watermark


def _png(path, size=(200, 50)):
    Image.new("RGBA", size, (255, 255, 255, 128)).save(path, format="PNG")
    return path


def test_load_watermark_ok(tmp_path):
    logo = _png(tmp_path / "logo.png")
    spec = load_watermark(f"{logo}:tr:15")
    assert spec.path == logo
    assert spec.position is WatermarkPosition.TR
    assert spec.width_percent == 15.0
    assert image_size(logo) == (200, 50)


def test_load_watermark_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="doesn't exist"):
        load_watermark(str(tmp_path / "nope.png"))


def test_load_watermark_not_an_image(tmp_path):
    bogus = tmp_path / "logo.png"
    bogus.write_text("definitely not a png", encoding="utf-8")
    with pytest.raises(ConfigError, match="not a readable image"):
        load_watermark(str(bogus))


def test_load_watermark_bad_orientation(tmp_path):
    logo = _png(tmp_path / "logo.png")
    with pytest.raises(ConfigError, match="Incorrect watermark orientation"):
        load_watermark(f"{logo}:middle")
