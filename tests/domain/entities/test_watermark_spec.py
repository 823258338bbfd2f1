from pathlib import Path

import pytest

from streamprep.domain.entities.watermark import WatermarkSpec
from streamprep.domain.enums.watermark_position import WatermarkPosition


def test_parse_file_only_uses_defaults():
    spec = WatermarkSpec.parse("logo.png")
    assert spec.path == Path("logo.png")
    assert spec.position is WatermarkPosition.BR
    assert spec.width_percent == 40.0


def test_parse_orientation_case_insensitive_and_percent():
    spec = WatermarkSpec.parse("logo.png:tl:25")
    assert spec.position is WatermarkPosition.TL
    assert spec.width_percent == 25.0

    spec = WatermarkSpec.parse("logo.png::10")
    assert spec.position is WatermarkPosition.BR
    assert spec.width_percent == 10.0


def test_parse_rejects_bad_orientation():
    with pytest.raises(ValueError, match="Incorrect watermark orientation 'XY'"):
        WatermarkSpec.parse("logo.png:XY")


@pytest.mark.parametrize("text", ["", ":TL", "logo.png:TL:0", "logo.png:TL:150", "logo.png:TL:big", "a:b:c:d"])
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        WatermarkSpec.parse(text)
