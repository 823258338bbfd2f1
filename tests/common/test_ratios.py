import pytest

from streamprep.common.numeric.ratios import is_degenerate_ratio, parse_ratio


def test_parse_ratio_colon_and_slash_forms():
    assert parse_ratio("16:9") == pytest.approx(16 / 9)
    assert parse_ratio("10/11") == pytest.approx(10 / 11)
    assert parse_ratio("1:1") == 1.0


def test_parse_ratio_plain_numbers():
    assert parse_ratio("1.067") == pytest.approx(1.067)
    assert parse_ratio(1) == 1.0
    assert parse_ratio(0.9) == 0.9


def test_parse_ratio_zero_denominator_returns_numerator():
    assert parse_ratio("4:0") == 4.0
    assert parse_ratio("0:0") == 0.0


@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "1:b", True])
def test_parse_ratio_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_ratio(raw)


def test_parse_ratio_does_not_evaluate_expressions():
    with pytest.raises(ValueError):
        parse_ratio("__import__('os')")


def test_is_degenerate_ratio():
    assert is_degenerate_ratio("0:1")
    assert is_degenerate_ratio(" 0:1 ")
    assert not is_degenerate_ratio("1:1")
    assert not is_degenerate_ratio(None)
