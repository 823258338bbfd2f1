import pytest

from streamprep.common.numeric.rounding import round_even, round_half_away


def test_round_half_away_rounds_halves_up_not_to_even():
    assert round_half_away(2.5) == 3
    assert round_half_away(3.5) == 4
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4999) == 2


@pytest.mark.parametrize(
    "value, expected",
    [
        (1920 * (1280 / 1920), 1280),
        (853.33, 854),
        (359.0, 360),   # 179.5 rounds away from zero
        (361.0, 362),
        (480.0, 480),
        (0.4, 0),
    ],
)
def test_round_even_known_values(value, expected):
    assert round_even(value) == expected


@pytest.mark.parametrize("value", [1.0, 3.3, 17.99, 359.5, 640.0, 1079.9, 4095.01])
def test_round_even_is_even_and_within_one(value):
    out = round_even(value)
    assert out % 2 == 0
    assert abs(out - value) <= 1
