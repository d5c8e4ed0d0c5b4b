import pytest

from rehearsal.services.scoring import (
    LONG_LINE_BAND,
    MEDIUM_LINE_BAND,
    SHORT_LINE_BAND,
    STRICT_BAND,
    compute_accuracy,
    is_passing,
    tolerance_for,
)


@pytest.mark.parametrize(
    "count,band",
    [(1, SHORT_LINE_BAND), (10, SHORT_LINE_BAND), (11, MEDIUM_LINE_BAND),
     (20, MEDIUM_LINE_BAND), (21, LONG_LINE_BAND)],
)
def test_band_by_line_length(count, band):
    assert tolerance_for(count) == band


def test_strict_mode_band():
    assert tolerance_for(30, strict_mode=True) == STRICT_BAND


def test_accuracy_rounds_half_up():
    assert compute_accuracy(1, 8) == 13  # 12.5
    assert compute_accuracy(11, 13) == 85
    assert compute_accuracy(0, 0) == 100
    assert compute_accuracy(0, 5) == 0


def test_any_wrong_word_fails():
    assert not is_passing(100, 0, 0, 1, LONG_LINE_BAND)
    assert is_passing(90, 1, 1, 0, SHORT_LINE_BAND)
    assert not is_passing(90, 2, 0, 0, SHORT_LINE_BAND)
