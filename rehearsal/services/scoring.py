"""Turn alignment counts into an accuracy percentage and a pass/fail verdict.

Tolerance scales with the line length: long speeches may drop or add a
few words, short lines may not.  Strict mode tolerates nothing.  Any
substitution fails the line whatever the percentage says, because
"old" for "young" is a wrong line, not a close one.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceBand:
    allowed_missing: int
    allowed_extra: int
    min_accuracy: int


STRICT_BAND = ToleranceBand(allowed_missing=0, allowed_extra=0, min_accuracy=100)
LONG_LINE_BAND = ToleranceBand(allowed_missing=3, allowed_extra=3, min_accuracy=85)
MEDIUM_LINE_BAND = ToleranceBand(allowed_missing=2, allowed_extra=2, min_accuracy=90)
SHORT_LINE_BAND = ToleranceBand(allowed_missing=1, allowed_extra=1, min_accuracy=90)


def tolerance_for(effective_word_count: int, strict_mode: bool = False) -> ToleranceBand:
    if strict_mode:
        return STRICT_BAND
    if effective_word_count > 20:
        return LONG_LINE_BAND
    if effective_word_count > 10:
        return MEDIUM_LINE_BAND
    return SHORT_LINE_BAND


def compute_accuracy(matched_count: int, effective_word_count: int) -> int:
    """Whole-number percentage; an empty line counts as fully matched."""
    if effective_word_count <= 0:
        return 100
    # halves round up, unlike round()
    return int(matched_count * 100 / effective_word_count + 0.5)


def is_passing(
    accuracy: int,
    missing: int,
    extra: int,
    wrong: int,
    band: ToleranceBand,
) -> bool:
    return (
        wrong == 0
        and accuracy >= band.min_accuracy
        and missing <= band.allowed_missing
        and extra <= band.allowed_extra
    )
