"""Decide whether an expected script word and a spoken word are "the same".

Checks run cheapest first and stop at the first hit:

1. exact match
2. equivalence table (either word as key)
3. Jaro-Winkler >= threshold, only for proper nouns / known character names
4. bounded edit distance (1 for short words, 2 when both are 6+ chars)
5. equal Soundex codes

Fuzzy similarity is limited to names on purpose: ordinary words that look
alike ("old" / "young" score surprisingly well) must never pass.
"""

from __future__ import annotations

import logging
from typing import AbstractSet

from rapidfuzz.distance import Levenshtein

from rehearsal.services.lexicon import DEFAULT_LEXICON, Lexicon
from rehearsal.services.normalization import Token

logger = logging.getLogger(__name__)

NAME_SIMILARITY_THRESHOLD = 0.80
WINKLER_PREFIX_SCALE = 0.1
WINKLER_MAX_PREFIX = 4


def jaro(a: str, b: str) -> float:
    """Jaro similarity with half-counted (not floored) transpositions."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    window = max(len(a), len(b)) // 2 - 1
    a_matched = [False] * len(a)
    b_matched = [False] * len(b)
    matches = 0
    for i, ch in enumerate(a):
        for j in range(max(0, i - window), min(i + window + 1, len(b))):
            if not b_matched[j] and b[j] == ch:
                a_matched[i] = b_matched[j] = True
                matches += 1
                break
    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i, ch in enumerate(a):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if ch != b[k]:
            transpositions += 1
        k += 1

    return (
        matches / len(a) + matches / len(b) + (matches - transpositions / 2) / matches
    ) / 3


def jaro_winkler(a: str, b: str, prefix_scale: float = WINKLER_PREFIX_SCALE) -> float:
    """Jaro similarity plus a bonus for a shared prefix of up to 4 chars."""
    score = jaro(a, b)
    prefix = 0
    for ca, cb in zip(a[:WINKLER_MAX_PREFIX], b[:WINKLER_MAX_PREFIX]):
        if ca != cb:
            break
        prefix += 1
    return score + prefix * prefix_scale * (1 - score)


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance."""
    return Levenshtein.distance(a, b)


_SOUNDEX_CODES = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}


def soundex(word: str) -> str:
    """4-character Soundex code.

    Vowels, H, W, Y and any non-letter reset the "previous digit", so a
    repeated consonant sound separated by one of them is coded twice.
    """
    if not word:
        return ""
    upper = word.upper()
    code = upper[0]
    prev = _SOUNDEX_CODES.get(code, "0")
    for ch in upper[1:]:
        if len(code) >= 4:
            break
        digit = _SOUNDEX_CODES.get(ch)
        if digit and digit != prev:
            code += digit
        prev = digit or "0"
    return (code + "000")[:4]


def is_proper_noun(original: str, is_first_position: bool) -> bool:
    """Capitalised word that is not simply the start of the line."""
    if not original or is_first_position:
        return False
    first = original[0]
    return first.isupper() and first.upper() != first.lower()


class WordComparator:
    """Word equality predicate shared by all aligners.

    ``known_names`` (lower-cased character names) is supplied per call so
    several lines can be checked concurrently with different casts.
    """

    def __init__(
        self,
        known_names: AbstractSet[str] | None = None,
        lexicon: Lexicon = DEFAULT_LEXICON,
        name_threshold: float = NAME_SIMILARITY_THRESHOLD,
    ) -> None:
        self.known_names = known_names or frozenset()
        self.lexicon = lexicon
        self.name_threshold = name_threshold

    def words_match(
        self,
        expected: str,
        spoken: str,
        expected_original: str | None = None,
        is_first_position: bool = False,
    ) -> bool:
        if expected == spoken:
            return True

        if self.lexicon.are_equivalent(expected, spoken):
            return True

        is_name = expected in self.known_names or (
            expected_original is not None
            and is_proper_noun(expected_original, is_first_position)
        )
        if is_name and jaro_winkler(expected, spoken) >= self.name_threshold:
            return True

        if len(expected) <= 5 or len(spoken) <= 5:
            if edit_distance(expected, spoken) <= 1:
                return True
        elif edit_distance(expected, spoken) <= 2:
            return True

        if len(expected) >= 2 and len(spoken) >= 2:
            if soundex(expected) == soundex(spoken):
                return True

        return False

    def matches(self, expected: Token, spoken: str) -> bool:
        """Compare a tokenized script word against a spoken word."""
        return self.words_match(
            expected.normalized, spoken, expected.original, expected.is_first_position
        )

    def matches_joined(self, first: Token, joined_expected: str, spoken: str) -> bool:
        """Compare two script words written together against one spoken word."""
        return self.words_match(
            joined_expected, spoken, first.original, first.is_first_position
        )


def words_match(
    expected: str,
    spoken: str,
    expected_original: str | None = None,
    is_first_position: bool = False,
    known_names: AbstractSet[str] | None = None,
) -> bool:
    """One-off comparison with the default tables."""
    return WordComparator(known_names).words_match(
        expected, spoken, expected_original, is_first_position
    )
