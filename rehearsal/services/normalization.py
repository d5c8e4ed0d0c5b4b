"""Tokenization shared by every aligner.

Both the script line and the transcript go through the same pipeline, so
a stutter written as "I--I" and a speaker who literally says "I I" produce
identical token streams.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable

# hyphens, dashes, minus sign and ellipses
_STUTTER_BREAK = re.compile(r"(?:[-\u2010-\u2015\u2212]|\.{2,}|\u2026)+")
_NON_WORD = re.compile(r"[^\w']")
_CURLY_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


@dataclass(frozen=True)
class Token:
    """One comparable word, with the casing it was written in."""

    normalized: str
    original: str
    is_first_position: bool = False


def split_stutters(text: str) -> str:
    """Turn dash- or ellipsis-joined stutters ("I--I", "w...what") into separate words."""
    return _STUTTER_BREAK.sub(" ", text)


def _clean(chunk: str) -> str:
    chunk = unicodedata.normalize("NFKD", chunk).translate(_CURLY_APOSTROPHES)
    return _NON_WORD.sub("", chunk).strip("'")


def tokenize(text: str) -> list[Token]:
    """Split raw text into tokens.

    Punctuation other than inner apostrophes is dropped, accents are folded
    and the original casing is kept so proper nouns can be spotted later.
    """
    tokens: list[Token] = []
    for chunk in split_stutters(text or "").split():
        cleaned = _clean(chunk)
        if not cleaned:
            continue
        tokens.append(
            Token(
                normalized=cleaned.lower(),
                original=cleaned,
                is_first_position=not tokens,
            )
        )
    return tokens


def words(text: str) -> list[str]:
    """Normalized words only."""
    return [t.normalized for t in tokenize(text)]


def build_known_names(character_names: Iterable[str]) -> frozenset[str]:
    """Name words eligible for fuzzy matching, from full character names.

    "DR. JANE O'NEIL" contributes "dr", "jane" and "o'neil"; single
    letters are dropped.
    """
    names: set[str] = set()
    for name in character_names:
        for chunk in split_stutters(name or "").split():
            part = _clean(chunk).lower()
            if len(part) >= 2:
                names.add(part)
    return frozenset(names)
