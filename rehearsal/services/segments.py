"""Split a line into short practice segments for build-up rehearsal.

The actor masters the first few words, then the first few plus the
next few, and so on.  Each segment is checked on its own with
``check_accuracy``.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4
MIN_SEGMENT_WORDS = 2

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")


def strip_parentheticals(text: str) -> str:
    """Drop "(beat)"-style stage directions and tidy the spacing."""
    return _WHITESPACE.sub(" ", _PARENTHETICAL.sub("", text or "")).strip()


def _word_count(segment: str) -> int:
    return len(segment.split())


def split_line_segments(
    line: str,
    practice_segments: Sequence[str] | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[str]:
    """
    Return the practice segments for a line.

    Pre-authored ``practice_segments`` win when given; otherwise the line
    is cut into ``chunk_size``-word chunks.  One-word segments are folded
    into a neighbour so nobody is asked to drill "Thanks." on its own.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be greater than 0")

    if practice_segments:
        segments = [strip_parentheticals(seg) for seg in practice_segments]
    else:
        cleaned = strip_parentheticals(line).split()
        segments = [
            " ".join(cleaned[i:i + chunk_size])
            for i in range(0, len(cleaned), chunk_size)
        ]

    segments = [seg for seg in segments if seg]
    if len(segments) <= 1:
        return segments

    merged: list[str] = []
    carry = ""
    for index, segment in enumerate(segments):
        if carry:
            segment = f"{carry} {segment}"
            carry = ""
        if _word_count(segment) < MIN_SEGMENT_WORDS:
            if merged:
                merged[-1] = f"{merged[-1]} {segment}"
                continue
            if index < len(segments) - 1:
                carry = segment
                continue
        merged.append(segment)

    logger.debug("Split line into %d segments", len(merged))
    return merged
