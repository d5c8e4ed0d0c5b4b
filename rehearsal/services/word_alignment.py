"""Word alignment between a script line and what the actor said.

Four entry points share the tokenizer and the word comparator:

* ``check_accuracy``            end-of-take verdict (greedy walk with look-ahead)
* ``get_word_by_word_results``  per-slot correct / wrong / missing for display (no look-ahead)
* ``get_locked_word_match``     live progress that never moves backwards
* ``get_subsequence_word_match`` live progress that tolerates gaps (LCS)

The first two run the same walk (``align``), the display one in diff mode,
so a fix to compound-word or expansion handling lands in both at once.

Transcripts arrive incrementally and get revised.  The locked aligner
treats a transcript that shrinks as a recogniser revision and keeps what
it already locked; after the first real mismatch it freezes (unless
configured otherwise) so the highlighted progress never flickers.

The LCS table is O(len(expected) * len(spoken)) in time and memory, fine
for a line of dialogue but not for paragraph-sized text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet

from rehearsal.services.comparator import NAME_SIMILARITY_THRESHOLD, WordComparator
from rehearsal.services.lexicon import DEFAULT_LEXICON, Lexicon
from rehearsal.services.normalization import Token, tokenize, words
from rehearsal.services.scoring import compute_accuracy, is_passing, tolerance_for

logger = logging.getLogger(__name__)

LOOKAHEAD_WINDOW = 3


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccuracyResult:
    is_correct: bool
    accuracy: int
    missing_words: list[str] = field(default_factory=list)
    extra_words: list[str] = field(default_factory=list)
    wrong_words: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RealtimeMatch:
    matched: int
    has_error: bool


@dataclass(frozen=True)
class LockedWordState:
    """Caller-held progress for one line.

    ``expected_cursor`` is where the next call resumes in the script line;
    it runs ahead of ``locked_count`` when stutters or skippable sounds
    were passed over.
    """

    locked_words: list[str] = field(default_factory=list)
    locked_count: int = 0
    has_error: bool = False
    expected_cursor: int = 0


@dataclass(frozen=True)
class SubsequenceMatchResult:
    matched_indices: frozenset[int]
    matched_count: int
    coverage: float


class WordVerdict(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    MISSING = "missing"


@dataclass(frozen=True)
class WordByWordResult:
    results: list[WordVerdict]
    spoken_words: list[str]


# ---------------------------------------------------------------------------
# Shared walk
# ---------------------------------------------------------------------------


class EventKind(str, Enum):
    MATCH = "match"  # expected slot(s) satisfied by spoken word(s)
    SKIPPED = "skipped"  # skippable sound or stutter repeat, not spoken
    MISSING = "missing"
    EXTRA = "extra"
    FILLER = "filler"  # extra spoken filler, ignored
    WRONG = "wrong"


@dataclass(frozen=True)
class AlignmentEvent:
    kind: EventKind
    expected_index: int = -1
    expected_span: int = 0
    spoken: tuple[str, ...] = ()
    display: str = ""


def _is_skippable_slot(expected: list[Token], index: int, lexicon: Lexicon) -> bool:
    """Skippable script sound, or the repeated half of a stutter."""
    word = expected[index].normalized
    if lexicon.is_skippable(word):
        return True
    return index > 0 and word == expected[index - 1].normalized


def _try_match(
    expected: list[Token],
    spoken: list[str],
    e: int,
    s: int,
    comparator: WordComparator,
) -> AlignmentEvent | None:
    """Direct, compound, split and multi-word matches at (e, s)."""
    token = expected[e]
    word = spoken[s]

    if comparator.matches(token, word):
        return AlignmentEvent(EventKind.MATCH, e, 1, (word,), word)

    # "cork screw" spoken for "corkscrew"
    if s + 1 < len(spoken):
        joined = word + spoken[s + 1]
        if comparator.matches(token, joined):
            return AlignmentEvent(EventKind.MATCH, e, 1, (word, spoken[s + 1]), joined)

    # "corkscrew" spoken for "cork screw"
    if e + 1 < len(expected):
        joined = token.normalized + expected[e + 1].normalized
        if comparator.matches_joined(token, joined, word):
            return AlignmentEvent(EventKind.MATCH, e, 2, (word,), word)

    lexicon = comparator.lexicon

    # "all right" spoken for "alright"
    for phrase in lexicon.multi_word_equivalents(token.normalized):
        if tuple(spoken[s:s + len(phrase)]) == phrase:
            return AlignmentEvent(EventKind.MATCH, e, 1, phrase, " ".join(phrase))

    # "alright" spoken for "all right"
    for phrase in lexicon.multi_word_equivalents(word):
        window = tuple(t.normalized for t in expected[e:e + len(phrase)])
        if window == phrase:
            return AlignmentEvent(EventKind.MATCH, e, len(phrase), (word,), word)

    return None


def _look_ahead(
    expected: list[Token],
    spoken: list[str],
    e: int,
    s: int,
    comparator: WordComparator,
    window: int,
) -> tuple[int, int]:
    """Offsets at which the current words reappear a little further on.

    Returns (offset of the spoken word among upcoming expected words,
    offset of the expected word among upcoming spoken words), -1 if absent.
    """
    found_expected_ahead = -1
    for offset in range(1, window + 1):
        if e + offset >= len(expected):
            break
        if comparator.matches(expected[e + offset], spoken[s]):
            found_expected_ahead = offset
            break

    found_spoken_ahead = -1
    for offset in range(1, window + 1):
        if s + offset >= len(spoken):
            break
        if comparator.matches(expected[e], spoken[s + offset]):
            found_spoken_ahead = offset
            break

    return found_expected_ahead, found_spoken_ahead


def align(
    expected: list[Token],
    spoken: list[str],
    comparator: WordComparator,
    lookahead: int = LOOKAHEAD_WINDOW,
    *,
    diff: bool = False,
) -> list[AlignmentEvent]:
    """Greedy left-to-right alignment of a whole take.

    Every expected slot ends up in exactly one MATCH / SKIPPED / MISSING /
    WRONG event; every spoken word in exactly one MATCH / WRONG / EXTRA /
    FILLER event.

    With ``diff`` there is no look-ahead: an unresolved mismatch is WRONG
    and advances both sides, so MISSING only comes from running out of
    spoken words.
    """
    lexicon = comparator.lexicon
    events: list[AlignmentEvent] = []
    e = 0
    s = 0

    while e < len(expected) and s < len(spoken):
        token = expected[e]
        word = spoken[s]

        if _is_skippable_slot(expected, e, lexicon) and not comparator.matches(token, word):
            events.append(AlignmentEvent(EventKind.SKIPPED, e, 1, (), token.normalized))
            e += 1
            continue

        matched = _try_match(expected, spoken, e, s, comparator)
        if matched is not None:
            events.append(matched)
            e += matched.expected_span
            s += len(matched.spoken)
            continue

        # Mid-line "um" must not reach the look-ahead, or it shifts everything after it.
        if lexicon.is_filler(word):
            events.append(AlignmentEvent(EventKind.FILLER, spoken=(word,)))
            s += 1
            continue

        if diff:
            expected_ahead = spoken_ahead = -1
        else:
            expected_ahead, spoken_ahead = _look_ahead(
                expected, spoken, e, s, comparator, lookahead
            )

        if expected_ahead == -1 and spoken_ahead == -1:
            events.append(AlignmentEvent(EventKind.WRONG, e, 1, (word,), word))
            e += 1
            s += 1
        elif spoken_ahead != -1 and (expected_ahead == -1 or spoken_ahead <= expected_ahead):
            events.append(AlignmentEvent(EventKind.MISSING, e, 1))
            e += 1
        else:
            events.append(AlignmentEvent(EventKind.EXTRA, spoken=(word,), display=word))
            s += 1

    while e < len(expected):
        if _is_skippable_slot(expected, e, lexicon):
            events.append(
                AlignmentEvent(EventKind.SKIPPED, e, 1, (), expected[e].normalized)
            )
        else:
            events.append(AlignmentEvent(EventKind.MISSING, e, 1))
        e += 1

    while s < len(spoken):
        word = spoken[s]
        kind = EventKind.FILLER if lexicon.is_filler(word) else EventKind.EXTRA
        events.append(AlignmentEvent(kind, spoken=(word,), display=word))
        s += 1

    return events


# ---------------------------------------------------------------------------
# Batch verdict
# ---------------------------------------------------------------------------


def check_accuracy(
    expected: str,
    spoken: str,
    strict_mode: bool = False,
    known_names: AbstractSet[str] | None = None,
    *,
    lexicon: Lexicon = DEFAULT_LEXICON,
    lookahead: int = LOOKAHEAD_WINDOW,
    name_threshold: float = NAME_SIMILARITY_THRESHOLD,
) -> AccuracyResult:
    """Score a finished take of one line.

    Accuracy is matched words over the line's words, not counting skipped
    stutters and skippable sounds.  The line passes only with no
    substitutions and missing / extra counts inside the tolerance band.
    """
    expected_tokens = tokenize(expected)
    spoken_words = words(spoken)

    if [t.normalized for t in expected_tokens] == spoken_words:
        return AccuracyResult(is_correct=True, accuracy=100)

    comparator = WordComparator(known_names, lexicon, name_threshold)
    events = align(expected_tokens, spoken_words, comparator, lookahead)

    matched_count = 0
    skipped_count = 0
    missing_words: list[str] = []
    extra_words: list[str] = []
    wrong_words: list[str] = []

    for event in events:
        if event.kind is EventKind.MATCH:
            matched_count += event.expected_span
        elif event.kind is EventKind.SKIPPED:
            skipped_count += 1
        elif event.kind is EventKind.MISSING:
            missing_words.append(expected_tokens[event.expected_index].normalized)
        elif event.kind is EventKind.EXTRA:
            extra_words.append(event.display)
        elif event.kind is EventKind.WRONG:
            expected_word = expected_tokens[event.expected_index].normalized
            wrong_words.append(f'"{event.display}" instead of "{expected_word}"')

    effective_word_count = len(expected_tokens) - skipped_count
    accuracy = compute_accuracy(matched_count, effective_word_count)
    band = tolerance_for(effective_word_count, strict_mode)
    is_correct = is_passing(
        accuracy, len(missing_words), len(extra_words), len(wrong_words), band
    )

    logger.debug(
        "Accuracy: %d expected / %d spoken → %d matched, %d skipped, "
        "%d missing, %d extra, %d wrong, %d%% (%s)",
        len(expected_tokens),
        len(spoken_words),
        matched_count,
        skipped_count,
        len(missing_words),
        len(extra_words),
        len(wrong_words),
        accuracy,
        "pass" if is_correct else "fail",
    )

    return AccuracyResult(
        is_correct=is_correct,
        accuracy=accuracy,
        missing_words=missing_words,
        extra_words=extra_words,
        wrong_words=wrong_words,
    )


# ---------------------------------------------------------------------------
# Word-by-word display
# ---------------------------------------------------------------------------


def get_word_by_word_results(
    expected: str,
    spoken: str,
    known_names: AbstractSet[str] | None = None,
    *,
    lexicon: Lexicon = DEFAULT_LEXICON,
    name_threshold: float = NAME_SIMILARITY_THRESHOLD,
) -> WordByWordResult:
    """One verdict per expected word, with the spoken word shown under it.

    Skipped stutters and skippable sounds count as correct.  When one
    spoken word covers two script words, the second slot shows "".
    A word that does not line up is wrong and both sides move on; only
    script words past the end of the transcript are missing.
    """
    expected_tokens = tokenize(expected)
    spoken_words = words(spoken)
    comparator = WordComparator(known_names, lexicon, name_threshold)

    results: list[WordVerdict] = []
    aligned: list[str] = []

    for event in align(expected_tokens, spoken_words, comparator, diff=True):
        if event.kind is EventKind.MATCH:
            for offset in range(event.expected_span):
                results.append(WordVerdict.CORRECT)
                aligned.append(event.display if offset == 0 else "")
        elif event.kind is EventKind.SKIPPED:
            results.append(WordVerdict.CORRECT)
            aligned.append(event.display)
        elif event.kind is EventKind.WRONG:
            results.append(WordVerdict.WRONG)
            aligned.append(event.display)
        elif event.kind is EventKind.MISSING:
            results.append(WordVerdict.MISSING)
            aligned.append("")

    return WordByWordResult(results=results, spoken_words=aligned)


# ---------------------------------------------------------------------------
# Sequential (locked) real-time matching
# ---------------------------------------------------------------------------


def _extend_sequential(
    expected: list[Token],
    spoken: list[str],
    e: int,
    s: int,
    comparator: WordComparator,
) -> tuple[list[str], int, bool]:
    """Match spoken[s:] against expected[e:] until the first mismatch.

    Returns (newly matched spoken words, expected cursor, hit a mismatch).
    """
    lexicon = comparator.lexicon
    matched: list[str] = []

    while s < len(spoken) and e < len(expected):
        token = expected[e]
        word = spoken[s]

        if comparator.matches(token, word):
            matched.append(word)
            e += 1
            s += 1
            continue

        if _is_skippable_slot(expected, e, lexicon):
            e += 1
            continue

        return matched, e, True

    return matched, e, False


def get_realtime_word_match(
    expected: str,
    spoken: str,
    known_names: AbstractSet[str] | None = None,
    *,
    lexicon: Lexicon = DEFAULT_LEXICON,
    name_threshold: float = NAME_SIMILARITY_THRESHOLD,
) -> RealtimeMatch:
    """How many words of the line were said in order, from scratch."""
    comparator = WordComparator(known_names, lexicon, name_threshold)
    matched, _, has_error = _extend_sequential(
        tokenize(expected), words(spoken), 0, 0, comparator
    )
    return RealtimeMatch(matched=len(matched), has_error=has_error)


def create_fresh_locked_state() -> LockedWordState:
    """Empty state for a new line."""
    return LockedWordState()


def get_locked_word_match(
    expected: str,
    spoken: str,
    prev_state: LockedWordState | None = None,
    known_names: AbstractSet[str] | None = None,
    *,
    freeze_on_error: bool = True,
    lexicon: Lexicon = DEFAULT_LEXICON,
    name_threshold: float = NAME_SIMILARITY_THRESHOLD,
) -> LockedWordState:
    """Advance the locked progress for one line with the latest transcript.

    Only spoken words past the already-locked ones are examined, so the
    recogniser rewriting an earlier word cannot un-match it.  A transcript
    shorter than the locked prefix is a revision in flight and is ignored.

    With ``freeze_on_error`` (the default) an errored state is returned
    as-is until the caller starts the line again; without it, the next
    call retries from the locked cursor and clears the error if the new
    words line up.
    """
    state = prev_state if prev_state is not None else create_fresh_locked_state()

    if state.has_error and freeze_on_error:
        logger.debug("Locked match frozen at %d words", state.locked_count)
        return state

    spoken_words = words(spoken)
    if len(spoken_words) < len(state.locked_words):
        logger.debug(
            "Transcript shrank to %d words (locked %d); keeping locked state",
            len(spoken_words),
            len(state.locked_words),
        )
        return state

    expected_tokens = tokenize(expected)
    comparator = WordComparator(known_names, lexicon, name_threshold)
    newly_locked, cursor, has_error = _extend_sequential(
        expected_tokens,
        spoken_words,
        state.expected_cursor,
        len(state.locked_words),
        comparator,
    )

    locked_words = [*state.locked_words, *newly_locked]
    locked_count = min(state.locked_count + len(newly_locked), len(expected_tokens))

    if newly_locked or has_error != state.has_error:
        logger.debug(
            "Locked %d/%d words%s",
            locked_count,
            len(expected_tokens),
            " (mismatch)" if has_error else "",
        )

    return LockedWordState(
        locked_words=locked_words,
        locked_count=locked_count,
        has_error=has_error,
        expected_cursor=cursor,
    )


def is_line_complete(
    expected: str,
    state: LockedWordState,
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> bool:
    """True once every word the actor has to say is locked."""
    if state.has_error:
        return False
    expected_tokens = tokenize(expected)
    return all(
        _is_skippable_slot(expected_tokens, i, lexicon)
        for i in range(state.expected_cursor, len(expected_tokens))
    )


# ---------------------------------------------------------------------------
# Gap-tolerant real-time matching (LCS)
# ---------------------------------------------------------------------------


def get_subsequence_word_match(
    expected: str,
    spoken: str,
    known_names: AbstractSet[str] | None = None,
    *,
    lexicon: Lexicon = DEFAULT_LEXICON,
    name_threshold: float = NAME_SIMILARITY_THRESHOLD,
) -> SubsequenceMatchResult:
    """Match as many script words as possible, in order, allowing gaps.

    A wrong word in the middle does not stop later words from matching.
    Skippable sounds and stutter repeats are matched up front and left
    out of ``matched_count`` and of the coverage denominator.
    """
    expected_tokens = tokenize(expected)
    comparator = WordComparator(known_names, lexicon, name_threshold)

    auto_matched = {
        i for i in range(len(expected_tokens))
        if _is_skippable_slot(expected_tokens, i, lexicon)
    }
    rows = [i for i in range(len(expected_tokens)) if i not in auto_matched]
    cols = [w for w in words(spoken) if not lexicon.is_filler(w)]

    m = len(rows)
    n = len(cols)
    if m == 0:
        return SubsequenceMatchResult(frozenset(auto_matched), 0, 1.0)
    if n == 0:
        return SubsequenceMatchResult(frozenset(auto_matched), 0, 0.0)

    hit = [
        [comparator.matches(expected_tokens[rows[i]], cols[j]) for j in range(n)]
        for i in range(m)
    ]
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if hit[i - 1][j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    matched: set[int] = set()
    i, j = m, n
    while i > 0 and j > 0:
        if hit[i - 1][j - 1]:
            matched.add(rows[i - 1])
            i -= 1
            j -= 1
        elif dp[i - 1][j] >= dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    logger.debug("Subsequence: %d/%d words matched", len(matched), m)

    return SubsequenceMatchResult(
        matched_indices=frozenset(auto_matched | matched),
        matched_count=len(matched),
        coverage=len(matched) / m,
    )
