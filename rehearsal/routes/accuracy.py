"""Line accuracy APIs.

Every endpoint is stateless: the caller sends the script line and the
transcript so far, and for locked matching also the previous state,
which it keeps and sends back on the next update.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from rehearsal.config import settings
from rehearsal.services.normalization import build_known_names
from rehearsal.services.segments import split_line_segments
from rehearsal.services.word_alignment import (
    LockedWordState,
    check_accuracy,
    get_locked_word_match,
    get_realtime_word_match,
    get_subsequence_word_match,
    get_word_by_word_results,
    is_line_complete,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class BadRequest(ValueError):
    """Request body failed validation."""


def _bad_request(message: str) -> JSONResponse:
    logger.warning("Rejected request: %s", message)
    return JSONResponse({"error": message}, status_code=400)


async def _read_body(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequest("Body must be JSON") from e
    if not isinstance(body, dict):
        raise BadRequest("Body must be a JSON object")
    return body


def _text(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str):
        raise BadRequest(f"'{key}' must be a string")
    return value


def _string_list(body: dict[str, Any], key: str) -> list[str] | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise BadRequest(f"'{key}' must be a list of strings")
    return value


def _known_names(body: dict[str, Any]) -> frozenset[str] | None:
    """Either bare name words ("known_names") or full cast names ("character_names")."""
    names = _string_list(body, "known_names")
    characters = _string_list(body, "character_names")
    if names is None and characters is None:
        return None
    known = {n.strip().lower() for n in names or [] if n.strip()}
    return frozenset(known | build_known_names(characters or []))


def _locked_state(body: dict[str, Any]) -> LockedWordState | None:
    raw = body.get("prev_state")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise BadRequest("'prev_state' must be an object")

    locked_words = raw.get("locked_words", [])
    locked_count = raw.get("locked_count", 0)
    has_error = raw.get("has_error", False)
    cursor = raw.get("expected_cursor", locked_count)

    if not isinstance(locked_words, list) or not all(isinstance(w, str) for w in locked_words):
        raise BadRequest("'prev_state.locked_words' must be a list of strings")
    for name, value in (("locked_count", locked_count), ("expected_cursor", cursor)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise BadRequest(f"'prev_state.{name}' must be a non-negative integer")
    if not isinstance(has_error, bool):
        raise BadRequest("'prev_state.has_error' must be a boolean")

    return LockedWordState(
        locked_words=list(locked_words),
        locked_count=locked_count,
        has_error=has_error,
        expected_cursor=cursor,
    )


@router.post("/accuracy/check")
async def api_check_accuracy(request: Request):
    """Pass/fail verdict for a finished take.

    Body: {expected, spoken, strict_mode?, known_names?, character_names?}
    """
    try:
        body = await _read_body(request)
        expected = _text(body, "expected")
        spoken = _text(body, "spoken")
        strict_mode = body.get("strict_mode", settings.default_strict_mode)
        if not isinstance(strict_mode, bool):
            raise BadRequest("'strict_mode' must be a boolean")
        known_names = _known_names(body)
    except BadRequest as e:
        return _bad_request(str(e))

    result = check_accuracy(
        expected,
        spoken,
        strict_mode,
        known_names,
        lookahead=settings.lookahead_window,
        name_threshold=settings.name_similarity_threshold,
    )
    logger.info(
        "Accuracy check: %d%% %s (%d missing, %d extra, %d wrong)",
        result.accuracy,
        "pass" if result.is_correct else "fail",
        len(result.missing_words),
        len(result.extra_words),
        len(result.wrong_words),
    )
    return JSONResponse(asdict(result))


@router.post("/accuracy/realtime")
async def api_realtime_match(request: Request):
    """In-order match count from scratch. Body: {expected, spoken, known_names?}."""
    try:
        body = await _read_body(request)
        expected = _text(body, "expected")
        spoken = _text(body, "spoken")
        known_names = _known_names(body)
    except BadRequest as e:
        return _bad_request(str(e))

    result = get_realtime_word_match(
        expected, spoken, known_names, name_threshold=settings.name_similarity_threshold
    )
    return JSONResponse(asdict(result))


@router.post("/accuracy/locked")
async def api_locked_match(request: Request):
    """Advance locked progress. Body: {expected, spoken, prev_state?, known_names?}."""
    try:
        body = await _read_body(request)
        expected = _text(body, "expected")
        spoken = _text(body, "spoken")
        prev_state = _locked_state(body)
        known_names = _known_names(body)
    except BadRequest as e:
        return _bad_request(str(e))

    state = get_locked_word_match(
        expected,
        spoken,
        prev_state,
        known_names,
        freeze_on_error=settings.freeze_locked_on_error,
        name_threshold=settings.name_similarity_threshold,
    )
    payload = asdict(state)
    payload["complete"] = is_line_complete(expected, state)
    return JSONResponse(payload)


@router.post("/accuracy/subsequence")
async def api_subsequence_match(request: Request):
    """Gap-tolerant match. Body: {expected, spoken, known_names?}."""
    try:
        body = await _read_body(request)
        expected = _text(body, "expected")
        spoken = _text(body, "spoken")
        known_names = _known_names(body)
    except BadRequest as e:
        return _bad_request(str(e))

    result = get_subsequence_word_match(
        expected, spoken, known_names, name_threshold=settings.name_similarity_threshold
    )
    return JSONResponse({
        "matched_indices": sorted(result.matched_indices),
        "matched_count": result.matched_count,
        "coverage": result.coverage,
    })


@router.post("/accuracy/word-by-word")
async def api_word_by_word(request: Request):
    """Per-word verdicts for display. Body: {expected, spoken, known_names?}."""
    try:
        body = await _read_body(request)
        expected = _text(body, "expected")
        spoken = _text(body, "spoken")
        known_names = _known_names(body)
    except BadRequest as e:
        return _bad_request(str(e))

    result = get_word_by_word_results(
        expected,
        spoken,
        known_names,
        name_threshold=settings.name_similarity_threshold,
    )
    return JSONResponse({
        "results": [verdict.value for verdict in result.results],
        "spoken_words": result.spoken_words,
    })


@router.post("/segments")
async def api_segments(request: Request):
    """Practice segments for build mode. Body: {line, practice_segments?, chunk_size?}."""
    try:
        body = await _read_body(request)
        line = _text(body, "line")
        practice_segments = _string_list(body, "practice_segments")
        chunk_size = body.get("chunk_size", settings.segment_chunk_size)
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise BadRequest("'chunk_size' must be a positive integer")
    except BadRequest as e:
        return _bad_request(str(e))

    return JSONResponse({
        "segments": split_line_segments(line, practice_segments, chunk_size),
    })
