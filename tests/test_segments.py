import pytest

from rehearsal.services.segments import split_line_segments, strip_parentheticals


def test_strip_parentheticals():
    assert strip_parentheticals("(beat) Well,  fine. (sighs)") == "Well, fine."
    assert strip_parentheticals("") == ""


def test_chunks_line_by_word_count():
    segments = split_line_segments("I can't believe you did that to me")
    assert segments == ["I can't believe you", "did that to me"]


def test_trailing_single_word_joins_previous_segment():
    assert split_line_segments("One two three four five") == ["One two three four five"]


def test_custom_chunk_size():
    segments = split_line_segments("a b c d e f", chunk_size=2)
    assert segments == ["a b", "c d", "e f"]


def test_authored_segments_take_priority():
    segments = split_line_segments(
        "ignored line",
        practice_segments=["Thanks.", "I mean it (beat) really"],
    )
    assert segments == ["Thanks. I mean it really"]


def test_short_line_is_one_segment():
    assert split_line_segments("Go!") == ["Go!"]
    assert split_line_segments("") == []


def test_rejects_non_positive_chunk_size():
    with pytest.raises(ValueError):
        split_line_segments("hello there", chunk_size=0)
