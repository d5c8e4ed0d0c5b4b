from rehearsal.services.normalization import (
    build_known_names,
    split_stutters,
    tokenize,
    words,
)


def test_tokenize_lowercases_and_strips_punctuation():
    tokens = tokenize("Hello, World!")
    assert [t.normalized for t in tokens] == ["hello", "world"]
    assert [t.original for t in tokens] == ["Hello", "World"]


def test_only_first_token_is_first_position():
    tokens = tokenize("Well Hamlet, what now")
    assert [t.is_first_position for t in tokens] == [True, False, False, False]


def test_stutter_dashes_split_into_repeated_words():
    assert words("I--I am here") == ["i", "i", "am", "here"]
    assert words("I-I am here") == ["i", "i", "am", "here"]
    assert words("I--I am here") == words("I I am here")
    assert split_stutters("w---what") == "w what"
    assert words("I\u2014I\u2014I") == ["i", "i", "i"]
    assert words("w...what now") == ["w", "what", "now"]
    assert words("well\u2026 no") == ["well", "no"]


def test_apostrophes_kept_inside_words():
    assert words("Don't you're") == ["don't", "you're"]
    assert words("don’t") == ["don't"]
    assert words("'Hello' she said") == ["hello", "she", "said"]


def test_accents_folded():
    assert words("Café Noël") == ["cafe", "noel"]


def test_empty_and_punctuation_only_input():
    assert tokenize("") == []
    assert tokenize("   ") == []
    assert tokenize("... !! --") == []
    assert words("  multiple   spaces  ") == ["multiple", "spaces"]


def test_build_known_names_from_character_list():
    names = build_known_names(["DR. JANE O'NEIL", "Mary-Kate", "X"])
    assert names == frozenset({"dr", "jane", "o'neil", "mary", "kate"})
