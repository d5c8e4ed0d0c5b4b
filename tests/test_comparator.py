import pytest

from rehearsal.services.comparator import (
    WordComparator,
    edit_distance,
    is_proper_noun,
    jaro,
    jaro_winkler,
    soundex,
    words_match,
)
from rehearsal.services.lexicon import DEFAULT_LEXICON
from rehearsal.services.normalization import tokenize


def test_exact_match():
    assert words_match("hello", "hello")


@pytest.mark.parametrize(
    "a, b",
    [
        ("their", "there"),
        ("there", "they're"),
        ("your", "you're"),
        ("two", "2"),
        ("dr", "doctor"),
        ("ok", "okay"),
        ("yep", "yeah"),
        ("mhm", "mmhmm"),
        ("1st", "first"),
    ],
)
def test_equivalents_are_symmetric(a, b):
    assert words_match(a, b)
    assert words_match(b, a)


def test_regular_words_never_fuzzy_match():
    assert not words_match("old", "young")
    assert not words_match("love", "hate")
    assert not words_match("going", "leaving")


def test_fuzzy_match_only_for_names():
    # edit distance and Soundex both reject this pair
    assert not words_match("johannes", "johansson")
    assert words_match("johannes", "johansson", "Johannes", is_first_position=False)
    assert words_match("johannes", "johansson", known_names={"johannes"})


def test_capitalised_first_word_is_not_a_name():
    assert not words_match("johannes", "johansson", "Johannes", is_first_position=True)


def test_name_threshold_is_configurable():
    strict = WordComparator(known_names={"johannes"}, name_threshold=0.99)
    assert not strict.words_match("johannes", "johansson")


def test_edit_distance_bounds():
    # short words: one edit
    assert words_match("liv", "live")
    assert not words_match("hi", "bye")
    # long words: two edits
    assert words_match("remember", "remembah")
    assert words_match("morning", "mourning")


def test_soundex_fallback_catches_homophones():
    assert words_match("scene", "seen")
    assert words_match("bare", "bear")


def test_edit_distance():
    assert edit_distance("kitten", "sitting") == 3
    assert edit_distance("", "abc") == 3
    assert edit_distance("same", "same") == 0


@pytest.mark.parametrize(
    "word, code",
    [
        ("robert", "R163"),
        ("rupert", "R163"),
        ("tymczak", "T522"),
        ("pfister", "P236"),
        ("scene", "S500"),
        ("a", "A000"),
        ("", ""),
    ],
)
def test_soundex(word, code):
    assert soundex(word) == code


def test_jaro_winkler():
    assert jaro_winkler("martha", "martha") == 1.0
    assert jaro_winkler("martha", "marhta") == pytest.approx(0.961, abs=1e-3)
    assert jaro_winkler("dwayne", "duane") == pytest.approx(0.84)
    assert jaro_winkler("johannes", "jmhasnes") == pytest.approx(0.775)
    assert jaro_winkler("abc", "xyz") == 0.0


def test_is_proper_noun():
    assert is_proper_noun("Hamlet", False)
    assert not is_proper_noun("Hamlet", True)
    assert not is_proper_noun("hamlet", False)
    assert not is_proper_noun("123", False)
    assert not is_proper_noun("", False)


def test_matches_uses_token_shape():
    comparator = WordComparator()
    tokens = tokenize("Hello Johannes")
    assert comparator.matches(tokens[1], "johansson")
    assert not comparator.matches(tokens[0], "yellow")


def test_lexicon_tables_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_LEXICON.equivalence["dr"] = frozenset({"drive"})
    assert DEFAULT_LEXICON.multi_word_equivalents("alright") == [("all", "right")]
    assert DEFAULT_LEXICON.is_skippable("sighs")
    assert DEFAULT_LEXICON.is_filler("um")
    assert not DEFAULT_LEXICON.is_filler("sighs")


def test_jaro_counts_half_transpositions():
    # 6 matches, 3 transpositions: (0.75 + 0.75 + 4.5 / 6) / 3
    assert jaro("johannes", "jmhasnes") == pytest.approx(0.75)
    assert jaro("a", "b") == 0.0
    assert jaro("", "abc") == 0.0


def test_name_just_under_threshold_needs_another_rule():
    comparator = WordComparator(known_names={"johannes"})
    assert jaro_winkler("johannes", "jmhasnes") < comparator.name_threshold
    # still caught by the edit-distance rule (two substitutions)
    assert comparator.words_match("johannes", "jmhasnes")
    assert not comparator.words_match("johannes", "jmhxsnxs")
