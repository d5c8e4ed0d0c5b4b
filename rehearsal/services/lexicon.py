"""Static word tables used when comparing a script line with a transcript.

Everything here describes *transcription* variation: different speech
recognisers spell the same sound differently ("mhm" / "mm hmm"), pick a
different homophone, or write numbers as digits.  Acting choices (saying
"I am" for "I'm") are deliberately absent.

Stutter dashes are split by the tokenizer, so hyphenated sounds such as
"uh-huh" reach these tables as two words and are listed as phrases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

# Maps a normalised word → words or phrases a recogniser may produce instead.
_EQUIVALENTS: dict[str, tuple[str, ...]] = {
    # Abbreviations
    "dr": ("doctor",), "doctor": ("dr",),
    "mr": ("mister",), "mister": ("mr",),
    "mrs": ("missus",), "missus": ("mrs",),
    "ms": ("miss",), "miss": ("ms",),
    "prof": ("professor",), "professor": ("prof",),
    "st": ("saint",), "saint": ("st",),
    "mt": ("mount",), "mount": ("mt",),

    # Homophones
    "their": ("there", "they're"), "there": ("their", "they're"),
    "they're": ("their", "there"),
    "your": ("you're",), "you're": ("your",),
    "its": ("it's",), "it's": ("its",),
    "to": ("too", "two", "2"), "too": ("to", "two", "2"),
    "two": ("to", "too", "2"), "2": ("to", "too", "two"),
    "hear": ("here",), "here": ("hear",),
    "weather": ("whether",), "whether": ("weather",),
    "write": ("right",), "right": ("write",),
    "know": ("no",), "no": ("know",),
    "knew": ("new",), "new": ("knew",),
    "would": ("wood",), "wood": ("would",),
    "wait": ("weight",), "weight": ("wait",),
    "wear": ("where", "ware"), "where": ("wear", "ware"),
    "whose": ("who's",), "who's": ("whose",),
    "for": ("four", "4"), "four": ("for", "4"), "4": ("for", "four"),
    "ate": ("eight", "8"), "eight": ("ate", "8"), "8": ("ate", "eight"),
    "won": ("one", "1"), "one": ("won", "1"), "1": ("won", "one"),

    # Casual spellings
    "ok": ("okay", "k", "kay"), "okay": ("ok", "k", "kay"),
    "alright": ("all right",),

    # mm-hmm
    "mmmhmm": ("mhm", "mmhm", "mmhmm", "mhmm", "mm hmm", "mm hm", "uhhuh"),
    "mmhmm": ("mhm", "mmhm", "mhmm", "mmmhmm", "mm hmm", "mm hm"),
    "mmhm": ("mhm", "mmhmm", "mhmm", "mmmhmm", "mm hmm", "mm hm"),
    "mhmm": ("mhm", "mmhm", "mmhmm", "mmmhmm", "mm hmm", "mm hm"),
    "mhm": ("mmhm", "mmhmm", "mhmm", "mmmhmm", "mm hmm", "mm hm"),

    # uh-huh
    "uhhuh": ("uhuh", "uh huh", "ah huh", "ahuh"),
    "uhuh": ("uhhuh", "uh huh", "ah huh"),
    "ahuh": ("uhhuh", "uh huh", "ah huh"),

    # hmm
    "hmm": ("hm", "hmmm", "hmmmm"),
    "hm": ("hmm", "hmmm"),
    "hmmm": ("hmm", "hm", "hmmmm"),

    # um
    "um": ("umm", "ummm", "uhm"),
    "umm": ("um", "ummm", "uhm"),
    "ummm": ("um", "umm", "uhm"),
    "uhm": ("um", "umm", "ummm"),

    # uh
    "uh": ("uhh", "uhhh", "er"),
    "uhh": ("uh", "uhhh", "er"),
    "er": ("uh", "uhh"),

    # ah
    "ah": ("ahh", "ahhh"),
    "ahh": ("ah", "ahhh"),

    # yeah
    "yeah": ("yea", "ya", "yah", "yep", "yup"),
    "yea": ("yeah", "ya", "yah"),
    "ya": ("yeah", "yea", "yah"),
    "yep": ("yeah", "yup", "yes"),
    "yup": ("yeah", "yep", "yes"),

    # nope
    "nope": ("nah", "na"),
    "nah": ("nope", "na", "no"),
    "na": ("nah", "nope"),

    # Numerals not covered above
    "three": ("3",), "3": ("three",),
    "five": ("5",), "5": ("five",),
    "six": ("6",), "6": ("six",),
    "seven": ("7",), "7": ("seven",),
    "nine": ("9",), "9": ("nine",),
    "ten": ("10",), "10": ("ten",),
    "first": ("1st",), "1st": ("first",),
    "second": ("2nd",), "2nd": ("second",),
    "third": ("3rd",), "3rd": ("third",),
}

# Sounds and stage-direction words in a script that an actor may leave out
# (or a recogniser may not transcribe).
_SKIPPABLE_SCRIPT_WORDS = (
    # thinking
    "um", "uh", "ah", "er", "ehh", "uhh", "ahh", "umm", "uhm",
    # acknowledgment
    "mm", "mmm", "mmmm", "hmm", "hm", "hmmm",
    "mmhmm", "mmmhmm", "mhm", "mhmm", "mmhm", "uhhuh", "uhuh",
    "aha", "ahha",
    # reactions
    "sigh", "sighs", "sighing",
    "laugh", "laughs", "laughing", "chuckle", "chuckles",
    "gasp", "gasps", "gasping",
    "groan", "groans", "groaning",
    "scoff", "scoffs", "scoffing",
    "snort", "snorts", "snorting",
    "sob", "sobs", "sobbing",
    "cough", "coughs", "coughing",
    "sniff", "sniffs", "sniffing",
    "wheeze", "wheezes", "wheezing",
    # exclamations
    "oh", "ooh", "oooh", "ohhh",
    "ahhh",
    "ugh", "argh", "aargh",
    "whoa", "wow", "woah",
    "huh", "eh", "hey", "ho", "ha",
    "phew", "psst", "shh", "shush", "tsk",
    # beats
    "beat", "pause", "then",
    # conversational fillers
    "well", "so",
)

# Words a speaker may add that are not in the line, ignored instead of
# being reported as extra.
_FILLER_WORDS = (
    "um", "umm", "uhm", "uh", "uhh", "ah", "er",
    "like", "well", "so", "oh",
    "hmm", "hmmm", "mm", "hm",
)


def _freeze(table: dict[str, Iterable[str]]) -> Mapping[str, frozenset[str]]:
    return MappingProxyType({k: frozenset(v) for k, v in table.items()})


@dataclass(frozen=True)
class Lexicon:
    """Read-only bundle of the equivalence, skippable and filler tables."""

    equivalence: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: _freeze(_EQUIVALENTS)
    )
    skippable: frozenset[str] = frozenset(_SKIPPABLE_SCRIPT_WORDS)
    fillers: frozenset[str] = frozenset(_FILLER_WORDS)

    def equivalents(self, word: str) -> frozenset[str]:
        return self.equivalence.get(word, frozenset())

    def multi_word_equivalents(self, word: str) -> list[tuple[str, ...]]:
        """Phrase equivalents of word, each split into its words."""
        return sorted(
            tuple(phrase.split()) for phrase in self.equivalents(word) if " " in phrase
        )

    def are_equivalent(self, a: str, b: str) -> bool:
        """Table hit with either word as the key."""
        return b in self.equivalents(a) or a in self.equivalents(b)

    def is_skippable(self, word: str) -> bool:
        return word in self.skippable

    def is_filler(self, word: str) -> bool:
        return word in self.fillers


DEFAULT_LEXICON = Lexicon()
