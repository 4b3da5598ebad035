from __future__ import annotations

from enum import Enum


class CardType(str, Enum):
    """Kind of study item stored on a card."""

    vocab = "vocab"
    verb = "verb"
    sentence = "sentence"


class DeckKind(str, Enum):
    """How queues are composed for a deck.

    `verb_conjugation` のデッキは活用形をまとめて出題する（ラダー）。
    表示名から推測せず、デッキ作成時に明示的に設定する。
    """

    standard = "standard"
    verb_conjugation = "verb_conjugation"


class DeckDirection(str, Enum):
    """Which side of a card is shown as the prompt."""

    en_ja = "en-ja"
    ja_en = "ja-en"


class VerbForm(str, Enum):
    """Closed set of conjugation forms.

    Declaration order is the ladder order: a verb's cards are always studied
    from `dictionary` down to `dont_want_past`.
    """

    dictionary = "dictionary"
    polite_present = "polite_present"
    polite_negative = "polite_negative"
    te = "te"
    progressive = "progressive"
    past = "past"
    negative = "negative"
    past_negative = "past_negative"
    want = "want"
    dont_want = "dont_want"
    want_past = "want_past"
    dont_want_past = "dont_want_past"


class VerbClass(str, Enum):
    ichidan = "ichidan"
    godan = "godan"


class VocabCategory(str, Enum):
    """Part-of-speech buckets used by the vocab practice filter."""

    noun = "noun"
    verb = "verb"
    adjective = "adjective"
    adverb = "adverb"
    connector = "connector"
    other = "other"


class LadderMode(str, Enum):
    """Composition modes for verb-conjugation queues."""

    review = "review"
    practice = "practice"
    mixed = "mixed"
    bases = "bases"
