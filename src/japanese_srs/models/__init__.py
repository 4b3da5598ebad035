"""Domain models shared by the scheduler, queue builders and store."""

from .card import (
    VERB_BASE_ENDINGS,
    Card,
    Deck,
    ExampleSentence,
    GeneratedVerb,
    looks_like_verb_card,
    normalize_base_kana,
)
from .common import (
    CardType,
    DeckDirection,
    DeckKind,
    LadderMode,
    VerbClass,
    VerbForm,
    VocabCategory,
)
from .state import (
    AppState,
    PracticeFilter,
    RecallState,
    ReviewStats,
    default_categories,
    default_recall_state,
)

__all__ = [
    "VERB_BASE_ENDINGS",
    "AppState",
    "Card",
    "CardType",
    "Deck",
    "DeckDirection",
    "DeckKind",
    "ExampleSentence",
    "GeneratedVerb",
    "LadderMode",
    "PracticeFilter",
    "RecallState",
    "ReviewStats",
    "VerbClass",
    "VerbForm",
    "VocabCategory",
    "default_categories",
    "default_recall_state",
    "looks_like_verb_card",
    "normalize_base_kana",
]
