"""Category and tag filters for practice selection.

語彙デッキの品詞カテゴリ絞り込みと、タグによるテーマ別練習の絞り込み。
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from .models import AppState, Card, CardType, PracticeFilter, VocabCategory


_ADVERB_RE = re.compile(r"\badverb\b")
_VERB_RE = re.compile(r"\bverb\b")
_CONNECTOR_MARKERS: tuple[str, ...] = (
    "conjunction",
    "particle",
    "determiner",
    "interjection",
    "auxiliary",
    "suffix",
    "expression",
)


def vocab_category_for_pos(pos: Optional[str]) -> VocabCategory:
    """Classify a free-form part-of-speech string.

    "adverb" is tested before "verb"; both use word boundaries so that e.g.
    "verb (transitive)" is a verb and "adverb" is not.
    """

    text = (pos or "").lower()
    if _ADVERB_RE.search(text):
        return VocabCategory.adverb
    if _VERB_RE.search(text):
        return VocabCategory.verb
    if "adjective" in text:
        return VocabCategory.adjective
    if "noun" in text or "pronoun" in text:
        return VocabCategory.noun
    if any(marker in text for marker in _CONNECTOR_MARKERS):
        return VocabCategory.connector
    return VocabCategory.other


def is_vocab_only_deck(state: AppState, deck_id: str) -> bool:
    deck = state.decks.get(deck_id)
    if deck is None or not deck.card_ids:
        return False
    for card_id in deck.card_ids:
        card = state.cards.get(card_id)
        if card is None or card.type is not CardType.vocab:
            return False
    return True


def filter_by_category(cards: Iterable[Card], practice_filter: Optional[PracticeFilter]) -> list[Card]:
    """Keep vocab cards whose category is enabled.

    - no filter configured: everything passes
    - every category disabled: nothing passes (an empty queue, not an error)
    - non-vocab cards are not subject to the filter
    """

    cards = list(cards)
    if practice_filter is None:
        return cards
    if not practice_filter.any_enabled:
        return []
    return [
        card
        for card in cards
        if card.type is not CardType.vocab
        or practice_filter.is_enabled(vocab_category_for_pos(card.pos))
    ]


def _wanted_tags(tags: Iterable[str]) -> list[str]:
    return [t.strip() for t in tags if t and t.strip()]


def filter_by_tags(cards: Iterable[Card], tags: Sequence[str]) -> list[Card]:
    """Keep cards sharing at least one tag with `tags`; untagged cards never match."""
    wanted = set(_wanted_tags(tags))
    if not wanted:
        return []
    return [card for card in cards if card.tags and wanted.intersection(card.tags)]


def practice_filtered_ids(state: AppState, deck_id: str) -> list[str]:
    """Deck card ids after the deck's category filter (vocab-only decks only)."""
    cards = state.deck_cards(deck_id)
    if is_vocab_only_deck(state, deck_id):
        cards = filter_by_category(cards, state.practice_filters.get(deck_id))
    return [card.id for card in cards]


def set_category_enabled(
    state: AppState,
    deck_id: str,
    category: VocabCategory,
    enabled: bool,
) -> AppState:
    """Return a snapshot with one category switched on or off for a deck."""
    current = state.practice_filters.get(deck_id) or PracticeFilter()
    updated = PracticeFilter(categories={**current.categories, category: enabled})
    return state.model_copy(
        update={"practice_filters": {**state.practice_filters, deck_id: updated}}
    )
