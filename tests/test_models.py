import pytest
from pydantic import ValidationError

from japanese_srs.models import (
    AppState,
    Card,
    CardType,
    Deck,
    DeckKind,
    GeneratedVerb,
    PracticeFilter,
    RecallState,
    VerbForm,
    VocabCategory,
    looks_like_verb_card,
)
from tests.factories import NOW, vocab_card


def test_generated_verb_normalizes_fields():
    verb = GeneratedVerb(base_kana=" た べ る ", base_kanji="  ", form=" TE ")

    assert verb.base_kana == "たべる"
    assert verb.base_kanji is None
    assert verb.form is VerbForm.te
    assert verb.base_key == "||たべる"


@pytest.mark.parametrize(
    ("kana", "form"),
    [("", "te"), ("たべ", "te"), ("のむ", "potential"), (None, "past")],
)
def test_generated_verb_try_create_rejects_invalid_metadata(kana, form):
    assert GeneratedVerb.try_create(kana, None, form) is None


def test_card_rejects_conjugation_metadata_on_non_verb_card():
    verb = GeneratedVerb(base_kana="のむ", base_kanji="飲む", form=VerbForm.past)

    with pytest.raises(ValidationError, match="not a verb card"):
        Card(
            id="c1",
            deck_id="d",
            type=CardType.verb,
            prompt="drank",
            answer="のんだ",
            pos="adverb",
            verb=verb,
        )


@pytest.mark.parametrize(
    ("card_type", "pos", "prompt", "expected"),
    [
        ("verb", "verb (transitive)", "drink", True),
        ("verb", None, "to drink", True),
        ("verb", "adverb", "quickly", False),
        ("vocab", "verb", "to drink", False),
    ],
)
def test_looks_like_verb_card(card_type, pos, prompt, expected):
    assert looks_like_verb_card(card_type, pos, prompt) is expected


def test_recall_state_enforces_ease_bounds():
    with pytest.raises(ValidationError):
        RecallState(card_id="c", due=NOW, ease_factor=1.0)


def test_practice_filter_treats_missing_category_as_disabled():
    practice_filter = PracticeFilter(categories={VocabCategory.noun: True})

    assert practice_filter.is_enabled(VocabCategory.noun)
    assert not practice_filter.is_enabled(VocabCategory.verb)
    assert practice_filter.any_enabled


def test_deck_cards_skips_dangling_and_duplicate_ids():
    card = vocab_card("a")
    deck = Deck(id="deck_vocab", name="Vocab", card_ids=["a", "ghost", "a"])
    state = AppState(decks={deck.id: deck}, cards={card.id: card})

    assert [c.id for c in state.deck_cards("deck_vocab")] == ["a"]
    assert state.deck_cards("missing") == []
    assert not deck.is_verb_conjugation
    assert Deck(id="v", name="Verbs", kind=DeckKind.verb_conjugation).is_verb_conjugation
