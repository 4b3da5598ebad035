import random
from datetime import datetime

import pytest

from japanese_srs.models import (
    Card,
    CardType,
    DeckKind,
    PracticeFilter,
    ReviewStats,
    VocabCategory,
    default_categories,
)
from japanese_srs.queue import (
    build_practice_queue,
    build_practice_queue_by_tags,
    count_due,
    get_due_card_ids,
)
from japanese_srs.srs import record_review
from tests.factories import NOW, ladder_cards, make_deck, make_state, recall, vocab_card


def _mixed_due_state():
    cards = [vocab_card(cid) for cid in ("overdue", "due_now", "later", "never_seen")]
    srs = {
        "overdue": recall("overdue", -2),
        "due_now": recall("due_now", 0),
        "later": recall("later", 3),
    }
    return make_state([make_deck("deck_vocab", cards)], cards, srs=srs)


def test_due_ids_are_exactly_cards_due_at_or_before_now(rng: random.Random):
    state = _mixed_due_state()

    due = get_due_card_ids(state, "deck_vocab", NOW, rng)

    assert sorted(due) == ["due_now", "never_seen", "overdue"]
    assert len(due) == len(set(due))
    assert count_due(state, "deck_vocab", NOW) == 3


def test_due_ids_skip_dangling_and_unknown_decks():
    card = vocab_card("a")
    deck = make_deck("deck_vocab", [card])
    deck.card_ids.append("ghost")
    state = make_state([deck], [card])

    assert get_due_card_ids(state, "deck_vocab", NOW) == ["a"]
    assert get_due_card_ids(state, "nope", NOW) == []


def test_due_order_is_a_shuffle_of_the_same_set():
    cards = [vocab_card(f"c{i}") for i in range(12)]
    state = make_state([make_deck("deck_vocab", cards)], cards)

    orders = {tuple(get_due_card_ids(state, "deck_vocab", NOW, random.Random(seed))) for seed in range(5)}

    assert all(sorted(order) == sorted(c.id for c in cards) for order in orders)
    assert len(orders) > 1


def test_practice_queue_puts_due_cards_first_then_least_practiced():
    cards = [vocab_card(cid) for cid in ("due", "fresh_a", "worn", "fresh_b")]
    state = make_state(
        [make_deck("deck_vocab", cards)],
        cards,
        srs={
            "due": recall("due", -1),
            "fresh_a": recall("fresh_a", 2),
            "worn": recall("worn", 1),
            "fresh_b": recall("fresh_b", 4),
        },
        stats={
            "due": ReviewStats(reviews=5, correct=5),
            "worn": ReviewStats(reviews=3, correct=1),
        },
    )

    queue = build_practice_queue(state, "deck_vocab", NOW, 0, random.Random(7))

    assert queue[0] == "due"
    assert set(queue[1:3]) == {"fresh_a", "fresh_b"}
    assert queue[3] == "worn"


def test_practice_queue_respects_limit_and_noun_filter(rng: random.Random):
    nouns = [vocab_card(f"n{i}", pos="noun") for i in range(8)]
    verbs = [vocab_card(f"v{i}", pos="verb (transitive)") for i in range(4)]
    cards = nouns + verbs
    only_nouns = PracticeFilter(
        categories={**default_categories(), VocabCategory.verb: False, VocabCategory.adverb: False}
    )
    state = make_state(
        [make_deck("deck_vocab", cards)],
        cards,
        filters={"deck_vocab": only_nouns},
    )

    queue = build_practice_queue(state, "deck_vocab", NOW, 5, rng)

    assert len(queue) == 5
    assert len(set(queue)) == 5
    assert all(card_id.startswith("n") for card_id in queue)


def test_practice_queue_is_empty_when_every_category_is_disabled():
    cards = [vocab_card("a"), vocab_card("b", pos="adverb")]
    disabled = PracticeFilter(categories={category: False for category in VocabCategory})
    state = make_state([make_deck("deck_vocab", cards)], cards, filters={"deck_vocab": disabled})

    assert build_practice_queue(state, "deck_vocab", NOW, 10) == []


def test_category_filter_does_not_apply_to_mixed_decks():
    sentence = Card(id="s1", deck_id="deck_mix", type=CardType.sentence, prompt="I eat.", answer="たべる")
    noun = vocab_card("n1", deck_id="deck_mix")
    disabled = PracticeFilter(categories={category: False for category in VocabCategory})
    state = make_state(
        [make_deck("deck_mix", [sentence, noun])],
        [sentence, noun],
        filters={"deck_mix": disabled},
    )

    assert sorted(build_practice_queue(state, "deck_mix", NOW, 0)) == ["n1", "s1"]


def test_practice_queue_for_conjugation_deck_uses_whole_ladders():
    cards = ladder_cards("deck_verbs", "たべる", "食べる", "to eat") + ladder_cards(
        "deck_verbs", "のむ", "飲む", "to drink"
    )
    state = make_state(
        [make_deck("deck_verbs", cards, kind=DeckKind.verb_conjugation)],
        cards,
    )

    queue = build_practice_queue(state, "deck_verbs", NOW, 12)

    assert len(queue) == 12
    assert len({state.cards[cid].verb.base_key for cid in queue}) == 1


def test_tag_practice_only_includes_tagged_cards(rng: random.Random):
    cards = [
        vocab_card("food1", tags=["food"]),
        vocab_card("food2", tags=["food", "shopping"]),
        vocab_card("time1", tags=["time"]),
        vocab_card("plain"),
    ]
    state = make_state([make_deck("deck_vocab", cards)], cards, srs={"food2": recall("food2", 5)})

    queue = build_practice_queue_by_tags(state, "deck_vocab", NOW, 10, [" food "], rng)

    # food1 は未学習なので期限切れ扱いで先頭
    assert queue == ["food1", "food2"]


def test_tag_practice_edge_cases(rng: random.Random):
    cards = [vocab_card("a", tags=["x"]), vocab_card("b")]
    state = make_state([make_deck("deck_vocab", cards)], cards)

    assert build_practice_queue_by_tags(state, "deck_vocab", NOW, 0, ["x"], rng) == []
    assert build_practice_queue_by_tags(state, "deck_vocab", NOW, 5, ["nothing"], rng) == []
    assert sorted(build_practice_queue_by_tags(state, "deck_vocab", NOW, 5, ["", "  "], rng)) == ["a", "b"]


@pytest.mark.parametrize("extra", [0, 5])
def test_practice_queue_is_a_permutation_when_limit_covers_the_deck(rng: random.Random, extra: int):
    cards = [vocab_card(f"c{i}") for i in range(9)]
    srs = {card.id: recall(card.id, due) for card, due in zip(cards, (-3, -1, 0, 1, 2, 5, 8, 13, 21))}
    stats = {card.id: ReviewStats(reviews=i % 3, correct=0) for i, card in enumerate(cards)}
    state = make_state([make_deck("deck_vocab", cards)], cards, srs=srs, stats=stats)

    queue = build_practice_queue(state, "deck_vocab", NOW, len(cards) + extra, rng)

    assert len(queue) == len(set(queue))
    assert sorted(queue) == sorted(card.id for card in cards)
    assert set(queue[:3]) == {"c0", "c1", "c2"}


def test_naive_now_is_rejected_after_reviews_were_recorded():
    card = vocab_card("a")
    state = record_review(make_state([make_deck("deck_vocab", [card])], [card]), "a", True, NOW)

    with pytest.raises(ValueError, match="timezone-aware"):
        get_due_card_ids(state, "deck_vocab", datetime(2026, 3, 5, 9, 0))
    with pytest.raises(ValueError, match="timezone-aware"):
        build_practice_queue(state, "deck_vocab", datetime(2026, 3, 5, 9, 0), 0)
