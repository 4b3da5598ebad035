from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Sequence

from .common import require_aware, shuffled, truncate
from .filters import filter_by_tags, practice_filtered_ids
from .logging import logger
from .models import AppState
from .verbs import ladder_queue_for_practice, ladder_queue_for_review


def get_due_card_ids(
    state: AppState,
    deck_id: str,
    now: datetime,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Cards of a deck whose `due <= now`.

    Conjugation decks return due ladders (see `verbs.ladder_queue_for_review`).
    Other decks: sorted by due time to pick the set, then shuffled so the
    presentation order cannot be memorised.
    """

    require_aware(now)
    deck = state.decks.get(deck_id)
    if deck is None:
        return []
    if deck.is_verb_conjugation:
        return ladder_queue_for_review(state, deck_id, now)

    due: list[tuple[datetime, str]] = []
    for card in state.deck_cards(deck_id):
        recall = state.recall_state(card.id, now)
        if recall.due <= now:
            due.append((recall.due, card.id))
    due.sort(key=lambda item: item[0])
    return shuffled([card_id for _, card_id in due], rng)


def count_due(state: AppState, deck_id: str, now: datetime) -> int:
    return len(get_due_card_ids(state, deck_id, now))


def _order_not_due(
    state: AppState,
    ids: Sequence[str],
    now: datetime,
    rng: Optional[random.Random],
) -> list[str]:
    # 練習回数の少ないバケットから順に並べる。バケット内は due 順に並べた後で
    # バケット全体をシャッフルするため、due 順は弱い優先度にしかならない。
    buckets: dict[int, list[str]] = {}
    for card_id in ids:
        buckets.setdefault(state.review_stats(card_id).reviews, []).append(card_id)

    out: list[str] = []
    for reviews in sorted(buckets):
        bucket = sorted(buckets[reviews], key=lambda cid: state.recall_state(cid, now).due)
        out.extend(shuffled(bucket, rng))
    return out


def _due_first(
    state: AppState,
    deck_id: str,
    base_ids: Sequence[str],
    now: datetime,
    rng: Optional[random.Random],
) -> tuple[list[str], list[str]]:
    base = set(base_ids)
    due = [card_id for card_id in get_due_card_ids(state, deck_id, now, rng) if card_id in base]
    due_set = set(due)
    others = [card_id for card_id in base_ids if card_id not in due_set]
    return due, _order_not_due(state, others, now, rng)


def build_practice_queue(
    state: AppState,
    deck_id: str,
    now: datetime,
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """On-demand study queue: due cards first, then least-practiced cards.

    - conjugation decks use whole-ladder practice
    - vocab-only decks honour the deck's category filter
    - `limit <= 0` returns the full ordering
    """

    require_aware(now)
    deck = state.decks.get(deck_id)
    if deck is None:
        return []
    if deck.is_verb_conjugation:
        queue = ladder_queue_for_practice(state, deck_id, now, limit)
        logger.debug("practice_queue_built", deck_id=deck_id, mode="ladder", size=len(queue))
        return queue

    base_ids = practice_filtered_ids(state, deck_id)
    due, others = _due_first(state, deck_id, base_ids, now, rng)
    queue = truncate(due + others, limit)
    logger.debug(
        "practice_queue_built",
        deck_id=deck_id,
        eligible=len(base_ids),
        due=len(due),
        size=len(queue),
    )
    return queue


def build_practice_queue_by_tags(
    state: AppState,
    deck_id: str,
    now: datetime,
    limit: int,
    tags: Sequence[str],
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Practice restricted to cards carrying any of `tags`.

    Without usable tags this is the plain practice queue.
    """

    deck = state.decks.get(deck_id)
    if deck is None or limit <= 0:
        return []
    if not any(t and t.strip() for t in tags):
        return build_practice_queue(state, deck_id, now, limit, rng)

    base_ids = [card.id for card in filter_by_tags(state.deck_cards(deck_id), tags)]
    due, others = _due_first(state, deck_id, base_ids, now, rng)
    queue = truncate(due + others, limit)
    logger.debug("tag_practice_queue_built", deck_id=deck_id, tags=list(tags), size=len(queue))
    return queue
