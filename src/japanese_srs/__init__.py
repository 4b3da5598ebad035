"""Spaced-repetition study engine for Japanese vocabulary, verbs and sentences.

Public entry points:
- `srs.record_review` / `srs.apply_review`: SM-2 scheduling
- `queue.get_due_card_ids` / `queue.build_practice_queue`: study queues
- `verbs.build_verb_queue`: conjugation ladders
- `store.StateStore`: persistence
"""

from .queue import (
    build_practice_queue,
    build_practice_queue_by_tags,
    count_due,
    get_due_card_ids,
)
from .srs import apply_review, deck_totals, record_review
from .verbs import build_verb_queue

__all__ = [
    "apply_review",
    "build_practice_queue",
    "build_practice_queue_by_tags",
    "build_verb_queue",
    "count_due",
    "deck_totals",
    "get_due_card_ids",
    "record_review",
]
