from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from .common import require_aware
from .logging import logger
from .models import AppState, RecallState, ReviewStats


MIN_EASE = 1.3
MAX_EASE = 3.0

# 正誤の二値を SM-2 の品質スコアへ写像する（0-5 の全段階は使わない）
QUALITY_CORRECT = 4
QUALITY_INCORRECT = 2
PASSING_QUALITY = 3


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    # 組み込み round() は偶数丸めなので、0.5 は常に切り上げる
    return int(math.floor(value + 0.5))


def apply_review(prev: RecallState, correct: bool, now: datetime) -> RecallState:
    """Return the recall state after one answer (simplified SM-2).

    - quality: 4 if correct, 2 if incorrect
    - incorrect: repetitions reset, interval forced to 1 day, lapse counted
    - correct: 1 day, then 6 days, then interval * ease
    - ease is only adjusted on a correct answer and clamped into [1.3, 3.0];
      at quality 4 the SM-2 adjustment is zero, so ease never decreases
    """

    require_aware(now)
    quality = QUALITY_CORRECT if correct else QUALITY_INCORRECT

    ease = prev.ease_factor
    repetitions = prev.repetitions
    interval_days = prev.interval_days
    lapses = prev.lapses

    if quality < PASSING_QUALITY:
        repetitions = 0
        interval_days = 1
        lapses += 1
    else:
        repetitions += 1
        if repetitions == 1:
            interval_days = 1
        elif repetitions == 2:
            interval_days = 6
        else:
            interval_days = _round_half_up(interval_days * ease)

        penalty = 5 - quality
        ease = _clamp(ease + (0.1 - penalty * (0.08 + penalty * 0.02)), MIN_EASE, MAX_EASE)

    return prev.model_copy(
        update={
            "ease_factor": ease,
            "repetitions": repetitions,
            "interval_days": interval_days,
            "lapses": lapses,
            "due": now + timedelta(days=interval_days),
            "last_reviewed": now,
        }
    )


def record_review(state: AppState, card_id: str, correct: bool, now: datetime) -> AppState:
    """Apply one answer to a snapshot and return the updated snapshot.

    Updates the card's recall state and its lifetime counters together so the
    caller can persist the result as a single write. Unknown cards leave the
    snapshot untouched.
    """

    if card_id not in state.cards:
        logger.warning("review_unknown_card", card_id=card_id)
        return state

    prev = state.recall_state(card_id, now)
    nxt = apply_review(prev, correct, now)

    prev_stats = state.review_stats(card_id)
    stats = ReviewStats(
        reviews=prev_stats.reviews + 1,
        correct=prev_stats.correct + (1 if correct else 0),
    )

    logger.debug(
        "review_recorded",
        card_id=card_id,
        correct=correct,
        interval_days=nxt.interval_days,
        repetitions=nxt.repetitions,
        lapses=nxt.lapses,
    )
    return state.model_copy(
        update={
            "srs": {**state.srs, card_id: nxt},
            "stats": {**state.stats, card_id: stats},
        }
    )


@dataclass
class DeckTotals:
    reviews: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> int:
        """Whole-number percentage of correct answers (0 when never reviewed)."""
        if not self.reviews:
            return 0
        return _round_half_up(self.correct / self.reviews * 100)


def deck_totals(state: AppState, deck_id: str) -> DeckTotals:
    """Sum lifetime review counters over a deck's cards."""
    totals = DeckTotals()
    for card in state.deck_cards(deck_id):
        stats = state.review_stats(card.id)
        totals.reviews += stats.reviews
        totals.correct += stats.correct
    return totals
