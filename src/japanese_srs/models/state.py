from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from ..common import require_aware
from .card import Card, Deck
from .common import VocabCategory


class RecallState(BaseModel):
    """Per-card SM-2 scheduling state.

    復習スケジュールの状態。Scheduler だけが更新し、初回レビュー時に
    `default_recall_state` で遅延生成される。
    """

    model_config = ConfigDict(frozen=True)

    card_id: str
    due: AwareDatetime
    interval_days: int = Field(default=0, ge=0)
    ease_factor: float = Field(default=2.5, ge=1.3, le=3.0)
    repetitions: int = Field(default=0, ge=0)
    lapses: int = Field(default=0, ge=0)
    last_reviewed: Optional[AwareDatetime] = None


def default_recall_state(card_id: str, now: datetime) -> RecallState:
    """State of a card that has never been reviewed: due immediately."""
    return RecallState(card_id=card_id, due=require_aware(now))


class ReviewStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    reviews: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)


def default_categories() -> dict[VocabCategory, bool]:
    return {category: True for category in VocabCategory}


class PracticeFilter(BaseModel):
    """Per-deck vocab category switches."""

    categories: dict[VocabCategory, bool] = Field(default_factory=default_categories)

    def is_enabled(self, category: VocabCategory) -> bool:
        # 保存データにキーが無いカテゴリは無効扱い
        return bool(self.categories.get(category, False))

    @property
    def any_enabled(self) -> bool:
        return any(self.categories.values())


class AppState(BaseModel):
    """Snapshot of everything the study engine reads.

    The engine never mutates a snapshot; helpers return updated copies.
    """

    model_config = ConfigDict(extra="ignore")

    version: Literal[1] = 1
    decks: dict[str, Deck] = Field(default_factory=dict)
    cards: dict[str, Card] = Field(default_factory=dict)
    srs: dict[str, RecallState] = Field(default_factory=dict)
    stats: dict[str, ReviewStats] = Field(default_factory=dict)
    practice_filters: dict[str, PracticeFilter] = Field(default_factory=dict)

    def recall_state(self, card_id: str, now: datetime) -> RecallState:
        """Stored recall state, or the never-reviewed default."""
        require_aware(now)
        existing = self.srs.get(card_id)
        if existing is not None:
            return existing
        return default_recall_state(card_id, now)

    def review_stats(self, card_id: str) -> ReviewStats:
        return self.stats.get(card_id) or ReviewStats()

    def deck_cards(self, deck_id: str) -> list[Card]:
        """Resolve a deck's card ids in deck order.

        Dangling and repeated ids are skipped; an unknown deck yields [].
        """

        deck = self.decks.get(deck_id)
        if deck is None:
            return []
        seen: set[str] = set()
        out: list[Card] = []
        for card_id in deck.card_ids:
            if card_id in seen:
                continue
            card = self.cards.get(card_id)
            if card is None:
                continue
            seen.add(card_id)
            out.append(card)
        return out
