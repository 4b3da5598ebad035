"""Verb ladder grouping for conjugation decks.

同じ辞書形（ベース）を共有する活用カード群を「ラダー」として扱い、
ラダー内は活用形の固定順、ラダー同士は期限・練習回数・明示順で並べる。
ラダーに参加するのは `GeneratedVerb` を持つ生成カードだけで、
手書きの旧カードは常に除外される。
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

import jaconv

from .common import shuffled
from .conjugation import classify_verb
from .logging import logger
from .models import AppState, Card, CardType, Deck, LadderMode, VerbClass, VerbForm


VerbClassifier = Callable[[str, Optional[str]], VerbClass]

FORM_RANK: dict[VerbForm, int] = {form: rank for rank, form in enumerate(VerbForm)}

# 語尾メニューの表示順
VERB_ENDING_ORDER: tuple[str, ...] = ("う", "く", "ぐ", "す", "つ", "ぬ", "ぶ", "む", "る", "する", "くる")


@dataclass(frozen=True)
class VerbBase:
    """A distinct dictionary-form verb present in a deck."""

    base_key: str
    base_kana: str
    base_kanji: Optional[str]
    verb_class: VerbClass
    ending: str


def _ladder_cards(state: AppState, deck: Deck) -> list[Card]:
    return [card for card in state.deck_cards(deck.id) if card.verb is not None]


def order_ladder(cards: Iterable[Card]) -> list[Card]:
    """Sort one ladder by form rank, then answer, then id."""
    return sorted(
        cards,
        key=lambda card: (FORM_RANK[card.verb.form], card.answer, card.id),  # type: ignore[union-attr]
    )


def _group_by_base(cards: Iterable[Card]) -> dict[str, list[Card]]:
    groups: dict[str, list[Card]] = {}
    for card in cards:
        groups.setdefault(card.verb.base_key, []).append(card)  # type: ignore[union-attr]
    return groups


def count_excluded_verb_cards(state: AppState, deck_id: str) -> int:
    """Number of verb-typed cards in a deck that cannot join a ladder."""
    return sum(
        1
        for card in state.deck_cards(deck_id)
        if card.type is CardType.verb and card.verb is None
    )


def _log_exclusions(state: AppState, deck_id: str) -> None:
    excluded = count_excluded_verb_cards(state, deck_id)
    if excluded:
        logger.debug("verb_cards_excluded_from_ladders", deck_id=deck_id, count=excluded)


# --- composition modes ---
def ladder_queue_for_review(state: AppState, deck_id: str, now: datetime) -> list[str]:
    """Due cards grouped by base, earliest-due verb first.

    Due-ness is checked per card, so a ladder may be partial.
    """

    deck = state.decks.get(deck_id)
    if deck is None:
        return []
    _log_exclusions(state, deck_id)

    due_cards: list[Card] = []
    min_due: dict[str, datetime] = {}
    for card in _ladder_cards(state, deck):
        due = state.recall_state(card.id, now).due
        if due > now:
            continue
        due_cards.append(card)
        key = card.verb.base_key  # type: ignore[union-attr]
        if key not in min_due or due < min_due[key]:
            min_due[key] = due

    groups = _group_by_base(due_cards)
    ordered = sorted(groups, key=lambda key: min_due[key])
    return [card.id for key in ordered for card in order_ladder(groups[key])]


def ladder_queue_for_practice(state: AppState, deck_id: str, now: datetime, limit: int) -> list[str]:
    """Whole ladders, least-practiced verb first, filled up to `limit`.

    Ladders are never split. When even the first ladder is longer than
    `limit` it is returned whole rather than an empty queue.
    """

    deck = state.decks.get(deck_id)
    if deck is None or limit <= 0:
        return []
    _log_exclusions(state, deck_id)

    groups = []
    for cards in _group_by_base(_ladder_cards(state, deck)).values():
        ladder = order_ladder(cards)
        reviews = [state.review_stats(card.id).reviews for card in ladder]
        avg_reviews = sum(reviews) / len(reviews)
        min_due = min(state.recall_state(card.id, now).due for card in ladder)
        groups.append((avg_reviews, min_due, ladder))
    groups.sort(key=lambda group: (group[0], group[1]))

    out: list[str] = []
    for _, _, ladder in groups:
        if out and len(out) + len(ladder) > limit:
            break
        out.extend(card.id for card in ladder)
        if len(out) >= limit:
            break
    return out


def mixed_queue_for_practice(
    state: AppState,
    deck_id: str,
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Individual forms from every ladder, shuffled and truncated."""
    deck = state.decks.get(deck_id)
    if deck is None or limit <= 0:
        return []
    ids = [card.id for card in _ladder_cards(state, deck)]
    return shuffled(ids, rng)[:limit]


def _wanted_base_order(base_keys: Sequence[str]) -> dict[str, int]:
    order: dict[str, int] = {}
    for idx, raw in enumerate(base_keys):
        key = (raw or "").strip()
        if key and key not in order:
            order[key] = idx
    return order


def ladder_queue_for_bases(state: AppState, deck_id: str, base_keys: Sequence[str]) -> list[str]:
    """Ladders in exactly the caller's base order; unknown bases are skipped."""
    deck = state.decks.get(deck_id)
    if deck is None:
        return []
    order = _wanted_base_order(base_keys)
    if not order:
        return []

    wanted = [card for card in _ladder_cards(state, deck) if card.verb.base_key in order]  # type: ignore[union-attr]
    groups = _group_by_base(wanted)
    return [
        card.id
        for key in sorted(groups, key=lambda k: order[k])
        for card in order_ladder(groups[key])
    ]


def mixed_queue_for_bases(
    state: AppState,
    deck_id: str,
    base_keys: Sequence[str],
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    deck = state.decks.get(deck_id)
    if deck is None or limit <= 0:
        return []
    wanted = set(_wanted_base_order(base_keys))
    if not wanted:
        return []
    ids = [card.id for card in _ladder_cards(state, deck) if card.verb.base_key in wanted]  # type: ignore[union-attr]
    return shuffled(ids, rng)[:limit]


def build_verb_queue(
    state: AppState,
    deck_id: str,
    now: datetime,
    mode: LadderMode,
    limit: int = 0,
    base_keys: Optional[Sequence[str]] = None,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Dispatch to one of the four composition modes."""
    if mode is LadderMode.review:
        return ladder_queue_for_review(state, deck_id, now)
    if mode is LadderMode.practice:
        return ladder_queue_for_practice(state, deck_id, now, limit)
    if mode is LadderMode.mixed:
        return mixed_queue_for_practice(state, deck_id, limit, rng)
    return ladder_queue_for_bases(state, deck_id, base_keys or [])


# --- base helpers ---
def verb_ending_for_base_kana(base_kana: str) -> str:
    """Ending used for sub-practice menus: する, くる or the last kana."""
    kana = "".join((base_kana or "").split())
    if not kana:
        return ""
    if kana.endswith("する"):
        return "する"
    if kana.endswith("くる"):
        return "くる"
    return kana[-1]


def dictionary_bases(
    state: AppState,
    deck_id: str,
    classifier: VerbClassifier = classify_verb,
) -> list[VerbBase]:
    """Distinct dictionary-form bases of a deck, sorted by kana.

    カタカナ混じりの語幹（サボる など）はひらがなに寄せた読みで並べる。
    """
    deck = state.decks.get(deck_id)
    if deck is None:
        return []

    out: dict[str, VerbBase] = {}
    for card in _ladder_cards(state, deck):
        verb = card.verb
        if verb is None or verb.form is not VerbForm.dictionary or verb.base_key in out:
            continue
        out[verb.base_key] = VerbBase(
            base_key=verb.base_key,
            base_kana=verb.base_kana,
            base_kanji=verb.base_kanji,
            verb_class=classifier(verb.base_kana, verb.base_kanji),
            ending=verb_ending_for_base_kana(verb.base_kana),
        )
    return sorted(out.values(), key=lambda base: (jaconv.kata2hira(base.base_kana), base.base_kana))


def _ending_sort_key(ending: str) -> tuple[int, str]:
    try:
        return VERB_ENDING_ORDER.index(ending), ending
    except ValueError:
        return len(VERB_ENDING_ORDER), ending


def verb_endings_present(state: AppState, deck_id: str) -> list[str]:
    endings = {base.ending for base in dictionary_bases(state, deck_id) if base.ending}
    return sorted(endings, key=_ending_sort_key)


def base_keys_for_class(
    state: AppState,
    deck_id: str,
    verb_class: VerbClass,
    classifier: VerbClassifier = classify_verb,
) -> list[str]:
    return [
        base.base_key
        for base in dictionary_bases(state, deck_id, classifier)
        if base.verb_class is verb_class
    ]


def base_keys_for_ending(state: AppState, deck_id: str, ending: str) -> list[str]:
    wanted = (ending or "").strip()
    if not wanted:
        return []
    return [base.base_key for base in dictionary_bases(state, deck_id) if base.ending == wanted]


def partition_bases_by_class(
    state: AppState,
    deck_id: str,
    classifier: VerbClassifier = classify_verb,
) -> dict[VerbClass, list[VerbBase]]:
    """Dictionary-form bases split into ichidan and godan."""
    out: dict[VerbClass, list[VerbBase]] = {cls: [] for cls in VerbClass}
    for base in dictionary_bases(state, deck_id, classifier):
        out[base.verb_class].append(base)
    return out


def ladder_queue_for_class(state: AppState, deck_id: str, verb_class: VerbClass) -> list[str]:
    return ladder_queue_for_bases(state, deck_id, base_keys_for_class(state, deck_id, verb_class))


def mixed_queue_for_class(
    state: AppState,
    deck_id: str,
    verb_class: VerbClass,
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    return mixed_queue_for_bases(state, deck_id, base_keys_for_class(state, deck_id, verb_class), limit, rng)


def ladder_queue_for_ending(state: AppState, deck_id: str, ending: str) -> list[str]:
    return ladder_queue_for_bases(state, deck_id, base_keys_for_ending(state, deck_id, ending))


def mixed_queue_for_ending(
    state: AppState,
    deck_id: str,
    ending: str,
    limit: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    return mixed_queue_for_bases(state, deck_id, base_keys_for_ending(state, deck_id, ending), limit, rng)
