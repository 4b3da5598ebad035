from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .config import settings
from .logging import logger
from .models import (
    AppState,
    Card,
    CardType,
    DeckDirection,
    DeckKind,
    GeneratedVerb,
    PracticeFilter,
    RecallState,
    ReviewStats,
    looks_like_verb_card,
)
from .seed import make_seed_state


# 旧フォーマット（camelCase）のキーを現在の snake_case へ読み替える
_DECK_KEYS = {"cardIds": "card_ids"}
_CARD_KEYS = {
    "deckId": "deck_id",
    "exampleSentences": "examples",
    "verbBaseKana": "verb_base_kana",
    "verbBaseKanji": "verb_base_kanji",
    "verbForm": "verb_form",
}
_SRS_KEYS = {
    "cardId": "card_id",
    "intervalDays": "interval_days",
    "easeFactor": "ease_factor",
    "lastReviewed": "last_reviewed",
}
_STATE_KEYS = {"vocabPracticeFilters": "practice_filters"}
_LEGACY_VERB_FIELDS = ("verb_base_kana", "verb_base_kanji", "verb_form")


def _rename_keys(raw: dict[str, Any], mapping: dict[str, str]) -> tuple[dict[str, Any], bool]:
    out = dict(raw)
    renamed = False
    for old, new in mapping.items():
        if old in out:
            value = out.pop(old)
            out.setdefault(new, value)
            renamed = True
    return out, renamed


def _infer_direction(name: str) -> DeckDirection:
    n = name.lower()
    if any(marker in n for marker in ("jp→en", "jp->en", "ja→en", "ja->en")):
        return DeckDirection.ja_en
    return DeckDirection.en_ja


def _infer_kind(name: str) -> DeckKind:
    if "verb conjugation" in name.lower():
        return DeckKind.verb_conjugation
    return DeckKind.standard


def _normalize_examples(raw: Any) -> tuple[list[dict[str, Any]], bool]:
    """Upgrade string examples to objects, drop blanks and dedupe by `ja`.

    Returns the cleaned list and whether anything changed.
    """

    if not isinstance(raw, list):
        return [], raw is not None

    out: list[dict[str, Any]] = []
    seen: set[str] = set()
    changed = False
    for item in raw:
        if isinstance(item, str):
            item = {"ja": item}
            changed = True
        if not isinstance(item, dict) or not isinstance(item.get("ja"), str):
            changed = True
            continue
        ja = item["ja"].strip()
        if not ja or ja in seen:
            changed = True
            continue
        seen.add(ja)
        cleaned: dict[str, Any] = {"ja": ja}
        for key in ("kana", "en"):
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                cleaned[key] = value.strip()
        if cleaned != {k: v for k, v in item.items() if v is not None}:
            changed = True
        out.append(cleaned)
    return out, changed


class StateFormatError(ValueError):
    """A stored blob whose sections do not have the expected shape."""


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise StateFormatError(f"{name} must be an object, got {type(value).__name__}")
    return value


def _to_datetime(value: Any) -> Any:
    # 旧データは epoch ミリ秒で保存されている
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str):
        # タイムゾーンの無い ISO 文字列は UTC とみなす
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return value
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
    return value


def _migrate_card(raw: dict[str, Any]) -> tuple[Optional[Card], bool, bool]:
    """Return (card or None, changed, excluded_from_ladders)."""
    data, changed = _rename_keys(raw, _CARD_KEYS)

    examples, examples_changed = _normalize_examples(data.get("examples"))
    data["examples"] = examples
    changed = changed or examples_changed

    excluded = False
    if any(field in data for field in _LEGACY_VERB_FIELDS):
        base_kana = data.pop("verb_base_kana", None)
        base_kanji = data.pop("verb_base_kanji", None)
        form = data.pop("verb_form", None)
        changed = True
        if data.get("verb") is None and (base_kana or form):
            verb = GeneratedVerb.try_create(base_kana, base_kanji, form)
            if verb is not None and looks_like_verb_card(
                data.get("type", ""), data.get("pos"), data.get("prompt")
            ):
                data["verb"] = verb.model_dump(mode="json")
            else:
                excluded = True

    try:
        return Card.model_validate(data), changed, excluded
    except ValidationError:
        pass

    # 活用メタデータだけが不正ならメタデータを外してカードは残す
    if data.get("verb") is not None:
        data["verb"] = None
        try:
            return Card.model_validate(data), True, True
        except ValidationError:
            pass
    return None, True, excluded


def migrate_state(raw: dict[str, Any]) -> tuple[AppState, bool]:
    """Upgrade a stored state blob to the current model.

    保存済みデータを現在のモデルへ移行する。
    - 名前からデッキの種別と出題方向を推定（名前で判定するのはここだけ）
    - 旧 verbBaseKana/verbForm を `GeneratedVerb` に変換し、不正なものは除外
    - 活用デッキに紛れ込んだ副詞カードを削除（srs/stats も削除）
    - 存在しないカード ID・重複 ID をデッキから除去
    - 例文の形式を統一し重複を除去、stats が無ければ空で補う

    Returns the migrated state and whether anything was rewritten. A blob
    whose sections are not mappings raises `StateFormatError` instead of
    being migrated to an empty state.
    """

    data, changed = _rename_keys(raw, _STATE_KEYS)

    # --- cards ---
    cards: dict[str, Card] = {}
    dropped_cards = 0
    excluded_verbs = 0
    for card_id, card_raw in _section(data, "cards").items():
        if not isinstance(card_raw, dict):
            dropped_cards += 1
            continue
        card, card_changed, excluded = _migrate_card(card_raw)
        changed = changed or card_changed
        excluded_verbs += int(excluded)
        if card is None or card.id != card_id:
            dropped_cards += 1
            continue
        cards[card_id] = card
    if dropped_cards:
        changed = True
        logger.warning("migration_dropped_invalid_cards", count=dropped_cards)
    if excluded_verbs:
        logger.info("migration_excluded_verb_cards", count=excluded_verbs)

    # --- decks ---
    decks: dict[str, Any] = {}
    for deck_id, deck_raw in _section(data, "decks").items():
        if not isinstance(deck_raw, dict):
            changed = True
            continue
        deck, renamed = _rename_keys(deck_raw, _DECK_KEYS)
        changed = changed or renamed
        name = str(deck.get("name") or "")
        if "kind" not in deck:
            deck["kind"] = _infer_kind(name).value
            changed = True
        if not deck.get("direction"):
            deck["direction"] = _infer_direction(name).value
            changed = True

        stored_ids = deck.get("card_ids") or []
        if not isinstance(stored_ids, list):
            raise StateFormatError(f"deck {deck_id} card_ids must be a list")
        card_ids: list[str] = []
        seen: set[str] = set()
        for card_id in stored_ids:
            if isinstance(card_id, str) and card_id in cards and card_id not in seen:
                seen.add(card_id)
                card_ids.append(card_id)
        if card_ids != stored_ids:
            changed = True
        deck["card_ids"] = card_ids
        decks[deck_id] = deck

    # 活用デッキから副詞に誤分類されたカードを外す
    removed: set[str] = set()
    for deck in decks.values():
        if deck["kind"] != DeckKind.verb_conjugation.value:
            continue
        keep = []
        for card_id in deck["card_ids"]:
            card = cards[card_id]
            if card.type is CardType.verb and "adverb" in (card.pos or "").lower():
                removed.add(card_id)
                continue
            keep.append(card_id)
        deck["card_ids"] = keep
    if removed:
        changed = True
        for card_id in removed:
            cards.pop(card_id, None)
        logger.info("migration_removed_adverb_verb_cards", count=len(removed))

    # --- srs ---
    srs: dict[str, RecallState] = {}
    for card_id, entry in _section(data, "srs").items():
        if card_id not in cards or not isinstance(entry, dict):
            changed = True
            continue
        entry, renamed = _rename_keys(entry, _SRS_KEYS)
        for key in ("due", "last_reviewed"):
            converted = _to_datetime(entry.get(key))
            if converted is not entry.get(key):
                entry[key] = converted
                renamed = True
        changed = changed or renamed
        try:
            srs[card_id] = RecallState.model_validate(entry)
        except ValidationError:
            changed = True
            logger.warning("migration_dropped_invalid_srs", card_id=card_id)

    # --- stats ---
    if "stats" not in data or data.get("stats") is None:
        changed = True
    stats: dict[str, ReviewStats] = {}
    for card_id, entry in _section(data, "stats").items():
        if card_id not in cards:
            changed = True
            continue
        try:
            stats[card_id] = ReviewStats.model_validate(entry)
        except ValidationError:
            changed = True

    # --- practice filters ---
    filters: dict[str, PracticeFilter] = {}
    for deck_id, entry in _section(data, "practice_filters").items():
        if deck_id not in decks:
            changed = True
            continue
        try:
            filters[deck_id] = PracticeFilter.model_validate(entry)
        except ValidationError:
            changed = True

    state = AppState.model_validate(
        {
            "version": 1,
            "decks": decks,
            "cards": cards,
            "srs": srs,
            "stats": stats,
            "practice_filters": filters,
        }
    )
    return state, changed


class StateStore:
    """SQLite-backed persistence for the whole app state.

    状態全体を 1 行の JSON として kv テーブルへ保存する。保存は常に全置換。
    読み込みに失敗した場合は初期データで起動を続ける。
    """

    def __init__(self, db_path: Optional[str] = None, key: Optional[str] = None) -> None:
        self.db_path = db_path or settings.state_db_path
        self.key = key or settings.state_key
        self._ensure_dirs()
        self._init_db()

    # --- low-level helpers ---
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=10.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        with conn:
            conn.execute("PRAGMA journal_mode=WAL;")
        return conn

    def _ensure_dirs(self) -> None:
        p = Path(self.db_path)
        if p.parent and not p.parent.exists():
            p.parent.mkdir(parents=True, exist_ok=True)

    def _init_db(self) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    );
                    """
                )
        finally:
            conn.close()

    def _read_raw(self) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self.key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row is not None else None

    def _write_raw(self, value: str) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, value, datetime.now(UTC).isoformat()),
                )
        finally:
            conn.close()

    # --- public API ---
    def load(self) -> AppState:
        """Load, migrate and return the stored state; seed on first run."""
        try:
            raw = self._read_raw()
            if raw is not None:
                data = json.loads(raw)
                if isinstance(data, dict) and data.get("version") == 1:
                    state, changed = migrate_state(data)
                    if changed:
                        logger.info("state_migrated", key=self.key)
                        self.save(state)
                    return state
                logger.warning("state_version_unsupported", key=self.key)
            seed = make_seed_state()
            self.save(seed)
            return seed
        except (sqlite3.Error, json.JSONDecodeError, StateFormatError, ValidationError) as exc:
            # 保存済みデータは上書きせず、初期データで起動を続ける
            logger.error(
                "state_load_failed",
                db_path=self.db_path,
                error=str(exc),
                exc_info=True,
            )
            return make_seed_state()

    def save(self, state: AppState) -> bool:
        """Replace the stored state. Returns False (after logging) on failure."""
        try:
            self._write_raw(state.model_dump_json())
        except sqlite3.Error as exc:
            logger.error("state_save_failed", db_path=self.db_path, error=str(exc))
            return False
        logger.debug("state_saved", key=self.key, cards=len(state.cards))
        return True

    def reset(self) -> AppState:
        """Discard stored progress and start over from a fresh seed."""
        seed = make_seed_state()
        self.save(seed)
        logger.info("state_reset", db_path=self.db_path, decks=len(seed.decks), cards=len(seed.cards))
        return seed
