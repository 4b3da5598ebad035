from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .common import CardType, DeckDirection, DeckKind, VerbForm


# 動詞の辞書形は必ずウ段で終わる（する／くる の複合形も る で終わる）。
VERB_BASE_ENDINGS: tuple[str, ...] = ("う", "く", "ぐ", "す", "つ", "ぬ", "ぶ", "む", "る")

_VERB_WORD_RE = re.compile(r"\bverb\b")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_base_kana(value: str | None) -> str:
    """Strip every whitespace character from a dictionary-form reading."""
    return _WHITESPACE_RE.sub("", value or "")


def looks_like_verb_card(card_type: CardType | str, pos: str | None, prompt: str | None) -> bool:
    """Return True when a card reads as a verb entry.

    生成された活用カードだけがラダーに参加できる。品詞に "verb" を含むか、
    英語の手掛かりが "to " で始まるものを動詞カードとみなす。
    """

    if CardType(card_type) is not CardType.verb:
        return False
    pos_l = (pos or "").lower()
    cue = (prompt or "").strip().lower()
    return bool(_VERB_WORD_RE.search(pos_l)) or cue.startswith("to ")


class ExampleSentence(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ja: str = Field(min_length=1)
    kana: Optional[str] = None
    en: Optional[str] = None


class GeneratedVerb(BaseModel):
    """Validated conjugation metadata of a mechanically generated verb card.

    Built once when a card is created or migrated, so queue code only has to
    check `card.verb is not None` instead of re-deriving eligibility.
    """

    model_config = ConfigDict(frozen=True)

    base_kana: str
    base_kanji: Optional[str] = None
    form: VerbForm

    @field_validator("base_kana")
    @classmethod
    def _validate_base_kana(cls, value: str) -> str:
        kana = normalize_base_kana(value)
        if not kana:
            raise ValueError("base_kana must not be empty")
        if not kana.endswith(VERB_BASE_ENDINGS):
            raise ValueError(f"base_kana {kana!r} does not end in a verb ending")
        return kana

    @field_validator("base_kanji")
    @classmethod
    def _strip_base_kanji(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        text = value.strip()
        return text or None

    @field_validator("form", mode="before")
    @classmethod
    def _normalize_form(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def base_key(self) -> str:
        return f"{self.base_kanji or ''}||{self.base_kana}"

    @classmethod
    def try_create(
        cls,
        base_kana: str | None,
        base_kanji: str | None,
        form: str | VerbForm | None,
    ) -> Optional["GeneratedVerb"]:
        """Build the metadata, or return None if any field fails validation."""
        try:
            return cls(base_kana=base_kana or "", base_kanji=base_kanji, form=form)
        except ValidationError:
            return None


class Card(BaseModel):
    """An atomic study item; belongs to exactly one deck."""

    model_config = ConfigDict(extra="ignore")

    id: str
    deck_id: str
    type: CardType
    prompt: str
    answer: str
    pos: Optional[str] = None
    note: Optional[str] = None
    kanji: Optional[str] = None
    background: Optional[str] = None
    examples: list[ExampleSentence] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    verb: Optional[GeneratedVerb] = None

    @model_validator(mode="after")
    def _check_generated_verb(self) -> "Card":
        if self.verb is not None and not looks_like_verb_card(self.type, self.pos, self.prompt):
            raise ValueError(
                f"card {self.id} carries conjugation metadata but is not a verb card"
            )
        return self


class Deck(BaseModel):
    """A named, ordered collection of card ids."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    kind: DeckKind = DeckKind.standard
    direction: DeckDirection = DeckDirection.en_ja
    description: Optional[str] = None
    card_ids: list[str] = Field(default_factory=list)

    @property
    def is_verb_conjugation(self) -> bool:
        return self.kind is DeckKind.verb_conjugation
