"""Answer grading for typed responses.

日本語の答えはローマ字をかなに変換し、カタカナをひらがなに寄せ、
空白と句読点を除いて比較する（taberu / タベル / たべる は同じ答え）。
英語の答えは ; , / 区切りの候補のどれかと一致すれば正解とする。
"""

from __future__ import annotations

import re

import jaconv

from .models import DeckDirection


_JA_STRIP_RE = re.compile(r"[\s　]+|[。．.、，,！!？?「」『』（）()\[\]【】]")
_PAREN_RE = re.compile(r"\([^)]*\)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]+")
_SPACES_RE = re.compile(r"\s+")


def to_hiragana(text: str) -> str:
    """Romaji and katakana to hiragana; kanji and other symbols pass through."""
    return jaconv.kata2hira(jaconv.alphabet2kana(text.lower()))


def to_katakana(text: str) -> str:
    return jaconv.hira2kata(to_hiragana(text))


def to_romaji(kana: str) -> str:
    return jaconv.kana2alphabet(jaconv.kata2hira(kana)).strip()


def normalize_japanese(text: str) -> str:
    return _JA_STRIP_RE.sub("", to_hiragana(text).strip())


def normalize_katakana(text: str) -> str:
    return _JA_STRIP_RE.sub("", to_katakana(text).strip())


def is_correct_japanese(user: str, expected: str) -> bool:
    """Kana comparison; を typed as お is accepted."""
    u = normalize_japanese(user)
    e = normalize_japanese(expected)
    if u == e:
        return True
    return "を" in e and u == e.replace("を", "お")


def normalize_english(text: str) -> str:
    lowered = _PAREN_RE.sub("", text.strip().lower())
    return _SPACES_RE.sub(" ", _NON_ALNUM_RE.sub(" ", lowered)).strip()


def _english_variants(expected: str) -> list[str]:
    raw = expected.strip()
    pieces = [p.strip() for p in re.split(r"[;,/]", raw) if p.strip()]

    variants: list[str] = []
    for candidate in [raw, *pieces]:
        norm = normalize_english(candidate)
        if not norm:
            continue
        variants.append(norm)
        # "to eat" の "to " は省略して良い
        if norm.startswith("to "):
            variants.append(norm[3:].strip())
    return list(dict.fromkeys(v for v in variants if v))


def _contains_word_phrase(haystack: str, needle: str) -> bool:
    h_words = haystack.split(" ")
    n_words = needle.split(" ")
    if not needle or not n_words:
        return False
    span = len(n_words)
    return any(h_words[i : i + span] == n_words for i in range(len(h_words) - span + 1))


def is_correct_english(user: str, expected: str) -> bool:
    """Accept any listed meaning; multi-word answers may match a phrase within one."""
    u = normalize_english(user)
    if not u:
        return False
    variants = _english_variants(expected)
    if u in variants:
        return True
    if len(u.split(" ")) < 2:
        return False
    return any(_contains_word_phrase(variant, u) for variant in variants)


def is_answer_correct(
    user: str,
    expected: str,
    direction: DeckDirection = DeckDirection.en_ja,
    katakana: bool = False,
) -> bool:
    """Grade a typed answer for a deck of the given direction."""
    if direction is DeckDirection.ja_en:
        return is_correct_english(user, expected)
    if katakana:
        return normalize_katakana(user) == normalize_katakana(expected)
    return is_correct_japanese(user, expected)
