"""Verb classification and conjugation for generated ladder cards.

辞書形（かな／漢字）から 12 種の活用形を機械的に生成する。
する／くる の複合動詞、いく の促音便、ある の否定形などの例外を扱う。
"""

from __future__ import annotations

from typing import Optional, Sequence

from .grading import to_romaji
from .models import ExampleSentence, VerbClass, VerbForm


_I_ROW = {"う": "い", "く": "き", "ぐ": "ぎ", "す": "し", "つ": "ち", "ぬ": "に", "ぶ": "び", "む": "み", "る": "り"}
_A_ROW = {"う": "わ", "く": "か", "ぐ": "が", "す": "さ", "つ": "た", "ぬ": "な", "ぶ": "ば", "む": "ま", "る": "ら"}
_TE = {"う": "って", "つ": "って", "る": "って", "む": "んで", "ぶ": "んで", "ぬ": "んで", "く": "いて", "ぐ": "いで", "す": "して"}
_TA = {"う": "った", "つ": "った", "る": "った", "む": "んだ", "ぶ": "んだ", "ぬ": "んだ", "く": "いた", "ぐ": "いだ", "す": "した"}

# る の直前がイ段・エ段なら一段動詞
_ICHIDAN_PRECEDING = set("いきぎしじちぢにひびぴみりえけげせぜてでねへべぺめれ")
# 見た目は一段だが五段活用する動詞
_GODAN_RU_EXCEPTIONS = {"はいる", "かえる"}

_DESIDERATIVE_TAILS = {
    VerbForm.want: "たい",
    VerbForm.dont_want: "たくない",
    VerbForm.want_past: "たかった",
    VerbForm.dont_want_past: "たくなかった",
}

_SURU_FORMS = {
    VerbForm.polite_present: "します",
    VerbForm.te: "して",
    VerbForm.past: "した",
    VerbForm.negative: "しない",
    VerbForm.past_negative: "しなかった",
    VerbForm.want: "したい",
    VerbForm.dont_want: "したくない",
    VerbForm.want_past: "したかった",
    VerbForm.dont_want_past: "したくなかった",
}

_KURU_FORMS = {
    VerbForm.polite_present: "きます",
    VerbForm.te: "きて",
    VerbForm.past: "きた",
    VerbForm.negative: "こない",
    VerbForm.past_negative: "こなかった",
    VerbForm.want: "きたい",
    VerbForm.dont_want: "きたくない",
    VerbForm.want_past: "きたかった",
    VerbForm.dont_want_past: "きたくなかった",
}

_ICHIDAN_ENDINGS = {
    VerbForm.polite_present: "ます",
    VerbForm.te: "て",
    VerbForm.past: "た",
    VerbForm.negative: "ない",
    VerbForm.past_negative: "なかった",
}

_FORM_LABELS = {
    VerbForm.dictionary: "Present indicative (plain)",
    VerbForm.polite_present: "Present indicative (polite) (〜ます)",
    VerbForm.polite_negative: "Present negative (polite) (〜ません)",
    VerbForm.te: "Te-form (connective) (〜て)",
    VerbForm.progressive: "Progressive (〜ている)",
    VerbForm.past: "Past indicative (plain) (〜た)",
    VerbForm.negative: "Present negative (plain) (〜ない)",
    VerbForm.past_negative: "Past negative (plain) (〜なかった)",
    VerbForm.want: "Desiderative (want) (〜たい)",
    VerbForm.dont_want: "Desiderative negative (〜たくない)",
    VerbForm.want_past: "Desiderative (past) (〜たかった)",
    VerbForm.dont_want_past: "Desiderative past negative (〜たくなかった)",
}


def classify_verb(base_kana: str, base_kanji: Optional[str] = None) -> VerbClass:
    """Return ichidan or godan for a dictionary form.

    する／くる は呼び出し側で不規則として扱うため、ここでは godan を返す。
    """

    kana = base_kana.strip()
    if kana in ("ある", "いく"):
        return VerbClass.godan
    if base_kanji and base_kanji.strip() == "要る":
        return VerbClass.godan
    if kana in _GODAN_RU_EXCEPTIONS:
        return VerbClass.godan
    if len(kana) >= 2 and kana.endswith("る") and kana[-2] in _ICHIDAN_PRECEDING:
        return VerbClass.ichidan
    return VerbClass.godan


def _conjugate_godan(base: str, form: VerbForm) -> str:
    end = base[-1:]
    stem = base[:-1]
    if form is VerbForm.polite_present:
        return f"{stem}{_I_ROW.get(end, '')}ます"
    if form is VerbForm.negative:
        return f"{stem}{_A_ROW.get(end, '')}ない"
    if form is VerbForm.past_negative:
        return f"{stem}{_A_ROW.get(end, '')}なかった"
    if form in (VerbForm.te, VerbForm.past):
        table = _TE if form is VerbForm.te else _TA
        return f"{stem}{table.get(end, '')}"
    return base


def conjugate_verb(base: str, base_kana: str, form: VerbForm, cls: VerbClass) -> str:
    """Conjugate `base` (kana or kanji spelling) into `form`.

    `base_kana` is always the kana reading; it decides the irregular paths
    even when `base` is written with kanji.
    """

    b = base.strip()
    if not b or form is VerbForm.dictionary:
        return b

    # 派生形は te 形・ます形から組み立てる
    if form is VerbForm.progressive:
        return f"{conjugate_verb(b, base_kana, VerbForm.te, cls)}いる"
    if form is VerbForm.polite_negative:
        polite = conjugate_verb(b, base_kana, VerbForm.polite_present, cls)
        return f"{polite[:-1]}せん" if polite.endswith("ます") else polite

    kana = base_kana.strip()
    if kana.endswith("する"):
        prefix = b[:-2] if b.endswith("する") else b
        return f"{prefix}{_SURU_FORMS[form]}"
    if kana.endswith("くる"):
        if b.endswith("来る"):
            # 漢字表記は語幹の 来 を残し、読みの変化は送り仮名だけに出る
            return f"{b[:-2]}来{_KURU_FORMS[form][1:]}"
        prefix = b[:-2] if b.endswith("くる") else b
        return f"{prefix}{_KURU_FORMS[form]}"

    if form in _DESIDERATIVE_TAILS:
        if cls is VerbClass.ichidan:
            stem = b[:-1]
        else:
            stem = f"{b[:-1]}{_I_ROW.get(b[-1:], '')}"
        return f"{stem}{_DESIDERATIVE_TAILS[form]}"

    if kana == "いく" and form in (VerbForm.te, VerbForm.past):
        return f"{b[:-1]}{'って' if form is VerbForm.te else 'った'}"

    if kana == "ある":
        if form is VerbForm.negative:
            return "ない"
        if form is VerbForm.past_negative:
            return "なかった"

    if cls is VerbClass.ichidan:
        return f"{b[:-1]}{_ICHIDAN_ENDINGS[form]}"

    return _conjugate_godan(b, form)


def verb_form_label(form: VerbForm) -> str:
    return _FORM_LABELS[form]


def verb_conjugation_hint(form: VerbForm, answer_kana: Optional[str] = None) -> str:
    """Hint text shown with a generated conjugation card.

    答えのかなを渡すとローマ字の行を 2 行目に入れる。
    """
    lines = [f"Target: {verb_form_label(form)}"]
    romaji = to_romaji(answer_kana) if answer_kana else ""
    if romaji:
        lines.append(f"Romaji: {romaji}")
    lines.extend(["", "Forms:"])
    lines.extend(f"- {label}" for label in _FORM_LABELS.values())
    lines.extend(
        [
            "",
            "Reminders:",
            "- Ichidan: drop る, then add the ending",
            "- Godan: change the last kana (pattern depends on the ending)",
            "- する / くる are irregular (and compounds like …する / …くる)",
            "- 行く te/past: いって / いった (irregular)",
            "- ある negative: ない / なかった (irregular)",
        ]
    )
    return "\n".join(lines)


def _replace_last(text: str, old: str, new: str) -> str:
    idx = text.rfind(old)
    return f"{text[:idx]}{new}{text[idx + len(old):]}"


def transform_examples(
    examples: Sequence[ExampleSentence],
    from_kana: str,
    from_kanji: Optional[str],
    to_kana: str,
    to_kanji: Optional[str],
) -> list[ExampleSentence]:
    """Rewrite the last occurrence of the base verb in each example.

    The kanji spelling is preferred when both spellings are known and present.
    """

    fk, tk = from_kana.strip(), to_kana.strip()
    f_kanji = (from_kanji or "").strip()
    t_kanji = (to_kanji or "").strip()
    if not examples or not fk or not tk:
        return []

    out: list[ExampleSentence] = []
    for ex in examples:
        ja = ex.ja
        if f_kanji and t_kanji and f_kanji in ja:
            ja = _replace_last(ja, f_kanji, t_kanji)
        elif fk in ja:
            ja = _replace_last(ja, fk, tk)
        out.append(ex.model_copy(update={"ja": ja}))
    return out
