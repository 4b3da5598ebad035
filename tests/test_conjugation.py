import pytest

from japanese_srs.conjugation import (
    classify_verb,
    conjugate_verb,
    transform_examples,
    verb_conjugation_hint,
    verb_form_label,
)
from japanese_srs.models import ExampleSentence, VerbClass, VerbForm


@pytest.mark.parametrize(
    ("kana", "kanji", "expected"),
    [
        ("たべる", "食べる", VerbClass.ichidan),
        ("おきる", "起きる", VerbClass.ichidan),
        ("ねる", "寝る", VerbClass.ichidan),
        ("いる", None, VerbClass.ichidan),
        ("いる", "要る", VerbClass.godan),
        ("はいる", "入る", VerbClass.godan),
        ("かえる", "帰る", VerbClass.godan),
        ("ある", None, VerbClass.godan),
        ("いく", "行く", VerbClass.godan),
        ("のむ", "飲む", VerbClass.godan),
    ],
)
def test_classify_verb(kana, kanji, expected):
    assert classify_verb(kana, kanji) is expected


TABERU = {
    VerbForm.dictionary: "たべる",
    VerbForm.polite_present: "たべます",
    VerbForm.polite_negative: "たべません",
    VerbForm.te: "たべて",
    VerbForm.progressive: "たべている",
    VerbForm.past: "たべた",
    VerbForm.negative: "たべない",
    VerbForm.past_negative: "たべなかった",
    VerbForm.want: "たべたい",
    VerbForm.dont_want: "たべたくない",
    VerbForm.want_past: "たべたかった",
    VerbForm.dont_want_past: "たべたくなかった",
}


@pytest.mark.parametrize("form", list(VerbForm))
def test_ichidan_paradigm(form):
    assert conjugate_verb("たべる", "たべる", form, VerbClass.ichidan) == TABERU[form]


@pytest.mark.parametrize(
    ("base", "kana", "form", "expected"),
    [
        ("のむ", "のむ", VerbForm.te, "のんで"),
        ("のむ", "のむ", VerbForm.progressive, "のんでいる"),
        ("のむ", "のむ", VerbForm.polite_negative, "のみません"),
        ("かう", "かう", VerbForm.negative, "かわない"),
        ("はなす", "はなす", VerbForm.past, "はなした"),
        ("かく", "かく", VerbForm.te, "かいて"),
        ("もつ", "もつ", VerbForm.want_past, "もちたかった"),
        ("はいる", "はいる", VerbForm.polite_present, "はいります"),
        ("飲む", "のむ", VerbForm.past, "飲んだ"),
    ],
)
def test_godan_forms(base, kana, form, expected):
    assert conjugate_verb(base, kana, form, VerbClass.godan) == expected


@pytest.mark.parametrize(
    ("base", "kana", "form", "expected"),
    [
        ("いく", "いく", VerbForm.te, "いって"),
        ("行く", "いく", VerbForm.past, "行った"),
        ("いく", "いく", VerbForm.want, "いきたい"),
        ("ある", "ある", VerbForm.negative, "ない"),
        ("ある", "ある", VerbForm.past_negative, "なかった"),
        ("ある", "ある", VerbForm.polite_present, "あります"),
        ("べんきょうする", "べんきょうする", VerbForm.polite_negative, "べんきょうしません"),
        ("勉強する", "べんきょうする", VerbForm.progressive, "勉強している"),
        ("くる", "くる", VerbForm.negative, "こない"),
        ("くる", "くる", VerbForm.te, "きて"),
        ("来る", "くる", VerbForm.polite_present, "来ます"),
        ("来る", "くる", VerbForm.negative, "来ない"),
    ],
)
def test_irregular_verbs(base, kana, form, expected):
    cls = classify_verb(kana)
    assert conjugate_verb(base, kana, form, cls) == expected


def test_blank_base_conjugates_to_blank():
    assert conjugate_verb("  ", "", VerbForm.past, VerbClass.godan) == ""


def test_transform_examples_prefers_kanji_and_replaces_last_occurrence():
    examples = [
        ExampleSentence(ja="ご飯を食べる。"),
        ExampleSentence(ja="たべるまえに、たべる。", en="eat"),
        ExampleSentence(ja="パンだ。"),
    ]

    out = transform_examples(examples, "たべる", "食べる", "たべた", "食べた")

    assert [ex.ja for ex in out] == ["ご飯を食べた。", "たべるまえに、たべた。", "パンだ。"]
    assert out[1].en == "eat"
    assert transform_examples([], "たべる", None, "たべた", None) == []
    assert transform_examples(examples, "", None, "たべた", None) == []


def test_hint_names_target_form_and_reminders():
    hint = verb_conjugation_hint(VerbForm.te)

    assert hint.startswith(f"Target: {verb_form_label(VerbForm.te)}")
    assert "Reminders:" in hint
    assert all(verb_form_label(form) in hint for form in VerbForm)


def test_hint_spells_the_answer_in_romaji():
    hint = verb_conjugation_hint(VerbForm.dictionary, "たべる")

    assert hint.splitlines()[1] == "Romaji: taberu"
    assert "Romaji:" not in verb_conjugation_hint(VerbForm.dictionary)
