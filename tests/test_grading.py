import pytest

from japanese_srs.grading import (
    is_answer_correct,
    is_correct_english,
    is_correct_japanese,
    normalize_english,
    normalize_japanese,
)
from japanese_srs.models import DeckDirection


def test_normalize_japanese_folds_katakana_and_strips_punctuation():
    assert normalize_japanese(" タベル。") == "たべる"
    assert normalize_japanese("「いきたい」、けど！") == "いきたいけど"
    assert normalize_japanese("あめ　だ") == "あめだ"


@pytest.mark.parametrize(
    ("user", "expected", "ok"),
    [
        ("たべる", "たべる", True),
        ("タベル", "たべる", True),
        ("みずおのむ", "みずをのむ", True),
        ("みずのむ", "みずをのむ", False),
        ("のんだ", "のむ", False),
    ],
)
def test_is_correct_japanese(user, expected, ok):
    assert is_correct_japanese(user, expected) is ok


def test_normalize_english_drops_parentheticals_and_symbols():
    assert normalize_english("To exist (inanimate)!") == "to exist"


@pytest.mark.parametrize(
    ("user", "expected", "ok"),
    [
        ("listen", "to listen; to ask", True),
        ("Ask!", "to listen; to ask", True),
        ("talk", "to speak/talk", True),
        ("exist", "to exist (inanimate); to have", True),
        ("in that case", "well then; in that case (casual)", True),
        ("little bit", "a little bit of rain", True),
        ("little", "a little bit", False),
        ("", "anything", False),
        ("dog", "cat, kitten", False),
    ],
)
def test_is_correct_english(user, expected, ok):
    assert is_correct_english(user, expected) is ok


def test_is_answer_correct_uses_deck_direction():
    assert is_answer_correct("eat", "to eat", DeckDirection.ja_en)
    assert not is_answer_correct("eat", "to eat", DeckDirection.en_ja)
    assert is_answer_correct("ぱん", "パン", DeckDirection.en_ja, katakana=True)


@pytest.mark.parametrize(
    ("user", "expected"),
    [
        ("taberu", "たべる"),
        ("Nomimasu", "のみます"),
        ("tabete", "タベテ"),
    ],
)
def test_romaji_answers_are_converted_to_kana(user, expected):
    assert is_answer_correct(user, expected)
    assert not is_answer_correct("nomu", "たべる")


def test_romaji_answers_are_accepted_for_katakana_cards():
    assert is_answer_correct("pan", "パン", DeckDirection.en_ja, katakana=True)
