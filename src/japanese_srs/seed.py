"""Starter decks for a fresh install.

初回起動時（保存データが無い／壊れている場合）に使う初期データ。
語彙デッキの動詞からは活用カードを 12 形ずつ機械生成し、ラダー練習に使う。
"""

from __future__ import annotations

from typing import Optional

from .conjugation import (
    classify_verb,
    conjugate_verb,
    transform_examples,
    verb_conjugation_hint,
    verb_form_label,
)
from .filters import vocab_category_for_pos
from .ids import generate_card_id, generate_deck_id
from .logging import logger
from .models import (
    AppState,
    Card,
    CardType,
    Deck,
    DeckDirection,
    DeckKind,
    ExampleSentence,
    GeneratedVerb,
    VerbForm,
    VocabCategory,
)


# (prompt, answer, kanji, pos, examples, tags)
_VOCAB: list[tuple[str, str, Optional[str], str, list[str], list[str]]] = [
    ("to exist (inanimate); to have", "ある", None, "verb (intransitive)", ["おかねがある。", "じかんがある。"], ["existence"]),
    ("to exist (animate); to be (someone/animal)", "いる", None, "verb (intransitive)", ["ねこがいる。", "ともだちがいる。"], ["existence"]),
    ("to need (a thing); to require", "いる", "要る", "verb (intransitive)", ["おかねがいる。"], []),
    ("to hold; to have/own", "もつ", "持つ", "verb (transitive)", ["かばんをもつ。"], []),
    ("to eat", "たべる", "食べる", "verb (transitive)", ["ごはんをたべる。", "パンをたべる。"], ["food"]),
    ("to drink", "のむ", "飲む", "verb (transitive)", ["みずをのむ。", "おちゃをのむ。"], ["food"]),
    ("to buy", "かう", "買う", "verb (transitive)", ["パンをかう。", "これをかう。"], ["shopping"]),
    ("to work", "はたらく", "働く", "verb (intransitive)", ["まいにちはたらく。"], []),
    ("to sleep", "ねる", "寝る", "verb (intransitive)", ["よるにねる。"], ["daily"]),
    ("to wake up", "おきる", "起きる", "verb (intransitive)", ["まいあさおきる。"], ["daily"]),
    ("to enter", "はいる", "入る", "verb (intransitive)", ["へやにはいる。"], []),
    ("to leave/exit", "でる", "出る", "verb (intransitive)", ["いえをでる。"], []),
    ("to listen; to ask", "きく", "聞く", "verb (transitive)", ["おんがくをきく。"], []),
    ("to speak/talk", "はなす", "話す", "verb (transitive)", ["にほんごをはなす。"], []),
    ("to read", "よむ", "読む", "verb (transitive)", ["ほんをよむ。"], []),
    ("to write", "かく", "書く", "verb (transitive)", ["なまえをかく。"], []),
    ("to go", "いく", "行く", "verb (intransitive)", ["みせにいく。", "あしたいく。"], ["daily"]),
    ("to return; to go home", "かえる", "帰る", "verb (intransitive)", ["いえにかえる。"], ["daily"]),
    ("to come", "くる", "来る", "verb (intransitive)", ["ともだちがくる。"], []),
    ("to study", "べんきょうする", "勉強する", "verb (suru)", ["にほんごをべんきょうする。"], []),
    ("want (a thing)", "ほしい", "欲しい", "i-adjective", ["あたらしいくつがほしい。"], []),
    ("good", "いい", None, "i-adjective", ["きょうはいいてんきだ。"], []),
    ("busy", "いそがしい", None, "i-adjective", ["きょうはいそがしい。"], []),
    ("delicious", "おいしい", None, "i-adjective", ["パンがおいしい。"], ["food"]),
    ("easy; simple", "かんたん", "簡単", "na-adjective", ["かんたんです。"], []),
    ("free time; not busy", "ひま", "暇", "na-adjective / noun", ["きょうはひまだ。"], []),
    ("how", "どう", None, "adverb", ["どうですか。"], []),
    ("very", "とても", None, "adverb", ["とてもおいしい。"], []),
    ("maybe; probably", "たぶん", "多分", "adverb", ["たぶんいく。"], []),
    ("and; and then", "そして", None, "conjunction", ["パンをかって、そしてたべる。"], []),
    ("but; however", "でも", None, "conjunction", ["いきたい。でも、じかんがない。"], ["contrast"]),
    ("so; therefore", "だから", None, "conjunction", ["あめだ。だから、いえにいる。"], ["reason"]),
    ("because; since (casual)", "から", None, "particle / conjunction", ["じかんがないから、いかない。"], ["reason"]),
    ("but; though (casual)", "けど", None, "conjunction", ["いきたいけど、じかんがない。"], ["contrast"]),
    ("well then; in that case (casual)", "じゃあ", None, "interjection", ["じゃあ、いえにかえる。"], []),
    ("which (before a noun)", "どの", None, "determiner", ["どのパンがいい？"], []),
    ("who", "だれ", None, "pronoun", ["だれですか。"], []),
    ("today", "きょう", "今日", "noun", ["きょうはいいてんきだ。"], ["time"]),
    ("tomorrow", "あした", None, "noun", ["あしたいきます。"], ["time"]),
    ("night", "よる", "夜", "noun", ["よるにねる。"], ["time"]),
    ("rain", "あめ", "雨", "noun", ["あめです。"], []),
    ("house; home", "いえ", "家", "noun", ["いえにかえる。"], []),
    ("time", "じかん", "時間", "noun", ["じかんがない。"], ["time"]),
    ("store; shop", "みせ", "店", "noun", ["みせにいく。"], ["shopping"]),
    ("bread", "パン", None, "noun", ["パンをたべる。"], ["food", "shopping"]),
]

# 生成カード導入前の手書き活用カード。ラダーには参加しない
_LEGACY_VERB_CARDS: list[tuple[str, str, str, str]] = [
    ("want to go", "いきたい", "行きたい", "いく → いき + たい (want to...)."),
    ("don’t want to go", "いきたくない", "行きたくない", "いく → いき + たくない."),
    ("went (casual past of いく)", "いった", "行った", "いく → いった (not *いきた)."),
    ("drank (casual past of のむ)", "のんだ", "飲んだ", "のむ → のんだ."),
]

# (prompt, answer, kanji, note, tags)
_SENTENCES: list[tuple[str, str, str, str, list[str]]] = [
    (
        "Because it’s raining, I stay home.",
        "あめだからいえにいる",
        "雨だから家にいる",
        "Structure: [reason] + だから + [location] + に + いる",
        ["reason"],
    ),
    (
        "I want to go, but I don’t have time.",
        "いきたいけどじかんがない",
        "行きたいけど時間がない",
        'Structure: [X] けど [Y] ("X, but Y")',
        ["contrast"],
    ),
    (
        "Tomorrow, I will go to the store and buy bread.",
        "あしたみせにいってパンをかう",
        "明日店に行ってパンを買う",
        "Structure: [place] に [go (te-form)] + [object] を [buy]",
        ["shopping", "time"],
    ),
    (
        "Because I have time, I will go to the store.",
        "じかんがあるのでみせにいく",
        "時間があるので店に行く",
        "Structure: [reason] ので [destination] に [go]",
        ["reason"],
    ),
    (
        "It’s raining, but I will go.",
        "あめだけどいく",
        "雨だけど行く",
        'Structure: [X] けど [Y] ("X, but Y")',
        ["contrast"],
    ),
    (
        "I need time.",
        "じかんがいる",
        "時間が要る",
        "Structure: [thing] が いる (need X)",
        [],
    ),
]


class _SeedBuilder:
    def __init__(self) -> None:
        self.decks: dict[str, Deck] = {}
        self.cards: dict[str, Card] = {}

    def deck(
        self,
        name: str,
        description: str,
        direction: DeckDirection = DeckDirection.en_ja,
        kind: DeckKind = DeckKind.standard,
    ) -> Deck:
        deck = Deck(
            id=generate_deck_id(),
            name=name,
            description=description,
            direction=direction,
            kind=kind,
        )
        self.decks[deck.id] = deck
        return deck

    def add(self, deck: Deck, **fields: object) -> Card:
        card = Card(id=generate_card_id(), deck_id=deck.id, **fields)
        self.cards[card.id] = card
        deck.card_ids.append(card.id)
        return card


def _add_conjugation_ladder(builder: _SeedBuilder, deck: Deck, src: Card) -> None:
    base_kana = src.answer.strip()
    base_kanji = (src.kanji or "").strip() or None
    cls = classify_verb(base_kana, base_kanji)

    for form in VerbForm:
        answer_kana = conjugate_verb(base_kana, base_kana, form, cls)
        answer_kanji = conjugate_verb(base_kanji, base_kana, form, cls) if base_kanji else None
        shown_from = base_kanji or base_kana
        shown_to = answer_kanji or answer_kana
        builder.add(
            deck,
            type=CardType.verb,
            prompt=src.prompt,
            answer=answer_kana,
            pos=src.pos,
            kanji=answer_kanji,
            note=verb_conjugation_hint(form, answer_kana),
            background=f"Conjugation: {shown_from} → {shown_to} ({verb_form_label(form)}).",
            examples=transform_examples(src.examples, base_kana, base_kanji, answer_kana, answer_kanji),
            verb=GeneratedVerb(base_kana=base_kana, base_kanji=base_kanji, form=form),
        )


def make_seed_state() -> AppState:
    """Build a fresh state with vocab, reverse vocab, conjugation and sentence decks."""
    builder = _SeedBuilder()
    vocab = builder.deck("Common Vocab", "English → Japanese (kana)")
    vocab_ja_en = builder.deck(
        "Common Vocab (JP→EN)",
        "Japanese → English (type meaning)",
        direction=DeckDirection.ja_en,
    )
    verbs = builder.deck(
        "Verb Conjugation",
        "English cue → Japanese conjugation (kana)",
        kind=DeckKind.verb_conjugation,
    )
    sentences = builder.deck("Sentence Writing", "English → Japanese (kana)")

    vocab_cards: list[Card] = []
    for prompt, answer, kanji, pos, examples, tags in _VOCAB:
        vocab_cards.append(
            builder.add(
                vocab,
                type=CardType.vocab,
                prompt=prompt,
                answer=answer,
                kanji=kanji,
                pos=pos,
                examples=[ExampleSentence(ja=ja) for ja in examples],
                tags=tags,
            )
        )

    seen_bases: set[str] = set()
    for src in vocab_cards:
        if vocab_category_for_pos(src.pos) is not VocabCategory.verb:
            continue
        key = f"{src.kanji or ''}||{src.answer}"
        if key in seen_bases:
            continue
        seen_bases.add(key)
        _add_conjugation_ladder(builder, verbs, src)

    for prompt, answer, kanji, background in _LEGACY_VERB_CARDS:
        builder.add(
            verbs,
            type=CardType.verb,
            prompt=prompt,
            answer=answer,
            kanji=kanji,
            background=f"Conjugation: {background}",
        )

    for prompt, answer, kanji, note, tags in _SENTENCES:
        builder.add(
            sentences,
            type=CardType.sentence,
            prompt=prompt,
            answer=answer,
            kanji=kanji,
            note=note,
            tags=tags,
        )

    for src in vocab_cards:
        builder.add(
            vocab_ja_en,
            type=CardType.vocab,
            prompt=src.answer,
            answer=src.prompt,
            kanji=src.kanji,
            pos=src.pos,
            examples=list(src.examples),
            tags=list(src.tags),
        )

    state = AppState(decks=builder.decks, cards=builder.cards)
    logger.info(
        "seed_state_built",
        decks=len(state.decks),
        cards=len(state.cards),
        verb_bases=len(seen_bases),
    )
    return state
