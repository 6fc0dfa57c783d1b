from __future__ import annotations

import random
from collections import Counter

import pytest

from quadseq import cards
from quadseq.cards import Card, Deck, Rank, Suit, WildCardType


def test_full_deck_composition() -> None:
    deck = list(cards.iter_full_deck())

    assert len(deck) == cards.TOTAL_CARDS == 108
    assert len({card.id for card in deck}) == 108
    jokers = [card for card in deck if card.wild_card_type is WildCardType.JOKER]
    assert len(jokers) == 4
    assert {card.id for card in jokers} == {"joker-0", "joker-1", "joker-2", "joker-3"}

    counts = Counter((card.rank, card.suit) for card in deck if card.rank is not Rank.JOKER)
    assert set(counts.values()) == {2}
    assert len(counts) == 52


@pytest.mark.parametrize(
    ("suit", "expected"),
    [
        (Suit.CLUBS, WildCardType.TWO_EYED_JACK),
        (Suit.DIAMONDS, WildCardType.TWO_EYED_JACK),
        (Suit.HEARTS, WildCardType.ONE_EYED_JACK),
        (Suit.SPADES, WildCardType.ONE_EYED_JACK),
    ],
)
def test_jacks_are_tagged_by_suit(suit: Suit, expected: WildCardType) -> None:
    assert cards.wild_card_type_for(suit, Rank.JACK) is expected
    tagged = [card for card in cards.iter_full_deck() if card.rank is Rank.JACK and card.suit is suit]
    assert len(tagged) == 2
    assert all(card.wild_card_type is expected for card in tagged)


def test_non_jacks_are_not_wild() -> None:
    for card in cards.iter_full_deck():
        if card.rank not in (Rank.JACK, Rank.JOKER):
            assert card.wild_card_type is None
            assert not card.is_wild


def test_card_labels() -> None:
    ten = Card(Suit.SPADES, Rank.TEN, "spades-10-0")
    joker = Card(Suit.JOKER, Rank.JOKER, "joker-0", WildCardType.JOKER)

    assert ten.label() == "10S"
    assert joker.label() == "JKR"
    assert cards.format_cards([ten, joker]) == "10S JKR"


def test_suit_from_symbol() -> None:
    assert Suit.from_symbol("h") is Suit.HEARTS
    with pytest.raises(ValueError):
        Suit.from_symbol("X")


def test_deck_draws_every_card_then_none() -> None:
    deck = Deck.initialize(random.Random(3))
    deck.shuffle()

    drawn = [deck.draw() for _ in range(cards.TOTAL_CARDS)]

    assert all(card is not None for card in drawn)
    assert len({card.id for card in drawn if card is not None}) == 108
    assert deck.draw() is None
    assert len(deck) == 0


def test_shuffle_is_reproducible_with_seed() -> None:
    first = Deck.initialize(random.Random(42))
    second = Deck.initialize(random.Random(42))
    first.shuffle()
    second.shuffle()

    assert [card.id for card in first.cards] == [card.id for card in second.cards]
    assert sorted(card.id for card in first.cards) == sorted(card.id for card in cards.iter_full_deck())


def test_reset_restores_full_composition() -> None:
    deck = Deck.initialize(random.Random(5))
    for _ in range(30):
        deck.draw()
    assert len(deck) == 78

    deck.reset()

    assert len(deck) == 108
    assert len({card.id for card in deck.cards}) == 108
