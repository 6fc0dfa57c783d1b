"""Card abstractions and deck assembly for Quad Sequence."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Iterable, Iterator

logger = logging.getLogger(__name__)

CARDS_PER_DECK: Final[int] = 52
DECKS_IN_GAME: Final[int] = 2
JOKERS_PER_DECK: Final[int] = 2
JOKERS_IN_GAME: Final[int] = JOKERS_PER_DECK * DECKS_IN_GAME
TOTAL_CARDS: Final[int] = CARDS_PER_DECK * DECKS_IN_GAME + JOKERS_IN_GAME


class Suit(str, Enum):
    """Enumeration of the four suits plus the joker pseudo-suit."""

    SPADES = "spades"
    HEARTS = "hearts"
    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    JOKER = "joker"

    @property
    def symbol(self) -> str:
        return "*" if self is Suit.JOKER else self.value[0].upper()

    @classmethod
    def standard(cls) -> tuple["Suit", ...]:
        """Return the four playing suits in deck order."""

        return (cls.SPADES, cls.HEARTS, cls.CLUBS, cls.DIAMONDS)

    @classmethod
    def from_symbol(cls, symbol: str) -> "Suit":
        for suit in cls.standard():
            if suit.symbol == symbol.upper():
                return suit
        raise ValueError(f"unknown suit symbol '{symbol}'")


class Rank(str, Enum):
    """Enumeration of ranks in deck order."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    JOKER = "Joker"

    @classmethod
    def ordered(cls) -> tuple["Rank", ...]:
        """Return the thirteen playing ranks in deck order."""

        return tuple(rank for rank in cls if rank is not cls.JOKER)


class WildCardType(str, Enum):
    """Special behaviours attached to jacks and jokers."""

    TWO_EYED_JACK = "twoEyedJack"
    ONE_EYED_JACK = "oneEyedJack"
    JOKER = "joker"


TWO_EYED_SUITS: Final[frozenset[Suit]] = frozenset({Suit.CLUBS, Suit.DIAMONDS})
ONE_EYED_SUITS: Final[frozenset[Suit]] = frozenset({Suit.HEARTS, Suit.SPADES})


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical card."""

    suit: Suit
    rank: Rank
    id: str
    wild_card_type: WildCardType | None = None

    @property
    def is_wild(self) -> bool:
        return self.wild_card_type is not None

    def label(self) -> str:
        """Create a short label suitable for CLI representations."""

        if self.wild_card_type is WildCardType.JOKER:
            return "JKR"
        return f"{self.rank.value}{self.suit.symbol}"


def wild_card_type_for(suit: Suit, rank: Rank) -> WildCardType | None:
    """Return the wild behaviour fixed for a suit/rank pair."""

    if rank is Rank.JOKER:
        return WildCardType.JOKER
    if rank is Rank.JACK:
        if suit in TWO_EYED_SUITS:
            return WildCardType.TWO_EYED_JACK
        if suit in ONE_EYED_SUITS:
            return WildCardType.ONE_EYED_JACK
    return None


def iter_full_deck() -> Iterator[Card]:
    """Yield all 108 physical cards in a deterministic order."""

    for copy in range(DECKS_IN_GAME):
        for suit in Suit.standard():
            for rank in Rank.ordered():
                yield Card(
                    suit=suit,
                    rank=rank,
                    id=f"{suit.value}-{rank.value}-{copy}",
                    wild_card_type=wild_card_type_for(suit, rank),
                )
        for joker in range(JOKERS_PER_DECK):
            index = copy * JOKERS_PER_DECK + joker
            yield Card(
                suit=Suit.JOKER,
                rank=Rank.JOKER,
                id=f"joker-{index}",
                wild_card_type=WildCardType.JOKER,
            )


@dataclass(slots=True)
class Deck:
    """Draw pile; the top of the deck is the end of ``cards``."""

    cards: list[Card] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def initialize(cls, rng: random.Random | None = None) -> "Deck":
        """Return an unshuffled deck holding the full composition."""

        return cls(cards=list(iter_full_deck()), rng=rng or random.Random())

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self) -> None:
        """Shuffle in place with Fisher-Yates."""

        cards = self.cards
        for i in range(len(cards) - 1, 0, -1):
            j = self.rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]

    def draw(self) -> Card | None:
        """Remove and return the top card, or ``None`` when empty."""

        if not self.cards:
            return None
        return self.cards.pop()

    def reset(self) -> None:
        """Restore the full composition and reshuffle."""

        self.cards = list(iter_full_deck())
        self.shuffle()
        logger.debug("deck reset to %d cards", len(self.cards))


def format_cards(cards: Iterable[Card]) -> str:
    return " ".join(card.label() for card in cards)
