"""Core game state data structures for Quad Sequence."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .board import ChipColor
from .cards import Card
from .scoring import SCORE_TO_WIN

INITIAL_HAND_SIZE: Final[int] = 5
NUM_PLAYERS_MIN: Final[int] = 2
NUM_PLAYERS_MAX: Final[int] = 4


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Runtime configuration for a single game."""

    colors: tuple[ChipColor, ...] = (ChipColor.RED, ChipColor.BLUE)
    hand_size: int = INITIAL_HAND_SIZE
    score_to_win: int = SCORE_TO_WIN
    two_eyed_jack_ends_turn: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        if not NUM_PLAYERS_MIN <= len(self.colors) <= NUM_PLAYERS_MAX:
            raise ValueError(
                f"between {NUM_PLAYERS_MIN} and {NUM_PLAYERS_MAX} colors are required"
            )
        if len(set(self.colors)) != len(self.colors):
            raise ValueError("player colors must be distinct")
        if self.hand_size <= 0:
            raise ValueError("hand_size must be positive")
        if self.score_to_win <= 0:
            raise ValueError("score_to_win must be positive")


@dataclass(slots=True)
class Hand:
    """Cards held by one player, in the order they were received."""

    cards: list[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def remove_card(self, card_id: str) -> Card | None:
        """Remove and return the first card with ``card_id``, if held."""

        for index, card in enumerate(self.cards):
            if card.id == card_id:
                return self.cards.pop(index)
        return None

    def has_card(self, card_id: str) -> bool:
        return any(card.id == card_id for card in self.cards)

    def get(self, card_id: str) -> Card | None:
        return next((card for card in self.cards if card.id == card_id), None)


@dataclass(slots=True)
class PlayerState:
    """State tracked for each seated color."""

    color: ChipColor
    hand: Hand = field(default_factory=Hand)
