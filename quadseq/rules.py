"""Card legality, wild card and burn rules for Quad Sequence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .board import Board, Cell, ChipColor
from .cards import Card, WildCardType

if TYPE_CHECKING:
    from .cards import Deck

logger = logging.getLogger(__name__)

__all__ = [
    "PlayResult",
    "BurnResult",
    "OUT_OF_BOUNDS",
    "CORNER_CELL",
    "OCCUPIED",
    "NO_CHIP",
    "can_play_card",
    "play_card",
    "wild_card_add_chip",
    "wild_card_remove_chip",
    "is_card_playable",
    "burn_card",
]

OUT_OF_BOUNDS = "Position is out of bounds"
CORNER_CELL = "Corner joker cells cannot hold chips"
OCCUPIED = "Position already occupied"
NO_CHIP = "No chip at this position"


@dataclass(frozen=True, slots=True)
class PlayResult:
    """Outcome of a legality check; ``error`` explains a refusal."""

    success: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "PlayResult":
        return cls(True)

    @classmethod
    def fail(cls, error: str) -> "PlayResult":
        return cls(False, error)

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True, slots=True)
class BurnResult:
    """Outcome of a burn attempt together with the replacement card."""

    success: bool
    error: str | None = None
    new_card: Card | None = None


def _target_cell(row: int, col: int, board: Board) -> Cell | PlayResult:
    cell = board.get(row, col)
    if cell is None:
        return PlayResult.fail(OUT_OF_BOUNDS)
    if cell.is_corner:
        return PlayResult.fail(CORNER_CELL)
    return cell


def play_card(card: Card, row: int, col: int, board: Board) -> PlayResult:
    """Check whether ``card`` may target ``(row, col)``.

    Wild cards only check occupancy here; chip ownership and capped state
    are enforced by :func:`wild_card_add_chip` and
    :func:`wild_card_remove_chip` once the action is chosen.
    """

    target = _target_cell(row, col, board)
    if isinstance(target, PlayResult):
        return target
    cell = target

    wild = card.wild_card_type
    if wild is WildCardType.TWO_EYED_JACK:
        return PlayResult.fail(OCCUPIED) if cell.is_occupied else PlayResult.ok()
    if wild is WildCardType.ONE_EYED_JACK:
        return PlayResult.ok() if cell.is_occupied else PlayResult.fail(NO_CHIP)
    if wild is WildCardType.JOKER:
        return PlayResult.ok()

    if cell.is_occupied:
        return PlayResult.fail(OCCUPIED)
    if cell.rank != card.rank or cell.suit != card.suit:
        return PlayResult.fail(
            f"Card {card.label()} does not match cell {cell.label()} at ({row}, {col})"
        )
    return PlayResult.ok()


def can_play_card(card: Card, row: int, col: int, board: Board) -> bool:
    """Return ``True`` when ``card`` may be played at ``(row, col)``."""

    return play_card(card, row, col, board).success


def wild_card_add_chip(row: int, col: int, color: ChipColor, board: Board) -> PlayResult:
    """Validate placing a ``color`` chip anywhere open; the caller places it."""

    target = _target_cell(row, col, board)
    if isinstance(target, PlayResult):
        return target
    if target.is_occupied:
        return PlayResult.fail(OCCUPIED)
    if target.is_capped and target.chip != color:
        return PlayResult.fail("Cannot place on a capped score")
    return PlayResult.ok()


def wild_card_remove_chip(
    row: int, col: int, opponent_color: ChipColor, board: Board
) -> PlayResult:
    """Validate removing an ``opponent_color`` chip; the caller clears it."""

    target = _target_cell(row, col, board)
    if isinstance(target, PlayResult):
        return target
    if target.chip is None:
        return PlayResult.fail(NO_CHIP)
    if target.chip != opponent_color:
        return PlayResult.fail(f"Can only remove {opponent_color.value} chips, found {target.chip.value}")
    if target.is_capped:
        return PlayResult.fail("Cannot remove chip from capped score")
    return PlayResult.ok()


def _playable_on(card: Card, cell: Cell, board: Board) -> bool:
    if cell.is_corner:
        return False
    wild = card.wild_card_type
    if wild is WildCardType.TWO_EYED_JACK:
        return not cell.is_occupied
    if wild is WildCardType.ONE_EYED_JACK:
        return cell.is_occupied and not cell.is_capped
    if wild is WildCardType.JOKER:
        return not cell.is_occupied or not cell.is_capped
    return can_play_card(card, cell.row, cell.col, board)


def is_card_playable(card: Card, board: Board) -> bool:
    """Return ``True`` if ``card`` has at least one legal target on ``board``."""

    return any(_playable_on(card, cell, board) for cell in board)


def burn_card(card: Card, board: Board, deck: "Deck") -> BurnResult:
    """Draw a replacement for an unplayable card.

    Removing the burned card from the hand and recording the discard are
    left to the caller, as is the once-per-turn limit.
    """

    if is_card_playable(card, board):
        return BurnResult(False, "Card is playable - must play, not burn")
    new_card = deck.draw()
    if new_card is None:
        return BurnResult(False, "Deck is empty")
    logger.debug("burned %s, drew %s", card.label(), new_card.label())
    return BurnResult(True, new_card=new_card)
