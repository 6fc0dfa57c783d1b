"""Legal action enumeration for Quad Sequence turns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from . import rules
from .board import Board, ChipColor
from .cards import Card, WildCardType


class ActionKind(str, Enum):
    """What a card does to its target cell."""

    PLACE = "place"
    REMOVE = "remove"


@dataclass(frozen=True)
class ChipAction:
    """A concrete chip placement or removal available to a player."""

    kind: ActionKind
    row: int
    col: int


def opponent_colors(color: ChipColor, colors: Iterable[ChipColor] | None = None) -> tuple[ChipColor, ...]:
    """Return every seated color other than ``color``."""

    pool = tuple(colors) if colors is not None else tuple(ChipColor)
    return tuple(other for other in pool if other != color)


def legal_targets(
    card: Card,
    board: Board,
    color: ChipColor,
    opponents: Iterable[ChipColor] | None = None,
) -> list[ChipAction]:
    """Return the actions ``color`` could take with ``card`` right now.

    Jokers offer both placements and removals; removals only ever target
    chips owned by one of ``opponents``.
    """

    rivals = set(opponent_colors(color, opponents))
    wild = card.wild_card_type
    found: list[ChipAction] = []
    for cell in board:
        if cell.is_corner:
            continue
        if wild in (WildCardType.TWO_EYED_JACK, WildCardType.JOKER):
            if rules.wild_card_add_chip(cell.row, cell.col, color, board):
                found.append(ChipAction(ActionKind.PLACE, cell.row, cell.col))
        if wild in (WildCardType.ONE_EYED_JACK, WildCardType.JOKER):
            if cell.chip in rivals and rules.wild_card_remove_chip(cell.row, cell.col, cell.chip, board):
                found.append(ChipAction(ActionKind.REMOVE, cell.row, cell.col))
        if wild is None and rules.can_play_card(card, cell.row, cell.col, board):
            found.append(ChipAction(ActionKind.PLACE, cell.row, cell.col))
    return found
