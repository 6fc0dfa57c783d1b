"""Board layout and cell state for the 10x10 Quad Sequence grid."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Iterator

from .cards import Rank, Suit

BOARD_SIZE: Final[int] = 10
CORNER_CODE: Final[str] = "XX"

# Rows 4 and 5 form the equator where the printed cards flip orientation.
EQUATOR_ROWS: Final[tuple[int, int]] = (4, 5)

LAYOUT: Final[tuple[tuple[str, ...], ...]] = (
    ("XX", "9C", "8H", "7S", "6D", "5C", "4H", "3S", "2D", "XX"),
    ("10S", "9D", "8C", "7H", "6S", "5D", "4C", "3H", "2S", "AD"),
    ("10D", "9S", "8D", "7C", "6H", "5S", "4D", "3C", "2H", "AC"),
    ("10C", "9H", "8S", "7D", "6C", "5H", "4S", "3D", "2C", "AH"),
    ("10H", "KC", "QD", "KS", "QH", "QC", "KD", "QS", "KH", "AS"),
    ("AC", "KH", "QC", "KD", "QS", "QD", "KC", "QH", "KS", "10D"),
    ("AD", "2S", "3H", "4C", "5D", "6S", "7H", "8C", "9D", "10C"),
    ("AS", "2D", "3S", "4H", "5C", "6D", "7S", "8H", "9C", "10H"),
    ("AH", "2C", "3D", "4S", "5H", "6C", "7D", "8S", "9H", "10S"),
    ("XX", "2H", "3C", "4D", "5S", "6H", "7C", "8D", "9S", "XX"),
)

Coord = tuple[int, int]


class ChipColor(str, Enum):
    """Team colors; the two-player game uses red and blue."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


@dataclass(slots=True)
class Cell:
    """A single board position and the chip state living on it."""

    id: str
    row: int
    col: int
    rank: Rank
    suit: Suit
    is_corner: bool = False
    is_royal_belt: bool = False
    chip: ChipColor | None = None
    is_capped: bool = False
    score_ids: list[str] = field(default_factory=list)

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    @property
    def is_occupied(self) -> bool:
        return self.chip is not None

    def clear(self) -> None:
        """Remove the chip and forget the scores it belonged to."""

        self.chip = None
        self.score_ids = []

    def label(self) -> str:
        if self.is_corner:
            return CORNER_CODE
        return f"{self.rank.value}{self.suit.symbol}"


@dataclass(slots=True)
class Board:
    """Fixed 10x10 grid of cells, mutated in place by the engine."""

    cells: list[list[Cell]]

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def __getitem__(self, coord: Coord) -> Cell:
        row, col = coord
        return self.cells[row][col]

    @property
    def size(self) -> int:
        return len(self.cells)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get(self, row: int, col: int) -> Cell | None:
        """Return the cell at ``(row, col)`` or ``None`` when off the board."""

        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]


def parse_code(code: str) -> tuple[Rank, Suit]:
    """Split a layout code such as ``10S`` into rank and suit."""

    if code == CORNER_CODE:
        return Rank.JOKER, Suit.JOKER
    return Rank(code[:-1]), Suit.from_symbol(code[-1])


def _is_royal_belt(row: int, rank: Rank) -> bool:
    """Kings and queens on the equator rows.

    The printed layout carries no royal-belt marking of its own; this flag is
    a display highlight only and no rule reads it.
    """

    return row in EQUATOR_ROWS and rank in (Rank.KING, Rank.QUEEN)


def validate_layout(layout: tuple[tuple[str, ...], ...] = LAYOUT) -> None:
    """Raise ``ValueError`` unless ``layout`` is a well-formed board."""

    if len(layout) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in layout):
        raise ValueError(f"layout must be {BOARD_SIZE}x{BOARD_SIZE}")
    last = BOARD_SIZE - 1
    corners = [layout[0][0], layout[0][last], layout[last][0], layout[last][last]]
    if any(code != CORNER_CODE for code in corners):
        raise ValueError("corners must be joker cells")
    printed = [code for row in layout for code in row if code != CORNER_CODE]
    if len(printed) != BOARD_SIZE * BOARD_SIZE - 4:
        raise ValueError(f"expected {BOARD_SIZE * BOARD_SIZE - 4} printed cells, found {len(printed)}")
    counts = Counter(printed)
    bad = {code: n for code, n in counts.items() if code.startswith("J") or n != 2}
    if bad:
        raise ValueError(f"every non-jack card must be printed exactly twice: {bad}")


def new_board(layout: tuple[tuple[str, ...], ...] = LAYOUT) -> Board:
    """Build a fresh, chip-free board from ``layout``."""

    rows: list[list[Cell]] = []
    for row_index, codes in enumerate(layout):
        row_cells: list[Cell] = []
        for col_index, code in enumerate(codes):
            rank, suit = parse_code(code)
            row_cells.append(
                Cell(
                    id=f"cell-{row_index}-{col_index}",
                    row=row_index,
                    col=col_index,
                    rank=rank,
                    suit=suit,
                    is_corner=code == CORNER_CODE,
                    is_royal_belt=_is_royal_belt(row_index, rank),
                )
            )
        rows.append(row_cells)
    return Board(cells=rows)


def reset_board(board: Board) -> None:
    """Clear every chip, capped flag and score id in place."""

    for cell in board:
        cell.chip = None
        cell.is_capped = False
        cell.score_ids = []


def find_cells(board: Board, rank: Rank, suit: Suit) -> list[Cell]:
    """Return the cells printed with ``rank`` of ``suit`` in row-major order."""

    return [cell for cell in board if not cell.is_corner and cell.rank is rank and cell.suit is suit]
