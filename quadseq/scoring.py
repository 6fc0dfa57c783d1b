"""Score detection, capped-chip reuse validation and capping.

A score is five board-aligned cells of one color, where a corner joker cell
stands in for any color. Corners never hold chips, so a line of five holds
either five matching chips, or four matching chips and one corner.

Capped chips stay on the board and still match their own color, but a new
score may reuse at most two of them, and two reused chips must come from
different previously capped scores.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Final, Iterable, Iterator, Sequence

import numpy as np

from .board import Board, Cell, ChipColor, Coord

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

__all__ = [
    "CHIPS_IN_SCORE",
    "SCORE_TO_WIN",
    "MAX_CAPPED_REUSE",
    "Direction",
    "Score",
    "ScoreKey",
    "score_key",
    "cell_matches_color",
    "line_direction",
    "detect_scores",
    "check_for_new_scores",
    "validate_consecutive_line",
    "validate_capped_chips_in_score",
    "capped_origins",
    "is_already_capped",
    "uncapped_scores",
    "cap_score",
    "capped_counts",
    "check_win_condition",
]

CHIPS_IN_SCORE: Final[int] = 5
SCORE_TO_WIN: Final[int] = 4
MAX_CAPPED_REUSE: Final[int] = 2


class Direction(str, Enum):
    """The four line orientations a score may take."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    ANTI_DIAGONAL = "anti-diagonal"

    @property
    def step(self) -> Coord:
        return _STEPS[self]


_STEPS: Final[dict[Direction, Coord]] = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL: (1, 1),
    Direction.ANTI_DIAGONAL: (1, -1),
}

ScoreKey = tuple[ChipColor, Direction, tuple[Coord, ...]]


@dataclass(slots=True)
class Score:
    """Five cells forming a line for one color."""

    id: str
    cells: tuple[Coord, ...]
    color: ChipColor
    direction: Direction
    is_capped: bool = False

    @classmethod
    def create(cls, cells: Iterable[Coord], color: ChipColor, direction: Direction) -> "Score":
        ordered = tuple(cells)
        row, col = min(ordered)
        return cls(
            id=f"score-{color.value}-{direction.value}-{row}-{col}",
            cells=ordered,
            color=color,
            direction=direction,
        )

    @property
    def key(self) -> ScoreKey:
        return score_key(self)


def score_key(score: Score) -> ScoreKey:
    """Return the identity of ``score``: color, direction and sorted cells."""

    return (score.color, score.direction, tuple(sorted(score.cells)))


def cell_matches_color(cell: Cell | None, color: ChipColor) -> bool:
    """Corners match every color; other cells need a chip of ``color``."""

    if cell is None:
        return False
    if cell.is_corner:
        return True
    return cell.chip is not None and cell.chip == color


def _valid_composition(chips: int, corners: int) -> bool:
    return (chips == CHIPS_IN_SCORE and corners == 0) or (
        chips == CHIPS_IN_SCORE - 1 and corners == 1
    )


@dataclass(frozen=True, slots=True)
class _LineTable:
    directions: tuple[Direction, ...]
    rows: "NDArray[np.intp]"
    cols: "NDArray[np.intp]"


@lru_cache(maxsize=None)
def _line_table(size: int) -> _LineTable:
    """Every run of five on a ``size`` board, in scan order."""

    directions: list[Direction] = []
    rows: list[list[int]] = []
    cols: list[list[int]] = []
    span = CHIPS_IN_SCORE - 1
    for row in range(size):
        for col in range(size):
            for direction in Direction:
                d_row, d_col = direction.step
                if not (0 <= row + d_row * span < size and 0 <= col + d_col * span < size):
                    continue
                directions.append(direction)
                rows.append([row + d_row * i for i in range(CHIPS_IN_SCORE)])
                cols.append([col + d_col * i for i in range(CHIPS_IN_SCORE)])
    return _LineTable(
        directions=tuple(directions),
        rows=np.array(rows, dtype=np.intp).reshape(-1, CHIPS_IN_SCORE),
        cols=np.array(cols, dtype=np.intp).reshape(-1, CHIPS_IN_SCORE),
    )


def _scan(
    board: Board,
    color: ChipColor,
    capped_scores: Sequence[Score],
    through: Coord | None = None,
) -> list[Score]:
    table = _line_table(board.size)
    matches = np.array(
        [[cell_matches_color(cell, color) for cell in row] for row in board.cells], dtype=bool
    )
    corners = np.array([[cell.is_corner for cell in row] for row in board.cells], dtype=bool)

    qualifying = matches[table.rows, table.cols].all(axis=1)
    qualifying &= corners[table.rows, table.cols].sum(axis=1) <= 1
    if through is not None:
        row, col = through
        qualifying &= ((table.rows == row) & (table.cols == col)).any(axis=1)

    scores: list[Score] = []
    seen: set[ScoreKey] = set()
    for index in np.flatnonzero(qualifying):
        cells = tuple(
            (int(r), int(c)) for r, c in zip(table.rows[index], table.cols[index])
        )
        score = Score.create(cells, color, table.directions[index])
        if score.key in seen:
            continue
        if not validate_capped_chips_in_score(score, board, capped_scores):
            logger.debug("scan rejected %s by capped-chip rules", score.id)
            continue
        seen.add(score.key)
        scores.append(score)
    return scores


def detect_scores(
    board: Board, color: ChipColor, capped_scores: Sequence[Score] = ()
) -> list[Score]:
    """Return every valid score for ``color`` currently on ``board``.

    Lines that break the capped-chip reuse rules are filtered out. Scores
    that are already capped are not filtered; see :func:`uncapped_scores`.
    """

    return _scan(board, color, capped_scores)


def check_for_new_scores(
    board: Board,
    row: int,
    col: int,
    color: ChipColor,
    capped_scores: Sequence[Score] = (),
) -> list[Score]:
    """Return the valid scores for ``color`` whose line passes through ``(row, col)``."""

    if not board.in_bounds(row, col):
        return []
    return _scan(board, color, capped_scores, through=(row, col))


def line_direction(cells: Sequence[Coord]) -> Direction | None:
    """Return the direction of ``cells`` if they are consecutive, else ``None``.

    ``cells`` must already be sorted by row, then column.
    """

    if len(cells) < 2:
        return None
    for direction in Direction:
        d_row, d_col = direction.step
        if all(
            (cur[0] - prev[0], cur[1] - prev[1]) == (d_row, d_col)
            for prev, cur in zip(cells, cells[1:])
        ):
            return direction
    return None


def validate_consecutive_line(
    cells: Sequence[Coord], board: Board, color: ChipColor
) -> Score | None:
    """Turn a player's five selected cells into a score, in any click order."""

    if len(cells) != CHIPS_IN_SCORE:
        return None
    ordered = sorted((int(row), int(col)) for row, col in cells)

    chips = 0
    corners = 0
    for row, col in ordered:
        cell = board.get(row, col)
        if cell is None:
            logger.debug("selected cell %d,%d is off the board", row, col)
            return None
        if cell.is_corner:
            corners += 1
            continue
        if not cell_matches_color(cell, color):
            logger.debug(
                "selected cell %d,%d does not match %s (chip=%s)", row, col, color.value, cell.chip
            )
            return None
        chips += 1

    if not _valid_composition(chips, corners):
        logger.debug("invalid chip/joker count: chips=%d jokers=%d", chips, corners)
        return None

    direction = line_direction(ordered)
    if direction is None:
        logger.debug("selected cells %s are not a straight line", ordered)
        return None
    return Score.create(ordered, color, direction)


def capped_origins(coord: Coord, color: ChipColor, capped_scores: Iterable[Score]) -> set[str]:
    """Ids of the capped ``color`` scores that contain ``coord``."""

    return {
        score.id
        for score in capped_scores
        if score.is_capped and score.color == color and coord in score.cells
    }


def validate_capped_chips_in_score(
    score: Score, board: Board, capped_scores: Sequence[Score]
) -> bool:
    """Check how many already capped chips ``score`` reuses, and from where.

    With ``n`` reused capped chips (at most two) the remaining cells must be
    exactly ``5 - n`` uncapped chips and corners. Each reused chip has to
    belong to a capped score of the same color, and two reused chips may
    not share any such score.
    """

    corners = 0
    uncapped = 0
    capped_cells: list[Coord] = []
    for row, col in score.cells:
        cell = board.get(row, col)
        if cell is None:
            continue
        if cell.is_corner:
            corners += 1
        elif cell.chip is not None and cell.chip == score.color:
            if cell.is_capped:
                capped_cells.append((row, col))
            else:
                uncapped += 1

    capped = len(capped_cells)
    logger.debug(
        "%s composition: %d capped, %d uncapped, %d jokers", score.id, capped, uncapped, corners
    )
    if capped > MAX_CAPPED_REUSE:
        logger.debug("%s reuses %d capped chips (max %d)", score.id, capped, MAX_CAPPED_REUSE)
        return False

    if capped:
        origins = [capped_origins(coord, score.color, capped_scores) for coord in capped_cells]
        if not all(origins):
            logger.debug("%s reuses a capped chip with no capped score behind it", score.id)
            return False
        if capped == 2 and origins[0] & origins[1]:
            logger.debug(
                "%s reuses two chips of the same score(s): %s",
                score.id,
                sorted(origins[0] & origins[1]),
            )
            return False

    required_uncapped = CHIPS_IN_SCORE - capped - corners
    if uncapped != required_uncapped:
        logger.debug(
            "%s needs %d uncapped chips with %d capped and %d jokers, found %d",
            score.id,
            required_uncapped,
            capped,
            corners,
            uncapped,
        )
        return False
    return capped + uncapped + corners == CHIPS_IN_SCORE


def is_already_capped(score: Score, capped_scores: Iterable[Score]) -> bool:
    key = score.key
    return any(
        capped.is_capped and (capped.id == score.id or capped.key == key)
        for capped in capped_scores
    )


def uncapped_scores(
    board: Board, color: ChipColor, capped_scores: Sequence[Score]
) -> list[Score]:
    """Valid scores for ``color`` that have not been capped yet."""

    return [
        score
        for score in detect_scores(board, color, capped_scores)
        if not is_already_capped(score, capped_scores)
    ]


def cap_score(board: Board, score: Score) -> None:
    """Lock ``score`` in: mark it and its non-corner cells capped."""

    score.is_capped = True
    for row, col in score.cells:
        cell = board.get(row, col)
        if cell is None:
            continue
        if score.id not in cell.score_ids:
            cell.score_ids.append(score.id)
        if not cell.is_corner:
            cell.is_capped = True
    logger.info("capped %s score %s", score.color.value, score.id)


def _distinct_capped(capped_scores: Iterable[Score]) -> Iterator[Score]:
    """Yield each capped score once per identity key, in capped order."""

    seen: set[ScoreKey] = set()
    for score in capped_scores:
        if not score.is_capped or score.key in seen:
            continue
        seen.add(score.key)
        yield score


def capped_counts(capped_scores: Iterable[Score]) -> Counter[ChipColor]:
    """Number of distinct capped scores per color."""

    return Counter(score.color for score in _distinct_capped(capped_scores))


def check_win_condition(
    capped_scores: Iterable[Score], score_to_win: int = SCORE_TO_WIN
) -> ChipColor | None:
    """Return the first color holding ``score_to_win`` distinct capped scores."""

    counts: Counter[ChipColor] = Counter()
    for score in _distinct_capped(capped_scores):
        counts[score.color] += 1
        if counts[score.color] >= score_to_win:
            return score.color
    return None
