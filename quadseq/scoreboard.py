"""Helpers for tracking multi-game Quad Sequence match results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .board import ChipColor

__all__ = ["GameSummary", "ColorMatchTotal", "MatchHistory"]


@dataclass(frozen=True, slots=True)
class GameSummary:
    """Summary captured when a single game ends."""

    game_number: int
    winner: ChipColor | None
    capped: Mapping[ChipColor, int]


@dataclass(frozen=True, slots=True)
class ColorMatchTotal:
    """Aggregate totals for one color across all recorded games."""

    color: ChipColor
    wins: int
    capped_scores: int


@dataclass(slots=True)
class MatchHistory:
    """Mutable tracker that accumulates game summaries for a match."""

    colors: Sequence[ChipColor]
    games: list[GameSummary] = field(default_factory=list)
    _wins: dict[ChipColor, int] = field(init=False, repr=False)
    _capped: dict[ChipColor, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("at least one color is required")
        self._wins = {color: 0 for color in self.colors}
        self._capped = {color: 0 for color in self.colors}

    def record(self, summary: GameSummary) -> None:
        """Record ``summary`` and update cumulative totals."""

        if summary.winner is not None and summary.winner not in self._wins:
            raise ValueError(f"winner {summary.winner} is not part of this match")
        unknown = set(summary.capped) - set(self._capped)
        if unknown:
            raise ValueError(f"capped counts reference unknown colors: {sorted(c.value for c in unknown)}")
        self.games.append(summary)
        for color, count in summary.capped.items():
            self._capped[color] += count
        if summary.winner is not None:
            self._wins[summary.winner] += 1

    def totals(self) -> list[ColorMatchTotal]:
        """Return the cumulative totals for each color in seating order."""

        return [
            ColorMatchTotal(color=color, wins=self._wins[color], capped_scores=self._capped[color])
            for color in self.colors
        ]

    def leader(self) -> ChipColor | None:
        """Return the color with the most game wins, or ``None`` on a tie."""

        ranked = sorted(self._wins.items(), key=lambda item: item[1], reverse=True)
        if not ranked or ranked[0][1] == 0:
            return None
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return None
        return ranked[0][0]
