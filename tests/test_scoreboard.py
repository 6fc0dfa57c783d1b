from __future__ import annotations

import pytest

from quadseq import scoreboard
from quadseq.board import ChipColor

RED = ChipColor.RED
BLUE = ChipColor.BLUE


def _summary(number: int, winner: ChipColor | None, red: int, blue: int) -> scoreboard.GameSummary:
    return scoreboard.GameSummary(game_number=number, winner=winner, capped={RED: red, BLUE: blue})


def test_match_history_accumulates_totals() -> None:
    history = scoreboard.MatchHistory(colors=(RED, BLUE))
    history.record(_summary(1, RED, red=4, blue=2))
    history.record(_summary(2, BLUE, red=1, blue=4))
    history.record(_summary(3, RED, red=4, blue=3))

    totals = history.totals()
    assert len(history.games) == 3
    assert [total.color for total in totals] == [RED, BLUE]
    assert totals[0].wins == 2
    assert totals[1].wins == 1
    assert totals[0].capped_scores == 9
    assert totals[1].capped_scores == 9
    assert history.leader() is RED


def test_leader_is_none_on_tie_or_before_any_win() -> None:
    history = scoreboard.MatchHistory(colors=(RED, BLUE))
    assert history.leader() is None

    history.record(_summary(1, None, red=1, blue=1))
    assert history.leader() is None

    history.record(_summary(2, RED, red=4, blue=0))
    history.record(_summary(3, BLUE, red=0, blue=4))
    assert history.leader() is None


def test_match_history_validates_colors() -> None:
    history = scoreboard.MatchHistory(colors=(RED, BLUE))

    with pytest.raises(ValueError):
        history.record(scoreboard.GameSummary(1, ChipColor.GREEN, {RED: 0, BLUE: 0}))
    with pytest.raises(ValueError):
        history.record(scoreboard.GameSummary(1, RED, {ChipColor.YELLOW: 4}))
    with pytest.raises(ValueError):
        scoreboard.MatchHistory(colors=())
