from __future__ import annotations

import pytest

from quadseq import state
from quadseq.board import ChipColor
from quadseq.cards import Card, Rank, Suit


def _card(card_id: str) -> Card:
    return Card(Suit.HEARTS, Rank.FIVE, card_id)


def test_hand_operations() -> None:
    hand = state.Hand()
    hand.add_card(_card("hearts-5-0"))
    hand.add_card(_card("hearts-5-1"))

    assert len(hand) == 2
    assert hand.has_card("hearts-5-1")
    assert hand.get("hearts-5-0") is hand.cards[0]

    removed = hand.remove_card("hearts-5-0")

    assert removed is not None and removed.id == "hearts-5-0"
    assert [card.id for card in hand.cards] == ["hearts-5-1"]
    assert hand.remove_card("hearts-5-0") is None
    assert hand.get("missing") is None


def test_default_config() -> None:
    config = state.GameConfig()

    assert config.colors == (ChipColor.RED, ChipColor.BLUE)
    assert config.hand_size == state.INITIAL_HAND_SIZE == 5
    assert config.score_to_win == 4
    assert not config.two_eyed_jack_ends_turn


@pytest.mark.parametrize(
    "kwargs",
    [
        {"colors": (ChipColor.RED,)},
        {"colors": (ChipColor.RED, ChipColor.RED)},
        {"colors": tuple(ChipColor) + (ChipColor.RED,)},
        {"hand_size": 0},
        {"score_to_win": 0},
    ],
)
def test_config_rejects_bad_values(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        state.GameConfig(**kwargs)
