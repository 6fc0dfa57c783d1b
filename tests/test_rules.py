from __future__ import annotations

import random

import pytest

from quadseq import board, cards, rules
from quadseq.board import ChipColor
from quadseq.cards import Card, Deck, Rank, Suit, WildCardType

RED = ChipColor.RED
BLUE = ChipColor.BLUE


def _card(suit: Suit, rank: Rank, copy: int = 0) -> Card:
    return Card(suit, rank, f"{suit.value}-{rank.value}-{copy}", cards.wild_card_type_for(suit, rank))


def _joker() -> Card:
    return Card(Suit.JOKER, Rank.JOKER, "joker-0", WildCardType.JOKER)


NINE_CLUBS = _card(Suit.CLUBS, Rank.NINE)
TWO_EYED = _card(Suit.DIAMONDS, Rank.JACK)
ONE_EYED = _card(Suit.SPADES, Rank.JACK)


@pytest.mark.parametrize(
    ("row", "col", "expected_error"),
    [
        (0, 1, None),
        (7, 8, None),
        (0, 2, "does not match"),
        (0, 0, rules.CORNER_CELL),
        (10, 0, rules.OUT_OF_BOUNDS),
        (-1, 4, rules.OUT_OF_BOUNDS),
    ],
)
def test_regular_card_targets(row: int, col: int, expected_error: str | None) -> None:
    grid = board.new_board()

    result = rules.play_card(NINE_CLUBS, row, col, grid)

    if expected_error is None:
        assert result.success
        assert result.error is None
    else:
        assert not result.success
        assert expected_error in (result.error or "")


def test_regular_card_rejects_occupied_cell() -> None:
    grid = board.new_board()
    grid[(0, 1)].chip = BLUE

    result = rules.play_card(NINE_CLUBS, 0, 1, grid)

    assert not result
    assert result.error == rules.OCCUPIED
    assert rules.can_play_card(NINE_CLUBS, 7, 8, grid)


def test_two_eyed_jack_targets_any_empty_cell() -> None:
    grid = board.new_board()
    grid[(3, 3)].chip = BLUE

    assert rules.play_card(TWO_EYED, 5, 5, grid).success
    assert rules.play_card(TWO_EYED, 3, 3, grid).error == rules.OCCUPIED
    assert rules.play_card(TWO_EYED, 9, 9, grid).error == rules.CORNER_CELL


def test_one_eyed_jack_needs_a_chip() -> None:
    grid = board.new_board()
    grid[(3, 3)].chip = BLUE

    assert rules.play_card(ONE_EYED, 3, 3, grid).success
    assert rules.play_card(ONE_EYED, 3, 4, grid).error == rules.NO_CHIP


def test_joker_targets_occupied_and_empty_cells() -> None:
    grid = board.new_board()
    grid[(3, 3)].chip = BLUE

    assert rules.play_card(_joker(), 3, 3, grid).success
    assert rules.play_card(_joker(), 3, 4, grid).success
    assert not rules.play_card(_joker(), 0, 0, grid).success


def test_wild_add_chip() -> None:
    grid = board.new_board()
    grid[(2, 2)].chip = BLUE

    assert rules.wild_card_add_chip(2, 3, RED, grid).success
    assert rules.wild_card_add_chip(2, 2, RED, grid).error == rules.OCCUPIED
    assert rules.wild_card_add_chip(0, 9, RED, grid).error == rules.CORNER_CELL
    assert rules.wild_card_add_chip(2, 12, RED, grid).error == rules.OUT_OF_BOUNDS


@pytest.mark.parametrize(
    ("chip", "capped", "expected"),
    [
        (BLUE, False, True),
        (RED, False, False),
        (None, False, False),
        (BLUE, True, False),
    ],
)
def test_wild_remove_chip(chip: ChipColor | None, capped: bool, expected: bool) -> None:
    grid = board.new_board()
    cell = grid[(6, 6)]
    cell.chip = chip
    cell.is_capped = capped

    result = rules.wild_card_remove_chip(6, 6, BLUE, grid)

    assert result.success is expected
    if not expected:
        assert result.error


def test_remove_from_capped_score_message() -> None:
    grid = board.new_board()
    grid[(6, 6)].chip = BLUE
    grid[(6, 6)].is_capped = True

    result = rules.wild_card_remove_chip(6, 6, BLUE, grid)

    assert result.error == "Cannot remove chip from capped score"


def test_every_card_but_one_eyed_jacks_is_playable_on_empty_board() -> None:
    grid = board.new_board()

    for card in cards.iter_full_deck():
        expected = card.wild_card_type is not WildCardType.ONE_EYED_JACK
        assert rules.is_card_playable(card, grid) is expected, card.id


def test_regular_card_unplayable_when_both_copies_covered() -> None:
    grid = board.new_board()
    grid[(0, 1)].chip = RED
    grid[(7, 8)].chip = BLUE

    assert not rules.is_card_playable(NINE_CLUBS, grid)


def test_one_eyed_jack_ignores_capped_chips() -> None:
    grid = board.new_board()
    grid[(4, 4)].chip = BLUE
    grid[(4, 4)].is_capped = True

    assert not rules.is_card_playable(ONE_EYED, grid)

    grid[(4, 5)].chip = BLUE
    assert rules.is_card_playable(ONE_EYED, grid)


def test_burn_playable_card_is_refused() -> None:
    grid = board.new_board()
    deck = Deck.initialize(random.Random(1))

    result = rules.burn_card(NINE_CLUBS, grid, deck)

    assert not result.success
    assert result.error == "Card is playable - must play, not burn"
    assert len(deck) == 108


def test_burn_unplayable_card_draws_replacement() -> None:
    grid = board.new_board()
    deck = Deck.initialize(random.Random(1))
    top = deck.cards[-1]

    result = rules.burn_card(ONE_EYED, grid, deck)

    assert result.success
    assert result.new_card == top
    assert len(deck) == 107


def test_burn_with_empty_deck_fails() -> None:
    grid = board.new_board()
    deck = Deck(cards=[])

    result = rules.burn_card(ONE_EYED, grid, deck)

    assert not result.success
    assert result.error == "Deck is empty"
    assert result.new_card is None


def _random_board(seed: int) -> board.Board:
    rng = random.Random(seed)
    grid = board.new_board()
    fill = rng.choice([0.3, 0.7, 0.95])
    for cell in grid:
        if cell.is_corner or rng.random() > fill:
            continue
        cell.chip = rng.choice([RED, BLUE])
        cell.is_capped = rng.random() < 0.3
    return grid


@pytest.mark.parametrize("seed", range(12))
def test_is_card_playable_matches_cell_by_cell_legality(seed: int) -> None:
    grid = _random_board(seed)

    for card in cards.iter_full_deck():
        legal = [
            cell.coord
            for cell in grid
            if rules.play_card(card, cell.row, cell.col, grid).success
            and not (cell.is_occupied and cell.is_capped)
        ]
        assert rules.is_card_playable(card, grid) is bool(legal), card.id


@pytest.mark.parametrize(
    ("chip", "capped", "expected"),
    [
        (None, False, True),
        (RED, False, False),
        (BLUE, False, False),
        (BLUE, True, False),
    ],
)
def test_two_eyed_jack_sweep(chip: ChipColor | None, capped: bool, expected: bool) -> None:
    grid = board.new_board()
    for cell in grid:
        if not cell.is_corner:
            cell.chip = chip
            cell.is_capped = capped

    for cell in grid:
        result = rules.play_card(TWO_EYED, cell.row, cell.col, grid)
        assert result.success is (expected and not cell.is_corner), cell.coord
    assert rules.is_card_playable(TWO_EYED, grid) is expected
