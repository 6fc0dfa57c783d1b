"""Turn orchestration for a single in-memory Quad Sequence game.

``GameSession`` sequences calls into the rules and scoring modules the way a
front end would: it owns the board, deck, hands, discard pile and the capped
scores, and reports every outcome as a result value.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from . import rules
from .actions import opponent_colors
from .board import Board, ChipColor, Coord, new_board, reset_board
from .cards import Card, Deck, WildCardType
from .scoreboard import GameSummary
from .scoring import (
    CHIPS_IN_SCORE,
    MAX_CAPPED_REUSE,
    Score,
    cap_score,
    capped_counts,
    capped_origins,
    check_for_new_scores,
    check_win_condition,
    detect_scores,
    is_already_capped,
    uncapped_scores,
    validate_capped_chips_in_score,
    validate_consecutive_line,
)
from .state import GameConfig, Hand, PlayerState

logger = logging.getLogger(__name__)

__all__ = [
    "JokerAction",
    "TurnResult",
    "CapStatus",
    "CapSelectionResult",
    "CapMode",
    "GameSession",
]


class JokerAction(str, Enum):
    """The two things a joker card can do."""

    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class TurnResult:
    """Outcome of a play, burn or cap-mode request."""

    success: bool
    error: str | None = None
    ended_turn: bool = False
    drawn_card: Card | None = None
    new_scores: tuple[Score, ...] = ()

    @classmethod
    def fail(cls, error: str) -> "TurnResult":
        return cls(False, error)


class CapStatus(str, Enum):
    SELECTED = "selected"
    DESELECTED = "deselected"
    REJECTED = "rejected"
    INVALID_LINE = "invalid_line"
    CAPPED = "capped"


@dataclass(frozen=True, slots=True)
class CapSelectionResult:
    """Outcome of clicking a cell while in cap mode."""

    status: CapStatus
    error: str | None = None
    capped: tuple[Score, ...] = ()
    cap_mode_active: bool = True
    winner: ChipColor | None = None

    @property
    def success(self) -> bool:
        return self.status not in (CapStatus.REJECTED, CapStatus.INVALID_LINE)


@dataclass(slots=True)
class CapMode:
    """Cells a player has picked so far while capping for ``color``."""

    color: ChipColor
    selection: list[Coord] = field(default_factory=list)


@dataclass(slots=True)
class GameSession:
    """Board, deck, hands and capped scores for one game at a time."""

    config: GameConfig = field(default_factory=GameConfig)
    rng: random.Random | None = None
    board: Board = field(init=False)
    deck: Deck = field(init=False)
    players: list[PlayerState] = field(init=False)
    discard_pile: list[Card] = field(init=False, default_factory=list)
    capped_scores: list[Score] = field(init=False, default_factory=list)
    starting_index: int = field(init=False, default=0)
    current_index: int = field(init=False, default=0)
    has_burned_this_turn: bool = field(init=False, default=False)
    cap_mode: CapMode | None = field(init=False, default=None)
    winner: ChipColor | None = field(init=False, default=None)
    games_started: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random(self.config.seed)
        self.board = new_board()
        self.deck = Deck.initialize(self.rng)
        self.players = [PlayerState(color) for color in self.config.colors]
        self.new_game()

    # ------------------------------------------------------------------
    # Game lifecycle

    def new_game(self) -> None:
        """Reset board and deck and deal fresh hands.

        The starting seat rotates with every game after the first.
        """

        if self.games_started:
            self.starting_index = (self.starting_index + 1) % len(self.players)
        self.games_started += 1

        reset_board(self.board)
        self.deck.reset()
        for player in self.players:
            player.hand = Hand()
        for _ in range(self.config.hand_size):
            for player in self.players:
                card = self.deck.draw()
                if card is not None:
                    player.hand.add_card(card)

        self.discard_pile.clear()
        self.capped_scores.clear()
        self.current_index = self.starting_index
        self.has_burned_this_turn = False
        self.cap_mode = None
        self.winner = None
        logger.info(
            "game %d dealt: %d cards each, %d left in deck, %s starts",
            self.games_started,
            self.config.hand_size,
            len(self.deck),
            self.current_color.value,
        )

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_index]

    @property
    def current_color(self) -> ChipColor:
        return self.current_player.color

    def player(self, color: ChipColor) -> PlayerState:
        for player in self.players:
            if player.color == color:
                return player
        raise KeyError(color)

    def opponents(self, color: ChipColor) -> tuple[ChipColor, ...]:
        return opponent_colors(color, self.config.colors)

    def summary(self) -> GameSummary:
        counts = capped_counts(self.capped_scores)
        return GameSummary(
            game_number=self.games_started,
            winner=self.winner,
            capped={color: counts.get(color, 0) for color in self.config.colors},
        )

    # ------------------------------------------------------------------
    # Playing cards

    def _blocked(self) -> str | None:
        if self.winner is not None:
            return f"Game over: {self.winner.value} has won"
        if self.cap_mode is not None:
            return "Cannot play or burn cards while in cap mode"
        return None

    def _advance_turn(self) -> None:
        self.current_index = (self.current_index + 1) % len(self.players)
        self.has_burned_this_turn = False

    def _removal_target(self, row: int, col: int, color: ChipColor) -> ChipColor:
        cell = self.board.get(row, col)
        if cell is not None and cell.chip is not None and cell.chip != color:
            return cell.chip
        return self.opponents(color)[0]

    def play(
        self,
        card_id: str,
        row: int,
        col: int,
        joker_action: JokerAction | None = None,
    ) -> TurnResult:
        """Play ``card_id`` from the current hand at ``(row, col)``."""

        blocked = self._blocked()
        if blocked:
            return TurnResult.fail(blocked)

        player = self.current_player
        color = player.color
        card = player.hand.get(card_id)
        if card is None:
            return TurnResult.fail("Selected card is not in your hand")

        wild = card.wild_card_type
        ends_turn = True
        if wild is WildCardType.TWO_EYED_JACK:
            removing = False
            check = rules.wild_card_add_chip(row, col, color, self.board)
            ends_turn = self.config.two_eyed_jack_ends_turn
        elif wild is WildCardType.ONE_EYED_JACK:
            removing = True
            check = rules.wild_card_remove_chip(
                row, col, self._removal_target(row, col, color), self.board
            )
        elif wild is WildCardType.JOKER:
            if joker_action is None:
                return TurnResult.fail("Choose whether the joker adds or removes a chip")
            try:
                removing = JokerAction(joker_action) is JokerAction.REMOVE
            except ValueError:
                return TurnResult.fail(f"Unknown joker action '{joker_action}'")
            if removing:
                check = rules.wild_card_remove_chip(
                    row, col, self._removal_target(row, col, color), self.board
                )
            else:
                check = rules.wild_card_add_chip(row, col, color, self.board)
        else:
            removing = False
            check = rules.play_card(card, row, col, self.board)

        if not check.success:
            logger.debug(
                "%s cannot play %s at (%d, %d): %s", color.value, card.label(), row, col, check.error
            )
            return TurnResult.fail(check.error or "Illegal play")

        player.hand.remove_card(card.id)
        self.discard_pile.append(card)

        cell = self.board[(row, col)]
        new_scores: tuple[Score, ...] = ()
        if removing:
            removed = cell.chip
            cell.clear()
            logger.info(
                "%s removed a %s chip at (%d, %d) with %s",
                color.value,
                removed.value if removed else "?",
                row,
                col,
                card.label(),
            )
        else:
            cell.chip = color
            new_scores = tuple(
                score
                for score in check_for_new_scores(self.board, row, col, color, self.capped_scores)
                if not is_already_capped(score, self.capped_scores)
            )
            logger.info("%s placed a chip at (%d, %d) with %s", color.value, row, col, card.label())

        drawn = self.deck.draw()
        if drawn is not None:
            player.hand.add_card(drawn)
        else:
            logger.info("deck is empty, %s draws nothing", color.value)

        if ends_turn:
            self._advance_turn()
        return TurnResult(True, ended_turn=ends_turn, drawn_card=drawn, new_scores=new_scores)

    def burn(self, card_id: str) -> TurnResult:
        """Discard an unplayable card for a fresh one, once per turn."""

        blocked = self._blocked()
        if blocked:
            return TurnResult.fail(blocked)
        if self.has_burned_this_turn:
            return TurnResult.fail("Only one burn is allowed per turn")

        player = self.current_player
        card = player.hand.get(card_id)
        if card is None:
            return TurnResult.fail("Selected card is not in your hand")

        result = rules.burn_card(card, self.board, self.deck)
        if not result.success or result.new_card is None:
            return TurnResult.fail(result.error or "Burn failed")

        player.hand.remove_card(card.id)
        self.discard_pile.append(card)
        player.hand.add_card(result.new_card)
        self.has_burned_this_turn = True
        logger.info("%s burned %s and drew %s", player.color.value, card.label(), result.new_card.label())
        return TurnResult(True, drawn_card=result.new_card)

    # ------------------------------------------------------------------
    # Capping

    def cappable_scores(self, color: ChipColor) -> list[Score]:
        return uncapped_scores(self.board, color, self.capped_scores)

    def enter_cap_mode(self, color: ChipColor) -> TurnResult:
        """Start selecting cells to cap for ``color``; never ends a turn."""

        if self.winner is not None:
            return TurnResult.fail(f"Game over: {self.winner.value} has won")
        if color not in self.config.colors:
            return TurnResult.fail(f"{ChipColor(color).value} is not playing")
        self.cap_mode = CapMode(ChipColor(color))
        return TurnResult(True)

    def exit_cap_mode(self) -> None:
        self.cap_mode = None

    def _reject(self, error: str) -> CapSelectionResult:
        return CapSelectionResult(CapStatus.REJECTED, error, cap_mode_active=self.cap_mode is not None)

    def select_cap_cell(self, row: int, col: int) -> CapSelectionResult:
        """Toggle ``(row, col)`` in the cap selection; the fifth cell triggers capping."""

        mode = self.cap_mode
        if mode is None:
            return CapSelectionResult(CapStatus.REJECTED, "Not in cap mode", cap_mode_active=False)
        cell = self.board.get(row, col)
        if cell is None:
            return self._reject(rules.OUT_OF_BOUNDS)

        coord = (row, col)
        if coord in mode.selection:
            mode.selection.remove(coord)
            return CapSelectionResult(CapStatus.DESELECTED)

        if not cell.is_corner and cell.chip != mode.color:
            return self._reject(f"Cell must be a corner or hold a {mode.color.value} chip")
        if len(mode.selection) >= CHIPS_IN_SCORE:
            return self._reject("Five cells are already selected; deselect one first")

        if not cell.is_corner and cell.is_capped:
            chosen = [c for c in mode.selection if self.board[c].is_capped and not self.board[c].is_corner]
            if len(chosen) >= MAX_CAPPED_REUSE:
                return self._reject(f"A score may reuse at most {MAX_CAPPED_REUSE} capped chips")
            if chosen:
                first = capped_origins(chosen[0], mode.color, self.capped_scores)
                second = capped_origins(coord, mode.color, self.capped_scores)
                if first & second:
                    return self._reject("Two capped chips must come from different scores")

        mode.selection.append(coord)
        if len(mode.selection) < CHIPS_IN_SCORE:
            return CapSelectionResult(CapStatus.SELECTED)
        return self._cap_selection(mode)

    def _cap_selection(self, mode: CapMode) -> CapSelectionResult:
        validated = validate_consecutive_line(mode.selection, self.board, mode.color)
        if validated is None:
            return CapSelectionResult(CapStatus.INVALID_LINE, "Selected cells do not form a valid line")

        target = tuple(sorted(mode.selection))
        to_cap = [
            score
            for score in detect_scores(self.board, mode.color, self.capped_scores)
            if tuple(sorted(score.cells)) == target and not is_already_capped(score, self.capped_scores)
        ]
        if not to_cap:
            if is_already_capped(validated, self.capped_scores):
                return self._reject("That score is already capped")
            return self._reject("Selection breaks the capped-chip reuse rules")

        return self._apply_caps(mode.color, to_cap)

    def cap_detected_score(self, score: Score) -> CapSelectionResult:
        """Cap a score found by detection without selecting its cells."""

        if self.winner is not None:
            return self._reject(f"Game over: {self.winner.value} has won")
        if is_already_capped(score, self.capped_scores):
            return self._reject("That score is already capped")
        if not validate_capped_chips_in_score(score, self.board, self.capped_scores):
            return self._reject("Score breaks the capped-chip reuse rules")
        found = validate_consecutive_line(score.cells, self.board, score.color)
        if found is None:
            return self._reject("Score is no longer on the board")
        if found.key != score.key:
            return self._reject(f"Cells run {found.direction.value}, not {score.direction.value}")
        return self._apply_caps(score.color, [score])

    def _apply_caps(self, color: ChipColor, scores: list[Score]) -> CapSelectionResult:
        for score in scores:
            cap_score(self.board, score)
            self.capped_scores.append(score)

        self.winner = check_win_condition(self.capped_scores, self.config.score_to_win)
        remaining = [] if self.winner else uncapped_scores(self.board, color, self.capped_scores)
        active = self.cap_mode is not None and bool(remaining)
        if self.cap_mode is not None:
            self.cap_mode.selection.clear()
            if not active:
                self.cap_mode = None
        if self.winner is not None:
            logger.info("%s wins with %d capped scores", self.winner.value, self.config.score_to_win)
        return CapSelectionResult(
            CapStatus.CAPPED,
            capped=tuple(scores),
            cap_mode_active=active,
            winner=self.winner,
        )
