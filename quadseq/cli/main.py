"""Typer entry-point wiring for the Quad Sequence CLI."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Sequence

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..board import ChipColor, new_board
from ..logging_config import LOG_LEVELS, configure_logging
from ..scoreboard import MatchHistory
from ..session import GameSession, JokerAction
from ..state import GameConfig
from .render import format_card, render_board, render_session

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()

MAX_EVENT_LOG = 8

HELP_TEXT = """\
[bold]play[/bold] N ROW COL (add|remove)  play hand card N (jokers need add/remove)
[bold]burn[/bold] N                     burn unplayable hand card N
[bold]cap[/bold] (COLOR)                enter cap mode (defaults to the player to move)
[bold]sel[/bold] ROW COL                toggle a cell in the cap selection
[bold]done[/bold]                       leave cap mode
[bold]scores[/bold] (COLOR)             list scores that could be capped
[bold]new[/bold]                        start a new game
[bold]quit[/bold]                       leave"""

_ALIASES = {
    "p": "play",
    "b": "burn",
    "c": "cap",
    "s": "sel",
    "x": "done",
    "n": "new",
    "q": "quit",
    "exit": "quit",
    "h": "help",
    "?": "help",
}

_ARITY = {
    "play": (3, 4),
    "burn": (1, 1),
    "cap": (0, 1),
    "sel": (2, 2),
    "done": (0, 0),
    "scores": (0, 1),
    "new": (0, 0),
    "quit": (0, 0),
    "help": (0, 0),
}


class CommandError(ValueError):
    """Raised when a typed command cannot be understood."""


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed line of player input."""

    name: str
    args: tuple[str, ...] = ()

    def int_arg(self, index: int) -> int:
        try:
            return int(self.args[index])
        except ValueError as exc:
            raise CommandError(f"'{self.args[index]}' is not a number") from exc


def parse_command(text: str) -> Command:
    """Parse one line such as ``play 2 4 7`` into a :class:`Command`."""

    try:
        parts = shlex.split(text.strip().lower())
    except ValueError as exc:
        raise CommandError(str(exc)) from exc
    if not parts:
        raise CommandError("empty command")
    name = _ALIASES.get(parts[0], parts[0])
    if name not in _ARITY:
        raise CommandError(f"unknown command '{parts[0]}'")
    args = tuple(parts[1:])
    low, high = _ARITY[name]
    if not low <= len(args) <= high:
        raise CommandError(f"'{name}' takes {low}-{high} argument(s), got {len(args)}")
    return Command(name, args)


def _append_event(log: list[str], message: str) -> None:
    """Append ``message`` to ``log`` maintaining a bounded log length."""

    log.append(message)
    excess = len(log) - MAX_EVENT_LOG
    if excess > 0:
        del log[:excess]


def _hand_card_id(session: GameSession, position: int) -> str:
    cards = session.current_player.hand.cards
    if not 1 <= position <= len(cards):
        raise CommandError(f"hand position must be between 1 and {len(cards)}")
    return cards[position - 1].id


def _color_arg(session: GameSession, command: Command, index: int) -> ChipColor:
    if len(command.args) <= index:
        return session.current_color
    try:
        return ChipColor(command.args[index])
    except ValueError as exc:
        raise CommandError(f"unknown color '{command.args[index]}'") from exc


def execute(session: GameSession, command: Command) -> str:
    """Apply ``command`` to ``session`` and return a message for the event log."""

    if command.name == "play":
        card_id = _hand_card_id(session, command.int_arg(0))
        joker = None
        if len(command.args) == 4:
            try:
                joker = JokerAction(command.args[3])
            except ValueError as exc:
                raise CommandError("joker action must be 'add' or 'remove'") from exc
        color = session.current_color
        result = session.play(card_id, command.int_arg(1), command.int_arg(2), joker)
        if not result.success:
            return f"[red]{result.error}[/red]"
        message = f"{color.value} played at ({command.args[1]}, {command.args[2]})"
        if result.new_scores:
            message += f" - {len(result.new_scores)} score(s) ready to cap"
        if not result.ended_turn:
            message += " - play again"
        return message

    if command.name == "burn":
        result = session.burn(_hand_card_id(session, command.int_arg(0)))
        if not result.success:
            return f"[red]{result.error}[/red]"
        drawn = format_card(result.drawn_card) if result.drawn_card else "nothing"
        return f"{session.current_color.value} burned a card and drew {drawn}"

    if command.name == "cap":
        color = _color_arg(session, command, 0)
        result = session.enter_cap_mode(color)
        if not result.success:
            return f"[red]{result.error}[/red]"
        return f"cap mode for {color.value}: select five cells with 'sel ROW COL'"

    if command.name == "sel":
        outcome = session.select_cap_cell(command.int_arg(0), command.int_arg(1))
        if not outcome.success:
            return f"[red]{outcome.error}[/red]"
        if outcome.capped:
            message = f"capped {len(outcome.capped)} score(s)"
            if outcome.winner is not None:
                message += f" - [bold green]{outcome.winner.value} wins![/bold green]"
            elif not outcome.cap_mode_active:
                message += " - cap mode closed"
            return message
        return f"cell ({command.args[0]}, {command.args[1]}) {outcome.status.value}"

    if command.name == "done":
        session.exit_cap_mode()
        return "left cap mode"

    if command.name == "scores":
        color = _color_arg(session, command, 0)
        scores = session.cappable_scores(color)
        if not scores:
            return f"no cappable scores for {color.value}"
        return "; ".join(
            f"{score.direction.value} " + " ".join(f"{r},{c}" for r, c in score.cells)
            for score in scores
        )

    if command.name == "new":
        session.new_game()
        return f"new game - {session.current_color.value} starts"

    if command.name == "help":
        return HELP_TEXT

    raise CommandError(f"'{command.name}' cannot be executed here")


def _event_panel(events: Sequence[str]) -> Panel:
    body = "\n".join(events) if events else "[dim]Type 'help' for commands.[/dim]"
    return Panel(body, title="Events", border_style="magenta", box=box.ROUNDED)


def _render_match_summary(history: MatchHistory) -> Table:
    table = Table(title="Match Summary", box=box.SIMPLE_HEAVY)
    table.add_column("Color", justify="left")
    table.add_column("Wins", justify="right")
    table.add_column("Capped", justify="right")
    for total in history.totals():
        table.add_row(total.color.value.title(), str(total.wins), str(total.capped_scores))
    return table


@app.command()
def play(
    players: int = typer.Option(2, min=2, max=4, help="Number of seated colors."),
    seed: int | None = typer.Option(None, help="Random seed for reproducible deals (omit for randomness)."),
    two_eyed_ends_turn: bool = typer.Option(
        False,
        "--two-eyed-ends-turn/--two-eyed-continues",
        help="Whether playing a two-eyed jack ends the turn.",
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Engine log level."),
) -> None:
    """Play a hot-seat game in the terminal."""

    if log_level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"log level must be one of {', '.join(LOG_LEVELS)}")
    configure_logging(log_level)

    config = GameConfig(
        colors=tuple(ChipColor)[:players],
        two_eyed_jack_ends_turn=two_eyed_ends_turn,
        seed=seed,
    )
    session = GameSession(config)
    history = MatchHistory(config.colors)
    events: list[str] = []
    recorded = False

    while True:
        console.print(render_session(session))
        console.print(_event_panel(events))
        try:
            line = console.input(f"[bold]{session.current_color.value}>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            break
        if not line.strip():
            continue
        try:
            command = parse_command(line)
            if command.name == "quit":
                break
            message = execute(session, command)
        except CommandError as exc:
            message = f"[red]{exc}[/red]"
        else:
            if command.name == "new":
                recorded = False
        _append_event(events, message)
        if session.winner is not None and not recorded:
            history.record(session.summary())
            recorded = True

    if history.games:
        console.print(_render_match_summary(history))


@app.command("layout")
def layout_cli() -> None:
    """Print the printed-card layout of the board."""

    console.print(render_board(new_board(), title="Board Layout"))


def main() -> None:
    """Entry-point for the ``quadseq`` console script."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
