"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Collection

from rich import box
from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table

from ..board import Board, Cell, ChipColor, Coord
from ..cards import Card, Suit, WildCardType
from ..session import GameSession
from .views import SessionView

_SUIT_SYMBOLS = {
    Suit.SPADES: ("♠", "white"),
    Suit.HEARTS: ("♥", "red"),
    Suit.DIAMONDS: ("♦", "red"),
    Suit.CLUBS: ("♣", "white"),
}

CHIP_STYLES = {
    ChipColor.RED: "bold white on red",
    ChipColor.BLUE: "bold white on blue",
    ChipColor.GREEN: "bold black on green",
    ChipColor.YELLOW: "bold black on yellow",
}

_WILD_NOTES = {
    WildCardType.TWO_EYED_JACK: "place anywhere",
    WildCardType.ONE_EYED_JACK: "remove",
    WildCardType.JOKER: "add/remove",
}


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``."""

    if card.wild_card_type is WildCardType.JOKER:
        return "[magenta]🃏[/magenta]"
    symbol, color = _SUIT_SYMBOLS.get(card.suit, (card.suit.symbol, "white"))
    label = f"[{color}]{card.rank.value}{symbol}[/{color}]"
    note = _WILD_NOTES.get(card.wild_card_type) if card.wild_card_type else None
    if note:
        label += f" [dim]({note})[/dim]"
    return label


def format_cell(cell: Cell, *, selected: bool = False, highlighted: bool = False) -> str:
    """Return the markup for one board cell."""

    if cell.is_corner:
        text = "[magenta]🃏[/magenta]"
    elif cell.chip is not None:
        marker = "■" if cell.is_capped else "●"
        text = f"[{CHIP_STYLES[cell.chip]}] {marker} [/]"
    else:
        symbol, color = _SUIT_SYMBOLS.get(cell.suit, (cell.suit.symbol, "white"))
        style = f"underline {color}" if cell.is_royal_belt else color
        text = f"[{style}]{cell.rank.value}{symbol}[/]"
    if selected:
        return f"[reverse]{text}[/reverse]"
    if highlighted:
        return f"[on grey23]{text}[/]"
    return text


def render_board(
    board: Board,
    *,
    selection: Collection[Coord] = (),
    highlights: Collection[Coord] = (),
    title: str = "Board",
) -> RenderableType:
    """Return a Rich panel showing the board with row and column indices."""

    table = Table(box=box.SIMPLE, show_edge=False, pad_edge=False, padding=(0, 1))
    table.add_column("", justify="right", style="dim")
    for col in range(board.size):
        table.add_column(str(col), justify="center")
    for row_index, row in enumerate(board.cells):
        table.add_row(
            str(row_index),
            *(
                format_cell(
                    cell,
                    selected=cell.coord in selection,
                    highlighted=cell.coord in highlights,
                )
                for cell in row
            ),
        )
    return Panel(table, title=title, border_style="cyan", box=box.ROUNDED)


def render_session(session: GameSession, *, title: str = "Quad Sequence") -> RenderableType:
    """Return a Rich panel describing the whole game session."""

    view = SessionView(session=session, card_formatter=format_card)
    return Panel(view.render(render_board), title=title, padding=(0, 1), border_style="cyan")
