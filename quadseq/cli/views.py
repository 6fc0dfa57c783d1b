"""Composable view primitives for the Quad Sequence CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import Card
from ..scoring import capped_counts
from ..session import GameSession

BoardRenderer = Callable[..., RenderableType]


@dataclass(slots=True)
class SessionView:
    """Renderable summarising the current game session."""

    session: GameSession
    card_formatter: Callable[[Card], str]

    def _hand_markup(self, cards: list[Card], visible: bool) -> str:
        if not visible:
            return f"{len(cards)} cards"
        if not cards:
            return "—"
        return "  ".join(
            f"[dim]{idx}:[/dim]{self.card_formatter(card)}" for idx, card in enumerate(cards, start=1)
        )

    def _metadata_panel(self) -> Panel:
        session = self.session
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_row(f"[cyan]Game[/cyan]: {session.games_started}")
        grid.add_row(f"[cyan]Deck[/cyan]: {len(session.deck)} card(s)")
        if session.discard_pile:
            top_card = self.card_formatter(session.discard_pile[-1])
            grid.add_row(f"[cyan]Discard[/cyan]: {top_card} ({len(session.discard_pile)} card(s))")
        else:
            grid.add_row("[cyan]Discard[/cyan]: —")
        burned = "yes" if session.has_burned_this_turn else "no"
        grid.add_row(f"[cyan]Burned this turn[/cyan]: {burned}")
        if session.cap_mode is not None:
            picked = ", ".join(f"{r},{c}" for r, c in session.cap_mode.selection) or "—"
            grid.add_row(f"[yellow]Cap mode[/yellow]: {session.cap_mode.color.value} [{picked}]")
        return Panel(grid, title="Table State", box=box.SQUARE, border_style="blue")

    def render(self, board_renderer: BoardRenderer) -> RenderableType:
        session = self.session
        counts = capped_counts(session.capped_scores)

        table = Table(box=box.ROUNDED, expand=True)
        table.add_column("Player", justify="left", style="bold")
        table.add_column("Hand", justify="left")
        table.add_column("Scores", justify="right")
        table.add_column("Status", justify="left")

        for player in session.players:
            active = player.color == session.current_color
            name = player.color.value.title()
            if active:
                name = f"[bold yellow]{name}[/bold yellow]"
            status = "To play" if active else ""
            if session.winner == player.color:
                status = "[bold green]Winner[/bold green]"
            table.add_row(
                name,
                self._hand_markup(player.hand.cards, active),
                f"{counts.get(player.color, 0)}/{session.config.score_to_win}",
                status,
            )

        selection = session.cap_mode.selection if session.cap_mode is not None else ()
        highlights: set[tuple[int, int]] = set()
        if session.cap_mode is not None:
            for score in session.cappable_scores(session.cap_mode.color):
                highlights.update(score.cells)

        return Group(
            board_renderer(session.board, selection=selection, highlights=highlights),
            table,
            self._metadata_panel(),
        )
