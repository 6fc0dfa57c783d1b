"""Top-level package for the Quad Sequence rules engine."""

from . import actions, board, cards, rules, scoring, session, state

__all__ = [
    "actions",
    "board",
    "cards",
    "rules",
    "scoring",
    "session",
    "state",
]
