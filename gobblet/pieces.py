"""
Players, piece sizes and pieces.

A piece is a plain (owner, size) value. Two pieces with the same owner and
size are interchangeable: the engine only ever counts them, it never tracks
which physical piece is which.
"""

from enum import IntEnum
from typing import NamedTuple


class Player(IntEnum):
    """The two sides. The integer value indexes per-player reserve tuples."""

    ORANGE = 0
    BLUE = 1

    def opponent(self) -> "Player":
        """Return the other side."""
        return Player.BLUE if self is Player.ORANGE else Player.ORANGE

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Size(IntEnum):
    """Piece sizes. Integer order is the covering order: SMALL < MEDIUM < LARGE."""

    SMALL = 1
    MEDIUM = 2
    LARGE = 3


class Piece(NamedTuple):
    owner: Player
    size: Size

    def covers(self, other: "Piece | None") -> bool:
        """
        True if this piece may be stacked on a square whose top is `other`.

        An empty square (other is None) accepts any piece; otherwise the
        incoming piece must be strictly larger than the current top.
        """
        return other is None or self.size > other.size
