"""
Shared type definitions for the streetgrid system.
"""

from __future__ import annotations

from enum import Enum

MAP_WIDTH = 10
MAP_HEIGHT = 5

# Entropy of a tile is at most 4, so this means "nothing left to collapse"
NO_CANDIDATE = 5


class Direction(Enum):
    """Cardinal direction of a tile edge."""

    N = "N"  # Up (decreasing y)
    S = "S"  # Down (increasing y)
    E = "E"  # Right (increasing x)
    W = "W"  # Left (decreasing x)


# Canonical iteration order
DIRECTIONS: tuple[Direction, ...] = (Direction.N, Direction.S, Direction.E, Direction.W)

_DELTAS = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
}

_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}


def delta(direction: Direction) -> tuple[int, int]:
    """Return the (dx, dy) step for a direction."""
    try:
        return _DELTAS[direction]
    except KeyError:
        raise ValueError(f"No such direction: {direction!r}") from None


def opposite(direction: Direction) -> Direction:
    """Return the direction facing back across the same edge."""
    try:
        return _OPPOSITES[direction]
    except KeyError:
        raise ValueError(f"No such direction: {direction!r}") from None


class Edge(Enum):
    """Tri-state value of a tile edge."""

    UNKNOWN = "?"
    OPEN = "o"  # Road continues across this edge
    CLOSED = "x"  # No road

    @classmethod
    def of(cls, value: bool) -> Edge:
        return cls.OPEN if value else cls.CLOSED

    @property
    def resolved(self) -> bool:
        return self is not Edge.UNKNOWN


class Role(Enum):
    """What a tile stands for on the map."""

    NORMAL = "normal"
    START = "start"  # Point of entry, on the west edge
    HOME = "home"  # Destination hub, on the east edge
