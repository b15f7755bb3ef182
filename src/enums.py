"""Contains all global enumeration classes used throughout the project."""

from __future__ import annotations

from enum import Enum


class Direction(Enum):
    """Defines the cardinal directions used for pattern adjacency and propagation."""

    LEFT = 0
    """Left direction."""
    RIGHT = 1
    """Right direction."""
    UP = 2
    """Upward direction."""
    DOWN = 3
    """Downward direction."""

    def reverse(self) -> Direction:
        """Returns the opposite direction of the current direction."""
        match self:
            case Direction.LEFT:
                return Direction.RIGHT
            case Direction.RIGHT:
                return Direction.LEFT
            case Direction.UP:
                return Direction.DOWN
            case Direction.DOWN:
                return Direction.UP

    def to_vector(self) -> tuple[int, int]:
        """Returns the (row, col) offset of the neighbor lying in this direction."""
        match self:
            case Direction.LEFT:
                return (0, -1)
            case Direction.RIGHT:
                return (0, 1)
            case Direction.UP:
                return (-1, 0)
            case Direction.DOWN:
                return (1, 0)


class WaveState(Enum):
    """Defines the lifecycle states of a wave model."""

    RUNNING = "Running"
    """The wave still contains uncollapsed cells and no contradiction has been found."""
    SOLVED = "Solved"
    """Every cell of the wave holds exactly one pattern."""
    CONTRADICTION = "Contradiction"
    """Some cell of the wave lost all of its possible patterns."""


class MapDifficulty(Enum):
    """Defines the difficulty labels assigned to generated tilemaps."""

    EASY = 0
    """Few hazard tiles (at most two)."""
    MEDIUM = 1
    """A moderate amount of hazard tiles (at most six)."""
    HARD = 2
    """Many hazard tiles."""
