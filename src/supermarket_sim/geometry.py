from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Direction(Enum):
    """Cardinal directions. Values are (dx, dy) offsets; y grows southward."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """Accept full names or their first letter, case-insensitive."""
        key = text.strip().upper()
        for member in cls:
            if member.name == key or member.name[0] == key:
                return member
        raise ValueError(f"Unknown direction: {text!r}")


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def step(self, direction: Direction) -> "Point":
        """Return the adjacent point. Bounds are the grid's concern."""
        dx, dy = direction.delta
        return Point(self.x + dx, self.y + dy)

    def as_tuple(self) -> Tuple[int, int]:
        return self.x, self.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


__all__ = ["Direction", "Point"]
