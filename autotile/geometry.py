"""
Geometry Types

Plain value types for screen rectangles, window minimum sizes and placements.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Tuple


@dataclass(frozen=True)
class Rect:
    """Rectangle in absolute screen coordinates."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        """First x coordinate past the right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """First y coordinate past the bottom edge."""
        return self.y + self.height

    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def area(self) -> int:
        if not self.is_valid():
            return 0
        return self.width * self.height

    def adjusted(self, dx1: int, dy1: int, dx2: int, dy2: int) -> "Rect":
        """Return a copy with each edge moved by the given offsets.

        Args:
            dx1: Offset for the left edge
            dy1: Offset for the top edge
            dx2: Offset for the right edge
            dy2: Offset for the bottom edge
        """
        return Rect(
            self.x + dx1,
            self.y + dy1,
            self.width - dx1 + dx2,
            self.height - dy1 + dy2,
        )

    def to_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class Size:
    """Width and height pair, used for window minimum sizes."""

    width: int = 0
    height: int = 0

    def is_empty(self) -> bool:
        return self.width <= 0 and self.height <= 0


class WindowPlacement(NamedTuple):
    """One entry of the batched geometry notification."""

    window_id: str
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_rect(cls, window_id: str, rect: Rect) -> "WindowPlacement":
        return cls(window_id, rect.x, rect.y, rect.width, rect.height)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)
