"""
Tiling Algorithm Base Classes

Provides the TilingAlgorithm interface and the space-distribution helpers
shared by all algorithms.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

from ..constants import DEFAULT_SPLIT_RATIO
from ..geometry import Rect, Size

if TYPE_CHECKING:
    from ..tiling_state import TilingState


@dataclass
class TilingParams:
    """Inputs to TilingAlgorithm.calculate_zones()."""

    window_count: int
    screen: Rect
    state: Optional["TilingState"] = None
    inner_gap: int = 0
    outer_gap: int = 0
    # One entry per tiled window, in tiled order; empty when not enforced
    min_sizes: List[Size] = field(default_factory=list)


class TilingAlgorithm(ABC):
    """Abstract base class for tiling algorithms.

    An algorithm turns a window count and a screen rectangle into exactly
    one zone per window, in absolute coordinates. Algorithms read master
    count and split ratio from the state but never modify it.

    Algorithms that keep layout state between calls (BSP's split tree) are
    not safe for concurrent calculate_zones() calls on the same instance.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Algorithm name for display."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line description for tooltips."""
        pass

    @property
    @abstractmethod
    def icon(self) -> str:
        """Icon name for UI display."""
        pass

    @abstractmethod
    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        """
        Calculate zone geometries for a number of windows.

        Args:
            params: Window count, screen rectangle, state, gaps and minimum sizes

        Returns:
            Exactly params.window_count rectangles (empty for 0 windows or an
            invalid screen). A single window gets the screen inset by the
            outer gap.
        """
        pass

    # Capabilities (with default implementations)
    def master_zone_index(self) -> int:
        """Index of the master zone, or -1 if the algorithm has no master."""
        return 0

    def supports_master_count(self) -> bool:
        return False

    def supports_split_ratio(self) -> bool:
        return False

    def default_split_ratio(self) -> float:
        return DEFAULT_SPLIT_RATIO

    def minimum_windows(self) -> int:
        """Smallest window count for which the layout is meaningful."""
        return 1

    def default_max_windows(self) -> int:
        return 5

    # Shared helpers
    @staticmethod
    def distribute_evenly(total: int, count: int) -> List[int]:
        """Split total into count parts that differ by at most one pixel.

        The remainder goes to the first parts, so the result always sums to
        total: distribute_evenly(100, 3) == [34, 33, 33].
        """
        if count <= 0:
            return []
        total = max(0, total)
        base, remainder = divmod(total, count)
        return [base + 1 if i < remainder else base for i in range(count)]

    @staticmethod
    def distribute_with_gaps(total: int, count: int, gap: int) -> List[int]:
        """Split total into count parts separated by gap pixels.

        The caller positions the parts with gap spacing between them.
        """
        if count <= 0:
            return []
        available = total - (count - 1) * max(0, gap)
        if available < count:
            return [1] * count
        return TilingAlgorithm.distribute_evenly(available, count)

    @staticmethod
    def distribute_with_min_sizes(
        total: int, count: int, gap: int, min_sizes: Sequence[int]
    ) -> List[int]:
        """Split total into count gap-separated parts honoring minimum sizes.

        When the minimums fit, each part gets its minimum plus an even share
        of the surplus. When they don't, space is shared in proportion to the
        minimums (every part weighs at least 1).

        Args:
            total: Pixels available, including the gaps
            count: Number of parts
            gap: Pixels between neighbouring parts
            min_sizes: Minimum per part; missing entries count as 0
        """
        if count <= 0:
            return []
        available = total - (count - 1) * max(0, gap)
        if available < count:
            return [1] * count

        mins = [
            max(0, min_sizes[i]) if i < len(min_sizes) else 0 for i in range(count)
        ]
        total_min = sum(mins)

        if total_min <= available:
            extra = TilingAlgorithm.distribute_evenly(available - total_min, count)
            return [m + e for m, e in zip(mins, extra)]

        weights = [max(m, 1) for m in mins]
        total_weight = sum(weights)
        sizes = [max(1, available * w // total_weight) for w in weights]
        # Hand out rounding leftovers from the front
        leftover = available - sum(sizes)
        while leftover < 0:
            largest = sizes.index(max(sizes))
            sizes[largest] -= 1
            leftover += 1
        i = 0
        while leftover > 0:
            sizes[i % count] += 1
            leftover -= 1
            i += 1
        return sizes

    @staticmethod
    def inner_rect(screen: Rect, outer_gap: int) -> Rect:
        """Screen area inset by the outer gap, never smaller than 1x1.

        A gap too large for the screen collapses that axis to a 1px strip in
        the middle of the screen.
        """
        gap = max(0, outer_gap)
        x, width = screen.x + gap, screen.width - 2 * gap
        if width < 1:
            x, width = screen.x + max(0, (screen.width - 1) // 2), 1
        y, height = screen.y + gap, screen.height - 2 * gap
        if height < 1:
            y, height = screen.y + max(0, (screen.height - 1) // 2), 1
        return Rect(x, y, width, height)

    @staticmethod
    def min_width_at(min_sizes: Sequence[Size], index: int) -> int:
        if 0 <= index < len(min_sizes):
            return max(0, min_sizes[index].width)
        return 0

    @staticmethod
    def min_height_at(min_sizes: Sequence[Size], index: int) -> int:
        if 0 <= index < len(min_sizes):
            return max(0, min_sizes[index].height)
        return 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def solve_two_widths(content: int, ratio: float, min_first: int, min_second: int):
    """Split content between two columns by ratio, then honor minimum widths.

    If both minimums can't fit, the columns share the space in proportion
    to their minimums. Neither column is ever narrower than 1px.

    Returns:
        (first_width, second_width), summing to content whenever content >= 2
    """
    if content < 2:
        return 1, 1

    first = int(content * ratio)
    second = content - first

    total_min = max(min_first, 0) + max(min_second, 0)
    if total_min > content and total_min > 0:
        first = content * max(min_first, 1) // total_min
        second = content - first
    else:
        if min_first > 0 and first < min_first:
            first = min_first
            second = content - first
        if min_second > 0 and second < min_second:
            second = min_second
            first = content - second
    first = max(1, min(content - 1, first))
    return first, content - first


def stack_vertically(
    x: int, y: int, width: int, heights: Sequence[int], gap: int
) -> List[Rect]:
    zones = []
    for height in heights:
        zones.append(Rect(x, y, width, height))
        y += height + gap
    return zones


def stack_horizontally(
    x: int, y: int, widths: Sequence[int], height: int, gap: int
) -> List[Rect]:
    zones = []
    for width in widths:
        zones.append(Rect(x, y, width, height))
        x += width + gap
    return zones
