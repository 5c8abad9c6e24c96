"""
Fibonacci Algorithm

Dwindle subdivision: each window takes part of what is left and hands the
rest on, alternating between left/right and top/bottom splits.
"""

from __future__ import annotations
from typing import List

from .algorithm_base import TilingAlgorithm, TilingParams
from ..constants import MAX_SPLIT_RATIO, MIN_SPLIT_RATIO, MIN_ZONE_SIZE_PX
from ..geometry import Rect


class FibonacciAlgorithm(TilingAlgorithm):
    """
    Dwindle layout.

    Window i takes ``split_ratio`` of the remaining region; the remainder
    moves right (after a left/right split) or down (after a top/bottom
    split). When the remaining region gets too small to split, the windows
    still waiting share it evenly.
    """

    @property
    def name(self) -> str:
        return "Fibonacci"

    @property
    def description(self) -> str:
        return "Dwindle subdivision with alternating splits"

    @property
    def icon(self) -> str:
        return "shape-spiral"

    def master_zone_index(self) -> int:
        return -1

    def supports_split_ratio(self) -> bool:
        return True

    def default_split_ratio(self) -> float:
        return 0.5

    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        count = params.window_count
        if count <= 0 or not params.screen.is_valid() or params.state is None:
            return []

        area = self.inner_rect(params.screen, params.outer_gap)
        if count == 1:
            return [area]

        gap = params.inner_gap
        min_sizes = params.min_sizes
        ratio = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, params.state.split_ratio))

        # Lower bounds on what windows i.. still need, gaps included
        remaining_min_w = [0] * (count + 1)
        remaining_min_h = [0] * (count + 1)
        if min_sizes:
            for i in range(count - 1, -1, -1):
                mw = self.min_width_at(min_sizes, i)
                mh = self.min_height_at(min_sizes, i)
                rest_w = remaining_min_w[i + 1]
                rest_h = remaining_min_h[i + 1]
                remaining_min_w[i] = mw + (gap + rest_w if rest_w > 0 else 0)
                remaining_min_h[i] = mh + (gap + rest_h if rest_h > 0 else 0)

        zones: List[Rect] = []
        remaining = area
        split_vertical = True

        for i in range(count):
            content = (remaining.width if split_vertical else remaining.height) - gap
            if (
                i == count - 1
                or remaining.width < MIN_ZONE_SIZE_PX
                or remaining.height < MIN_ZONE_SIZE_PX
                or content < 2
            ):
                zones.extend(self._fill_remaining(remaining, count - i, gap))
                break

            if split_vertical:
                size = int(content * ratio)
                if self.min_width_at(min_sizes, i) > 0:
                    size = max(size, self.min_width_at(min_sizes, i))
                if remaining_min_w[i + 1] > 0:
                    size = min(size, content - remaining_min_w[i + 1])
                size = max(1, min(size, content - 1))

                zones.append(Rect(remaining.x, remaining.y, size, remaining.height))
                remaining = Rect(
                    remaining.x + size + gap,
                    remaining.y,
                    content - size,
                    remaining.height,
                )
            else:
                size = int(content * ratio)
                if self.min_height_at(min_sizes, i) > 0:
                    size = max(size, self.min_height_at(min_sizes, i))
                if remaining_min_h[i + 1] > 0:
                    size = min(size, content - remaining_min_h[i + 1])
                size = max(1, min(size, content - 1))

                zones.append(Rect(remaining.x, remaining.y, remaining.width, size))
                remaining = Rect(
                    remaining.x,
                    remaining.y + size + gap,
                    remaining.width,
                    content - size,
                )

            split_vertical = not split_vertical

        return zones

    def _fill_remaining(self, remaining: Rect, count: int, gap: int) -> List[Rect]:
        """Share the leftover region among count windows along its longer axis.

        Only as many zones as fit at MIN_ZONE_SIZE_PX are laid out; any
        windows beyond that share the last zone.
        """
        if count <= 1:
            return [remaining]

        horizontal = remaining.width >= remaining.height
        length = remaining.width if horizontal else remaining.height
        fit = min(count, max(1, length // MIN_ZONE_SIZE_PX))
        sizes = self.distribute_with_gaps(length, fit, gap)

        zones = []
        offset = remaining.x if horizontal else remaining.y
        for size in sizes:
            if horizontal:
                zones.append(Rect(offset, remaining.y, size, remaining.height))
            else:
                zones.append(Rect(remaining.x, offset, remaining.width, size))
            offset += size + gap

        zones.extend([zones[-1]] * (count - fit))
        return zones
