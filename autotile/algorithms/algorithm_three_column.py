"""
Three Column Algorithm

Master window centered with the other windows alternating between a left
and a right column.
"""

from __future__ import annotations
from typing import List, Tuple

from .algorithm_base import (
    TilingAlgorithm,
    TilingParams,
    solve_two_widths,
    stack_horizontally,
)
from ..constants import MAX_SPLIT_RATIO, MIN_SPLIT_RATIO, MIN_ZONE_SIZE_PX
from ..geometry import Rect


class ThreeColumnAlgorithm(TilingAlgorithm):
    """
    Centered master layout for wide screens.

    Zone order is center (master), left 1, right 1, left 2, right 2, ...
    The split ratio is the center column's share of the content width; the
    side columns split the rest evenly and never drop below
    MIN_ZONE_SIZE_PX (or the widest minimum of their windows).
    """

    @property
    def name(self) -> str:
        return "Three Column"

    @property
    def description(self) -> str:
        return "Center master with side columns"

    @property
    def icon(self) -> str:
        return "view-column-three"

    def master_zone_index(self) -> int:
        return 0

    def supports_split_ratio(self) -> bool:
        return True

    def default_split_ratio(self) -> float:
        # Center gets 50%
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
        state_ratio = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, params.state.split_ratio))

        # Too narrow for three columns
        if count >= 3 and area.width < 3 * MIN_ZONE_SIZE_PX:
            widths = self.distribute_with_gaps(area.width, count, gap)
            return stack_horizontally(area.x, area.y, widths, area.height, gap)

        if count == 2:
            master_width, stack_width = solve_two_widths(
                max(1, area.width - gap),
                state_ratio,
                self.min_width_at(min_sizes, 0),
                self.min_width_at(min_sizes, 1),
            )
            return stack_horizontally(
                area.x, area.y, [master_width, stack_width], area.height, gap
            )

        content = max(1, area.width - 2 * gap)
        stack_count = count - 1
        left_count = (stack_count + 1) // 2
        right_count = stack_count - left_count

        # Zone 1, 3, 5, ... go left; zone 2, 4, 6, ... go right
        left_zones = [1 + 2 * k for k in range(left_count)]
        right_zones = [2 + 2 * k for k in range(right_count)]

        min_center = self.min_width_at(min_sizes, 0)
        min_left = max((self.min_width_at(min_sizes, z) for z in left_zones), default=0)
        min_right = max((self.min_width_at(min_sizes, z) for z in right_zones), default=0)

        left_width, center_width, right_width = self._column_widths(
            content, state_ratio, min_left, min_center, min_right
        )

        left_x = area.x
        center_x = left_x + left_width + gap
        right_x = center_x + center_width + gap

        left_heights = self._column_heights(area.height, left_zones, gap, min_sizes)
        right_heights = self._column_heights(area.height, right_zones, gap, min_sizes)

        zones = [Rect(center_x, area.y, center_width, area.height)]
        left_y = right_y = area.y
        for i in range(stack_count):
            if i % 2 == 0:
                height = left_heights[i // 2]
                zones.append(Rect(left_x, left_y, left_width, height))
                left_y += height + gap
            else:
                height = right_heights[i // 2]
                zones.append(Rect(right_x, right_y, right_width, height))
                right_y += height + gap
        return zones

    @staticmethod
    def _column_widths(
        content: int, ratio: float, min_left: int, min_center: int, min_right: int
    ) -> Tuple[int, int, int]:
        side_floor = max(MIN_ZONE_SIZE_PX, min_left, min_right)
        max_center = min(MAX_SPLIT_RATIO, 1.0 - 2.0 * side_floor / content)
        center_ratio = max(MIN_SPLIT_RATIO, min(max(MIN_SPLIT_RATIO, max_center), ratio))
        if min_center > 0:
            center_ratio = max(center_ratio, min(min_center / content, max_center))

        side_ratio = (1.0 - center_ratio) / 2.0
        left = int(content * side_ratio)
        center = int(content * center_ratio)
        right = content - left - center

        total_min = min_left + min_center + min_right
        if total_min > content:
            weights = (max(min_left, 1), max(min_center, 1), max(min_right, 1))
            left = content * weights[0] // sum(weights)
            center = content * weights[1] // sum(weights)
            right = content - left - center
            return left, center, right

        if min_left > 0 and left < min_left:
            deficit = min_left - left
            left = min_left
            center -= max(0, min(deficit, center - max(min_center, 1)))
            right = content - left - center
        if min_right > 0 and right < min_right:
            deficit = min_right - right
            right = min_right
            center -= max(0, min(deficit, center - max(min_center, 1)))
            left = content - right - center
        return left, center, right

    def _column_heights(self, total, zone_indexes, gap, min_sizes) -> List[int]:
        if not zone_indexes:
            return []
        if not min_sizes:
            return self.distribute_with_gaps(total, len(zone_indexes), gap)
        mins = [self.min_height_at(min_sizes, z) for z in zone_indexes]
        return self.distribute_with_min_sizes(total, len(zone_indexes), gap, mins)
