"""
Rows Algorithm

Windows stacked top to bottom in equal-height rows.
"""

from __future__ import annotations
from typing import List

from .algorithm_base import TilingAlgorithm, TilingParams, stack_vertically
from ..geometry import Rect


class RowsAlgorithm(TilingAlgorithm):
    """Equal-height horizontal rows. Suited to portrait screens."""

    @property
    def name(self) -> str:
        return "Rows"

    @property
    def description(self) -> str:
        return "Equal-height horizontal rows"

    @property
    def icon(self) -> str:
        return "view-split-top-bottom"

    def master_zone_index(self) -> int:
        return -1

    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        count = params.window_count
        if count <= 0 or not params.screen.is_valid():
            return []

        area = self.inner_rect(params.screen, params.outer_gap)
        if count == 1:
            return [area]

        if params.min_sizes:
            mins = [self.min_height_at(params.min_sizes, i) for i in range(count)]
            heights = self.distribute_with_min_sizes(
                area.height, count, params.inner_gap, mins
            )
        else:
            heights = self.distribute_with_gaps(area.height, count, params.inner_gap)

        return stack_vertically(area.x, area.y, area.width, heights, params.inner_gap)
