"""
Columns Algorithm

Windows side by side in equal-width columns.
"""

from __future__ import annotations
from typing import List

from .algorithm_base import TilingAlgorithm, TilingParams, stack_horizontally
from ..geometry import Rect


class ColumnsAlgorithm(TilingAlgorithm):
    """Equal-width vertical columns, widened where windows need it."""

    @property
    def name(self) -> str:
        return "Columns"

    @property
    def description(self) -> str:
        return "Equal-width vertical columns"

    @property
    def icon(self) -> str:
        return "view-split-left-right"

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
            mins = [self.min_width_at(params.min_sizes, i) for i in range(count)]
            widths = self.distribute_with_min_sizes(
                area.width, count, params.inner_gap, mins
            )
        else:
            widths = self.distribute_with_gaps(area.width, count, params.inner_gap)

        return stack_horizontally(area.x, area.y, widths, area.height, params.inner_gap)
