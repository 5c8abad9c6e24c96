"""
Master + Stack Algorithm

Master window(s) in a column on the left, remaining windows stacked on the right.
"""

from __future__ import annotations
from typing import List

from .algorithm_base import (
    TilingAlgorithm,
    TilingParams,
    solve_two_widths,
    stack_vertically,
)
from ..constants import DEFAULT_SPLIT_RATIO, MAX_SPLIT_RATIO, MIN_SPLIT_RATIO
from ..geometry import Rect


class MasterStackAlgorithm(TilingAlgorithm):
    """
    Classic dwm-style master/stack layout.

    The first ``master_count`` windows share a column whose width is
    ``split_ratio`` of the content width; the rest share the other column.
    Both columns are split into evenly sized rows.
    """

    @property
    def name(self) -> str:
        return "Master + Stack"

    @property
    def description(self) -> str:
        return "Large master area with stacked secondary windows"

    @property
    def icon(self) -> str:
        return "view-left-close"

    def supports_master_count(self) -> bool:
        return True

    def supports_split_ratio(self) -> bool:
        return True

    def default_split_ratio(self) -> float:
        return DEFAULT_SPLIT_RATIO

    def default_max_windows(self) -> int:
        # 1 master + 3 stack
        return 4

    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        count = params.window_count
        if count <= 0 or not params.screen.is_valid() or params.state is None:
            return []

        area = self.inner_rect(params.screen, params.outer_gap)
        if count == 1:
            return [area]

        gap = params.inner_gap
        min_sizes = params.min_sizes
        state = params.state

        master_count = max(1, min(state.master_count, count))
        stack_count = count - master_count
        ratio = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, state.split_ratio))

        if stack_count == 0:
            master_width, stack_width = area.width, 0
        else:
            min_master = max(
                (self.min_width_at(min_sizes, i) for i in range(master_count)),
                default=0,
            )
            min_stack = max(
                (self.min_width_at(min_sizes, i) for i in range(master_count, count)),
                default=0,
            )
            master_width, stack_width = solve_two_widths(
                area.width - gap, ratio, min_master, min_stack
            )

        zones = stack_vertically(
            area.x,
            area.y,
            master_width,
            self._column_heights(area.height, 0, master_count, gap, min_sizes),
            gap,
        )
        if stack_count > 0:
            zones.extend(
                stack_vertically(
                    area.x + master_width + gap,
                    area.y,
                    stack_width,
                    self._column_heights(
                        area.height, master_count, stack_count, gap, min_sizes
                    ),
                    gap,
                )
            )
        return zones

    def _column_heights(self, total, first, count, gap, min_sizes) -> List[int]:
        if not min_sizes:
            return self.distribute_with_gaps(total, count, gap)
        mins = [self.min_height_at(min_sizes, first + i) for i in range(count)]
        return self.distribute_with_min_sizes(total, count, gap, mins)
