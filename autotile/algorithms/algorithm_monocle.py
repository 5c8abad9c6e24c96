"""
Monocle Algorithm

All windows full size and stacked - the engine decides which one is shown.
"""

from __future__ import annotations
from typing import List

from .algorithm_base import TilingAlgorithm, TilingParams
from ..geometry import Rect


class MonocleAlgorithm(TilingAlgorithm):
    """
    Monocle layout - every window gets the whole usable area.

    Hiding the windows that are not shown is the engine's job (see the
    monocle visibility notification); this algorithm only sizes them.
    """

    @property
    def name(self) -> str:
        return "Monocle"

    @property
    def description(self) -> str:
        return "Single fullscreen window, others hidden"

    @property
    def icon(self) -> str:
        return "view-fullscreen"

    def master_zone_index(self) -> int:
        return -1

    def default_max_windows(self) -> int:
        return 10

    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        if params.window_count <= 0 or not params.screen.is_valid():
            return []

        area = self.inner_rect(params.screen, params.outer_gap)
        return [area] * params.window_count
