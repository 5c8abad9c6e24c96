"""
autotile

Multi-monitor automatic tiling engine.

This package provides:
- Per-screen tiling state (window order, master area, floating, focus)
- Tiling algorithms (master + stack, columns, rows, BSP, fibonacci,
  monocle, three column) and an algorithm registry
- Minimum-size enforcement for computed zones
- An engine that reacts to window events on the event bus and publishes
  window placements

Example usage:
    from pubsub import pub
    from autotile import AutotileEngine, Rect, StaticScreenProvider, topics

    screens = StaticScreenProvider({"DP-1": Rect(0, 0, 1920, 1080)})
    engine = AutotileEngine(pub, screens)
    engine.enable_screen("DP-1")
    pub.sendMessage(topics.WINDOW_OPENED, window_id="term", screen_name="DP-1",
                    min_width=0, min_height=0)

Or preview a layout:
    python -m autotile --algorithm bsp --windows 4
"""

__version__ = "0.1.0"

from . import topics
from .geometry import Rect, Size, WindowPlacement
from .tiling_state import TilingState
from .algorithms import (
    TilingAlgorithm,
    TilingParams,
    MasterStackAlgorithm,
    ColumnsAlgorithm,
    RowsAlgorithm,
    BSPAlgorithm,
    FibonacciAlgorithm,
    MonocleAlgorithm,
    ThreeColumnAlgorithm,
    enforce_window_min_sizes,
)
from .registry import AlgorithmRegistry, make_autotile_id
from .config import AutotileConfig, InsertPosition
from .settings import SettingPolicy, SettingsSnapshot
from .screens import ScreenProvider, StaticScreenProvider
from .timer import DebounceTimer
from .engine import AutotileEngine

__all__ = [
    "topics",
    # Geometry
    "Rect",
    "Size",
    "WindowPlacement",
    # State
    "TilingState",
    # Algorithms
    "TilingAlgorithm",
    "TilingParams",
    "MasterStackAlgorithm",
    "ColumnsAlgorithm",
    "RowsAlgorithm",
    "BSPAlgorithm",
    "FibonacciAlgorithm",
    "MonocleAlgorithm",
    "ThreeColumnAlgorithm",
    "enforce_window_min_sizes",
    "AlgorithmRegistry",
    "make_autotile_id",
    # Configuration
    "AutotileConfig",
    "InsertPosition",
    "SettingPolicy",
    "SettingsSnapshot",
    # Engine
    "ScreenProvider",
    "StaticScreenProvider",
    "DebounceTimer",
    "AutotileEngine",
]
