"""
Tiling Algorithms

Provides the tiling algorithm interface and the built-in algorithms.
"""

from .algorithm_base import TilingAlgorithm, TilingParams
from .algorithm_master_stack import MasterStackAlgorithm
from .algorithm_columns import ColumnsAlgorithm
from .algorithm_rows import RowsAlgorithm
from .algorithm_bsp import BSPAlgorithm
from .algorithm_fibonacci import FibonacciAlgorithm
from .algorithm_monocle import MonocleAlgorithm
from .algorithm_three_column import ThreeColumnAlgorithm
from .min_size import enforce_window_min_sizes

__all__ = [
    # Base classes
    "TilingAlgorithm",
    "TilingParams",
    # Algorithm implementations
    "MasterStackAlgorithm",
    "ColumnsAlgorithm",
    "RowsAlgorithm",
    "BSPAlgorithm",
    "FibonacciAlgorithm",
    "MonocleAlgorithm",
    "ThreeColumnAlgorithm",
    # Post-processing
    "enforce_window_min_sizes",
]
