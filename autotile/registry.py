"""
Algorithm Registry

Maps stable algorithm ids to TilingAlgorithm instances.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import topics
from .algorithms import (
    BSPAlgorithm,
    ColumnsAlgorithm,
    FibonacciAlgorithm,
    MasterStackAlgorithm,
    MonocleAlgorithm,
    RowsAlgorithm,
    ThreeColumnAlgorithm,
    TilingAlgorithm,
    TilingParams,
)
from .constants import (
    AUTOTILE_ID_PREFIX,
    BSP,
    COLUMNS,
    FIBONACCI,
    MASTER_STACK,
    MONOCLE,
    PREVIEW_SIZE,
    PREVIEW_WINDOW_COUNT,
    ROWS,
    THREE_COLUMN,
)
from .geometry import Rect

log = logging.getLogger(__name__)

# (priority, id, factory) - lower priority registers first
BUILT_IN_ALGORITHMS: List[Tuple[int, str, Callable[[], TilingAlgorithm]]] = [
    (10, MASTER_STACK, MasterStackAlgorithm),
    (20, COLUMNS, ColumnsAlgorithm),
    (25, ROWS, RowsAlgorithm),
    (30, BSP, BSPAlgorithm),
    (35, FIBONACCI, FibonacciAlgorithm),
    (40, MONOCLE, MonocleAlgorithm),
    (45, THREE_COLUMN, ThreeColumnAlgorithm),
]


def make_autotile_id(algorithm_id: str) -> str:
    """Layout id for an algorithm, distinct from manual layout ids."""
    return AUTOTILE_ID_PREFIX + algorithm_id


class AlgorithmRegistry:
    """Registry of tiling algorithms, in registration order.

    A process-wide instance is available through ``instance()``; tests and
    embedders can create their own. Publishes REGISTRY_ALGORITHM_REGISTERED
    and REGISTRY_ALGORITHM_UNREGISTERED.
    """

    _instance: Optional["AlgorithmRegistry"] = None

    def __init__(self, register_built_ins: bool = True):
        self._algorithms: Dict[str, TilingAlgorithm] = {}
        if register_built_ins:
            self._register_built_in_algorithms()

    @classmethod
    def instance(cls) -> "AlgorithmRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _register_built_in_algorithms(self):
        for _priority, algorithm_id, factory in sorted(
            BUILT_IN_ALGORITHMS, key=lambda entry: entry[0]
        ):
            self.register_algorithm(algorithm_id, factory())

    def register_algorithm(self, algorithm_id: str, algorithm: TilingAlgorithm) -> bool:
        """Register an algorithm, replacing any algorithm with the same id.

        A replaced entry keeps its position in the order.

        Returns:
            True if registered
        """
        from pubsub import pub

        if not algorithm_id:
            log.warning("Refusing to register an algorithm without an id")
            return False
        if algorithm is None:
            log.warning("Refusing to register None as %r", algorithm_id)
            return False

        existing_id = self._find_algorithm_id(algorithm)
        if existing_id and existing_id != algorithm_id:
            log.warning(
                "Algorithm %s is already registered as %r - cannot register as %r",
                algorithm.name,
                existing_id,
                algorithm_id,
            )
            return False

        self._algorithms[algorithm_id] = algorithm
        log.debug("Registered algorithm %r", algorithm_id)
        pub.sendMessage(topics.REGISTRY_ALGORITHM_REGISTERED, algorithm_id=algorithm_id)
        return True

    def unregister_algorithm(self, algorithm_id: str) -> bool:
        from pubsub import pub

        if self._algorithms.pop(algorithm_id, None) is None:
            return False
        log.debug("Unregistered algorithm %r", algorithm_id)
        pub.sendMessage(topics.REGISTRY_ALGORITHM_UNREGISTERED, algorithm_id=algorithm_id)
        return True

    def _find_algorithm_id(self, algorithm: TilingAlgorithm) -> str:
        for algorithm_id, registered in self._algorithms.items():
            if registered is algorithm:
                return algorithm_id
        return ""

    def algorithm(self, algorithm_id: str) -> Optional[TilingAlgorithm]:
        return self._algorithms.get(algorithm_id)

    def available_algorithms(self) -> List[str]:
        return list(self._algorithms)

    def all_algorithms(self) -> List[TilingAlgorithm]:
        return list(self._algorithms.values())

    def has_algorithm(self, algorithm_id: str) -> bool:
        return algorithm_id in self._algorithms

    @staticmethod
    def default_algorithm_id() -> str:
        return MASTER_STACK

    def default_algorithm(self) -> Optional[TilingAlgorithm]:
        return self.algorithm(self.default_algorithm_id())

    # Previews for layout pickers
    @staticmethod
    def generate_preview_zones(algorithm: Optional[TilingAlgorithm]) -> List[Dict[str, Any]]:
        """
        Lay out PREVIEW_WINDOW_COUNT windows for a thumbnail.

        Returns:
            One dict per zone with id, zoneNumber and relativeGeometry
            (fractions of the preview square)
        """
        from .tiling_state import TilingState

        if algorithm is None:
            return []

        preview_rect = Rect(0, 0, PREVIEW_SIZE, PREVIEW_SIZE)
        state = TilingState("preview")

        # BSP keeps its tree between calls; preview on a fresh instance
        if isinstance(algorithm, BSPAlgorithm):
            algorithm = BSPAlgorithm()

        zones = algorithm.calculate_zones(
            TilingParams(window_count=PREVIEW_WINDOW_COUNT, screen=preview_rect, state=state)
        )

        previews = []
        for i, zone in enumerate(zones):
            previews.append(
                {
                    "id": str(i),
                    "name": "",
                    "zoneNumber": i + 1,
                    "relativeGeometry": {
                        "x": zone.x / preview_rect.width,
                        "y": zone.y / preview_rect.height,
                        "width": zone.width / preview_rect.width,
                        "height": zone.height / preview_rect.height,
                    },
                }
            )
        return previews

    @classmethod
    def algorithm_info(cls, algorithm: Optional[TilingAlgorithm], algorithm_id: str) -> Dict[str, Any]:
        """Describe an algorithm the way layout pickers list layouts."""
        if algorithm is None:
            return {}
        return {
            "id": make_autotile_id(algorithm_id),
            "name": algorithm.name,
            "description": algorithm.description,
            "icon": algorithm.icon,
            "zoneCount": 0,
            "supportsMasterCount": algorithm.supports_master_count(),
            "supportsSplitRatio": algorithm.supports_split_ratio(),
            "defaultSplitRatio": algorithm.default_split_ratio(),
            "masterZoneIndex": algorithm.master_zone_index(),
            "defaultMaxWindows": algorithm.default_max_windows(),
            "zones": cls.generate_preview_zones(algorithm),
        }
