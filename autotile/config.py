"""
Autotile Configuration

Algorithm choice and tunables, clamped on every write.
"""

from __future__ import annotations
import copy
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .constants import (
    DEFAULT_GAP,
    DEFAULT_MASTER_COUNT,
    DEFAULT_SPLIT_RATIO,
    MASTER_STACK,
    MAX_GAP,
    MAX_MASTER_COUNT,
    MAX_SPLIT_RATIO,
    MIN_GAP,
    MIN_MASTER_COUNT,
    MIN_SPLIT_RATIO,
)

log = logging.getLogger(__name__)


class InsertPosition(Enum):
    """Where a newly tracked window goes in the window order."""

    END = "end"
    AFTER_FOCUSED = "afterFocused"
    AS_MASTER = "asMaster"


# Boolean fields accepted by set_flag(), with their JSON keys
FLAG_FIELDS = {
    "focus_follows_mouse": "focusFollowsMouse",
    "focus_new_windows": "focusNewWindows",
    "monocle_hide_others": "monocleHideOthers",
    "monocle_show_tabs": "monocleShowTabs",
    "smart_gaps": "smartGaps",
    "respect_minimum_size": "respectMinimumSize",
}


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass(eq=False)
class AutotileConfig:
    """Autotile configuration.

    Values passed to the constructor are clamped in ``__post_init__``. Use the
    ``set_*`` methods for later changes: they clamp too, and report whether
    the stored value actually changed.
    """

    algorithm_id: str = MASTER_STACK

    # Master area
    split_ratio: float = DEFAULT_SPLIT_RATIO
    master_count: int = DEFAULT_MASTER_COUNT

    # Gaps in pixels
    inner_gap: int = DEFAULT_GAP
    outer_gap: int = DEFAULT_GAP

    insert_position: InsertPosition = InsertPosition.END

    # Focus behaviour
    focus_follows_mouse: bool = False
    focus_new_windows: bool = True

    # Monocle behaviour
    monocle_hide_others: bool = True
    monocle_show_tabs: bool = False

    # No gaps when only one window is tiled
    smart_gaps: bool = True
    respect_minimum_size: bool = True

    def __post_init__(self):
        """Clamp numeric fields and coerce the insert position."""
        if not self.algorithm_id:
            self.algorithm_id = MASTER_STACK
        self.split_ratio = _clamp(float(self.split_ratio), MIN_SPLIT_RATIO, MAX_SPLIT_RATIO)
        self.master_count = _clamp(int(self.master_count), MIN_MASTER_COUNT, MAX_MASTER_COUNT)
        self.inner_gap = _clamp(int(self.inner_gap), MIN_GAP, MAX_GAP)
        self.outer_gap = _clamp(int(self.outer_gap), MIN_GAP, MAX_GAP)
        self.insert_position = parse_insert_position(self.insert_position)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AutotileConfig):
            return NotImplemented
        return (
            self.algorithm_id == other.algorithm_id
            and math.isclose(self.split_ratio, other.split_ratio, abs_tol=1e-9)
            and self.master_count == other.master_count
            and self.inner_gap == other.inner_gap
            and self.outer_gap == other.outer_gap
            and self.insert_position == other.insert_position
            and all(getattr(self, f) == getattr(other, f) for f in FLAG_FIELDS)
        )

    @classmethod
    def defaults(cls) -> "AutotileConfig":
        return cls()

    def copy(self) -> "AutotileConfig":
        return copy.copy(self)

    # Clamping setters
    def set_algorithm_id(self, algorithm_id: str) -> bool:
        if not algorithm_id or algorithm_id == self.algorithm_id:
            return False
        self.algorithm_id = algorithm_id
        return True

    def set_split_ratio(self, ratio: float) -> bool:
        ratio = _clamp(float(ratio), MIN_SPLIT_RATIO, MAX_SPLIT_RATIO)
        if math.isclose(ratio, self.split_ratio, abs_tol=1e-9):
            return False
        self.split_ratio = ratio
        return True

    def set_master_count(self, count: int) -> bool:
        count = _clamp(int(count), MIN_MASTER_COUNT, MAX_MASTER_COUNT)
        if count == self.master_count:
            return False
        self.master_count = count
        return True

    def set_inner_gap(self, gap: int) -> bool:
        gap = _clamp(int(gap), MIN_GAP, MAX_GAP)
        if gap == self.inner_gap:
            return False
        self.inner_gap = gap
        return True

    def set_outer_gap(self, gap: int) -> bool:
        gap = _clamp(int(gap), MIN_GAP, MAX_GAP)
        if gap == self.outer_gap:
            return False
        self.outer_gap = gap
        return True

    def set_insert_position(self, position) -> bool:
        position = parse_insert_position(position)
        if position == self.insert_position:
            return False
        self.insert_position = position
        return True

    def set_flag(self, name: str, value: bool) -> bool:
        """Set one of the boolean feature flags by field name."""
        if name not in FLAG_FIELDS:
            raise ValueError(f"Unknown autotile flag: {name}")
        value = bool(value)
        if getattr(self, name) == value:
            return False
        setattr(self, name, value)
        return True

    # Serialization
    def to_json(self) -> Dict[str, Any]:
        data = {
            "algorithmId": self.algorithm_id,
            "splitRatio": self.split_ratio,
            "masterCount": self.master_count,
            "innerGap": self.inner_gap,
            "outerGap": self.outer_gap,
            "insertPosition": self.insert_position.value,
        }
        for name, key in FLAG_FIELDS.items():
            data[key] = getattr(self, name)
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "AutotileConfig":
        """Build a config from a document, keeping defaults for missing or bad keys."""
        config = cls()
        if not isinstance(data, dict):
            log.warning("Ignoring autotile config document of type %s", type(data).__name__)
            return config

        algorithm_id = data.get("algorithmId")
        if isinstance(algorithm_id, str) and algorithm_id:
            config.algorithm_id = algorithm_id

        for key, setter in (
            ("splitRatio", config.set_split_ratio),
            ("masterCount", config.set_master_count),
            ("innerGap", config.set_inner_gap),
            ("outerGap", config.set_outer_gap),
        ):
            if key not in data:
                continue
            try:
                setter(data[key])
            except (OverflowError, TypeError, ValueError):
                log.warning("Ignoring invalid %s: %r", key, data[key])

        if "insertPosition" in data:
            config.insert_position = parse_insert_position(data["insertPosition"])

        for name, key in FLAG_FIELDS.items():
            if isinstance(data.get(key), bool):
                setattr(config, name, data[key])
        return config


def parse_insert_position(value) -> InsertPosition:
    """Accept an InsertPosition or its string value; unknown values mean END."""
    if isinstance(value, InsertPosition):
        return value
    try:
        return InsertPosition(value)
    except ValueError:
        log.warning("Unknown insert position %r, using %r", value, InsertPosition.END.value)
        return InsertPosition.END
