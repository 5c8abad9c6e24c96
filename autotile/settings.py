"""
Settings Bridge

Shapes in which the settings store hands autotile settings to the engine:
a full snapshot for bulk sync, and the per-field policy used for individual
change notifications.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import Dict, FrozenSet

from .config import AutotileConfig, InsertPosition
from .constants import (
    DEFAULT_GAP,
    DEFAULT_MASTER_COUNT,
    DEFAULT_SPLIT_RATIO,
    MASTER_STACK,
)


class SettingPolicy(Enum):
    """What the engine does when a single setting changes."""

    SET_ALGORITHM = auto()  # Switch algorithm right away
    PROPAGATE_AND_RETILE = auto()  # Push into every screen state, debounced retile
    RETILE = auto()  # Debounced retile
    CONFIG_ONLY = auto()  # Takes effect on the next natural retile


SETTING_POLICIES: Dict[str, SettingPolicy] = {
    "algorithm_id": SettingPolicy.SET_ALGORITHM,
    "split_ratio": SettingPolicy.PROPAGATE_AND_RETILE,
    "master_count": SettingPolicy.PROPAGATE_AND_RETILE,
    "inner_gap": SettingPolicy.RETILE,
    "outer_gap": SettingPolicy.RETILE,
    "smart_gaps": SettingPolicy.RETILE,
    "respect_minimum_size": SettingPolicy.RETILE,
    "monocle_hide_others": SettingPolicy.RETILE,
    "insert_position": SettingPolicy.CONFIG_ONLY,
    "focus_new_windows": SettingPolicy.CONFIG_ONLY,
    "focus_follows_mouse": SettingPolicy.CONFIG_ONLY,
    "monocle_show_tabs": SettingPolicy.CONFIG_ONLY,
}


@dataclass
class SettingsSnapshot:
    """Everything the settings store knows about autotiling, read in one go."""

    autotile_screens: FrozenSet[str] = field(default_factory=frozenset)
    algorithm_id: str = MASTER_STACK
    split_ratio: float = DEFAULT_SPLIT_RATIO
    master_count: int = DEFAULT_MASTER_COUNT
    inner_gap: int = DEFAULT_GAP
    outer_gap: int = DEFAULT_GAP
    insert_position: InsertPosition = InsertPosition.END
    focus_follows_mouse: bool = False
    focus_new_windows: bool = True
    monocle_hide_others: bool = True
    monocle_show_tabs: bool = False
    smart_gaps: bool = True
    respect_minimum_size: bool = True

    def to_config(self) -> AutotileConfig:
        """Config holding the snapshot's values, clamped."""
        values = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "autotile_screens"
        }
        return AutotileConfig(**values)
