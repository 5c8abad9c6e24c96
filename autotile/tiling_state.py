"""
Tiling State

Per-screen record of window order, floating windows, master area settings,
focus and the last calculated zones.
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Optional, Set

from pubsub import pub

from . import topics
from .constants import (
    DEFAULT_MASTER_COUNT,
    DEFAULT_RATIO_STEP,
    DEFAULT_SPLIT_RATIO,
    MAX_MASTER_COUNT,
    MAX_SPLIT_RATIO,
    MIN_MASTER_COUNT,
    MIN_SPLIT_RATIO,
)
from .geometry import Rect

log = logging.getLogger(__name__)

# JSON keys
KEY_SCREEN_NAME = "screenName"
KEY_WINDOW_ORDER = "windowOrder"
KEY_FLOATING_WINDOWS = "floatingWindows"
KEY_FOCUSED_WINDOW = "focusedWindow"
KEY_MASTER_COUNT = "masterCount"
KEY_SPLIT_RATIO = "splitRatio"


def clamp(value, low, high):
    return max(low, min(high, value))


def ratios_equal(a: float, b: float) -> bool:
    """Compare two ratios with a tolerance suitable for slider values."""
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


class TilingState:
    """Tiling state of a single screen.

    The window order is the single source of truth for placement: the first
    ``master_count`` tiled (non-floating) windows form the master area, the
    rest form the stack. Floating windows keep their slot in the order so
    they return to it when unfloated.

    Every mutator validates its input and returns without side effects when
    nothing changes. Changes are announced on the ``state.*`` topics with the
    screen name, so listeners can tell screens apart.
    """

    def __init__(self, screen_name: str):
        self._screen_name = screen_name
        self._window_order: List[str] = []
        self._floating: Set[str] = set()
        self._focused_window = ""
        self._master_count = DEFAULT_MASTER_COUNT
        self._split_ratio = DEFAULT_SPLIT_RATIO
        self._calculated_zones: List[Rect] = []

    def __repr__(self) -> str:
        return (
            f"TilingState({self._screen_name!r}, windows={self._window_order!r}, "
            f"floating={self.floating_windows()!r}, master_count={self._master_count}, "
            f"split_ratio={self._split_ratio:.2f})"
        )

    @property
    def screen_name(self) -> str:
        return self._screen_name

    # Window counts and views

    def window_count(self) -> int:
        return len(self._window_order)

    def tiled_window_count(self) -> int:
        return sum(1 for w in self._window_order if w not in self._floating)

    def window_order(self) -> List[str]:
        return list(self._window_order)

    def tiled_windows(self) -> List[str]:
        """Windows that take part in layout, in order."""
        return [w for w in self._window_order if w not in self._floating]

    def floating_windows(self) -> List[str]:
        """Floating windows in window order."""
        return [w for w in self._window_order if w in self._floating]

    def contains_window(self, window_id: str) -> bool:
        return window_id in self._window_order

    def window_index(self, window_id: str) -> int:
        """Index of a window in the full order, or -1 if it is not tracked."""
        try:
            return self._window_order.index(window_id)
        except ValueError:
            return -1

    def window_position(self, window_id: str) -> int:
        return self.window_index(window_id)

    # Window membership

    def add_window(self, window_id: str, position: int = -1) -> bool:
        """Start tracking a window.

        Args:
            window_id: Opaque window identifier
            position: Index to insert at; negative or out-of-range appends

        Returns:
            False if the id is empty or already tracked
        """
        if not window_id or window_id in self._window_order:
            return False

        if position < 0 or position >= len(self._window_order):
            self._window_order.append(window_id)
        else:
            self._window_order.insert(position, window_id)

        self._publish(topics.STATE_WINDOW_COUNT_CHANGED)
        self._notify_state_changed()
        return True

    def remove_window(self, window_id: str) -> bool:
        """Stop tracking a window, dropping it from floating and focus."""
        index = self.window_index(window_id)
        if index < 0:
            return False

        del self._window_order[index]
        self._floating.discard(window_id)

        if self._focused_window == window_id:
            self._focused_window = ""
            self._publish(topics.STATE_FOCUSED_WINDOW_CHANGED)

        self._publish(topics.STATE_WINDOW_COUNT_CHANGED)
        self._notify_state_changed()
        return True

    # Reordering

    def move_window(self, from_index: int, to_index: int) -> bool:
        """Move the window at from_index so it ends up at to_index."""
        size = len(self._window_order)
        if not 0 <= from_index < size or not 0 <= to_index < size:
            return False
        if from_index == to_index:
            return True

        window_id = self._window_order.pop(from_index)
        self._window_order.insert(to_index, window_id)
        self._order_changed()
        return True

    def swap_windows(self, index1: int, index2: int) -> bool:
        size = len(self._window_order)
        if not 0 <= index1 < size or not 0 <= index2 < size:
            return False
        if index1 == index2:
            return True

        order = self._window_order
        order[index1], order[index2] = order[index2], order[index1]
        self._order_changed()
        return True

    def swap_windows_by_id(self, window_id1: str, window_id2: str) -> bool:
        index1 = self.window_index(window_id1)
        index2 = self.window_index(window_id2)
        if index1 < 0 or index2 < 0:
            return False
        return self.swap_windows(index1, index2)

    def promote_to_master(self, window_id: str) -> bool:
        """Move a window to the front of the order."""
        index = self.window_index(window_id)
        if index < 0:
            return False
        if index == 0:
            return True
        return self.move_window(index, 0)

    def move_to_front(self, window_id: str) -> bool:
        return self.promote_to_master(window_id)

    def insert_after_focused(self, window_id: str) -> bool:
        """Add a window right after the focused one, or at the end."""
        if not window_id or window_id in self._window_order:
            return False

        position = -1
        if self._focused_window:
            focused_index = self.window_index(self._focused_window)
            if focused_index >= 0:
                position = focused_index + 1
        return self.add_window(window_id, position)

    def move_to_position(self, window_id: str, position: int) -> bool:
        index = self.window_index(window_id)
        if index < 0:
            return False
        return self.move_window(index, position)

    def rotate_tiled(self, clockwise: bool = True) -> bool:
        """Rotate the tiled windows by one slot.

        Clockwise moves every window to the next zone and the last window to
        the first zone. Floating windows keep their positions in the order.

        Returns:
            False if fewer than two windows are tiled
        """
        tiled = self.tiled_windows()
        if len(tiled) < 2:
            return False

        if clockwise:
            rotated = tiled[-1:] + tiled[:-1]
        else:
            rotated = tiled[1:] + tiled[:1]

        replacements = iter(rotated)
        self._window_order = [
            w if w in self._floating else next(replacements)
            for w in self._window_order
        ]
        self._order_changed()
        return True

    # Master area

    @property
    def master_count(self) -> int:
        return self._master_count

    def set_master_count(self, count: int):
        """Set the master count, clamped to the number of tiled windows."""
        max_allowed = min(
            MAX_MASTER_COUNT, max(MIN_MASTER_COUNT, self.tiled_window_count())
        )
        count = clamp(int(count), MIN_MASTER_COUNT, max_allowed)
        if count != self._master_count:
            self._master_count = count
            self._publish(topics.STATE_MASTER_COUNT_CHANGED)
            self._notify_state_changed()

    def is_master(self, window_id: str) -> bool:
        tiled = self.tiled_windows()
        if window_id not in tiled:
            return False
        return tiled.index(window_id) < self._master_count

    def master_windows(self) -> List[str]:
        return self.tiled_windows()[: self._master_count]

    def stack_windows(self) -> List[str]:
        return self.tiled_windows()[self._master_count :]

    # Split ratio

    @property
    def split_ratio(self) -> float:
        return self._split_ratio

    def set_split_ratio(self, ratio: float):
        ratio = clamp(float(ratio), MIN_SPLIT_RATIO, MAX_SPLIT_RATIO)
        if not ratios_equal(self._split_ratio, ratio):
            self._split_ratio = ratio
            self._publish(topics.STATE_SPLIT_RATIO_CHANGED)
            self._notify_state_changed()

    def increase_split_ratio(self, delta: float = DEFAULT_RATIO_STEP):
        self.set_split_ratio(self._split_ratio + delta)

    def decrease_split_ratio(self, delta: float = DEFAULT_RATIO_STEP):
        self.set_split_ratio(self._split_ratio - delta)

    # Floating

    def is_floating(self, window_id: str) -> bool:
        return window_id in self._floating

    def set_floating(self, window_id: str, floating: bool):
        """Exclude a tracked window from layout, or bring it back."""
        if window_id not in self._window_order:
            return
        if (window_id in self._floating) == floating:
            return

        if floating:
            self._floating.add(window_id)
        else:
            self._floating.discard(window_id)

        pub.sendMessage(
            topics.STATE_FLOATING_CHANGED,
            screen_name=self._screen_name,
            window_id=window_id,
            floating=floating,
        )
        self._publish(topics.STATE_WINDOW_COUNT_CHANGED)
        self._notify_state_changed()

    def toggle_floating(self, window_id: str) -> bool:
        """Toggle floating and return the resulting state."""
        if window_id not in self._window_order:
            return False
        self.set_floating(window_id, not self.is_floating(window_id))
        return self.is_floating(window_id)

    # Focus

    @property
    def focused_window(self) -> str:
        return self._focused_window

    def set_focused_window(self, window_id: str):
        """Set the focused window; ignores windows this screen doesn't track."""
        if window_id and window_id not in self._window_order:
            return
        if window_id != self._focused_window:
            self._focused_window = window_id
            self._publish(topics.STATE_FOCUSED_WINDOW_CHANGED)

    def focused_tiled_index(self) -> int:
        """Position of the focused window among tiled windows, or -1."""
        if not self._focused_window or self._focused_window in self._floating:
            return -1
        tiled = self.tiled_windows()
        if self._focused_window not in tiled:
            return -1
        return tiled.index(self._focused_window)

    # Calculated geometry

    @property
    def calculated_zones(self) -> List[Rect]:
        return list(self._calculated_zones)

    def set_calculated_zones(self, zones: List[Rect]):
        self._calculated_zones = list(zones)

    def clear_calculated_zones(self):
        self._calculated_zones = []

    # Reset and serialization

    def clear(self):
        """Forget all windows and return to default settings."""
        has_data = (
            self._window_order
            or self._floating
            or self._focused_window
            or self._master_count != DEFAULT_MASTER_COUNT
            or not ratios_equal(self._split_ratio, DEFAULT_SPLIT_RATIO)
        )
        self._calculated_zones = []
        if not has_data:
            return

        self._window_order = []
        self._floating = set()
        self._focused_window = ""
        self._master_count = DEFAULT_MASTER_COUNT
        self._split_ratio = DEFAULT_SPLIT_RATIO

        self._publish(topics.STATE_WINDOW_COUNT_CHANGED)
        self._publish(topics.STATE_FOCUSED_WINDOW_CHANGED)
        self._publish(topics.STATE_MASTER_COUNT_CHANGED)
        self._publish(topics.STATE_SPLIT_RATIO_CHANGED)
        self._notify_state_changed()

    def to_json(self) -> Dict[str, Any]:
        return {
            KEY_SCREEN_NAME: self._screen_name,
            KEY_WINDOW_ORDER: list(self._window_order),
            KEY_FLOATING_WINDOWS: self.floating_windows(),
            KEY_FOCUSED_WINDOW: self._focused_window,
            KEY_MASTER_COUNT: self._master_count,
            KEY_SPLIT_RATIO: self._split_ratio,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> Optional["TilingState"]:
        """Rebuild a state from to_json() output.

        Entries that don't fit the restored window order are dropped rather
        than rejected, and numeric settings are clamped.

        Returns:
            The restored state, or None if the document has no screen name
        """
        screen_name = data.get(KEY_SCREEN_NAME)
        if not isinstance(screen_name, str) or not screen_name:
            return None

        state = cls(screen_name)
        for window_id in data.get(KEY_WINDOW_ORDER) or []:
            if (
                isinstance(window_id, str)
                and window_id
                and window_id not in state._window_order
            ):
                state._window_order.append(window_id)

        for window_id in data.get(KEY_FLOATING_WINDOWS) or []:
            if isinstance(window_id, str) and window_id in state._window_order:
                state._floating.add(window_id)

        focused = data.get(KEY_FOCUSED_WINDOW)
        if isinstance(focused, str) and focused in state._window_order:
            state._focused_window = focused

        max_master = min(
            MAX_MASTER_COUNT, max(MIN_MASTER_COUNT, state.tiled_window_count())
        )
        try:
            master_count = int(data.get(KEY_MASTER_COUNT, DEFAULT_MASTER_COUNT))
        except (OverflowError, TypeError, ValueError):
            master_count = DEFAULT_MASTER_COUNT
        state._master_count = clamp(master_count, MIN_MASTER_COUNT, max_master)

        try:
            split_ratio = float(data.get(KEY_SPLIT_RATIO, DEFAULT_SPLIT_RATIO))
        except (TypeError, ValueError):
            split_ratio = DEFAULT_SPLIT_RATIO
        if math.isnan(split_ratio):
            split_ratio = DEFAULT_SPLIT_RATIO
        state._split_ratio = clamp(split_ratio, MIN_SPLIT_RATIO, MAX_SPLIT_RATIO)
        return state

    # Notifications

    def _order_changed(self):
        self._publish(topics.STATE_WINDOW_ORDER_CHANGED)
        self._notify_state_changed()

    def _notify_state_changed(self):
        self._publish(topics.STATE_CHANGED)

    def _publish(self, topic: str):
        pub.sendMessage(topic, screen_name=self._screen_name)
