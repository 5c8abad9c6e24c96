"""
Autotile Engine

Keeps one TilingState per tiled screen, runs the selected algorithm when
windows come and go, and publishes the resulting placements.
"""

from __future__ import annotations
import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from pubsub import pub

from . import topics
from .algorithms import MonocleAlgorithm, TilingAlgorithm, TilingParams, enforce_window_min_sizes
from .config import FLAG_FIELDS, AutotileConfig, InsertPosition
from .constants import (
    DEFAULT_RATIO_STEP,
    GAP_EDGE_THRESHOLD_PX,
    MAX_WINDOWS_PER_SCREEN,
    MIN_MASTER_COUNT,
    MIN_SIZE_POST_PASS_SLACK_PX,
    SETTINGS_RETILE_DEBOUNCE_MS,
)
from .geometry import Size, WindowPlacement
from .registry import AlgorithmRegistry
from .screens import ScreenProvider
from .settings import SETTING_POLICIES, SettingPolicy, SettingsSnapshot
from .tiling_state import TilingState
from .timer import DebounceTimer

log = logging.getLogger(__name__)

# Navigation feedback actions
ACTION_FOCUS_NEXT = "focus_next"
ACTION_FOCUS_PREVIOUS = "focus_previous"
ACTION_FOCUS_MASTER = "focus_master"
ACTION_SWAP_MASTER = "swap_master"
ACTION_ROTATE = "rotate"
ACTION_FLOAT = "float"

# Navigation feedback reasons
REASON_NONE = ""
REASON_NO_WINDOWS = "no_windows"
REASON_NO_FOCUS = "no_focus"
REASON_ALREADY_MASTER = "already_master"
REASON_NOTHING_TO_ROTATE = "nothing_to_rotate"
REASON_NOT_TRACKED = "not_tracked"

# Persistence document keys
KEY_ALGORITHM_ID = "algorithmId"
KEY_AUTOTILE_SCREENS = "autotileScreens"
KEY_SCREENS = "screens"
KEY_MASTER_COUNT = "masterCount"
KEY_SPLIT_RATIO = "splitRatio"


class AutotileEngine:
    """Automatic tiling for a set of screens.

    The engine subscribes to the window, screen, settings and command topics
    and publishes one WINDOWS_TILED message per retiled screen. Everything
    runs on the caller's thread; the only deferred work is the debounced
    retile after settings changes.

    Responsibilities:
    - Track which windows live on which screen
    - Keep per-screen window order, floating set, master area and focus
    - Recompute zones with the current algorithm and publish placements
    - Interactive operations: swap, rotate, promote, float, focus cycling
    - Settings sync, debounced settings retiles and persisted state
    """

    def __init__(
        self,
        bus,
        screens: ScreenProvider,
        config: Optional[AutotileConfig] = None,
        registry: Optional[AlgorithmRegistry] = None,
        clock: Callable[[], float] = time.monotonic,
        call_later: Optional[Callable[..., Any]] = None,
    ):
        """Initialize the engine.

        Args:
            bus: Event bus instance (Pypubsub)
            screens: Screen geometry provider
            config: Initial configuration (copied); defaults if omitted
            registry: Algorithm registry; the process-wide one if omitted
            clock: Monotonic clock for the settings debounce timer
            call_later: Optional scheduler for the debounce timer, see DebounceTimer
        """
        self.bus = bus
        self._screens = screens
        self._registry = registry or AlgorithmRegistry.instance()
        self._config = config.copy() if config is not None else AutotileConfig()

        self._states: Dict[str, TilingState] = {}
        self._autotile_screens: Set[str] = set()
        self._window_to_screen: Dict[str, str] = {}
        self._window_min_sizes: Dict[str, Size] = {}
        self._active_screen = ""

        self._retiling = False
        self._pending_settings_retile = False
        self._settings_timer = DebounceTimer(
            SETTINGS_RETILE_DEBOUNCE_MS,
            self._on_settings_retile_timer,
            clock=clock,
            call_later=call_later,
        )

        if not self._registry.has_algorithm(self._config.algorithm_id):
            log.warning(
                "Unknown algorithm %r, using %r",
                self._config.algorithm_id,
                self._registry.default_algorithm_id(),
            )
            self._config.algorithm_id = self._registry.default_algorithm_id()

        self._subscriptions: List[Tuple[Callable, str]] = []
        self._setup_subscriptions()

        # Setup debug event logging if enabled
        if os.getenv("AUTOTILE_DEBUG"):
            self._subscribe(self.debug_event_logger, pub.ALL_TOPICS)

    def _setup_subscriptions(self):
        """Subscribe to events the engine cares about."""
        # Notification events
        self._subscribe(self._on_window_opened, topics.WINDOW_OPENED)
        self._subscribe(self._on_window_closed, topics.WINDOW_CLOSED)
        self._subscribe(self._on_window_focused, topics.WINDOW_FOCUSED)
        self._subscribe(self._on_screen_geometry_changed, topics.SCREEN_GEOMETRY_CHANGED)
        self._subscribe(self._on_settings_changed, topics.SETTINGS_CHANGED)

        # Command events
        self._subscribe(self._on_cmd_retile, topics.CMD_RETILE)
        self._subscribe(self._on_cmd_focus_next, topics.CMD_FOCUS_NEXT)
        self._subscribe(self._on_cmd_focus_previous, topics.CMD_FOCUS_PREVIOUS)
        self._subscribe(self._on_cmd_focus_master, topics.CMD_FOCUS_MASTER)
        self._subscribe(self._on_cmd_swap_master, topics.CMD_SWAP_MASTER)
        self._subscribe(self._on_cmd_rotate, topics.CMD_ROTATE)
        self._subscribe(self._on_cmd_toggle_float, topics.CMD_TOGGLE_FLOAT)
        self._subscribe(self._on_cmd_increase_master_ratio, topics.CMD_INCREASE_MASTER_RATIO)
        self._subscribe(self._on_cmd_decrease_master_ratio, topics.CMD_DECREASE_MASTER_RATIO)
        self._subscribe(self._on_cmd_increase_master_count, topics.CMD_INCREASE_MASTER_COUNT)
        self._subscribe(self._on_cmd_decrease_master_count, topics.CMD_DECREASE_MASTER_COUNT)

    def _subscribe(self, listener: Callable, topic: str):
        pub.subscribe(listener, topic)
        self._subscriptions.append((listener, topic))

    def shutdown(self):
        """Unsubscribe from the bus and cancel pending work."""
        for listener, topic in self._subscriptions:
            if pub.isSubscribed(listener, topic):
                pub.unsubscribe(listener, topic)
        self._subscriptions.clear()
        self._settings_timer.stop()
        self._pending_settings_retile = False

    def debug_event_logger(self, topic=pub.AUTO_TOPIC, **kwargs):
        """Log all events published on the event bus."""
        data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        log.debug("EVENT: %s | %s", topic.getName(), data_str)

    # Event handlers
    def _on_window_opened(self, window_id, screen_name="", min_width=0, min_height=0):
        self.window_opened(window_id, screen_name, min_width, min_height)

    def _on_window_closed(self, window_id):
        self.window_closed(window_id)

    def _on_window_focused(self, window_id, screen_name=""):
        self.window_focused(window_id, screen_name)

    def _on_screen_geometry_changed(self, screen_name):
        self.on_screen_geometry_changed(screen_name)

    def _on_settings_changed(self, field, value):
        self.on_setting_changed(field, value)

    def _on_cmd_retile(self):
        self.retile()

    def _on_cmd_focus_next(self):
        self.focus_next()

    def _on_cmd_focus_previous(self):
        self.focus_previous()

    def _on_cmd_focus_master(self):
        self.focus_master()

    def _on_cmd_swap_master(self):
        self.swap_focused_with_master()

    def _on_cmd_rotate(self, clockwise=True):
        self.rotate_window_order(clockwise)

    def _on_cmd_toggle_float(self):
        self.toggle_focused_window_float()

    def _on_cmd_increase_master_ratio(self):
        self.increase_master_ratio()

    def _on_cmd_decrease_master_ratio(self):
        self.decrease_master_ratio()

    def _on_cmd_increase_master_count(self):
        self.increase_master_count()

    def _on_cmd_decrease_master_count(self):
        self.decrease_master_count()

    # Screen enablement
    @property
    def autotile_screens(self) -> FrozenSet[str]:
        return frozenset(self._autotile_screens)

    def is_screen_tiled(self, screen_name: str) -> bool:
        return screen_name in self._autotile_screens

    def set_autotile_screens(self, screen_names: Iterable[str]):
        """Tile exactly these screens. Newly tiled screens are retiled."""
        added = self._set_autotile_screens(screen_names)
        for screen_name in added:
            self.retile(screen_name)

    def enable_screen(self, screen_name: str):
        if screen_name and not self.is_screen_tiled(screen_name):
            self.set_autotile_screens(self._autotile_screens | {screen_name})

    def disable_screen(self, screen_name: str):
        if self.is_screen_tiled(screen_name):
            self.set_autotile_screens(self._autotile_screens - {screen_name})

    def _set_autotile_screens(self, screen_names: Iterable[str]) -> List[str]:
        """Update the tiled set without retiling.

        Returns:
            Newly tiled screens, sorted
        """
        wanted = {name for name in screen_names if name}
        removed = sorted(self._autotile_screens - wanted)
        added = sorted(wanted - self._autotile_screens)
        if not removed and not added:
            return []

        for screen_name in removed:
            self._autotile_screens.discard(screen_name)
            self._release_screen(screen_name)

        for screen_name in added:
            self._autotile_screens.add(screen_name)
            self._adopt_known_windows(screen_name)

        log.info("Autotile screens: %s", ", ".join(sorted(self._autotile_screens)) or "none")
        pub.sendMessage(topics.SCREENS_CHANGED, screen_names=sorted(self._autotile_screens))
        return added

    def _release_screen(self, screen_name: str):
        state = self._states.pop(screen_name, None)
        if state is None:
            return
        window_ids = state.window_order()
        if self._active_screen == screen_name:
            self._active_screen = ""
        pub.sendMessage(
            topics.WINDOWS_RELEASED, screen_name=screen_name, window_ids=window_ids
        )

    def _adopt_known_windows(self, screen_name: str):
        """Track windows that opened on a screen before it was tiled."""
        state = self.state_for_screen(screen_name)
        for window_id, owner in self._window_to_screen.items():
            if owner != screen_name or state.window_count() >= MAX_WINDOWS_PER_SCREEN:
                continue
            state.add_window(window_id)
        state.set_master_count(self._config.master_count)

    # State access
    def state_for_screen(self, screen_name: str) -> Optional[TilingState]:
        """Tiling state of a screen, created on first use from the config."""
        if not screen_name:
            return None
        state = self._states.get(screen_name)
        if state is None:
            state = TilingState(screen_name)
            state.set_split_ratio(self._config.split_ratio)
            state.set_master_count(self._config.master_count)
            self._states[screen_name] = state
        return state

    @property
    def config(self) -> AutotileConfig:
        return self._config

    @property
    def active_screen(self) -> str:
        return self._active_screen

    def screen_for_window(self, window_id: str) -> str:
        return self._window_to_screen.get(window_id, "")

    def _tracked_state(self, window_id: str) -> Tuple[str, Optional[TilingState]]:
        """Screen and state tracking a window, or ("", None)."""
        screen_name = self._window_to_screen.get(window_id, "")
        state = self._states.get(screen_name)
        if state is None or not state.contains_window(window_id):
            return "", None
        return screen_name, state

    # Algorithms
    @property
    def algorithm(self) -> str:
        return self._config.algorithm_id

    def set_algorithm(self, algorithm_id: str):
        """Switch algorithm; unknown ids fall back to the default algorithm."""
        if not self._registry.has_algorithm(algorithm_id):
            log.warning(
                "Unknown algorithm %r, using %r",
                algorithm_id,
                self._registry.default_algorithm_id(),
            )
            algorithm_id = self._registry.default_algorithm_id()

        if algorithm_id == self._config.algorithm_id:
            return

        leaving_monocle = self._monocle_hiding()
        self._config.set_algorithm_id(algorithm_id)
        log.info("Autotile algorithm: %s", algorithm_id)

        if leaving_monocle and not self._monocle_hiding():
            for screen_name in sorted(self._autotile_screens):
                self._publish_monocle_visibility(screen_name, hide_others=False)

        pub.sendMessage(topics.ALGORITHM_CHANGED, algorithm_id=algorithm_id)
        self.retile()

    def current_algorithm(self) -> Optional[TilingAlgorithm]:
        algorithm = self._registry.algorithm(self._config.algorithm_id)
        if algorithm is None:
            algorithm = self._registry.default_algorithm()
        return algorithm

    # Window lifecycle
    def window_opened(
        self, window_id: str, screen_name: str = "", min_width: int = 0, min_height: int = 0
    ):
        """A tileable window appeared.

        An empty screen name means the primary screen.
        """
        if not window_id:
            log.debug("Ignoring window without id")
            return
        if not screen_name:
            screen_name = self._screens.primary_screen_name()
        if not screen_name:
            log.debug("No screen for window %s", window_id)
            return

        if min_width > 0 or min_height > 0:
            self._window_min_sizes[window_id] = Size(max(0, min_width), max(0, min_height))

        previous = self._window_to_screen.get(window_id)
        if previous and previous != screen_name:
            floating = self._is_floating(previous, window_id)
            self._forget_window_on(previous, window_id)
            self._window_to_screen[window_id] = screen_name
            if floating:
                self._adopt_floating_window(window_id, screen_name)
                return
        self._window_to_screen[window_id] = screen_name

        self._on_window_added(window_id, screen_name)

    def _is_floating(self, screen_name: str, window_id: str) -> bool:
        state = self._states.get(screen_name)
        return state is not None and state.is_floating(window_id)

    def _adopt_floating_window(self, window_id: str, screen_name: str):
        """Keep a floating window floating when it moves to another screen."""
        if not self.is_screen_tiled(screen_name):
            return
        state = self.state_for_screen(screen_name)
        if state.window_count() < MAX_WINDOWS_PER_SCREEN and state.add_window(window_id):
            state.set_floating(window_id, True)

    def _on_window_added(self, window_id: str, screen_name: str):
        if not self.is_screen_tiled(screen_name):
            return
        for state in self._states.values():
            if state.is_floating(window_id):
                log.debug("Window %s is floating, not tiling it", window_id)
                return

        state = self.state_for_screen(screen_name)
        if state.contains_window(window_id):
            return
        if state.window_count() >= MAX_WINDOWS_PER_SCREEN:
            log.debug("Screen %s is full, not tiling %s", screen_name, window_id)
            return

        if self._config.insert_position is InsertPosition.AFTER_FOCUSED:
            state.insert_after_focused(window_id)
        elif self._config.insert_position is InsertPosition.AS_MASTER:
            state.add_window(window_id, 0)
        else:
            state.add_window(window_id)

        self.retile_after_operation(screen_name, True)

        if self._config.focus_new_windows:
            pub.sendMessage(topics.FOCUS_REQUESTED, window_id=window_id)

    def window_closed(self, window_id: str):
        self._window_min_sizes.pop(window_id, None)
        screen_name = self._window_to_screen.pop(window_id, None)
        if screen_name is None:
            log.debug("Closed window %s was not tracked", window_id)
            return
        self._forget_window_on(screen_name, window_id)

    def _forget_window_on(self, screen_name: str, window_id: str):
        state = self._states.get(screen_name)
        if state is not None and state.remove_window(window_id):
            self.retile_after_operation(screen_name, True)

    def window_focused(self, window_id: str, screen_name: str = ""):
        """A window got focus. Its screen becomes the active screen."""
        if not window_id:
            return

        owner, state = self._tracked_state(window_id)
        self._active_screen = owner or screen_name or self._active_screen

        if state is None:
            # Known but untiled windows follow focus to their current screen
            if screen_name and window_id in self._window_to_screen:
                self._window_to_screen[window_id] = screen_name
            return
        state.set_focused_window(window_id)
        if self._monocle_hiding() and self.is_screen_tiled(owner):
            self._publish_monocle_visibility(owner)

    def on_screen_geometry_changed(self, screen_name: str):
        if self.is_screen_tiled(screen_name):
            self.retile(screen_name)

    def set_window_min_size(self, window_id: str, min_width: int, min_height: int):
        """Update a window's minimum size and retile its screen if it matters."""
        size = Size(max(0, min_width), max(0, min_height))
        if size.is_empty():
            changed = self._window_min_sizes.pop(window_id, None) is not None
        else:
            changed = self._window_min_sizes.get(window_id) != size
            self._window_min_sizes[window_id] = size

        screen_name, state = self._tracked_state(window_id)
        if changed and state is not None and self._config.respect_minimum_size:
            self.retile_after_operation(screen_name, not state.is_floating(window_id))

    # Retiling
    @property
    def is_retiling(self) -> bool:
        return self._retiling

    @contextmanager
    def _retile_guard(self):
        self._retiling = True
        try:
            yield
        finally:
            self._retiling = False

    def retile(self, screen_name: str = ""):
        """Recompute and apply one tiled screen, or all of them."""
        if self._retiling:
            log.debug("Retile already in progress, skipping nested retile")
            return

        with self._retile_guard():
            if screen_name:
                if self.is_screen_tiled(screen_name):
                    self._retile_screen(screen_name)
                return
            for name in sorted(self._autotile_screens):
                self._retile_screen(name)

    def retile_after_operation(self, screen_name: str, succeeded: bool):
        """Retile one screen after an operation changed its state.

        Inside an ongoing retile the screen is still recomputed and applied,
        but the guard stays with the outer retile.
        """
        if not succeeded or not self.is_screen_tiled(screen_name):
            return
        if self._retiling:
            self._retile_screen(screen_name)
            return
        with self._retile_guard():
            self._retile_screen(screen_name)

    def _retile_screen(self, screen_name: str):
        if self.recalculate_layout(screen_name) and self.apply_tiling(screen_name):
            pub.sendMessage(topics.TILING_CHANGED, screen_name=screen_name)

    def recalculate_layout(self, screen_name: str) -> bool:
        """Compute zones for a screen's tiled windows and store them in its state.

        Returns:
            True if zones were stored
        """
        state = self._states.get(screen_name)
        if state is None:
            return False

        tiled = state.tiled_windows()
        if not tiled:
            state.clear_calculated_zones()
            return False

        algorithm = self.current_algorithm()
        if algorithm is None:
            log.error("No tiling algorithm available for %s", screen_name)
            return False

        screen = self._screens.available_geometry(screen_name)
        if not screen.is_valid():
            log.warning("Invalid geometry for screen %s: %s", screen_name, screen)
            return False

        inner_gap = self._config.inner_gap
        outer_gap = self._config.outer_gap
        if self._config.smart_gaps and len(tiled) == 1:
            inner_gap = outer_gap = 0

        min_sizes: List[Size] = []
        if self._config.respect_minimum_size:
            min_sizes = [self._window_min_sizes.get(w, Size()) for w in tiled]
            if all(size.is_empty() for size in min_sizes):
                min_sizes = []

        zones = algorithm.calculate_zones(
            TilingParams(
                window_count=len(tiled),
                screen=screen,
                state=state,
                inner_gap=inner_gap,
                outer_gap=outer_gap,
                min_sizes=min_sizes,
            )
        )
        if len(zones) != len(tiled):
            log.error(
                "Algorithm %s returned %d zones for %d windows on %s",
                self._config.algorithm_id,
                len(zones),
                len(tiled),
                screen_name,
            )
            return False

        if min_sizes:
            threshold = inner_gap + max(GAP_EDGE_THRESHOLD_PX, MIN_SIZE_POST_PASS_SLACK_PX)
            zones = enforce_window_min_sizes(zones, min_sizes, threshold)

        state.set_calculated_zones(zones)
        return True

    def apply_tiling(self, screen_name: str) -> bool:
        """Publish the stored zones of a screen as one batch of placements."""
        state = self._states.get(screen_name)
        if state is None:
            return False

        tiled = state.tiled_windows()
        zones = state.calculated_zones
        if not tiled:
            return False
        if len(tiled) != len(zones):
            log.error(
                "Window/zone count mismatch on %s: %d windows, %d zones",
                screen_name,
                len(tiled),
                len(zones),
            )
            return False

        placements = [WindowPlacement.from_rect(w, z) for w, z in zip(tiled, zones)]
        pub.sendMessage(topics.WINDOWS_TILED, screen_name=screen_name, placements=placements)

        if self._monocle_hiding():
            self._publish_monocle_visibility(screen_name)
        return True

    # Monocle
    def _monocle_hiding(self) -> bool:
        return self._config.monocle_hide_others and isinstance(
            self.current_algorithm(), MonocleAlgorithm
        )

    def _publish_monocle_visibility(self, screen_name: str, hide_others: bool = True):
        state = self._states.get(screen_name)
        if state is None:
            return
        tiled = state.tiled_windows()
        if not tiled:
            return

        focused = state.focused_window
        show = focused if focused in tiled else tiled[0]
        hide = [w for w in tiled if w != show] if hide_others else []
        pub.sendMessage(
            topics.MONOCLE_VISIBILITY,
            screen_name=screen_name,
            show_window=show,
            hide_windows=hide,
        )

    # Interactive operations
    def swap_windows(self, window_id1: str, window_id2: str):
        screen1, state = self._tracked_state(window_id1)
        screen2, _ = self._tracked_state(window_id2)
        if state is None or not screen2:
            log.debug("Cannot swap %s and %s: not tracked", window_id1, window_id2)
            return
        if screen1 != screen2:
            log.debug("Cannot swap %s and %s: different screens", window_id1, window_id2)
            return
        self.retile_after_operation(screen1, state.swap_windows_by_id(window_id1, window_id2))

    def promote_to_master(self, window_id: str):
        screen_name, state = self._tracked_state(window_id)
        if state is None:
            log.debug("Cannot promote %s: not tracked", window_id)
            return
        self.retile_after_operation(screen_name, state.promote_to_master(window_id))

    def demote_from_master(self, window_id: str):
        """Move a master window to the top of the stack."""
        screen_name, state = self._tracked_state(window_id)
        if state is None or not state.is_master(window_id):
            return

        tiled = state.tiled_windows()
        master_count = min(state.master_count, len(tiled))
        if len(tiled) <= master_count:
            log.debug("Cannot demote %s: no stack on %s", window_id, screen_name)
            return

        target = state.window_index(tiled[master_count])
        moved = state.move_window(state.window_index(window_id), target)
        self.retile_after_operation(screen_name, moved)

    def _active_state(self) -> Tuple[str, Optional[TilingState]]:
        """Screen that focus-based operations act on.

        The last focused screen wins. If it is no longer tiled, the first
        tiled screen with a focused window is used, then the primary screen.
        """
        state = self._states.get(self._active_screen)
        if state is not None and self.is_screen_tiled(self._active_screen):
            return self._active_screen, state

        for screen_name, state in self._states.items():
            if state.focused_window and self.is_screen_tiled(screen_name):
                return screen_name, state

        primary = self._screens.primary_screen_name()
        if self.is_screen_tiled(primary):
            return primary, self.state_for_screen(primary)
        return "", None

    def swap_focused_with_master(self):
        screen_name, state = self._active_state()
        if state is None or state.tiled_window_count() == 0:
            self._feedback(False, ACTION_SWAP_MASTER, REASON_NO_WINDOWS, screen_name)
            return

        index = state.focused_tiled_index()
        if index < 0:
            self._feedback(False, ACTION_SWAP_MASTER, REASON_NO_FOCUS, screen_name)
            return
        if index == 0:
            self._feedback(False, ACTION_SWAP_MASTER, REASON_ALREADY_MASTER, screen_name, 0, 0)
            return

        master = state.tiled_windows()[0]
        swapped = state.swap_windows_by_id(state.focused_window, master)
        self._feedback(swapped, ACTION_SWAP_MASTER, REASON_NONE, screen_name, index, 0)
        self.retile_after_operation(screen_name, swapped)

    def focus_master(self):
        screen_name, state = self._active_state()
        if state is None or state.tiled_window_count() == 0:
            self._feedback(False, ACTION_FOCUS_MASTER, REASON_NO_WINDOWS, screen_name)
            return
        self._focus_tiled(state, 0, ACTION_FOCUS_MASTER)

    def focus_next(self):
        self._cycle_focus(1, ACTION_FOCUS_NEXT)

    def focus_previous(self):
        self._cycle_focus(-1, ACTION_FOCUS_PREVIOUS)

    def _cycle_focus(self, step: int, action: str):
        screen_name, state = self._active_state()
        if state is None or state.tiled_window_count() == 0:
            self._feedback(False, action, REASON_NO_WINDOWS, screen_name)
            return

        count = state.tiled_window_count()
        index = state.focused_tiled_index()
        if index < 0:
            target = 0 if step > 0 else count - 1
        else:
            target = (index + step) % count
        self._focus_tiled(state, target, action)

    def _focus_tiled(self, state: TilingState, index: int, action: str):
        source = state.focused_tiled_index()
        window_id = state.tiled_windows()[index]
        state.set_focused_window(window_id)
        self._feedback(
            True,
            action,
            REASON_NONE,
            state.screen_name,
            source if source >= 0 else None,
            index,
        )
        pub.sendMessage(topics.FOCUS_REQUESTED, window_id=window_id)
        if self._monocle_hiding():
            self._publish_monocle_visibility(state.screen_name)

    def rotate_window_order(self, clockwise: bool = True):
        screen_name, state = self._active_state()
        if state is None or state.tiled_window_count() < 2:
            self._feedback(False, ACTION_ROTATE, REASON_NOTHING_TO_ROTATE, screen_name)
            return

        rotated = state.rotate_tiled(clockwise)
        self._feedback(rotated, ACTION_ROTATE, REASON_NONE, screen_name)
        self.retile_after_operation(screen_name, rotated)

    def toggle_floating(self, window_id: str):
        screen_name, state = self._tracked_state(window_id)
        if state is None:
            self._feedback(False, ACTION_FLOAT, REASON_NOT_TRACKED, self.screen_for_window(window_id))
            return

        floating = state.toggle_floating(window_id)
        log.debug("Window %s %s", window_id, "floating" if floating else "tiled")
        self._feedback(True, ACTION_FLOAT, REASON_NONE, screen_name)
        self.retile_after_operation(screen_name, True)

    def float_window(self, window_id: str):
        self._set_floating(window_id, True)

    def unfloat_window(self, window_id: str):
        self._set_floating(window_id, False)

    def _set_floating(self, window_id: str, floating: bool):
        screen_name, state = self._tracked_state(window_id)
        if state is None or state.is_floating(window_id) == floating:
            return
        state.set_floating(window_id, floating)
        self.retile_after_operation(screen_name, True)

    def toggle_focused_window_float(self):
        screen_name, state = self._active_state()
        if state is None or not state.focused_window:
            self._feedback(False, ACTION_FLOAT, REASON_NO_FOCUS, screen_name)
            return
        self.toggle_floating(state.focused_window)

    def increase_master_ratio(self, delta: float = DEFAULT_RATIO_STEP):
        self._change_split_ratio(delta)

    def decrease_master_ratio(self, delta: float = DEFAULT_RATIO_STEP):
        self._change_split_ratio(-delta)

    def _change_split_ratio(self, delta: float):
        self._config.set_split_ratio(self._config.split_ratio + delta)
        for screen_name in sorted(self._autotile_screens):
            state = self._states.get(screen_name)
            if state is not None:
                state.set_split_ratio(state.split_ratio + delta)
        self.retile()

    def increase_master_count(self):
        self._change_master_count(1)

    def decrease_master_count(self):
        self._change_master_count(-1)

    def _change_master_count(self, delta: int):
        for screen_name in sorted(self._autotile_screens):
            state = self._states.get(screen_name)
            if state is None:
                continue
            if delta < 0 and state.master_count <= MIN_MASTER_COUNT:
                continue
            state.set_master_count(state.master_count + delta)
        self.retile()

    def _feedback(
        self,
        succeeded: bool,
        action: str,
        reason: str,
        screen_name: str,
        source_zone: Optional[int] = None,
        target_zone: Optional[int] = None,
    ):
        pub.sendMessage(
            topics.NAVIGATION_FEEDBACK,
            succeeded=succeeded,
            action=action,
            reason=reason,
            source_zone=source_zone,
            target_zone=target_zone,
            screen_name=screen_name,
        )

    # Settings
    @contextmanager
    def _tiling_suspended(self):
        """Pretend no screen is tiled, so state listeners can't trigger retiles."""
        screens = self._autotile_screens
        self._autotile_screens = set()
        try:
            yield
        finally:
            self._autotile_screens = screens

    def sync_from_settings(self, snapshot: SettingsSnapshot):
        """Replace the whole configuration and retile once."""
        config = snapshot.to_config()
        if not self._registry.has_algorithm(config.algorithm_id):
            log.warning(
                "Unknown algorithm %r in settings, using %r",
                config.algorithm_id,
                self._registry.default_algorithm_id(),
            )
            config.algorithm_id = self._registry.default_algorithm_id()

        algorithm_changed = config.algorithm_id != self._config.algorithm_id
        leaving_monocle = self._monocle_hiding()

        with self._tiling_suspended():
            self._config = config
            for state in self._states.values():
                state.set_split_ratio(config.split_ratio)
                state.set_master_count(config.master_count)

        self._settings_timer.stop()
        self._pending_settings_retile = False
        self._set_autotile_screens(snapshot.autotile_screens)

        if leaving_monocle and not self._monocle_hiding():
            for screen_name in sorted(self._autotile_screens):
                self._publish_monocle_visibility(screen_name, hide_others=False)
        if algorithm_changed:
            pub.sendMessage(topics.ALGORITHM_CHANGED, algorithm_id=config.algorithm_id)
        self.retile()

    def on_setting_changed(self, field: str, value):
        """Apply a single changed setting according to its policy."""
        policy = SETTING_POLICIES.get(field)
        if policy is None:
            log.warning("Ignoring unknown autotile setting %r", field)
            return

        if policy is SettingPolicy.SET_ALGORITHM:
            self.set_algorithm(value)
            return

        leaving_monocle = field == "monocle_hide_others" and self._monocle_hiding()
        try:
            changed = self._apply_setting(field, value)
        except (OverflowError, TypeError, ValueError):
            log.warning("Ignoring invalid value %r for setting %r", value, field)
            return
        if not changed:
            return

        if policy is SettingPolicy.PROPAGATE_AND_RETILE:
            for state in self._states.values():
                if field == "split_ratio":
                    state.set_split_ratio(self._config.split_ratio)
                else:
                    state.set_master_count(self._config.master_count)

        if leaving_monocle:
            for screen_name in sorted(self._autotile_screens):
                self._publish_monocle_visibility(screen_name, hide_others=False)

        if policy is not SettingPolicy.CONFIG_ONLY:
            self.schedule_settings_retile()

    def _apply_setting(self, field: str, value) -> bool:
        if field == "split_ratio":
            return self._config.set_split_ratio(value)
        if field == "master_count":
            return self._config.set_master_count(value)
        if field == "inner_gap":
            return self._config.set_inner_gap(value)
        if field == "outer_gap":
            return self._config.set_outer_gap(value)
        if field == "insert_position":
            return self._config.set_insert_position(value)
        if field in FLAG_FIELDS:
            return self._config.set_flag(field, value)
        return False

    def schedule_settings_retile(self):
        """Retile once after settings stop changing for a moment."""
        self._pending_settings_retile = True
        self._settings_timer.start()

    @property
    def has_pending_settings_retile(self) -> bool:
        return self._pending_settings_retile

    def poll(self) -> bool:
        """Drive the settings debounce timer from the host's loop.

        Returns:
            True if a pending settings retile ran
        """
        return self._settings_timer.poll()

    def _on_settings_retile_timer(self):
        if not self._pending_settings_retile:
            return
        self._pending_settings_retile = False
        if self._autotile_screens:
            self.retile()

    # Persistence
    def persistent_state(self) -> Dict[str, Any]:
        """Document for the persistence store. Window order is not included."""
        return {
            KEY_ALGORITHM_ID: self._config.algorithm_id,
            KEY_AUTOTILE_SCREENS: sorted(self._autotile_screens),
            KEY_SCREENS: {
                screen_name: {
                    KEY_MASTER_COUNT: state.master_count,
                    KEY_SPLIT_RATIO: state.split_ratio,
                }
                for screen_name, state in sorted(self._states.items())
            },
        }

    def restore_persistent_state(self, data: Dict[str, Any]):
        """Apply a persistent_state() document, dropping invalid entries."""
        if not isinstance(data, dict):
            log.warning("Ignoring autotile state of type %s", type(data).__name__)
            return

        algorithm_id = data.get(KEY_ALGORITHM_ID)
        if isinstance(algorithm_id, str) and algorithm_id:
            if self._registry.has_algorithm(algorithm_id):
                self._config.set_algorithm_id(algorithm_id)
            else:
                log.warning(
                    "Unknown saved algorithm %r, using %r",
                    algorithm_id,
                    self._registry.default_algorithm_id(),
                )
                self._config.set_algorithm_id(self._registry.default_algorithm_id())

        screens = data.get(KEY_AUTOTILE_SCREENS)
        if isinstance(screens, list):
            self._set_autotile_screens(s for s in screens if isinstance(s, str))

        per_screen = data.get(KEY_SCREENS)
        if isinstance(per_screen, dict):
            for screen_name, entry in per_screen.items():
                if not self.is_screen_tiled(screen_name) or not isinstance(entry, dict):
                    continue
                self._restore_screen(screen_name, entry)

        self.retile()

    def _restore_screen(self, screen_name: str, entry: Dict[str, Any]):
        state = self.state_for_screen(screen_name)
        try:
            state.set_split_ratio(float(entry.get(KEY_SPLIT_RATIO, state.split_ratio)))
        except (OverflowError, TypeError, ValueError):
            log.warning("Ignoring invalid split ratio for %s", screen_name)
        try:
            count = int(entry.get(KEY_MASTER_COUNT, state.master_count))
        except (OverflowError, TypeError, ValueError):
            log.warning("Ignoring invalid master count for %s", screen_name)
            return
        state.set_master_count(count)
