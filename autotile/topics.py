"""
Event Topics for autotile

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Every publisher of a topic sends the same keyword arguments each time, so
listeners can rely on a fixed signature.
"""

# Window lifecycle events (fed in by the window-manager integration)
WINDOW_OPENED = "window.opened"
"""Published when a tileable window appears. Args: window_id, screen_name, min_width, min_height."""

WINDOW_CLOSED = "window.closed"
"""Published when a window is closed. Args: window_id."""

WINDOW_FOCUSED = "window.focused"
"""Published when a window receives focus. Args: window_id, screen_name."""

# Screen events
SCREEN_GEOMETRY_CHANGED = "screen.geometry_changed"
"""Published when the available area of a screen changes. Args: screen_name."""

# Settings events
SETTINGS_CHANGED = "settings.changed"
"""Published when a single autotile setting changes. Args: field, value."""

# Tiling state events (published by TilingState)
STATE_WINDOW_COUNT_CHANGED = "state.window_count_changed"
"""Published when windows are added, removed, floated or unfloated. Args: screen_name."""

STATE_WINDOW_ORDER_CHANGED = "state.window_order_changed"
"""Published when the window order is rearranged. Args: screen_name."""

STATE_MASTER_COUNT_CHANGED = "state.master_count_changed"
"""Published when the master count changes. Args: screen_name."""

STATE_SPLIT_RATIO_CHANGED = "state.split_ratio_changed"
"""Published when the split ratio changes. Args: screen_name."""

STATE_FLOATING_CHANGED = "state.floating_changed"
"""Published when a window is floated or unfloated. Args: screen_name, window_id, floating."""

STATE_FOCUSED_WINDOW_CHANGED = "state.focused_window_changed"
"""Published when the focused window of a screen changes. Args: screen_name."""

STATE_CHANGED = "state.state_changed"
"""Published after any change that affects layout. Args: screen_name."""

# Registry events
REGISTRY_ALGORITHM_REGISTERED = "registry.algorithm_registered"
"""Published when an algorithm is registered. Args: algorithm_id."""

REGISTRY_ALGORITHM_UNREGISTERED = "registry.algorithm_unregistered"
"""Published when an algorithm is removed. Args: algorithm_id."""

# Engine output events (consumed by placement, OSD and UI collaborators)
WINDOWS_TILED = "autotile.windows_tiled"
"""Published once per applied retile. Args: screen_name, placements (list of WindowPlacement)."""

WINDOWS_RELEASED = "autotile.windows_released"
"""Published when a screen stops being tiled. Args: screen_name, window_ids."""

MONOCLE_VISIBILITY = "autotile.monocle_visibility"
"""Published in monocle mode with hide-others enabled. Args: screen_name, show_window, hide_windows."""

NAVIGATION_FEEDBACK = "autotile.navigation_feedback"
"""Published after a navigation command. Args: succeeded, action, reason, source_zone, target_zone, screen_name."""

FOCUS_REQUESTED = "autotile.focus_requested"
"""Published when the engine wants a window focused. Args: window_id."""

ALGORITHM_CHANGED = "autotile.algorithm_changed"
"""Published when the active algorithm changes. Args: algorithm_id."""

SCREENS_CHANGED = "autotile.screens_changed"
"""Published when the set of tiled screens changes. Args: screen_names."""

TILING_CHANGED = "autotile.tiling_changed"
"""Published after a screen has been retiled by an operation. Args: screen_name."""

# Command events (imperative - tell the engine to do something)
# These are triggered by keybinds, D-Bus/IPC bridges or scripts

CMD_RETILE = "cmd.retile"
"""Command: Retile every tiled screen."""

CMD_FOCUS_NEXT = "cmd.focus_next"
"""Command: Focus the next tiled window on the active screen."""

CMD_FOCUS_PREVIOUS = "cmd.focus_previous"
"""Command: Focus the previous tiled window on the active screen."""

CMD_FOCUS_MASTER = "cmd.focus_master"
"""Command: Focus the master window on the active screen."""

CMD_SWAP_MASTER = "cmd.swap_master"
"""Command: Swap the focused window with the master window."""

CMD_ROTATE = "cmd.rotate"
"""Command: Rotate the tiled window order. Args: clockwise."""

CMD_TOGGLE_FLOAT = "cmd.toggle_float"
"""Command: Toggle floating for the focused window."""

CMD_INCREASE_MASTER_RATIO = "cmd.increase_master_ratio"
"""Command: Grow the master area on every tiled screen."""

CMD_DECREASE_MASTER_RATIO = "cmd.decrease_master_ratio"
"""Command: Shrink the master area on every tiled screen."""

CMD_INCREASE_MASTER_COUNT = "cmd.increase_master_count"
"""Command: Add one window to the master area on every tiled screen."""

CMD_DECREASE_MASTER_COUNT = "cmd.decrease_master_count"
"""Command: Remove one window from the master area on every tiled screen."""
