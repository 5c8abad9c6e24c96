"""
Shared pytest fixtures for autotile tests.
"""

import pytest
from pubsub import pub

from autotile import topics
from autotile.config import AutotileConfig
from autotile.engine import AutotileEngine
from autotile.geometry import Rect
from autotile.registry import AlgorithmRegistry
from autotile.screens import StaticScreenProvider
from autotile.tiling_state import TilingState


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: engine driven over the event bus")


@pytest.fixture(autouse=True)
def clean_bus():
    """Drop every bus listener after each test."""
    yield
    pub.unsubAll()


@pytest.fixture
def standard_area():
    """Standard 1920x1080 area for layout tests."""
    return Rect(0, 0, 1920, 1080)


@pytest.fixture
def square_area():
    """1000x1000 area, handy for round numbers."""
    return Rect(0, 0, 1000, 1000)


@pytest.fixture
def small_area():
    """Small 800x600 area for layout tests."""
    return Rect(0, 0, 800, 600)


@pytest.fixture
def state():
    """Empty tiling state for screen DP-1."""
    return TilingState("DP-1")


@pytest.fixture
def make_state():
    """Factory fixture for states pre-filled with windows w1..wN."""

    def _make(count, screen_name="DP-1"):
        state = TilingState(screen_name)
        for i in range(count):
            state.add_window(f"w{i + 1}")
        return state

    return _make


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def screens():
    """Two side-by-side 1000x1000 screens, DP-1 primary."""
    return StaticScreenProvider(
        {
            "DP-1": Rect(0, 0, 1000, 1000),
            "DP-2": Rect(1000, 0, 1000, 1000),
        }
    )


class BusRecorder:
    """Records everything the engine publishes."""

    def __init__(self):
        self.tiled = []
        self.released = []
        self.visibility = []
        self.feedback = []
        self.focus_requests = []
        self.algorithm_changes = []
        self.screen_changes = []
        self.tiling_changes = []

        pub.subscribe(self._on_windows_tiled, topics.WINDOWS_TILED)
        pub.subscribe(self._on_windows_released, topics.WINDOWS_RELEASED)
        pub.subscribe(self._on_monocle_visibility, topics.MONOCLE_VISIBILITY)
        pub.subscribe(self._on_navigation_feedback, topics.NAVIGATION_FEEDBACK)
        pub.subscribe(self._on_focus_requested, topics.FOCUS_REQUESTED)
        pub.subscribe(self._on_algorithm_changed, topics.ALGORITHM_CHANGED)
        pub.subscribe(self._on_screens_changed, topics.SCREENS_CHANGED)
        pub.subscribe(self._on_tiling_changed, topics.TILING_CHANGED)

    def _on_windows_tiled(self, screen_name, placements):
        self.tiled.append((screen_name, list(placements)))

    def _on_windows_released(self, screen_name, window_ids):
        self.released.append((screen_name, list(window_ids)))

    def _on_monocle_visibility(self, screen_name, show_window, hide_windows):
        self.visibility.append((screen_name, show_window, list(hide_windows)))

    def _on_navigation_feedback(
        self, succeeded, action, reason, source_zone, target_zone, screen_name
    ):
        self.feedback.append(
            {
                "succeeded": succeeded,
                "action": action,
                "reason": reason,
                "source_zone": source_zone,
                "target_zone": target_zone,
                "screen_name": screen_name,
            }
        )

    def _on_focus_requested(self, window_id):
        self.focus_requests.append(window_id)

    def _on_algorithm_changed(self, algorithm_id):
        self.algorithm_changes.append(algorithm_id)

    def _on_screens_changed(self, screen_names):
        self.screen_changes.append(list(screen_names))

    def _on_tiling_changed(self, screen_name):
        self.tiling_changes.append(screen_name)

    def last_placements(self, screen_name):
        """Placements of the most recent WINDOWS_TILED for a screen, as a dict."""
        for name, placements in reversed(self.tiled):
            if name == screen_name:
                return {p.window_id: p.rect for p in placements}
        return {}

    def last_order(self, screen_name):
        for name, placements in reversed(self.tiled):
            if name == screen_name:
                return [p.window_id for p in placements]
        return []

    def clear(self):
        for value in vars(self).values():
            value.clear()


@pytest.fixture
def recorder():
    return BusRecorder()


@pytest.fixture
def gapless_config():
    """Default config without gaps, so zones line up with screen pixels."""
    return AutotileConfig(inner_gap=0, outer_gap=0)


@pytest.fixture
def make_engine(screens, clock, gapless_config):
    """Factory fixture for engines on the two test screens."""
    engines = []

    def _make(config=None, registry=None, call_later=None, tiled=("DP-1",)):
        engine = AutotileEngine(
            pub,
            screens,
            config=config if config is not None else gapless_config,
            registry=registry if registry is not None else AlgorithmRegistry(),
            clock=clock,
            call_later=call_later,
        )
        engine.set_autotile_screens(tiled)
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.shutdown()


@pytest.fixture
def engine(make_engine):
    """Engine tiling DP-1 with the gapless default config."""
    return make_engine()


def _open_windows(count, screen_name="DP-1", prefix="w"):
    for i in range(count):
        pub.sendMessage(
            topics.WINDOW_OPENED,
            window_id=f"{prefix}{i + 1}",
            screen_name=screen_name,
            min_width=0,
            min_height=0,
        )


@pytest.fixture
def open_windows():
    """Publish WINDOW_OPENED for windows w1..wN."""
    return _open_windows
