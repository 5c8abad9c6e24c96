"""
Screen Geometry

Interface to whatever knows the screens and their usable areas (panels and
docks excluded), plus a simple dict-backed provider.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .geometry import Rect


class ScreenProvider(ABC):
    """Answers screen geometry queries for the engine."""

    @abstractmethod
    def available_geometry(self, screen_name: str) -> Rect:
        """Usable area of a screen, or an empty Rect for an unknown screen."""
        pass

    @abstractmethod
    def primary_screen_name(self) -> str:
        pass

    @abstractmethod
    def screen_names(self) -> List[str]:
        pass


class StaticScreenProvider(ScreenProvider):
    """Screens from a name -> Rect mapping.

    The first screen is primary unless another is named.
    """

    def __init__(self, geometries: Dict[str, Rect], primary: Optional[str] = None):
        self._geometries: Dict[str, Rect] = dict(geometries)
        self._primary = primary

    def available_geometry(self, screen_name: str) -> Rect:
        return self._geometries.get(screen_name, Rect())

    def primary_screen_name(self) -> str:
        if self._primary and self._primary in self._geometries:
            return self._primary
        return next(iter(self._geometries), "")

    def screen_names(self) -> List[str]:
        return list(self._geometries)

    def set_geometry(self, screen_name: str, geometry: Rect):
        """Add a screen or change its area. Callers announce the change themselves."""
        self._geometries[screen_name] = geometry

    def remove_screen(self, screen_name: str) -> bool:
        if self._geometries.pop(screen_name, None) is None:
            return False
        if self._primary == screen_name:
            self._primary = None
        return True
