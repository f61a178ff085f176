"""Overlay state, rendering and input handling."""

from .controls import OverlayControls
from .render import ConsoleRenderer, Renderer
from .state import OverlaySnapshot, OverlayState

__all__ = [
    "ConsoleRenderer",
    "OverlayControls",
    "OverlaySnapshot",
    "OverlayState",
    "Renderer",
]
