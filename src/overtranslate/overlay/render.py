"""Renderers that present translated text for an overlay snapshot."""

import sys
from typing import Protocol, TextIO

from .. import log
from .state import OverlaySnapshot

logger = log.get_logger()


class Renderer(Protocol):
    """Presents translated text over the overlay region.

    The pipeline ignores the return value; presentation failures are the
    renderer's own concern.
    """

    def render(self, snapshot: OverlaySnapshot, text: str) -> None:
        ...


class ConsoleRenderer:
    """Prints the overlay geometry and text to a console stream."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def render(self, snapshot: OverlaySnapshot, text: str) -> None:
        stream = self._stream or sys.stdout
        bounds = snapshot.bounds
        line = (
            f"[OVERLAY] pos=({bounds.x},{bounds.y}) size={bounds.width}x{bounds.height} "
            f"locked={'yes' if snapshot.locked else 'no'} opacity={snapshot.opacity:.2f} "
            f"text='{text}'"
        )
        try:
            print(line, file=stream, flush=True)
        except (OSError, ValueError) as e:
            logger.warning("render failed", err=str(e))
