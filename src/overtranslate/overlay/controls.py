"""User input handling for the overlay.

Moves, resizes, locks and fades the overlay in response to hotkeys. This
is where the lock flag is enforced: OverlayState itself accepts any
bounds, so every geometry change made on the user's behalf goes through
OverlayControls and is refused while the overlay is locked.
"""

from collections.abc import Callable
from typing import Any

from .. import log
from ..geometry import Rect
from .state import OverlayState

logger = log.get_logger()

MOVE_STEP = 10          # Pixels per arrow-key press
RESIZE_STEP = 20        # Pixels per resize key press
OPACITY_STEP = 0.1

# Arrow key name -> (dx, dy) direction
ARROW_DIRECTIONS = {
    "left": (-1, 0),
    "right": (1, 0),
    "up": (0, -1),
    "down": (0, 1),
}


class OverlayControls:
    """Applies user input to an OverlayState."""

    def __init__(
        self,
        overlay: OverlayState,
        on_trigger: Callable[[], None] | None = None,
    ):
        """Initialize controls.

        Args:
            overlay: State to mutate.
            on_trigger: Called when the user asks for a pipeline run.
        """
        self._overlay = overlay
        self._on_trigger = on_trigger
        self._listener = None
        self.quit_requested = False

    def set_bounds(self, bounds: Rect) -> bool:
        """Replace the overlay bounds unless locked.

        Returns:
            True if the bounds were changed.
        """
        return self._update(lambda _: bounds)

    def move(self, dx: int, dy: int) -> bool:
        return self._update(lambda b: b.translated(dx, dy))

    def resize(self, dw: int, dh: int) -> bool:
        return self._update(lambda b: b.resized(dw, dh))

    def _update(self, transform: Callable[[Rect], Rect]) -> bool:
        # Lock check and write happen under the state's own lock
        if self._overlay.update_bounds(transform, unless_locked=True) is None:
            logger.debug("overlay locked, bounds change refused")
            return False
        return True

    def toggle_lock(self) -> bool:
        """Flip the lock flag. Returns the new value."""
        locked = not self._overlay.locked
        self._overlay.set_locked(locked)
        logger.info("overlay lock", locked=locked)
        return locked

    def adjust_opacity(self, delta: float) -> float:
        """Change opacity by delta (clamped). Returns the new value."""
        self._overlay.set_opacity(self._overlay.opacity + delta)
        opacity = self._overlay.opacity
        logger.debug("overlay opacity", opacity=round(opacity, 2))
        return opacity

    def trigger(self) -> None:
        if self._on_trigger is not None:
            self._on_trigger()

    def on_key_press(self, key: Any) -> None:
        """Handle a pynput key press.

        Arrow keys move the overlay, '[' / ']' shrink or grow it, 'l'
        toggles the lock, '-' / '=' adjust opacity, 't' runs the pipeline
        and 'q' requests quit.
        """
        name = getattr(key, "name", None)
        if name in ARROW_DIRECTIONS:
            dx, dy = ARROW_DIRECTIONS[name]
            self.move(dx * MOVE_STEP, dy * MOVE_STEP)
            return

        char = getattr(key, "char", None)
        if char == "[":
            self.resize(-RESIZE_STEP, -RESIZE_STEP)
        elif char == "]":
            self.resize(RESIZE_STEP, RESIZE_STEP)
        elif char == "l":
            self.toggle_lock()
        elif char == "-":
            self.adjust_opacity(-OPACITY_STEP)
        elif char == "=":
            self.adjust_opacity(OPACITY_STEP)
        elif char == "t":
            self.trigger()
        elif char == "q":
            self.quit_requested = True

    def start_listener(self) -> bool:
        """Start a global keyboard listener in the background.

        Returns:
            True if the listener started, False if hotkeys are unavailable
            on this platform or session.
        """
        if self._listener is not None:
            return True
        try:
            from pynput import keyboard

            self._listener = keyboard.Listener(on_press=self.on_key_press)
            self._listener.start()
        except Exception as e:
            logger.warning("keyboard shortcuts unavailable", err=str(e))
            self._listener = None
            return False
        return True

    def stop_listener(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
