"""Shared, thread-safe overlay state."""

import threading
from collections.abc import Callable
from dataclasses import dataclass

from ..config import DEFAULT_BOUNDS, DEFAULT_OPACITY, OverlayConfig
from ..geometry import Rect


def clamp_opacity(value: float) -> float:
    """Clamp an opacity value into [0.0, 1.0]."""
    return min(1.0, max(0.0, float(value)))


@dataclass(frozen=True)
class OverlaySnapshot:
    """Consistent point-in-time copy of the overlay state."""

    bounds: Rect
    locked: bool
    opacity: float


class OverlayState:
    """Overlay bounds, lock flag and opacity.

    A passive store: set_bounds never refuses a change. Callers acting on
    the user's behalf go through update_bounds(..., unless_locked=True) so
    the lock check and the write are one step (see OverlayControls).

    Every accessor takes the same lock, so a snapshot always reflects
    whole values written by individual setters, never a mix of two.
    """

    def __init__(
        self,
        bounds: Rect = DEFAULT_BOUNDS,
        locked: bool = False,
        opacity: float = DEFAULT_OPACITY,
    ):
        self._lock = threading.Lock()
        self._bounds = bounds
        self._locked = locked
        self._opacity = clamp_opacity(opacity)

    @classmethod
    def from_config(cls, config: OverlayConfig) -> "OverlayState":
        return cls(bounds=config.bounds, locked=config.start_locked, opacity=config.opacity)

    @property
    def bounds(self) -> Rect:
        with self._lock:
            return self._bounds

    @property
    def locked(self) -> bool:
        with self._lock:
            return self._locked

    @property
    def opacity(self) -> float:
        with self._lock:
            return self._opacity

    def set_bounds(self, bounds: Rect) -> None:
        with self._lock:
            self._bounds = bounds

    def update_bounds(
        self,
        transform: Callable[[Rect], Rect],
        unless_locked: bool = False,
    ) -> Rect | None:
        """Replace bounds with transform(current bounds) in one locked step.

        Args:
            transform: Maps the current bounds to the new bounds.
            unless_locked: If True, leave bounds alone while locked.

        Returns:
            The new bounds, or None if the change was skipped.
        """
        with self._lock:
            if unless_locked and self._locked:
                return None
            self._bounds = transform(self._bounds)
            return self._bounds

    def set_locked(self, locked: bool) -> None:
        with self._lock:
            self._locked = bool(locked)

    def set_opacity(self, value: float) -> None:
        """Store opacity, clamped into [0.0, 1.0]."""
        value = clamp_opacity(value)
        with self._lock:
            self._opacity = value

    def snapshot(self) -> OverlaySnapshot:
        with self._lock:
            return OverlaySnapshot(
                bounds=self._bounds,
                locked=self._locked,
                opacity=self._opacity,
            )

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"OverlayState(bounds={snap.bounds!r}, locked={snap.locked}, "
            f"opacity={snap.opacity:.2f})"
        )
