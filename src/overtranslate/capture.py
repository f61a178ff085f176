"""Screen region capture using mss.

Frames are returned as numpy arrays in native BGRA format, the layout
mss produces. Use bgra_to_rgb()/bgra_to_rgb_pil() to hand them to
consumers that need RGB.
"""

import threading

import mss
import mss.exception
import numpy as np
from numpy.typing import NDArray

from . import log
from .errors import OCRError
from .geometry import Rect

logger = log.get_logger()

# Type alias for BGRA frame (height, width, 4 channels)
BGRAFrame = NDArray[np.uint8]


def bgra_to_rgb(frame: BGRAFrame) -> NDArray[np.uint8]:
    """Convert BGRA numpy array to RGB numpy array.

    Args:
        frame: numpy array of shape (H, W, 4) in BGRA format.

    Returns:
        numpy array of shape (H, W, 3) in RGB format.
    """
    # Reorder channels: B=0, G=1, R=2, A=3 -> R=2, G=1, B=0
    rgb = frame[:, :, [2, 1, 0]]
    return np.ascontiguousarray(rgb)


def bgra_to_rgb_pil(frame: BGRAFrame):
    """Convert BGRA numpy array to PIL RGB Image."""
    from PIL import Image

    return Image.fromarray(bgra_to_rgb(frame))


class ScreenCapture:
    """Grabs rectangular regions of the virtual desktop.

    mss handles are not shareable across threads, so each thread gets its
    own handle, created on first use.
    """

    def __init__(self):
        self._local = threading.local()

    def _sct(self):
        sct = getattr(self._local, "sct", None)
        if sct is None:
            sct = self._local.sct = mss.mss()
        return sct

    def display_bounds(self) -> Rect:
        """Bounds of the virtual desktop spanning every monitor."""
        monitor = self._sct().monitors[0]
        return Rect(
            x=monitor["left"],
            y=monitor["top"],
            width=monitor["width"],
            height=monitor["height"],
        )

    def grab(self, region: Rect) -> BGRAFrame:
        """Capture a region of the screen.

        Args:
            region: Area to capture, in desktop coordinates.

        Returns:
            numpy array (H, W, 4) in BGRA format.

        Raises:
            OCRError: If the region is empty, lies outside the display, or
                the capture produced no pixels.
        """
        if region.is_empty:
            raise OCRError(f"capture region {region} is empty")

        display = self.display_bounds()
        if not display.contains(region):
            raise OCRError(f"capture region {region} is outside display bounds {display}")

        try:
            shot = self._sct().grab(region.as_monitor())
        except mss.exception.ScreenShotError as e:
            raise OCRError(f"screen capture failed: {e}") from e

        frame = np.asarray(shot, dtype=np.uint8)
        if frame.size == 0:
            raise OCRError("screen capture returned an empty frame")

        logger.debug("region captured", region=str(region), shape=str(frame.shape))
        return frame

    def close(self) -> None:
        sct = getattr(self._local, "sct", None)
        if sct is not None:
            sct.close()
            self._local.sct = None
