"""overtranslate - live "translate what you see" screen overlay.

Captures a region of the display, extracts its text with OCR, sends the
text to a translation provider and renders the translation over the
captured region.
"""

__version__ = "0.1.0"

# Public API
from .__main__ import main
from .geometry import Rect
from .overlay.state import OverlaySnapshot, OverlayState
from .pipeline import PipelineOrchestrator, PipelineResult, PipelineStage

__all__ = [
    "OverlaySnapshot",
    "OverlayState",
    "PipelineOrchestrator",
    "PipelineResult",
    "PipelineStage",
    "Rect",
    "main",
    "__version__",
]
