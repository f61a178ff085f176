"""Capture → OCR → translate → log → render pipeline.

One call to PipelineOrchestrator.run() is one pipeline run:

    Idle → Verifying → Capturing → Translating → Logging → Rendering → Idle

The first failing step ends the run with exactly one error line in the
log, and the renderer is not called, so the overlay keeps showing the
last good translation. Runs never overlap.
"""

import threading
from dataclasses import dataclass
from enum import Enum

from . import log
from .backends.base import OCREngine, TranslationProvider
from .config import TranslationConfig
from .errors import OCRError, PipelineError, TranslationError, VerificationFailed
from .geometry import Rect
from .log import LogSink
from .overlay.render import Renderer
from .overlay.state import OverlaySnapshot, OverlayState

logger = log.get_logger()

MSG_START = "Starting OCR overlay"
MSG_EXIT = "Exiting cleanly"
MSG_VERIFICATION_FAILED = "Translation API verification failed"
MSG_OCR_FAILED = "OCR failed; no text captured"
MSG_TRANSLATION_FAILED = "Translation failed; no translation returned"


class PipelineStage(Enum):
    """Where a pipeline run currently is (or where it stopped)."""

    IDLE = "idle"
    VERIFYING = "verifying"
    CAPTURING = "capturing"
    TRANSLATING = "translating"
    LOGGING = "logging"
    RENDERING = "rendering"


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run.

    Exactly one of `text` and `error` is set. `snapshot` is the overlay
    state read at the start of capture; it is None if the run stopped
    before capturing.
    """

    text: str | None = None
    error: PipelineError | None = None
    snapshot: OverlaySnapshot | None = None
    stage: PipelineStage = PipelineStage.IDLE

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        """Process exit code for a single-pass run: 0 on success, 1 on failure."""
        return 0 if self.ok else 1


def failure_message(error: PipelineError) -> str:
    """Error-log line for a fatal pipeline error."""
    if isinstance(error, VerificationFailed):
        if str(error) == MSG_VERIFICATION_FAILED:
            return MSG_VERIFICATION_FAILED
        return f"{MSG_VERIFICATION_FAILED} ({error})"
    if isinstance(error, OCRError):
        return f"{MSG_OCR_FAILED} ({error})"
    if isinstance(error, TranslationError):
        return f"{MSG_TRANSLATION_FAILED} ({error})"
    return str(error)


class PipelineOrchestrator:
    """Runs the pipeline against injected collaborators.

    The orchestrator only depends on the OCREngine, TranslationProvider,
    LogSink and Renderer interfaces, so any of them can be swapped for a
    test double.
    """

    def __init__(
        self,
        config: TranslationConfig,
        overlay: OverlayState,
        ocr: OCREngine,
        translator: TranslationProvider,
        log_sink: LogSink,
        renderer: Renderer,
    ):
        self._config = config
        self._overlay = overlay
        self._ocr = ocr
        self._translator = translator
        self._log = log_sink
        self._renderer = renderer

        # Held for the whole of a run; not reentrant
        self._run_lock = threading.Lock()
        self._stage = PipelineStage.IDLE

    @property
    def overlay(self) -> OverlayState:
        return self._overlay

    @property
    def stage(self) -> PipelineStage:
        return self._stage

    @property
    def in_flight(self) -> bool:
        """Whether a run is currently executing."""
        return self._run_lock.locked()

    def run(self) -> PipelineResult:
        """Run the pipeline once, waiting for any active run to finish first."""
        with self._run_lock:
            return self._run()

    def try_run(self) -> PipelineResult | None:
        """Run the pipeline once unless a run is already active.

        Returns:
            The run's result, or None if the trigger was dropped.
        """
        if not self._run_lock.acquire(blocking=False):
            logger.debug("pipeline busy, trigger dropped")
            return None
        try:
            return self._run()
        finally:
            self._run_lock.release()

    def close(self) -> None:
        """Release the OCR engine and translation provider."""
        self._ocr.close()
        self._translator.close()

    def _set_stage(self, stage: PipelineStage) -> None:
        self._stage = stage
        logger.debug("pipeline stage", stage=stage.value)

    def _run(self) -> PipelineResult:
        self._log.info(MSG_START)

        snapshot: OverlaySnapshot | None = None
        ocr_text: str | None = None
        translated: str | None = None
        try:
            self._set_stage(PipelineStage.VERIFYING)
            if self._config.verify_before_use:
                self._verify()

            self._set_stage(PipelineStage.CAPTURING)
            snapshot = self._overlay.snapshot()
            ocr_text = self._extract(snapshot.bounds)

            self._set_stage(PipelineStage.TRANSLATING)
            translated = self._translate(ocr_text)
            ocr_text = None

            self._set_stage(PipelineStage.LOGGING)
            self._log.translation(translated)

            self._set_stage(PipelineStage.RENDERING)
            self._render(snapshot, translated)

            result = PipelineResult(text=translated, snapshot=snapshot, stage=self._stage)
        except PipelineError as e:
            stopped_at = self._stage
            self._log.error(failure_message(e))
            logger.debug("pipeline failed", stage=stopped_at.value, err=str(e))
            return PipelineResult(error=e, snapshot=snapshot, stage=stopped_at)
        finally:
            # Drop intermediate text on every exit path
            ocr_text = None
            translated = None
            self._set_stage(PipelineStage.IDLE)

        self._log.info(MSG_EXIT)
        return result

    def _verify(self) -> None:
        try:
            usable = self._translator.verify()
        except VerificationFailed:
            raise
        except Exception as e:
            raise VerificationFailed(f"provider check raised: {e}") from e
        if not usable:
            raise VerificationFailed(MSG_VERIFICATION_FAILED)

    def _extract(self, region: Rect) -> str:
        try:
            text = self._ocr.extract(region)
        except OCRError:
            raise
        except Exception as e:
            raise OCRError(f"OCR engine error: {e}") from e
        if not text or not text.strip():
            raise OCRError(f"no text recognized in region {region}")
        return text

    def _translate(self, text: str) -> str:
        try:
            translated = self._translator.translate(text)
        except TranslationError:
            raise
        except Exception as e:
            raise TranslationError(f"translation provider error: {e}") from e
        if not translated:
            raise TranslationError("translation provider returned no text")
        return translated

    def _render(self, snapshot: OverlaySnapshot, text: str) -> None:
        # Presentation problems belong to the renderer, not to the run
        try:
            self._renderer.render(snapshot, text)
        except Exception as e:
            logger.warning("render failed", err=str(e))
