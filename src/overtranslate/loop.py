"""Repeating pipeline runner for long-lived overlay sessions."""

import threading
from collections.abc import Callable

from . import log
from .pipeline import PipelineOrchestrator, PipelineResult

logger = log.get_logger()


class PipelineLoop:
    """Runs the pipeline on a timer and on demand, one run at a time.

    Uses a plain Python thread. Triggers that arrive while a run is active
    are coalesced into a single pending run that starts as soon as the
    active one finishes, so runs are queued, never interleaved.
    """

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        interval: float | None = 1.0,
        on_result: Callable[[PipelineResult], None] | None = None,
    ):
        """Initialize the loop.

        Args:
            orchestrator: Pipeline to run.
            interval: Seconds between timed runs. None disables the timer,
                      so runs only happen on trigger().
            on_result: Called from the loop thread after every run.
        """
        self._orchestrator = orchestrator
        self._interval = interval
        self._on_result = on_result

        self._condition = threading.Condition()
        self._pending = False
        self._running = False
        self._thread: threading.Thread | None = None

        self._last_result: PipelineResult | None = None
        self._runs = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_result(self) -> PipelineResult | None:
        with self._condition:
            return self._last_result

    @property
    def runs(self) -> int:
        """Number of completed runs, including ones that crashed."""
        with self._condition:
            return self._runs

    def start(self) -> None:
        """Start the loop thread."""
        if self._thread is not None:
            return

        self._running = True
        if self._interval is not None:
            # First timed run happens immediately
            with self._condition:
                self._pending = True
        self._thread = threading.Thread(target=self._run, name="pipeline-loop", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop the loop and wait for an in-flight run to finish."""
        with self._condition:
            self._running = False
            self._condition.notify_all()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def trigger(self) -> None:
        """Request a run as soon as the loop is free."""
        with self._condition:
            self._pending = True
            self._condition.notify_all()

    def wait_for_runs(self, count: int, timeout: float | None = None) -> bool:
        """Block until at least `count` runs have completed.

        Returns:
            True if the count was reached, False on timeout.
        """
        with self._condition:
            return self._condition.wait_for(lambda: self._runs >= count, timeout)

    def _next_run(self) -> bool:
        """Wait for a trigger or the timer. Returns False when stopping."""
        with self._condition:
            self._condition.wait_for(
                lambda: self._pending or not self._running,
                self._interval,
            )
            self._pending = False
            return self._running

    def _run(self) -> None:
        logger.debug("pipeline loop starting", interval=self._interval)

        while self._next_run():
            try:
                result = self._orchestrator.run()
            except Exception as e:
                logger.error("pipeline run crashed", err=repr(e))
                result = None

            with self._condition:
                if result is not None:
                    self._last_result = result
                self._runs += 1
                self._condition.notify_all()

            if result is None:
                continue

            if self._on_result is not None:
                try:
                    self._on_result(result)
                except Exception as e:
                    logger.error("result callback failed", err=str(e))

        logger.debug("pipeline loop stopped", runs=self._runs)
