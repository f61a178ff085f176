"""Tests for the repeating pipeline runner."""

import threading
from unittest.mock import MagicMock

from overtranslate.backends.base import OCRBackendInfo, OCREngine
from overtranslate.backends.translation.prefix import PrefixTranslationProvider
from overtranslate.config import TranslationConfig
from overtranslate.log import MemoryLogSink
from overtranslate.loop import PipelineLoop
from overtranslate.overlay.state import OverlayState
from overtranslate.pipeline import PipelineOrchestrator, PipelineResult


class GatedOCREngine(OCREngine):
    """Blocks inside extract() until the test opens the gate."""

    def __init__(self):
        self.entered = threading.Event()
        self.gate = threading.Event()
        self.calls = 0

    @classmethod
    def get_info(cls):
        return OCRBackendInfo(id="gated", name="Gated")

    def extract(self, region):
        self.calls += 1
        self.entered.set()
        self.gate.wait(5)
        return "hello"


def _orchestrator(ocr):
    config = TranslationConfig(api_url="https://example.test", api_key="k")
    sink = MemoryLogSink()
    renderer = type("R", (), {"render": lambda self, snapshot, text: None})()
    orchestrator = PipelineOrchestrator(
        config=config,
        overlay=OverlayState(),
        ocr=ocr,
        translator=PrefixTranslationProvider(config),
        log_sink=sink,
        renderer=renderer,
    )
    return orchestrator, sink


class TestPipelineLoop:
    """Tests for PipelineLoop."""

    def test_trigger_runs_pipeline(self):
        ocr = GatedOCREngine()
        ocr.gate.set()
        orchestrator, _ = _orchestrator(ocr)
        results = []
        loop = PipelineLoop(orchestrator, interval=None, on_result=results.append)

        loop.start()
        try:
            loop.trigger()
            assert loop.wait_for_runs(1, timeout=5)
        finally:
            loop.stop(timeout=5)

        assert loop.last_result.ok
        assert loop.last_result.text == "[translated] hello"
        assert results and results[0].ok

    def test_timer_runs_repeatedly(self):
        ocr = GatedOCREngine()
        ocr.gate.set()
        orchestrator, _ = _orchestrator(ocr)
        loop = PipelineLoop(orchestrator, interval=0.01)

        loop.start()
        try:
            assert loop.wait_for_runs(3, timeout=5)
        finally:
            loop.stop(timeout=5)

        assert loop.runs >= 3

    def test_triggers_during_run_are_coalesced(self):
        """Many triggers while busy queue exactly one follow-up run."""
        ocr = GatedOCREngine()
        orchestrator, sink = _orchestrator(ocr)
        loop = PipelineLoop(orchestrator, interval=None)

        loop.start()
        try:
            loop.trigger()
            assert ocr.entered.wait(5)
            for _ in range(10):
                loop.trigger()
            ocr.gate.set()
            assert loop.wait_for_runs(2, timeout=5)
            # No third run is pending
            assert not loop.wait_for_runs(3, timeout=0.2)
        finally:
            loop.stop(timeout=5)

        assert ocr.calls == 2
        info = [line.rsplit("] ", 1)[1] for line in sink.lines("info")]
        assert info == ["Starting OCR overlay", "Exiting cleanly"] * 2

    def test_stop_without_start(self):
        ocr = GatedOCREngine()
        orchestrator, _ = _orchestrator(ocr)
        PipelineLoop(orchestrator).stop()

    def test_callback_errors_do_not_kill_loop(self):
        ocr = GatedOCREngine()
        ocr.gate.set()
        orchestrator, _ = _orchestrator(ocr)

        def bad_callback(result):
            raise RuntimeError("ui gone")

        loop = PipelineLoop(orchestrator, interval=None, on_result=bad_callback)
        loop.start()
        try:
            loop.trigger()
            assert loop.wait_for_runs(1, timeout=5)
            loop.trigger()
            assert loop.wait_for_runs(2, timeout=5)
        finally:
            loop.stop(timeout=5)

    def test_crashing_run_does_not_kill_loop(self):
        ok = PipelineResult(text="[translated] hello")
        orchestrator = MagicMock(spec=PipelineOrchestrator)
        orchestrator.run.side_effect = [RuntimeError("sink exploded"), ok]
        results = []
        loop = PipelineLoop(orchestrator, interval=None, on_result=results.append)

        loop.start()
        try:
            loop.trigger()
            assert loop.wait_for_runs(1, timeout=5)
            assert loop.is_running
            assert loop.last_result is None
            loop.trigger()
            assert loop.wait_for_runs(2, timeout=5)
        finally:
            loop.stop(timeout=5)

        assert loop.last_result is ok
        assert results == [ok]

    def test_first_timed_run_is_immediate(self):
        ocr = GatedOCREngine()
        ocr.gate.set()
        orchestrator, _ = _orchestrator(ocr)
        loop = PipelineLoop(orchestrator, interval=60)

        loop.start()
        try:
            assert loop.wait_for_runs(1, timeout=5)
            assert not loop.wait_for_runs(2, timeout=0.2)
        finally:
            loop.stop(timeout=5)
