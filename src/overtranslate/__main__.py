"""Main entry point for overtranslate.

This module is executed when running:
- python -m overtranslate
- overtranslate (via pyproject.toml entry point)
"""

import argparse
import dataclasses
import sys
import time

from . import log
from .backends.registry import get_registry
from .config import Config
from .errors import ConfigError
from .geometry import Rect
from .log import LogSink
from .loop import PipelineLoop
from .overlay.controls import OverlayControls
from .overlay.render import ConsoleRenderer
from .overlay.state import OverlayState
from .pipeline import PipelineOrchestrator

EXIT_CONFIG_ERROR = 2
QUIT_POLL_INTERVAL = 0.1  # Sleep between quit checks in loop mode (seconds)


def list_backends() -> None:
    """Print the registered OCR and translation backends."""
    registry = get_registry()
    print("OCR backends:")
    for info in registry.get_ocr_backends():
        print(f"  {info.id:<10} {info.name} - {info.description}")
    print("Translation backends:")
    for info in registry.get_translation_backends():
        print(f"  {info.id:<10} {info.name} - {info.description}")


def _parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="overtranslate",
        description="Capture a screen region, OCR it, translate it and show it in an overlay",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config file (default: config.yml)"
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running the pipeline on a timer with hotkeys (default: single pass)"
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the fixed-text OCR and prefix translation backends"
    )
    parser.add_argument(
        "--ocr-backend",
        type=str,
        default=None,
        help="OCR backend id (overrides config)"
    )
    parser.add_argument(
        "--translation-backend",
        type=str,
        default=None,
        help="Translation backend id (overrides config)"
    )
    parser.add_argument(
        "--region", "-r",
        type=Rect.parse,
        default=None,
        help="Overlay/capture region as X,Y,W,H (overrides config)"
    )
    parser.add_argument(
        "--lock",
        action="store_true",
        help="Start with the overlay locked"
    )
    parser.add_argument(
        "--list-backends", "-l",
        action="store_true",
        help="List available backends and exit"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show diagnostic logging"
    )

    return parser.parse_args(argv)


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Return a copy of config with command-line overrides applied."""
    changes = {}
    if args.offline:
        changes["ocr_backend"] = "fixed"
        changes["translation_backend"] = "prefix"
    if args.ocr_backend:
        changes["ocr_backend"] = args.ocr_backend
    if args.translation_backend:
        changes["translation_backend"] = args.translation_backend

    overlay_changes = {}
    if args.region is not None:
        overlay_changes["bounds"] = args.region
    if args.lock:
        overlay_changes["start_locked"] = True
    if overlay_changes:
        changes["overlay"] = dataclasses.replace(config.overlay, **overlay_changes)

    return dataclasses.replace(config, **changes) if changes else config


def build_orchestrator(config: Config) -> PipelineOrchestrator:
    """Wire up the pipeline from configuration.

    Raises:
        ConfigError: If a configured backend is unknown.
    """
    registry = get_registry()
    return PipelineOrchestrator(
        config=config.translation,
        overlay=OverlayState.from_config(config.overlay),
        ocr=registry.create_ocr_engine(config),
        translator=registry.create_translation_provider(config),
        log_sink=LogSink(config.logging),
        renderer=ConsoleRenderer(),
    )


def _run_loop(orchestrator: PipelineOrchestrator, config: Config) -> int:
    """Run the pipeline repeatedly until the user quits."""
    loop = PipelineLoop(orchestrator, interval=config.refresh_rate)
    controls = OverlayControls(orchestrator.overlay, on_trigger=loop.trigger)

    if controls.start_listener():
        print("Arrows move, [ ] resize, 'l' lock, -/= opacity, 't' translate now, 'q' quit")
    else:
        print("Hotkeys unavailable; press Ctrl-C to quit")

    loop.start()
    try:
        while loop.is_running and not controls.quit_requested:
            time.sleep(QUIT_POLL_INTERVAL)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        controls.stop_listener()
        loop.stop(timeout=config.translation.timeout + 1.0)

    last = loop.last_result
    return last.exit_code if last is not None else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit code: 0 when the (last) pipeline run succeeded, 1 when
        verification, OCR or translation failed, 2 on configuration errors.
    """
    args = _parse_arguments(argv)

    if args.list_backends:
        list_backends()
        return 0

    try:
        config = _apply_overrides(Config.load(args.config), args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    log.configure(config.logging.level, debug=args.debug)

    try:
        orchestrator = build_orchestrator(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Use --list-backends to see available backends.", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        if args.loop:
            return _run_loop(orchestrator, config)
        return orchestrator.run().exit_code
    finally:
        orchestrator.close()


if __name__ == "__main__":
    sys.exit(main())
