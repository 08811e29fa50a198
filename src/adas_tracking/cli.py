"""
ADAS Tracking CLI
Replays a recorded detection log through the tracking pipeline.

  python -m adas_tracking detections.jsonl
  python -m adas_tracking detections.jsonl --video drive.mp4
  python -m adas_tracking --validate
"""

import argparse
import logging
import signal
import sys
from threading import Event

from .config import (
    ConfigValidationError,
    apply_overrides,
    find_config_file,
    load_config,
    load_config_with_env,
    print_validation_result,
    read_config_file,
    validate_config_full,
)
from .loop import FrameLoop
from .output import ResultWriter
from .pipeline import FramePipeline
from .sources import ReplaySource, VideoScanSource
from .utils.constants import ENV_DETECTIONS_PATH, ENV_JITTER_SEED

logger = logging.getLogger(__name__)

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = Event()


def _handle_shutdown_signal(signum, _frame):
    """Handle SIGTERM/SIGINT: stop after the frame in progress."""
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, stopping after current frame...")
    _shutdown_signal.set()


def _setup_signal_handlers():
    """Register signal handlers for graceful shutdown."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("adas_tracking.", "adas.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="ADAS Tracking - track identities, lane position and collision risk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  python -m adas_tracking detections.jsonl              # Replay a detection log
  python -m adas_tracking detections.jsonl --video v.mp4 # Sample lane scan-line from video
  python -m adas_tracking detections.jsonl --seed 7      # Reproducible simulated signals
  python -m adas_tracking --validate                    # Check config validity

Environment Variables:
  {ENV_DETECTIONS_PATH} - Override detection log path from config
  {ENV_JITTER_SEED} - Seed for simulated signals
        """,
    )

    parser.add_argument(
        "detections",
        nargs="?",
        help="JSONL detection log (default: source.detections from config)",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: ./config.yaml if present)",
    )

    parser.add_argument("--video", help="Video file matching the detection log")

    parser.add_argument("--seed", type=int, help="Seed for simulated signals")

    parser.add_argument(
        "-o", "--output-dir", help="Directory for the JSONL frame log (default: from config)"
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors (results still written to file)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict:
    """Map command line flags onto config sections."""
    overrides: dict[str, dict] = {}
    if args.detections:
        overrides.setdefault("source", {})["detections"] = args.detections
    if args.video:
        overrides.setdefault("source", {})["video"] = args.video
    if args.seed is not None:
        overrides.setdefault("jitter", {})["seed"] = args.seed
    if args.output_dir:
        overrides.setdefault("output", {})["json_dir"] = args.output_dir
    return overrides


def run_validate(args: argparse.Namespace) -> int:
    """Print the validation result; returns the exit code."""
    try:
        config_file = find_config_file(args.config)
        config = read_config_file(config_file) if config_file else {}
    except ConfigValidationError as e:
        logger.error(str(e))
        return 1

    config = load_config_with_env(config)
    apply_overrides(config, _cli_overrides(args))

    result = validate_config_full(config)
    print_validation_result(result)
    return 0 if result.valid else 1


def run_replay(args: argparse.Namespace) -> int:
    """Replay the configured detection log; returns the exit code."""
    try:
        config = load_config(args.config, overrides=_cli_overrides(args))
    except ConfigValidationError as e:
        logger.error(str(e))
        if e.result is not None:
            print_validation_result(e.result)
        return 1

    if not config.source.detections:
        logger.error("No detection log given (argument, config source.detections, or env)")
        return 1

    source = ReplaySource(config.source.detections, assumed_fps=config.tracking.assumed_fps)
    if config.source.video:
        source = VideoScanSource(source, config.source.video, config.lane.scan_line_pct)

    pipeline = FramePipeline(config, source_id=config.source.detections)

    _setup_signal_handlers()

    try:
        with ResultWriter(config.output.json_dir, config.output.console_level) as writer:
            stats = FrameLoop(
                pipeline, source, writer=writer, shutdown_event=_shutdown_signal
            ).run()
    except (OSError, RuntimeError) as e:
        logger.error(f"Replay failed: {e}")
        return 1

    return 0 if stats.frames > 0 else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.quiet)

    if args.validate:
        sys.exit(run_validate(args))

    sys.exit(run_replay(args))


if __name__ == "__main__":
    main()
