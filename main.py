"""Command-line entry point for the perception fusion runtime."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

import yaml

from config import ConfigController
from core.logging import enable_file_logging, log_error, log_info, log_warning, logger, set_level


def configure_logging(level_name: str) -> None:
    """Configure application logging."""

    level = logging._nameToLevel.get(level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_level(level_name)


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Raw command-line arguments.

    Returns:
        Parsed arguments namespace.
    """

    parser = argparse.ArgumentParser(
        description="Fuse recorded perception frames into navigation and sign feedback."
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Run diagnostics probes and exit.",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        metavar="PATH",
        help="Replay a YAML recording of vision, depth and gesture frames.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Override the configured logging level (DEBUG, INFO, ...).",
    )
    return parser.parse_args(argv)


def run_diagnostics_report() -> int:
    from config.diagnostics import probe as config_probe
    from core.diagnostics import probe as core_probe
    from diagnostics.runner import format_results, run_diagnostics
    from navigation.diagnostics import probe as navigation_probe
    from signs.diagnostics import probe as signs_probe

    results = run_diagnostics(
        [
            config_probe,
            core_probe,
            navigation_probe,
            signs_probe,
        ]
    )
    print(format_results(results))
    return 1 if any(result.failed for result in results) else 0


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    config = ConfigController.get_instance().get_config()
    configure_logging(args.log_level or config.get("logging_level", "INFO"))

    if args.diagnostics:
        return run_diagnostics_report()

    if config.get("file_logging_enabled", False):
        log_file_path = Path(str(config.get("log_file", "log/fusion.log")))
        enable_file_logging(log_file_path)
        log_info(f"Writing logs to {log_file_path}")

    if args.replay is None:
        log_warning("Nothing to do: pass --replay PATH or --diagnostics")
        return 2

    from core.replay import RecordingError, load_recording, replay
    from core.session import FusionSession

    try:
        frames = load_recording(args.replay)
    except (OSError, yaml.YAMLError, RecordingError) as exc:
        log_error(f"Cannot load recording {args.replay}: {exc}")
        return 1

    session = FusionSession.from_config(config)
    session.start()
    try:
        log_info(f"Replaying {len(frames)} frames from {args.replay}", style="bold cyan")
        depth_cfg = config.get("depth") or {}
        summary = replay(
            session,
            frames,
            min_point_confidence=float(depth_cfg.get("min_point_confidence", 0.5)),
        )
    except Exception as exc:
        logger.exception("Replay failed: %s", exc)
        return 1
    finally:
        session.stop()

    print(summary.format())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
