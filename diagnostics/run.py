"""Command-line entry point for running diagnostics."""

from __future__ import annotations

import argparse
from pathlib import Path
import tempfile

from config.diagnostics import probe as config_probe
from core.diagnostics import probe as core_probe
from diagnostics.runner import format_results, run_diagnostics
from navigation.diagnostics import probe as navigation_probe
from signs.diagnostics import probe as signs_probe


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(description="Run diagnostics probes.")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Run probes against a temporary offline directory.",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Optional base directory for offline diagnostics.",
    )
    parser.add_argument(
        "--stability-threshold",
        type=int,
        default=3,
        help="Gesture stability threshold exercised by the signs probe.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run diagnostics and return an exit code."""

    args = parse_args(argv)
    base_dir = args.base_dir

    def signs_probe_configured():
        return signs_probe(threshold=args.stability_threshold)

    if args.offline and base_dir is None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_base = Path(tmp_dir)
            config_dir = tmp_base / "config"
            config_dir.mkdir(parents=True, exist_ok=True)
            (config_dir / "default.yaml").write_text("{}", encoding="utf-8")

            def config_probe_offline():
                return config_probe(base_dir=tmp_base)

            results = run_diagnostics(
                [
                    config_probe_offline,
                    core_probe,
                    navigation_probe,
                    signs_probe_configured,
                ]
            )
    else:
        def config_probe_with_base():
            return config_probe(base_dir=base_dir)

        results = run_diagnostics(
            [
                config_probe_with_base,
                core_probe,
                navigation_probe,
                signs_probe_configured,
            ]
        )

    print(format_results(results))
    return 1 if any(result.failed for result in results) else 0


if __name__ == "__main__":
    raise SystemExit(main())
