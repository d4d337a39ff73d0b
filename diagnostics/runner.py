"""Diagnostics runner utilities."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
import time

from core.logging import logger as LOGGER
from diagnostics.models import DiagnosticResult, DiagnosticStatus


Probe = Callable[[], DiagnosticResult]


def format_results(results: Iterable[DiagnosticResult]) -> str:
    """Return a human-friendly diagnostics report."""

    lines = ["Fusion diagnostics report", "-" * 60]
    for result in results:
        lines.append(
            f"[{result.status.value}] {result.name}: {result.details} "
            f"({result.duration_ms:.1f} ms)"
        )
    lines.append("-" * 60)
    return "\n".join(lines)


def run_diagnostics(probes: Iterable[Probe]) -> list[DiagnosticResult]:
    """Run diagnostics probes in order and return timed results."""

    results: list[DiagnosticResult] = []
    for probe in probes:
        started = time.perf_counter()
        try:
            result = probe()
        except Exception as exc:  # noqa: BLE001 - diagnostics must keep running
            LOGGER.exception("Probe failed: %s", probe)
            result = DiagnosticResult(
                name=getattr(probe, "__module__", "unknown_probe"),
                status=DiagnosticStatus.FAIL,
                details=f"Probe raised exception: {exc}",
            )
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        results.append(replace(result, duration_ms=elapsed_ms))
    return results
