"""Diagnostics routines for sign-language stabilization."""

from __future__ import annotations

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from signs.stability import GestureObservation, GestureStabilityFilter


def probe(threshold: int = 3) -> DiagnosticResult:
    """Feed a held gesture through a fresh filter and expect one confirmation.

    Args:
        threshold: Stability threshold to exercise.

    Returns:
        Diagnostic result indicating sign stabilization readiness.
    """

    name = "signs"
    stability_filter = GestureStabilityFilter(threshold=threshold)
    observations = [
        GestureObservation(gesture_id="wave", meaning="hello", confidence=0.9, timestamp_ms=index)
        for index in range(2 * threshold - 1)
    ]
    confirmed = [gesture for gesture in map(stability_filter.observe, observations) if gesture is not None]

    if len(confirmed) != 1:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Expected one confirmation from {len(observations)} frames, got {len(confirmed)}",
        )
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details=f"Gesture confirmed after {threshold} stable frames",
    )
