"""Diagnostics routines for navigation fusion."""

from __future__ import annotations

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from navigation.alerts import NavigationAlertClassifier, Severity
from navigation.depth import DepthFrame, DepthPoint
from navigation.depth_overlay import DepthFusionOverlay
from vision.detections import Detection, DetectionSet, Direction


def probe() -> DiagnosticResult:
    """Run canned fusion scenarios through the classifier and depth overlay.

    Returns:
        Diagnostic result indicating navigation readiness.
    """

    name = "navigation"
    classifier = NavigationAlertClassifier()
    overlay = DepthFusionOverlay()
    failures: list[str] = []

    clear = classifier.classify(DetectionSet(), timestamp_ms=0)
    if clear.severity is not Severity.CLEAR or clear.spoken_text != "Path clear":
        failures.append(f"empty frame -> {clear.severity.value} {clear.spoken_text!r}")

    close = classifier.classify(
        DetectionSet(
            [
                Detection(label="person", confidence=0.9, distance=0.9, direction=Direction.CENTER),
                Detection(label="car", confidence=0.8, distance=3.0, direction=Direction.LEFT),
            ]
        ),
        timestamp_ms=0,
    )
    if close.severity is not Severity.CRITICAL or close.spoken_text != "Stop! person ahead":
        failures.append(f"person at 0.9m -> {close.severity.value} {close.spoken_text!r}")

    depth_alert = overlay.process(
        DepthFrame.from_points([DepthPoint(x=0.8, y=0.5, depth=0.3)], timestamp_ms=0)
    )
    expected_depth = "obstacle detected 0.3 meters on your right"
    depth_text = depth_alert.spoken_text if depth_alert is not None else None
    if depth_text != expected_depth:
        failures.append(f"depth 0.3m -> {depth_text!r}")

    if failures:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details="Unexpected guidance: " + "; ".join(failures),
        )
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details="Severity bands, spoken guidance and depth overlay verified",
    )
