"""Tests for alert log formatting."""

from __future__ import annotations

from core.logging import format_alert
from navigation.alerts import NavigationAlertClassifier
from vision.detections import Detection, DetectionSet, Direction


def test_alert_log_line_names_severity_and_closest_object() -> None:
    detection = Detection(label="chair", confidence=0.8, distance=0.8, direction=Direction.LEFT)
    alert = NavigationAlertClassifier().classify(DetectionSet([detection]), timestamp_ms=5)

    line = format_alert(alert)

    assert "[VISION] critical (Obstacle ahead)" in line
    assert "chair at 0.80m left" in line
    assert alert.spoken_text in line


def test_clear_alert_log_line_reports_no_detections() -> None:
    alert = NavigationAlertClassifier().classify(DetectionSet(), timestamp_ms=10)

    assert "clear (Path is clear): no detections" in format_alert(alert)
