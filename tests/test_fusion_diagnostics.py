"""Tests for navigation and signs probes and the diagnostics runner."""

from __future__ import annotations

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from diagnostics.runner import format_results, run_diagnostics
from navigation.diagnostics import probe as navigation_probe
from signs.diagnostics import probe as signs_probe


def test_navigation_probe_passes() -> None:
    result = navigation_probe()
    assert result.status is DiagnosticStatus.PASS, result.details


def test_signs_probe_passes_for_several_thresholds() -> None:
    for threshold in (1, 3, 5):
        assert signs_probe(threshold=threshold).status is DiagnosticStatus.PASS


def test_runner_times_results_and_contains_probe_errors() -> None:
    def ok_probe() -> DiagnosticResult:
        return DiagnosticResult(name="ok", status=DiagnosticStatus.PASS, details="fine")

    def broken_probe() -> DiagnosticResult:
        raise RuntimeError("sensor offline")

    results = run_diagnostics([ok_probe, broken_probe])

    assert [result.status for result in results] == [DiagnosticStatus.PASS, DiagnosticStatus.FAIL]
    assert results[1].failed
    assert "sensor offline" in results[1].details
    assert all(result.duration_ms >= 0.0 for result in results)
    report = format_results(results)
    assert report.startswith("Fusion diagnostics report")
    assert "[FAIL]" in report
