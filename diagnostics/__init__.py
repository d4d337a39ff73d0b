"""Diagnostics helpers for the fusion runtime."""

from diagnostics.models import DiagnosticResult, DiagnosticStatus
from diagnostics.runner import Probe, format_results, run_diagnostics

__all__ = [
    "DiagnosticResult",
    "DiagnosticStatus",
    "Probe",
    "format_results",
    "run_diagnostics",
]
