"""Models for diagnostics results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticStatus(str, Enum):
    """Status for diagnostics checks."""

    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


@dataclass(frozen=True)
class DiagnosticResult:
    """Result for a single diagnostic probe."""

    name: str
    status: DiagnosticStatus
    details: str
    duration_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status is DiagnosticStatus.FAIL
