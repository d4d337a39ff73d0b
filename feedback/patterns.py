"""Static lookup tables from alert severity and direction to driver outputs."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from navigation.alerts import Severity
from vision.detections import Direction


class HapticPattern(str, Enum):
    """Pattern identifiers understood by the vibration driver."""

    PROXIMITY_FAR = "proximity_far"
    PROXIMITY_MEDIUM = "proximity_medium"
    PROXIMITY_CLOSE = "proximity_close"
    PROXIMITY_VERY_CLOSE = "proximity_very_close"
    DIRECTION_LEFT = "direction_left"
    DIRECTION_CENTER = "direction_center"
    DIRECTION_RIGHT = "direction_right"


class TtsPriority(str, Enum):
    """Speech priority; critical interrupts anything currently playing."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


SEVERITY_HAPTIC_PATTERNS: Mapping[Severity, HapticPattern] = {
    Severity.LOW: HapticPattern.PROXIMITY_FAR,
    Severity.MODERATE: HapticPattern.PROXIMITY_MEDIUM,
    Severity.HIGH: HapticPattern.PROXIMITY_CLOSE,
    Severity.CRITICAL: HapticPattern.PROXIMITY_VERY_CLOSE,
}

DIRECTION_HAPTIC_PATTERNS: Mapping[Direction, HapticPattern] = {
    Direction.LEFT: HapticPattern.DIRECTION_LEFT,
    Direction.CENTER: HapticPattern.DIRECTION_CENTER,
    Direction.RIGHT: HapticPattern.DIRECTION_RIGHT,
}

SEVERITY_TTS_PRIORITIES: Mapping[Severity, TtsPriority] = {
    Severity.LOW: TtsPriority.NORMAL,
    Severity.MODERATE: TtsPriority.NORMAL,
    Severity.HIGH: TtsPriority.NORMAL,
    Severity.CRITICAL: TtsPriority.CRITICAL,
}


def haptic_pattern_for(severity: Severity) -> HapticPattern | None:
    """Return the primary pulse for ``severity``; clear has none."""

    return SEVERITY_HAPTIC_PATTERNS.get(severity)


def direction_pattern_for(direction: Direction) -> HapticPattern | None:
    return DIRECTION_HAPTIC_PATTERNS.get(direction)


def tts_priority_for(severity: Severity) -> TtsPriority:
    return SEVERITY_TTS_PRIORITIES.get(severity, TtsPriority.NORMAL)
