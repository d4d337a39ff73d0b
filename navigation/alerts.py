"""Navigation alert classification and spoken guidance wording."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Mapping

from core.clock import millis
from vision.detections import Detection, DetectionSet, Direction


LOGGER = logging.getLogger(__name__)

PATH_CLEAR_TEXT = "Path clear"
GENERIC_OBJECT_NAME = "obstacle"
_UNNAMED_LABELS = frozenset({"object", "obstacle", "unknown"})


class Severity(str, Enum):
    """Ordered urgency of a navigation alert."""

    CLEAR = "clear"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def is_urgent(self) -> bool:
        return self in (Severity.HIGH, Severity.CRITICAL)

    @property
    def description(self) -> str:
        return _SEVERITY_DESCRIPTIONS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.CLEAR: 0,
    Severity.LOW: 1,
    Severity.MODERATE: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}

_SEVERITY_DESCRIPTIONS = {
    Severity.CLEAR: "Path is clear",
    Severity.LOW: "Objects detected ahead",
    Severity.MODERATE: "Approaching object",
    Severity.HIGH: "Object nearby",
    Severity.CRITICAL: "Obstacle ahead",
}

# Imperative wording used for critical and high alerts.
_DIRECTION_PHRASES = {
    Direction.LEFT: "on your left",
    Direction.RIGHT: "on your right",
    Direction.CENTER: "ahead",
    Direction.UNKNOWN: "nearby",
}

# Descriptive wording used for moderate and low alerts.
_DETECTED_PHRASES = {
    Direction.LEFT: "to your left",
    Direction.RIGHT: "to your right",
    Direction.CENTER: "ahead",
    Direction.UNKNOWN: "nearby",
}


@dataclass(frozen=True)
class SeverityThresholds:
    """Upper distance bounds (exclusive, meters) for each severity band."""

    critical_m: float = 1.0
    high_m: float = 1.5
    moderate_m: float = 2.5
    low_m: float = 4.0

    def __post_init__(self) -> None:
        bounds = (self.critical_m, self.high_m, self.moderate_m, self.low_m)
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            raise ValueError(f"Severity thresholds must be strictly increasing: {bounds}")

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "SeverityThresholds":
        navigation_cfg = config.get("navigation") if isinstance(config, Mapping) else None
        if not isinstance(navigation_cfg, Mapping):
            return cls()
        thresholds_cfg = navigation_cfg.get("thresholds")
        if not isinstance(thresholds_cfg, Mapping):
            return cls()
        return cls(
            critical_m=float(thresholds_cfg.get("critical_m", 1.0)),
            high_m=float(thresholds_cfg.get("high_m", 1.5)),
            moderate_m=float(thresholds_cfg.get("moderate_m", 2.5)),
            low_m=float(thresholds_cfg.get("low_m", 4.0)),
        )


DEFAULT_THRESHOLDS = SeverityThresholds()


@dataclass(frozen=True)
class NavigationAlert:
    """Fused per-frame navigation output."""

    detections: DetectionSet
    closest_detection: Detection | None
    severity: Severity
    spoken_text: str
    timestamp_ms: int
    source: str = "vision"
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def is_urgent(self) -> bool:
        return self.severity.is_urgent


def classify_severity(
    distance: float | None,
    thresholds: SeverityThresholds = DEFAULT_THRESHOLDS,
) -> Severity:
    """Map the closest distance to a severity band; ``None`` means clear."""

    if distance is None:
        return Severity.CLEAR
    if distance < thresholds.critical_m:
        return Severity.CRITICAL
    if distance < thresholds.high_m:
        return Severity.HIGH
    if distance < thresholds.moderate_m:
        return Severity.MODERATE
    if distance < thresholds.low_m:
        return Severity.LOW
    return Severity.CLEAR


def spoken_object_name(label: str) -> str:
    """Return the label to speak, or "obstacle" for unnamed detections."""

    normalized = label.strip().lower()
    if not normalized or normalized in _UNNAMED_LABELS:
        return GENERIC_OBJECT_NAME
    return label


def direction_phrase(direction: Direction) -> str:
    return _DIRECTION_PHRASES[direction]


def detected_phrase(direction: Direction) -> str:
    return _DETECTED_PHRASES[direction]


def spoken_guidance(closest: Detection | None, severity: Severity) -> str:
    """Build the guidance sentence; urgency is carried by the wording."""

    if closest is None or severity is Severity.CLEAR:
        return PATH_CLEAR_TEXT

    name = spoken_object_name(closest.label)
    if severity is Severity.CRITICAL:
        return f"Stop! {name} {direction_phrase(closest.direction)}"
    if severity is Severity.HIGH:
        return f"Caution: {name} {closest.distance:.1f} meters {direction_phrase(closest.direction)}"
    return f"{name} detected {detected_phrase(closest.direction)}"


class NavigationAlertClassifier:
    """Turns a merged detection set into a navigation alert."""

    def __init__(self, thresholds: SeverityThresholds | None = None) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "NavigationAlertClassifier":
        return cls(SeverityThresholds.from_config(config))

    @property
    def thresholds(self) -> SeverityThresholds:
        return self._thresholds

    def classify(self, detections: DetectionSet, timestamp_ms: int | None = None) -> NavigationAlert:
        closest = detections.closest()
        severity = classify_severity(
            closest.distance if closest is not None else None,
            self._thresholds,
        )
        alert = NavigationAlert(
            detections=detections,
            closest_detection=closest,
            severity=severity,
            spoken_text=spoken_guidance(closest, severity),
            timestamp_ms=millis() if timestamp_ms is None else int(timestamp_ms),
            source="vision",
        )
        LOGGER.debug(
            "[NAV] %d detections closest=%s severity=%s",
            len(detections),
            closest.label if closest is not None else None,
            severity.value,
        )
        return alert
