"""Depth-sensor fast path for immediate obstacles.

Depth is trusted for presence and vision for identity, so this path emits a
critical alert as soon as any point enters the immediate zone without waiting
for the vision classifier.
"""

from __future__ import annotations

import logging
from typing import Mapping

from navigation.alerts import GENERIC_OBJECT_NAME, NavigationAlert, Severity
from navigation.depth import DepthFrame, DepthPoint, DepthZone
from vision.detections import BoundingBox, Detection, DetectionSet, Direction


LOGGER = logging.getLogger(__name__)

_DEPTH_BOX = BoundingBox(left=0.4, top=0.4, right=0.6, bottom=0.6)

_DEPTH_DIRECTION_PHRASES = {
    Direction.LEFT: "on your left",
    Direction.RIGHT: "on your right",
    Direction.CENTER: "directly ahead",
    Direction.UNKNOWN: "nearby",
}


def depth_guidance(point: DepthPoint) -> str:
    phrase = _DEPTH_DIRECTION_PHRASES[point.direction]
    return f"{GENERIC_OBJECT_NAME} detected {point.depth:.1f} meters {phrase}"


class DepthFusionOverlay:
    """Emits at most one critical alert per depth frame."""

    def __init__(self, *, enabled: bool = True) -> None:
        self._enabled = bool(enabled)

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "DepthFusionOverlay":
        depth_cfg = config.get("depth") if isinstance(config, Mapping) else None
        if not isinstance(depth_cfg, Mapping):
            return cls()
        return cls(enabled=bool(depth_cfg.get("enabled", True)))

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        if self._enabled != bool(enabled):
            LOGGER.info("[DEPTH] overlay %s", "enabled" if enabled else "disabled")
        self._enabled = bool(enabled)

    def process(self, frame: DepthFrame) -> NavigationAlert | None:
        if not self._enabled:
            return None
        immediate = frame.zones()[DepthZone.IMMEDIATE]
        if not immediate:
            return None

        closest = min(immediate, key=lambda point: point.depth)
        detection = Detection(
            label=GENERIC_OBJECT_NAME,
            confidence=closest.confidence,
            distance=closest.depth,
            direction=closest.direction,
            bounding_box=_DEPTH_BOX,
            source="depth",
        )
        LOGGER.debug(
            "[DEPTH] immediate obstacle %.2fm at x=%.2f (%d points in zone)",
            closest.depth,
            closest.x,
            len(immediate),
        )
        return NavigationAlert(
            detections=DetectionSet(),
            closest_detection=detection,
            severity=Severity.CRITICAL,
            spoken_text=depth_guidance(closest),
            timestamp_ms=frame.timestamp_ms,
            source="depth",
            metadata={"immediate_points": len(immediate)},
        )
