"""Depth sensor frame schemas and zone bucketing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Sequence

from vision.detections import Direction
from vision.geometry import direction_of_x


class DepthZone(str, Enum):
    """Distance bands used to bucket depth points."""

    IMMEDIATE = "immediate"
    NEAR = "near"
    MEDIUM = "medium"
    FAR = "far"


IMMEDIATE_LIMIT_M = 0.5
NEAR_LIMIT_M = 1.0
MEDIUM_LIMIT_M = 2.0


def zone_for_depth(depth: float) -> DepthZone:
    if depth < IMMEDIATE_LIMIT_M:
        return DepthZone.IMMEDIATE
    if depth < NEAR_LIMIT_M:
        return DepthZone.NEAR
    if depth < MEDIUM_LIMIT_M:
        return DepthZone.MEDIUM
    return DepthZone.FAR


@dataclass(frozen=True)
class DepthPoint:
    """One depth sample at a normalized image position."""

    x: float
    y: float
    depth: float
    confidence: float = 1.0

    @property
    def direction(self) -> Direction:
        return direction_of_x(self.x)


@dataclass(frozen=True)
class DepthFrame:
    """One depth sensor update."""

    points: tuple[DepthPoint, ...]
    min_depth: float
    max_depth: float
    timestamp_ms: int
    width: int = 0
    height: int = 0

    @classmethod
    def from_points(
        cls,
        points: Sequence[DepthPoint],
        timestamp_ms: int,
        *,
        width: int = 0,
        height: int = 0,
    ) -> "DepthFrame":
        """Build a frame from sensor points; points without a positive depth are dropped."""

        kept = tuple(point for point in points if point.depth > 0)
        depths = [point.depth for point in kept]
        return cls(
            points=kept,
            min_depth=min(depths) if depths else math.inf,
            max_depth=max(depths) if depths else 0.0,
            timestamp_ms=int(timestamp_ms),
            width=width,
            height=height,
        )

    @classmethod
    def from_samples(
        cls,
        width: int,
        height: int,
        depths: Sequence[float],
        timestamp_ms: int,
        confidences: Sequence[float] | None = None,
        *,
        min_confidence: float = 0.5,
    ) -> "DepthFrame":
        """Build a frame from a row-major depth grid as delivered by the sensor.

        Samples with no depth or confidence at or below ``min_confidence`` are
        dropped.
        """

        points: list[DepthPoint] = []
        if width > 0 and height > 0:
            for index, depth in enumerate(depths):
                confidence = 1.0
                if confidences is not None and index < len(confidences):
                    confidence = float(confidences[index])
                if depth <= 0 or confidence <= min_confidence:
                    continue
                points.append(
                    DepthPoint(
                        x=(index % width) / width,
                        y=(index // width) / height,
                        depth=float(depth),
                        confidence=confidence,
                    )
                )
        return cls.from_points(points, timestamp_ms, width=width, height=height)

    def zones(self) -> dict[DepthZone, list[DepthPoint]]:
        buckets: dict[DepthZone, list[DepthPoint]] = {zone: [] for zone in DepthZone}
        for point in self.points:
            buckets[zone_for_depth(point.depth)].append(point)
        return buckets

    def closest_in_region(self, x1: float, y1: float, x2: float, y2: float) -> DepthPoint | None:
        closest: DepthPoint | None = None
        for point in self._in_region(x1, y1, x2, y2):
            if closest is None or point.depth < closest.depth:
                closest = point
        return closest

    def average_depth_in_region(self, x1: float, y1: float, x2: float, y2: float) -> float | None:
        depths = [point.depth for point in self._in_region(x1, y1, x2, y2)]
        if not depths:
            return None
        return sum(depths) / len(depths)

    def _in_region(self, x1: float, y1: float, x2: float, y2: float) -> list[DepthPoint]:
        return [
            point
            for point in self.points
            if x1 <= point.x <= x2 and y1 <= point.y <= y2
        ]
