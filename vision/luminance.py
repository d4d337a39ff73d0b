"""Luminance-variance obstacle heuristic for frames no classifier understood.

A uniform luminance patch usually means a flat surface filling the view
(a wall, a door, a body) close to the lens. The heuristic samples a grid of
luma values in three horizontal regions and maps low variance, darkness and
edge density to a synthetic ``obstacle`` at a short distance.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from vision.detections import BoundingBox, Detection, Direction


OBSTACLE_LABEL = "obstacle"
SAMPLE_STEP = 4
EDGE_DIFF_THRESHOLD = 30

BAND_TOP = 0.3
BAND_BOTTOM = 0.7

# (variance upper bound, distance m, confidence)
_VARIANCE_BANDS: tuple[tuple[float, float, float], ...] = (
    (300.0, 0.3, 0.8),
    (800.0, 0.7, 0.7),
    (1500.0, 1.5, 0.6),
    (3000.0, 2.5, 0.5),
)

_REGION_BOXES = {
    Direction.CENTER: BoundingBox(left=0.25, top=BAND_TOP, right=0.75, bottom=BAND_BOTTOM),
    Direction.LEFT: BoundingBox(left=0.0, top=BAND_TOP, right=0.33, bottom=BAND_BOTTOM),
    Direction.RIGHT: BoundingBox(left=0.67, top=BAND_TOP, right=1.0, bottom=BAND_BOTTOM),
}


@dataclass(frozen=True)
class LuminanceFrame:
    """Raw luma plane (one byte per pixel, row-major) with its dimensions."""

    data: bytes
    width: int
    height: int


@dataclass(frozen=True)
class RegionStats:
    """Sampled luminance statistics for one frame region."""

    mean: float
    variance: float
    edge_density: float


# Stand-in statistics for a region too small to hold any sample.
NEUTRAL_STATS = RegionStats(mean=128.0, variance=1000.0, edge_density=0.0)


def _as_plane(frame: LuminanceFrame) -> np.ndarray:
    flat = np.frombuffer(bytes(frame.data), dtype=np.uint8)
    if frame.width <= 0:
        return np.empty((0, 0), dtype=np.uint8)
    rows = min(frame.height, flat.size // frame.width)
    return flat[: rows * frame.width].reshape(rows, frame.width)


def region_stats(
    plane: np.ndarray,
    start_x: int,
    start_y: int,
    end_x: int,
    end_y: int,
    step: int = SAMPLE_STEP,
) -> RegionStats:
    """Return mean, variance and edge density over every ``step``-th pixel.

    An edge is counted when a sample differs from the next sample to its right
    in the same region by more than ``EDGE_DIFF_THRESHOLD``.
    """

    samples = plane[start_y:end_y:step, start_x:end_x:step].astype(np.int16)
    count = samples.size
    if count == 0:
        return NEUTRAL_STATS
    values = samples.astype(np.float64)
    mean = float(values.mean())
    variance = float((values * values).mean() - mean * mean)
    edges = np.abs(np.diff(samples, axis=1)) > EDGE_DIFF_THRESHOLD
    return RegionStats(
        mean=mean,
        variance=variance,
        edge_density=float(edges.sum()) / count,
    )


def analyze_region(
    stats: RegionStats,
    direction: Direction,
    *,
    min_confidence: float = 0.5,
) -> Detection | None:
    """Map region statistics to an obstacle detection, or ``None`` if open."""

    for upper_bound, band_distance, band_confidence in _VARIANCE_BANDS:
        if stats.variance < upper_bound:
            distance = band_distance
            confidence = band_confidence
            break
    else:
        return None

    if stats.mean < 40:
        distance *= 0.5
        confidence += 0.1
    elif stats.mean < 80:
        distance *= 0.7
        confidence += 0.05

    if stats.edge_density > 0.3 and stats.variance < 1500:
        distance *= 0.8
        confidence += 0.05

    distance = max(0.2, min(5.0, distance))
    confidence = max(0.4, min(0.9, confidence))
    if confidence < min_confidence:
        return None

    return Detection(
        label=OBSTACLE_LABEL,
        confidence=confidence,
        distance=distance,
        direction=direction,
        bounding_box=_REGION_BOXES[direction],
        source="fallback",
    )


def detect_obstacles(frame: LuminanceFrame, *, min_confidence: float = 0.5) -> list[Detection]:
    """Run the heuristic over the center, left and right regions, in that order."""

    plane = _as_plane(frame)
    if plane.size == 0:
        return []
    width = frame.width
    height = plane.shape[0]
    top = int(height * BAND_TOP)
    bottom = int(height * BAND_BOTTOM)
    regions = (
        (Direction.CENTER, int(width * 0.25), int(width * 0.75)),
        (Direction.LEFT, 0, int(width * 0.33)),
        (Direction.RIGHT, int(width * 0.67), width),
    )

    results: list[Detection] = []
    for direction, start_x, end_x in regions:
        stats = region_stats(plane, start_x, top, end_x, bottom)
        detection = analyze_region(stats, direction, min_confidence=min_confidence)
        if detection is not None:
            results.append(detection)
    return results
