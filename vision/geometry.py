"""Monocular distance and direction estimation from 2-D detections.

Two estimators exist because the box detector yields geometry while the whole
frame labeler does not:

* :func:`estimate_distance` applies a pinhole approximation to the box height
  and a reference real-world height for the label.
* :func:`estimate_distance_from_confidence` buckets labeler confidence into
  distance bands and skews the band by the label's reference size.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from vision.detections import BoundingBox, Direction, normalize_label


DEFAULT_FOCAL_LENGTH = 1.4
DEFAULT_REFERENCE_HEIGHT_M = 1.0
FAR_DISTANCE_M = 10.0
MIN_BOX_DISTANCE_M = 0.1
MIN_CONFIDENCE_DISTANCE_M = 1.0

LEFT_EDGE = 0.33
RIGHT_EDGE = 0.66

# Typical heights in meters, keyed by normalized label.
REFERENCE_HEIGHTS: Mapping[str, float] = {
    # People
    "person": 1.7,
    "man": 1.75,
    "woman": 1.65,
    "child": 1.2,
    "pedestrian": 1.7,
    # Vehicles
    "car": 1.5,
    "automobile": 1.5,
    "vehicle": 1.5,
    "truck": 2.5,
    "bus": 3.0,
    "motorcycle": 1.1,
    "bicycle": 1.0,
    "bike": 1.0,
    # Animals
    "dog": 0.5,
    "cat": 0.3,
    "bird": 0.2,
    "horse": 1.6,
    "sheep": 0.7,
    "cow": 1.4,
    "elephant": 3.0,
    "bear": 1.5,
    "zebra": 1.4,
    "giraffe": 5.5,
    "pet": 0.4,
    "animal": 0.6,
    # Furniture
    "chair": 0.8,
    "table": 0.75,
    "desk": 0.75,
    "couch": 0.9,
    "sofa": 0.9,
    "bed": 0.6,
    "bench": 0.45,
    "furniture": 0.8,
    "shelf": 1.5,
    "cabinet": 1.2,
    "drawer": 0.6,
    # Electronics
    "tv": 0.6,
    "television": 0.6,
    "monitor": 0.5,
    "laptop": 0.3,
    "computer": 0.5,
    "cell phone": 0.15,
    "phone": 0.15,
    "tablet": 0.25,
    "keyboard": 0.45,
    "mouse": 0.05,
    # Kitchen and dining
    "bottle": 0.25,
    "cup": 0.12,
    "mug": 0.12,
    "glass": 0.15,
    "wine glass": 0.2,
    "bowl": 0.1,
    "plate": 0.03,
    "refrigerator": 1.7,
    "fridge": 1.7,
    "microwave": 0.35,
    "oven": 0.9,
    "stove": 0.9,
    # Food
    "banana": 0.2,
    "apple": 0.08,
    "sandwich": 0.1,
    "orange": 0.08,
    "broccoli": 0.15,
    "carrot": 0.2,
    "pizza": 0.35,
    "cake": 0.15,
    "food": 0.15,
    "fruit": 0.1,
    # Indoor structures
    "door": 2.0,
    "window": 1.2,
    "wall": 2.5,
    "floor": 0.01,
    "ceiling": 2.5,
    "stairs": 2.0,
    "staircase": 2.0,
    "toilet": 0.4,
    "sink": 0.6,
    "bathtub": 0.6,
    # Outdoor structures
    "building": 10.0,
    "house": 6.0,
    "tree": 4.0,
    "pole": 5.0,
    "sign": 1.5,
    "stop sign": 0.75,
    "traffic light": 1.0,
    "fire hydrant": 0.5,
    "fence": 1.5,
    "sidewalk": 0.02,
    "road": 0.01,
    "street": 0.01,
    # Personal items
    "backpack": 0.5,
    "bag": 0.4,
    "umbrella": 1.0,
    "handbag": 0.3,
    "purse": 0.3,
    "suitcase": 0.7,
    "luggage": 0.7,
    # Sports and recreation
    "sports ball": 0.22,
    "ball": 0.22,
    "kite": 0.8,
    "tennis racket": 0.7,
    "skateboard": 0.1,
    "surfboard": 2.0,
    # Utensils
    "fork": 0.2,
    "knife": 0.25,
    "spoon": 0.18,
    "scissors": 0.2,
    # Plants
    "potted plant": 0.5,
    "plant": 0.5,
    "flower": 0.3,
    # Misc
    "book": 0.25,
    "clock": 0.3,
    "vase": 0.3,
    "tie": 0.5,
    "toothbrush": 0.2,
    "hair drier": 0.25,
    "box": 0.4,
    "pillow": 0.2,
    "blanket": 0.05,
    "curtain": 2.0,
    "lamp": 0.5,
    "light": 0.3,
}

# (exclusive lower confidence bound, baseline distance in meters)
_CONFIDENCE_BANDS: tuple[tuple[float, float], ...] = (
    (0.85, 2.5),
    (0.75, 3.5),
    (0.65, 5.0),
    (0.55, 6.5),
)
_LOW_CONFIDENCE_DISTANCE_M = 8.0
_LARGE_OBJECT_M = 1.5
_SMALL_OBJECT_M = 0.3
_LARGE_OBJECT_SCALE = 1.3
_SMALL_OBJECT_SCALE = 0.7


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def reference_height(
    label: str,
    table: Mapping[str, float] = REFERENCE_HEIGHTS,
) -> float | None:
    """Return the reference height for ``label`` or ``None`` if unknown."""

    return table.get(normalize_label(label))


def estimate_distance(
    label: str,
    box: BoundingBox,
    image_width: int,
    image_height: int,
    *,
    focal_length: float = DEFAULT_FOCAL_LENGTH,
    table: Mapping[str, float] = REFERENCE_HEIGHTS,
) -> float:
    """Estimate distance in meters from the normalized box height.

    ``image_width`` and ``image_height`` are accepted for callers holding
    pixel-space context; the box is already normalized so they do not scale
    the result.
    """

    del image_width, image_height
    apparent_height = box.height
    if apparent_height <= 0:
        return FAR_DISTANCE_M
    real_height = reference_height(label, table)
    if real_height is None:
        real_height = DEFAULT_REFERENCE_HEIGHT_M
    distance = (real_height * focal_length) / apparent_height
    return _clamp(distance, MIN_BOX_DISTANCE_M, FAR_DISTANCE_M)


def estimate_distance_from_confidence(
    confidence: float,
    label: str,
    *,
    table: Mapping[str, float] = REFERENCE_HEIGHTS,
) -> float:
    """Estimate distance in meters for a whole-frame label with no geometry."""

    distance = _LOW_CONFIDENCE_DISTANCE_M
    for lower_bound, band_distance in _CONFIDENCE_BANDS:
        if confidence > lower_bound:
            distance = band_distance
            break

    real_height = reference_height(label, table)
    if real_height is not None:
        if real_height > _LARGE_OBJECT_M:
            distance *= _LARGE_OBJECT_SCALE
        elif real_height < _SMALL_OBJECT_M:
            distance *= _SMALL_OBJECT_SCALE
    return _clamp(distance, MIN_CONFIDENCE_DISTANCE_M, FAR_DISTANCE_M)


def direction_of_x(x: float) -> Direction:
    """Bucket a normalized horizontal position."""

    if x < LEFT_EDGE:
        return Direction.LEFT
    if x > RIGHT_EDGE:
        return Direction.RIGHT
    return Direction.CENTER


def direction_of(box: BoundingBox | None) -> Direction:
    """Bucket a box by its horizontal center."""

    if box is None:
        return Direction.UNKNOWN
    return direction_of_x(box.center_x)


@dataclass(frozen=True)
class DistanceEstimator:
    """Calibrated estimator bundle injected into perception sources."""

    focal_length: float = DEFAULT_FOCAL_LENGTH
    reference_heights: Mapping[str, float] = field(default_factory=lambda: dict(REFERENCE_HEIGHTS))

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "DistanceEstimator":
        vision_cfg = config.get("vision") if isinstance(config, Mapping) else None
        if not isinstance(vision_cfg, Mapping):
            return cls()
        heights = dict(REFERENCE_HEIGHTS)
        overrides = vision_cfg.get("reference_heights")
        if isinstance(overrides, Mapping):
            for key, value in overrides.items():
                heights[normalize_label(str(key))] = float(value)
        return cls(
            focal_length=float(vision_cfg.get("focal_length", DEFAULT_FOCAL_LENGTH)),
            reference_heights=heights,
        )

    def from_box(self, label: str, box: BoundingBox, image_width: int = 1, image_height: int = 1) -> float:
        return estimate_distance(
            label,
            box,
            image_width,
            image_height,
            focal_length=self.focal_length,
            table=self.reference_heights,
        )

    def from_confidence(self, confidence: float, label: str) -> float:
        return estimate_distance_from_confidence(confidence, label, table=self.reference_heights)
