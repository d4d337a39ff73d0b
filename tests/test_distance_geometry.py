"""Tests for monocular distance and direction estimation."""

from __future__ import annotations

import pytest

from vision.detections import PLACEHOLDER_BOX, BoundingBox, Direction
from vision.geometry import (
    FAR_DISTANCE_M,
    DistanceEstimator,
    direction_of,
    direction_of_x,
    estimate_distance,
    estimate_distance_from_confidence,
)


def _box(height: float, center_x: float = 0.5) -> BoundingBox:
    return BoundingBox(left=center_x - 0.05, top=0.0, right=center_x + 0.05, bottom=height)


def test_person_box_uses_pinhole_estimate() -> None:
    distance = estimate_distance("person", _box(0.5, center_x=0.2), 1, 1)
    assert distance == pytest.approx(4.76)


def test_unknown_label_uses_default_reference_height() -> None:
    assert estimate_distance("robot", _box(0.7), 1, 1) == pytest.approx(2.0)


def test_degenerate_box_reads_as_far() -> None:
    flat = BoundingBox(left=0.1, top=0.4, right=0.3, bottom=0.4)
    assert estimate_distance("person", flat, 640, 480) == FAR_DISTANCE_M


def test_box_estimate_is_clamped_and_deterministic() -> None:
    assert estimate_distance("mouse", _box(1.0), 1, 1) == pytest.approx(0.1)
    assert estimate_distance("giraffe", _box(0.01), 1, 1) == pytest.approx(10.0)
    for height in (0.05, 0.2, 0.33, 0.8, 1.0):
        first = estimate_distance("chair", _box(height), 1, 1)
        second = estimate_distance("chair", _box(height), 1, 1)
        assert first == second
        assert 0.1 <= first <= 10.0


def test_confidence_bands_scale_by_object_size() -> None:
    assert estimate_distance_from_confidence(0.9, "person") == pytest.approx(3.25)
    assert estimate_distance_from_confidence(0.9, "cup") == pytest.approx(1.75)
    assert estimate_distance_from_confidence(0.8, "chair") == pytest.approx(3.5)
    assert estimate_distance_from_confidence(0.85, "chair") == pytest.approx(3.5)
    assert estimate_distance_from_confidence(0.4, "something") == pytest.approx(8.0)


def test_direction_buckets_use_open_edges() -> None:
    assert direction_of_x(0.2) is Direction.LEFT
    assert direction_of_x(0.33) is Direction.CENTER
    assert direction_of_x(0.66) is Direction.CENTER
    assert direction_of_x(0.7) is Direction.RIGHT
    assert direction_of(None) is Direction.UNKNOWN
    assert direction_of(_box(0.5, center_x=0.9)) is Direction.RIGHT


def test_pixel_boxes_normalize_and_fall_back_to_placeholder() -> None:
    box = BoundingBox.from_pixels(100, 100, 300, 800, 1000, 1000)
    assert box.center_x == pytest.approx(0.2)
    assert box.height == pytest.approx(0.7)
    assert BoundingBox.from_pixels(0, 0, 10, 10, 0, 480) == PLACEHOLDER_BOX


def test_estimator_reads_calibration_from_config() -> None:
    estimator = DistanceEstimator.from_config(
        {"vision": {"focal_length": 2.0, "reference_heights": {"Robot": 0.5}}}
    )
    assert estimator.focal_length == 2.0
    assert estimator.from_box("robot", _box(0.5)) == pytest.approx(2.0)
    assert estimator.from_box("person", _box(0.5)) == pytest.approx(6.8)
