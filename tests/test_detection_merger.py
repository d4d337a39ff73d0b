"""Tests for perception sources and the detection merger."""

from __future__ import annotations

import pytest

from vision.detections import Detection, DetectionSet, Direction
from vision.luminance import LuminanceFrame
from vision.merger import DetectionMerger, merge_detections
from vision.sources import (
    BoxDetection,
    BoxDetectorSource,
    ImageLabel,
    ImageLabelerSource,
    LuminanceFallbackSource,
    PerceptionFrame,
)


def _box(label: str, confidence: float, left: int = 100, top: int = 100, right: int = 300, bottom: int = 800) -> BoxDetection:
    return BoxDetection(
        label=label,
        confidence=confidence,
        left=left,
        top=top,
        right=right,
        bottom=bottom,
        image_width=1000,
        image_height=1000,
    )


def _dark_plane() -> LuminanceFrame:
    return LuminanceFrame(data=bytes([20]) * (64 * 48), width=64, height=48)


def _merger() -> DetectionMerger:
    return DetectionMerger.from_config({})


def test_same_label_from_two_sources_keeps_higher_priority() -> None:
    frame = PerceptionFrame(
        timestamp_ms=0,
        labels=[ImageLabel("Person", 0.9)],
        boxes=[_box("person", 0.95)],
    )
    merged = _merger().merge(frame)

    assert merged.labels() == ["person"]
    assert merged[0].source == "labeler"
    assert merged[0].direction is Direction.CENTER


def test_sources_are_ordered_by_priority_not_argument_order() -> None:
    merger = DetectionMerger([BoxDetectorSource(), ImageLabelerSource()])
    assert [source.name for source in merger.sources] == ["labeler", "detector"]


def test_confidence_floors_and_generic_labels_filter_input() -> None:
    frame = PerceptionFrame(
        timestamp_ms=0,
        labels=[ImageLabel("chair", 0.49), ImageLabel("Wall", 0.99), ImageLabel("dog", 0.6)],
        boxes=[_box("bicycle", 0.29), _box("floor", 0.9), _box("car", 0.3)],
    )
    merged = _merger().merge(frame)

    assert merged.labels() == ["dog", "car"]


def test_unclassified_box_borrows_best_useful_label() -> None:
    frame = PerceptionFrame(
        timestamp_ms=0,
        labels=[ImageLabel("Wall", 0.99), ImageLabel("Dog", 0.6), ImageLabel("cat", 0.55)],
        boxes=[_box("object", 0.2, left=700, right=900)],
    )
    detections = BoxDetectorSource().detect(frame)

    assert len(detections) == 1
    assert detections[0].label == "dog"
    assert detections[0].confidence == pytest.approx(0.6)
    assert detections[0].direction is Direction.RIGHT
    assert detections[0].distance == pytest.approx(0.5 * 1.4 / 0.7)


def test_unclassified_box_without_labels_keeps_a_placeholder_name() -> None:
    frame = PerceptionFrame(timestamp_ms=0, boxes=[_box("", 0.5)])
    detections = BoxDetectorSource().detect(frame)

    assert [item.label for item in detections] == ["object"]
    assert detections[0].direction is Direction.LEFT


def test_fallback_runs_only_when_real_sources_are_empty() -> None:
    merger = _merger()
    with_person = PerceptionFrame(
        timestamp_ms=0,
        labels=[ImageLabel("person", 0.9)],
        luminance=_dark_plane(),
    )
    assert merger.merge(with_person).labels() == ["person"]

    only_luminance = PerceptionFrame(timestamp_ms=0, luminance=_dark_plane())
    merged = merger.merge(only_luminance)
    assert merged.labels() == ["obstacle"]
    assert merged[0].source == "fallback"
    assert merged[0].direction is Direction.CENTER


def test_disabled_fallback_leaves_frame_empty() -> None:
    merger = DetectionMerger.from_config({"vision": {"fallback_enabled": False}})
    assert not merger.merge(PerceptionFrame(timestamp_ms=0, luminance=_dark_plane()))


def test_fallback_source_orders_candidates_nearest_first() -> None:
    frame = PerceptionFrame(timestamp_ms=0, luminance=_dark_plane())
    detections = LuminanceFallbackSource().detect(frame)
    distances = [item.distance for item in detections]
    assert distances == sorted(distances)


def test_merged_labels_are_unique_and_first_wins() -> None:
    near = Detection("Person", 0.6, 1.2, Direction.LEFT, source="labeler")
    far = Detection("person ", 0.9, 0.8, Direction.RIGHT, source="detector")
    car = Detection("car", 0.7, 3.0, Direction.CENTER)

    merged = merge_detections([[near], [far, car]])

    assert merged.labels() == ["person", "car"]
    assert merged[0] is near
    assert len(set(merged.labels())) == len(merged)


def test_detection_set_closest_prefers_first_on_ties() -> None:
    first = Detection("chair", 0.8, 2.0, Direction.LEFT)
    second = Detection("table", 0.8, 2.0, Direction.RIGHT)
    assert DetectionSet([first, second]).closest() is first
    assert DetectionSet().closest() is None
