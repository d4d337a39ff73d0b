"""Tests for the luminance-variance obstacle heuristic."""

from __future__ import annotations

import numpy as np
import pytest

from vision.detections import Direction
from vision.luminance import LuminanceFrame, RegionStats, analyze_region, detect_obstacles


def _uniform_frame(value: int, width: int = 64, height: int = 48) -> LuminanceFrame:
    return LuminanceFrame(data=bytes([value]) * (width * height), width=width, height=height)


def _striped_frame(width: int = 64, height: int = 48) -> LuminanceFrame:
    columns = np.arange(width)
    row = np.where((columns // 4) % 2 == 0, 0, 255).astype(np.uint8)
    plane = np.tile(row, (height, 1))
    return LuminanceFrame(data=plane.tobytes(), width=width, height=height)


def test_dark_uniform_view_reads_as_close_obstacle_everywhere() -> None:
    detections = detect_obstacles(_uniform_frame(20))

    assert [item.direction for item in detections] == [Direction.CENTER, Direction.LEFT, Direction.RIGHT]
    for detection in detections:
        assert detection.label == "obstacle"
        assert detection.source == "fallback"
        assert detection.distance == pytest.approx(0.2)
        assert detection.confidence == pytest.approx(0.9)


def test_mid_gray_wall_keeps_band_distance() -> None:
    center = detect_obstacles(_uniform_frame(128))[0]
    assert center.distance == pytest.approx(0.3)
    assert center.confidence == pytest.approx(0.8)


def test_high_variance_view_is_open() -> None:
    assert detect_obstacles(_striped_frame()) == []


def test_empty_plane_yields_nothing() -> None:
    assert detect_obstacles(LuminanceFrame(data=b"", width=0, height=0)) == []


def test_region_adjustments_for_darkness_and_edges() -> None:
    plain = analyze_region(RegionStats(mean=128.0, variance=500.0, edge_density=0.0), Direction.LEFT)
    assert plain is not None
    assert plain.distance == pytest.approx(0.7)
    assert plain.confidence == pytest.approx(0.7)

    dim_edgy = analyze_region(RegionStats(mean=60.0, variance=1000.0, edge_density=0.5), Direction.RIGHT)
    assert dim_edgy is not None
    assert dim_edgy.distance == pytest.approx(1.5 * 0.7 * 0.8)
    assert dim_edgy.confidence == pytest.approx(0.7)


def test_region_below_confidence_floor_is_dropped() -> None:
    stats = RegionStats(mean=128.0, variance=2000.0, edge_density=0.0)
    assert analyze_region(stats, Direction.CENTER, min_confidence=0.6) is None
    assert analyze_region(stats, Direction.CENTER) is not None
    assert analyze_region(RegionStats(mean=128.0, variance=5000.0, edge_density=0.0), Direction.CENTER) is None
