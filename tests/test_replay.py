"""Tests for replaying recorded frames through a session."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.replay import RecordingError, depth_frame_from, load_recording, replay
from core.session import FusionSession


RECORDING = Path(__file__).resolve().parents[1] / "recordings" / "crossing.yaml"


def test_shipped_recording_replays_end_to_end() -> None:
    session = FusionSession()
    session.start()
    summary = replay(session, load_recording(RECORDING))

    assert summary.frames == 7
    assert summary.skipped == 0
    assert summary.alerts == {"low": 2, "critical": 2}
    assert summary.gestures == ["hello"]
    assert summary.events == {"haptic": 8, "speech": 4, "history": 1}
    assert summary.spoken == [
        "person detected to your left",
        "Stop! obstacle ahead",
        "obstacle detected 0.3 meters on your right",
        "hello",
    ]
    assert "Replay summary" in summary.format()


def test_unknown_frame_types_are_skipped() -> None:
    session = FusionSession()
    session.start()
    summary = replay(session, [{"type": "thermal"}, {"type": "vision", "timestamp_ms": 0}])

    assert summary.skipped == 1
    assert summary.frames == 1
    assert summary.alerts == {"clear": 1}


def test_depth_grid_entries_apply_confidence_floor() -> None:
    frame = depth_frame_from(
        {"timestamp_ms": 5, "width": 2, "height": 1, "depths": [0.3, 0.4], "confidences": [0.9, 0.6]},
        min_point_confidence=0.7,
    )
    assert [point.depth for point in frame.points] == [0.3]
    assert frame.timestamp_ms == 5


def test_recording_must_hold_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(RecordingError):
        load_recording(path)
