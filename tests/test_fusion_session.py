"""End-to-end tests for a fusion session."""

from __future__ import annotations

from core.session import FusionSession
from navigation.alerts import Severity
from navigation.depth import DepthFrame, DepthPoint
from signs.stability import GestureObservation
from signs.history import TranscriptionSource
from vision.sources import BoxDetection, ImageLabel


def _box(label: str, left: int, right: int, top: int = 100, bottom: int = 800) -> BoxDetection:
    return BoxDetection(
        label=label,
        confidence=0.8,
        left=left,
        top=top,
        right=right,
        bottom=bottom,
        image_width=1000,
        image_height=1000,
    )


def _started(config: dict | None = None) -> FusionSession:
    session = FusionSession.from_config(config or {})
    session.start()
    return session


def test_person_on_the_left_is_announced() -> None:
    session = _started()
    alert = session.process_vision_frame(boxes=[_box("person", 100, 300)], timestamp_ms=0)

    assert alert is not None
    assert alert.severity is Severity.LOW
    assert alert.spoken_text == "person detected to your left"
    channels = [event.channel for event in session.event_bus.drain()]
    assert channels == ["haptic", "haptic", "speech"]


def test_empty_frame_is_clear_and_silent() -> None:
    session = _started()
    alert = session.process_vision_frame(labels=[ImageLabel("sky", 0.99)], timestamp_ms=0)

    assert alert is not None
    assert alert.severity is Severity.CLEAR
    assert alert.spoken_text == "Path clear"
    assert len(session.event_bus) == 0


def test_depth_point_close_on_the_right_is_critical() -> None:
    session = _started()
    frame = DepthFrame.from_points([DepthPoint(x=0.8, y=0.5, depth=0.3)], timestamp_ms=0)
    alert = session.process_depth_frame(frame)

    assert alert is not None
    assert alert.severity is Severity.CRITICAL
    assert alert.spoken_text == "obstacle detected 0.3 meters on your right"
    speech = [event for event in session.event_bus.drain() if event.channel == "speech"]
    assert speech[0].priority == "critical"


def test_depth_frame_without_immediate_points_is_ignored() -> None:
    session = _started()
    frame = DepthFrame.from_points([DepthPoint(x=0.5, y=0.5, depth=1.5)], timestamp_ms=0)
    assert session.process_depth_frame(frame) is None
    assert len(session.event_bus) == 0


def test_held_wave_is_confirmed_once_and_recorded() -> None:
    session = _started()
    confirmed = [
        session.process_gesture(GestureObservation("wave", "hello", 0.9, index))
        for index in range(4)
    ]

    assert [gesture is not None for gesture in confirmed] == [False, False, True, False]
    assert len(session.history) == 1
    latest = session.history.latest()
    assert latest is not None
    assert latest.text == "hello"
    assert latest.source is TranscriptionSource.SIGN_LANGUAGE
    assert [event.channel for event in session.event_bus.drain()] == ["history", "speech"]


def test_closest_of_two_objects_drives_guidance() -> None:
    session = _started({"vision": {"reference_heights": {"person": 0.45}}})
    alert = session.process_vision_frame(
        boxes=[_box("car", 50, 250), _box("person", 400, 600)],
        timestamp_ms=0,
    )

    assert alert is not None
    assert alert.closest_detection is not None
    assert alert.closest_detection.label == "person"
    assert alert.severity is Severity.CRITICAL
    assert alert.spoken_text == "Stop! person ahead"


def test_stopped_session_drops_frames_and_resets_gesture_run() -> None:
    session = _started()
    session.process_gesture(GestureObservation("wave", "hello", 0.9, 0))
    session.process_gesture(GestureObservation("wave", "hello", 0.9, 1))
    session.stop()

    assert session.stability_filter.state.consecutive_count == 0
    assert session.process_vision_frame(boxes=[_box("person", 100, 300)], timestamp_ms=2) is None
    assert session.process_depth_frame(DepthFrame.from_points([DepthPoint(0.5, 0.5, 0.1)], timestamp_ms=3)) is None
    assert session.process_gesture(GestureObservation("wave", "hello", 0.9, 4)) is None
    assert len(session.event_bus) == 0
    assert len(session.history) == 0


def test_new_session_is_idle_until_started() -> None:
    session = FusionSession()
    assert session.active is False
    assert session.process_vision_frame(timestamp_ms=0) is None
    session.start()
    assert session.process_vision_frame(timestamp_ms=1) is not None


def test_voice_toggle_from_config() -> None:
    session = _started({"feedback": {"tts_enabled": False}})
    session.process_vision_frame(boxes=[_box("person", 100, 300)], timestamp_ms=0)
    assert {event.channel for event in session.event_bus.drain()} == {"haptic"}


def test_configured_session_publishes_on_its_own_bus() -> None:
    session = _started({"feedback": {"bus_maxlen": 7}, "signs": {"history_size": 3}})
    frame = DepthFrame.from_points([DepthPoint(x=0.8, y=0.5, depth=0.3)], timestamp_ms=0)
    session.process_depth_frame(frame)

    assert session.event_bus.maxlen == 7
    assert session.history.max_entries == 3
    assert len(session.event_bus) == 3


def test_default_dispatcher_shares_the_session_bus() -> None:
    session = _started()
    session.process_depth_frame(DepthFrame.from_points([DepthPoint(0.5, 0.5, 0.2)], timestamp_ms=0))
    assert len(session.event_bus) == 3
