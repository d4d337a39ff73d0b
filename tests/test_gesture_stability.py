"""Tests for the gesture stability filter."""

from __future__ import annotations

import pytest

from signs.stability import (
    GestureObservation,
    GestureStabilityFilter,
    SignLanguage,
    StabilityState,
)


def _observe_all(stability_filter: GestureStabilityFilter, gesture_ids: list[str | None]) -> list[int]:
    confirmed: list[int] = []
    for index, gesture_id in enumerate(gesture_ids):
        result = stability_filter.observe(
            GestureObservation(gesture_id=gesture_id, meaning=f"meaning of {gesture_id}", confidence=0.9, timestamp_ms=index)
        )
        if result is not None:
            confirmed.append(index)
    return confirmed


def test_held_gesture_confirms_once_on_third_frame() -> None:
    stability_filter = GestureStabilityFilter(threshold=3)
    assert _observe_all(stability_filter, ["wave", "wave", "wave", "wave"]) == [2]
    assert stability_filter.state.consecutive_count == 1
    assert stability_filter.state.last_gesture_id == "wave"


def test_continued_hold_needs_a_full_run_again() -> None:
    stability_filter = GestureStabilityFilter(threshold=3)
    assert _observe_all(stability_filter, ["wave"] * 6) == [2, 5]


def test_short_runs_never_confirm() -> None:
    stability_filter = GestureStabilityFilter(threshold=3)
    assert _observe_all(stability_filter, ["wave", "wave", "stop", "stop", "wave", "wave"]) == []


def test_abstain_resets_the_run() -> None:
    stability_filter = GestureStabilityFilter(threshold=3)
    assert _observe_all(stability_filter, ["wave", "wave", None, "wave", "wave"]) == []
    assert stability_filter.state.last_gesture_id == "wave"
    assert stability_filter.state.consecutive_count == 2


def test_confirmed_gesture_carries_observation_and_language() -> None:
    stability_filter = GestureStabilityFilter(threshold=2, language=SignLanguage.BSL)
    stability_filter.observe(GestureObservation("thanks", "thank you", 0.7, 10))
    gesture = stability_filter.observe(GestureObservation("thanks", "thank you", 0.8, 20))

    assert gesture is not None
    assert gesture.gesture_id == "thanks"
    assert gesture.meaning == "thank you"
    assert gesture.confidence == pytest.approx(0.8)
    assert gesture.timestamp_ms == 20
    assert gesture.language is SignLanguage.BSL


def test_threshold_one_confirms_every_frame() -> None:
    assert _observe_all(GestureStabilityFilter(threshold=1), ["a", "a", "b"]) == [0, 1, 2]


def test_invalid_threshold_is_rejected() -> None:
    with pytest.raises(ValueError):
        StabilityState(threshold=0)


def test_from_config_reads_threshold_and_language() -> None:
    stability_filter = GestureStabilityFilter.from_config({"signs": {"stability_threshold": 5, "language": "isl"}})
    assert stability_filter.state.threshold == 5
    assert stability_filter.language is SignLanguage.ISL

    fallback = GestureStabilityFilter.from_config({"signs": {"language": "klingon"}})
    assert fallback.language is SignLanguage.ASL
