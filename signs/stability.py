"""Debounce for per-frame gesture classifier output.

A gesture is confirmed only after the classifier reports the same id on
``threshold`` consecutive frames. The counter restarts after a confirmation,
so a pose held for many frames re-emits once per ``threshold`` frames rather
than on every frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Mapping

from core.clock import millis


LOGGER = logging.getLogger(__name__)


class SignLanguage(str, Enum):
    """Sign language the classifier was trained on."""

    ASL = "asl"
    BSL = "bsl"
    ISL = "isl"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def code(self) -> str:
        return _CODES[self]


_DISPLAY_NAMES = {
    SignLanguage.ASL: "American Sign Language",
    SignLanguage.BSL: "British Sign Language",
    SignLanguage.ISL: "International Sign",
    SignLanguage.CUSTOM: "Custom Signs",
}

_CODES = {
    SignLanguage.ASL: "ASL",
    SignLanguage.BSL: "BSL",
    SignLanguage.ISL: "ISL",
    SignLanguage.CUSTOM: "Custom",
}


@dataclass(frozen=True)
class GestureObservation:
    """Raw classifier output for one processed frame; ``gesture_id`` is None on abstain."""

    gesture_id: str | None
    meaning: str = ""
    confidence: float = 0.0
    timestamp_ms: int | None = None


@dataclass(frozen=True)
class ConfirmedGesture:
    """A gesture that survived the stability filter."""

    gesture_id: str
    meaning: str
    confidence: float
    timestamp_ms: int
    language: SignLanguage = SignLanguage.ASL


@dataclass
class StabilityState:
    """Mutable run-length state owned by one session."""

    threshold: int = 3
    last_gesture_id: str | None = None
    consecutive_count: int = 0

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError(f"Stability threshold must be >= 1, got {self.threshold}")

    def reset(self) -> None:
        self.last_gesture_id = None
        self.consecutive_count = 0


class GestureStabilityFilter:
    """Emit a confirmed gesture after ``threshold`` identical observations."""

    def __init__(self, threshold: int = 3, language: SignLanguage = SignLanguage.ASL) -> None:
        self._state = StabilityState(threshold=int(threshold))
        self._language = language

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "GestureStabilityFilter":
        signs_cfg = config.get("signs") if isinstance(config, Mapping) else None
        if not isinstance(signs_cfg, Mapping):
            return cls()
        language_value = str(signs_cfg.get("language", "asl")).lower()
        try:
            language = SignLanguage(language_value)
        except ValueError:
            LOGGER.warning("[SIGNS] unknown sign language %r; using ASL", language_value)
            language = SignLanguage.ASL
        return cls(
            threshold=int(signs_cfg.get("stability_threshold", 3)),
            language=language,
        )

    @property
    def state(self) -> StabilityState:
        return self._state

    @property
    def language(self) -> SignLanguage:
        return self._language

    def set_language(self, language: SignLanguage) -> None:
        self._language = language

    def reset(self) -> None:
        self._state.reset()

    def observe(self, observation: GestureObservation) -> ConfirmedGesture | None:
        state = self._state
        if observation.gesture_id is None:
            state.reset()
            return None

        if observation.gesture_id == state.last_gesture_id:
            state.consecutive_count += 1
        else:
            state.last_gesture_id = observation.gesture_id
            state.consecutive_count = 1

        if state.consecutive_count < state.threshold:
            return None

        # Keep last_gesture_id so a held pose has to climb back to threshold.
        state.consecutive_count = 0
        timestamp_ms = observation.timestamp_ms
        gesture = ConfirmedGesture(
            gesture_id=observation.gesture_id,
            meaning=observation.meaning,
            confidence=observation.confidence,
            timestamp_ms=millis() if timestamp_ms is None else int(timestamp_ms),
            language=self._language,
        )
        LOGGER.debug("[SIGNS] confirmed %s after %d frames", gesture.gesture_id, state.threshold)
        return gesture
