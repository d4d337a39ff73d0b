"""Per-channel minimum-interval throttle for outbound feedback."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from core.clock import millis
from navigation.alerts import Severity


class FeedbackChannel(str, Enum):
    """Independent throttling budgets."""

    HAPTIC = "haptic"
    SPEECH = "speech"


@dataclass
class RateLimiterState:
    """Throttle state for one channel."""

    min_interval_ms: int
    last_emission_ms: int | None = None

    def __post_init__(self) -> None:
        if self.min_interval_ms < 0:
            raise ValueError(f"min_interval_ms must be >= 0, got {self.min_interval_ms}")


class FeedbackRateLimiter:
    """Suppress feedback that arrives inside a channel's minimum interval.

    Critical severity always passes and restarts the interval. Timestamps
    earlier than the last emission (another producer running behind) count
    as inside the interval.
    """

    def __init__(self, *, haptic_interval_ms: int = 300, speech_interval_ms: int = 2000) -> None:
        self._states = {
            FeedbackChannel.HAPTIC: RateLimiterState(min_interval_ms=int(haptic_interval_ms)),
            FeedbackChannel.SPEECH: RateLimiterState(min_interval_ms=int(speech_interval_ms)),
        }

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "FeedbackRateLimiter":
        feedback_cfg = config.get("feedback") if isinstance(config, Mapping) else None
        if not isinstance(feedback_cfg, Mapping):
            return cls()
        return cls(
            haptic_interval_ms=int(feedback_cfg.get("haptic_interval_ms", 300)),
            speech_interval_ms=int(feedback_cfg.get("speech_interval_ms", 2000)),
        )

    def state(self, channel: FeedbackChannel) -> RateLimiterState:
        return self._states[FeedbackChannel(channel)]

    def try_emit(
        self,
        channel: FeedbackChannel,
        severity: Severity,
        timestamp_ms: int | None = None,
    ) -> bool:
        severity = Severity(severity)
        state = self._states[FeedbackChannel(channel)]
        now_ms = millis() if timestamp_ms is None else int(timestamp_ms)

        if severity is not Severity.CRITICAL and state.last_emission_ms is not None:
            if now_ms - state.last_emission_ms < state.min_interval_ms:
                return False

        if state.last_emission_ms is None or now_ms > state.last_emission_ms:
            state.last_emission_ms = now_ms
        return True

    def reset(self) -> None:
        for state in self._states.values():
            state.last_emission_ms = None
