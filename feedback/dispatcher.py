"""Routes navigation alerts and confirmed gestures to driver-facing feedback events."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping

from core.event_bus import EventBus, FeedbackEvent
from feedback.patterns import TtsPriority, direction_pattern_for, haptic_pattern_for, tts_priority_for
from feedback.rate_limiter import FeedbackChannel, FeedbackRateLimiter
from navigation.alerts import NavigationAlert, Severity
from signs.history import Transcription
from signs.stability import ConfirmedGesture


LOGGER = logging.getLogger(__name__)

DEFAULT_DIRECTION_DELAY_MS = 150
# Queued non-critical guidance is replaced by newer guidance; critical speech never is.
GUIDANCE_REPLACE_KEY = "guidance"


@dataclass(frozen=True)
class DispatchResult:
    """What a single dispatch published."""

    haptic: bool = False
    direction: bool = False
    speech: bool = False

    @property
    def any(self) -> bool:
        return self.haptic or self.direction or self.speech


class FeedbackDispatcher:
    """Applies the per-channel limiter and publishes feedback events."""

    def __init__(
        self,
        event_bus: EventBus,
        rate_limiter: FeedbackRateLimiter | None = None,
        *,
        tts_enabled: bool = True,
        direction_delay_ms: int = DEFAULT_DIRECTION_DELAY_MS,
    ) -> None:
        self._event_bus = event_bus
        self._rate_limiter = rate_limiter if rate_limiter is not None else FeedbackRateLimiter()
        self._tts_enabled = bool(tts_enabled)
        self._direction_delay_ms = int(direction_delay_ms)

    @classmethod
    def from_config(cls, config: Mapping[str, object], event_bus: EventBus) -> "FeedbackDispatcher":
        feedback_cfg = config.get("feedback") if isinstance(config, Mapping) else None
        if not isinstance(feedback_cfg, Mapping):
            feedback_cfg = {}
        return cls(
            event_bus,
            FeedbackRateLimiter.from_config(config),
            tts_enabled=bool(feedback_cfg.get("tts_enabled", True)),
            direction_delay_ms=int(feedback_cfg.get("direction_delay_ms", DEFAULT_DIRECTION_DELAY_MS)),
        )

    @property
    def rate_limiter(self) -> FeedbackRateLimiter:
        return self._rate_limiter

    @property
    def tts_enabled(self) -> bool:
        return self._tts_enabled

    def set_tts_enabled(self, enabled: bool) -> None:
        self._tts_enabled = bool(enabled)
        LOGGER.info("[FEEDBACK] voice guidance %s", "on" if enabled else "off")

    def dispatch(self, alert: NavigationAlert) -> DispatchResult:
        if alert.severity is Severity.CLEAR:
            return DispatchResult()

        haptic_sent, direction_sent = self._dispatch_haptic(alert)
        speech_sent = self._dispatch_speech(alert)
        if not (haptic_sent or speech_sent):
            LOGGER.debug("[FEEDBACK] %s alert throttled on all channels", alert.severity.value)
        return DispatchResult(haptic=haptic_sent, direction=direction_sent, speech=speech_sent)

    def dispatch_gesture(self, gesture: ConfirmedGesture) -> Transcription:
        """Record the gesture in history and speak its meaning."""

        transcription = Transcription.from_gesture(gesture)
        self._event_bus.publish(
            FeedbackEvent(
                channel="history",
                payload=transcription,
                metadata={"gesture_id": gesture.gesture_id, "language": gesture.language.value},
            )
        )
        if self._tts_enabled and gesture.meaning:
            self._event_bus.publish(
                FeedbackEvent(
                    channel=FeedbackChannel.SPEECH.value,
                    payload=gesture.meaning,
                    priority=TtsPriority.HIGH.value,
                    metadata={"gesture_id": gesture.gesture_id},
                )
            )
        return transcription

    def _dispatch_haptic(self, alert: NavigationAlert) -> tuple[bool, bool]:
        pattern = haptic_pattern_for(alert.severity)
        if pattern is None:
            return False, False
        if not self._rate_limiter.try_emit(FeedbackChannel.HAPTIC, alert.severity, alert.timestamp_ms):
            return False, False

        priority = tts_priority_for(alert.severity).value
        self._event_bus.publish(
            FeedbackEvent(
                channel=FeedbackChannel.HAPTIC.value,
                payload=pattern,
                priority=priority,
                metadata={"severity": alert.severity.value, "source": alert.source},
            )
        )

        closest = alert.closest_detection
        if closest is None:
            return True, False
        direction_pattern = direction_pattern_for(closest.direction)
        if direction_pattern is None:
            return True, False
        # Follows the primary pulse and is not limited on its own.
        self._event_bus.publish(
            FeedbackEvent(
                channel=FeedbackChannel.HAPTIC.value,
                payload=direction_pattern,
                priority=priority,
                delay_ms=self._direction_delay_ms,
                metadata={"direction": closest.direction.value},
            )
        )
        return True, True

    def _dispatch_speech(self, alert: NavigationAlert) -> bool:
        if not self._tts_enabled or not alert.spoken_text:
            return False
        if not self._rate_limiter.try_emit(FeedbackChannel.SPEECH, alert.severity, alert.timestamp_ms):
            return False
        self._event_bus.publish(
            FeedbackEvent(
                channel=FeedbackChannel.SPEECH.value,
                payload=alert.spoken_text,
                priority=tts_priority_for(alert.severity).value,
                metadata={"severity": alert.severity.value, "source": alert.source},
                replace_key=None if alert.severity is Severity.CRITICAL else GUIDANCE_REPLACE_KEY,
            )
        )
        return True
