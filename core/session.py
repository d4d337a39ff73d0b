"""Per-user fusion session wiring perception, navigation, signs and feedback."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from core.clock import millis
from core.event_bus import EventBus
from core.logging import log_alert, log_gesture
from feedback.dispatcher import DispatchResult, FeedbackDispatcher
from navigation.alerts import NavigationAlert, NavigationAlertClassifier
from navigation.depth import DepthFrame
from navigation.depth_overlay import DepthFusionOverlay
from signs.history import ConversationHistory
from signs.stability import ConfirmedGesture, GestureObservation, GestureStabilityFilter
from vision.luminance import LuminanceFrame
from vision.merger import DetectionMerger
from vision.sources import BoxDetection, ImageLabel, PerceptionFrame


LOGGER = logging.getLogger(__name__)


class FusionSession:
    """Owns the engine state for one active user session.

    Callers serialize calls per session; nothing here takes a lock except the
    event bus, which driver threads consume. A new session is idle until
    :meth:`start` is called, and frames arriving while idle are dropped.
    """

    def __init__(
        self,
        *,
        merger: DetectionMerger | None = None,
        classifier: NavigationAlertClassifier | None = None,
        overlay: DepthFusionOverlay | None = None,
        stability_filter: GestureStabilityFilter | None = None,
        history: ConversationHistory | None = None,
        event_bus: EventBus | None = None,
        dispatcher: FeedbackDispatcher | None = None,
    ) -> None:
        self.merger = merger if merger is not None else DetectionMerger.from_config({})
        self.classifier = classifier if classifier is not None else NavigationAlertClassifier()
        self.overlay = overlay if overlay is not None else DepthFusionOverlay()
        self.stability_filter = stability_filter if stability_filter is not None else GestureStabilityFilter()
        self.history = history if history is not None else ConversationHistory()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.dispatcher = dispatcher if dispatcher is not None else FeedbackDispatcher(self.event_bus)
        self.last_alert: NavigationAlert | None = None
        self.last_dispatch: DispatchResult | None = None
        self._active = False

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "FusionSession":
        feedback_cfg = config.get("feedback") if isinstance(config, Mapping) else None
        if not isinstance(feedback_cfg, Mapping):
            feedback_cfg = {}
        event_bus = EventBus(maxlen=int(feedback_cfg.get("bus_maxlen", 200)))
        return cls(
            merger=DetectionMerger.from_config(config),
            classifier=NavigationAlertClassifier.from_config(config),
            overlay=DepthFusionOverlay.from_config(config),
            stability_filter=GestureStabilityFilter.from_config(config),
            history=ConversationHistory.from_config(config),
            event_bus=event_bus,
            dispatcher=FeedbackDispatcher.from_config(config, event_bus),
        )

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        LOGGER.info("[SESSION] started (%s)", self.stability_filter.language.display_name)

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self.stability_filter.reset()
        # Drivers blocked on the bus need to notice the session ended.
        self.event_bus.notify()
        LOGGER.info("[SESSION] stopped")

    def process_vision_frame(
        self,
        labels: Sequence[ImageLabel] = (),
        boxes: Sequence[BoxDetection] = (),
        luminance: LuminanceFrame | None = None,
        timestamp_ms: int | None = None,
    ) -> NavigationAlert | None:
        frame = PerceptionFrame(
            timestamp_ms=millis() if timestamp_ms is None else int(timestamp_ms),
            labels=tuple(labels),
            boxes=tuple(boxes),
            luminance=luminance,
        )
        return self.process_perception_frame(frame)

    def process_perception_frame(self, frame: PerceptionFrame) -> NavigationAlert | None:
        if not self._active:
            LOGGER.debug("[SESSION] dropping vision frame at %s; session idle", frame.timestamp_ms)
            return None
        detections = self.merger.merge(frame)
        alert = self.classifier.classify(detections, frame.timestamp_ms)
        self._publish(alert)
        return alert

    def process_depth_frame(self, frame: DepthFrame) -> NavigationAlert | None:
        if not self._active:
            LOGGER.debug("[SESSION] dropping depth frame at %s; session idle", frame.timestamp_ms)
            return None
        alert = self.overlay.process(frame)
        if alert is None:
            return None
        self._publish(alert)
        return alert

    def process_gesture(self, observation: GestureObservation) -> ConfirmedGesture | None:
        if not self._active:
            return None
        gesture = self.stability_filter.observe(observation)
        if gesture is None:
            return None
        transcription = self.dispatcher.dispatch_gesture(gesture)
        self.history.add(transcription)
        log_gesture(gesture)
        return gesture

    def set_tts_enabled(self, enabled: bool) -> None:
        self.dispatcher.set_tts_enabled(enabled)

    def _publish(self, alert: NavigationAlert) -> None:
        self.last_alert = alert
        self.last_dispatch = self.dispatcher.dispatch(alert)
        log_alert(alert)
