"""Replay recorded perception frames through a fusion session."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from core.session import FusionSession
from navigation.depth import DepthFrame, DepthPoint
from signs.stability import GestureObservation
from vision.luminance import LuminanceFrame
from vision.sources import BoxDetection, ImageLabel, PerceptionFrame


LOGGER = logging.getLogger(__name__)


class RecordingError(ValueError):
    """Raised when a recording file cannot be turned into frames."""


@dataclass
class ReplaySummary:
    """Counts gathered while replaying a recording."""

    frames: int = 0
    skipped: int = 0
    alerts: Counter = field(default_factory=Counter)
    gestures: list[str] = field(default_factory=list)
    events: Counter = field(default_factory=Counter)
    spoken: list[str] = field(default_factory=list)

    def format(self) -> str:
        lines = [
            "Replay summary",
            "-" * 60,
            f"frames: {self.frames} (skipped {self.skipped})",
            "alerts: " + (", ".join(f"{key}={value}" for key, value in sorted(self.alerts.items())) or "none"),
            "gestures: " + (", ".join(self.gestures) or "none"),
            "feedback events: "
            + (", ".join(f"{key}={value}" for key, value in sorted(self.events.items())) or "none"),
        ]
        lines.extend(f"  said: {text}" for text in self.spoken)
        lines.append("-" * 60)
        return "\n".join(lines)


def load_recording(path: Path) -> list[dict[str, Any]]:
    """Load the ``frames`` list from a YAML recording."""

    with Path(path).open("r", encoding="utf-8") as file:
        loaded = yaml.safe_load(file) or {}
    if not isinstance(loaded, Mapping):
        raise RecordingError(f"{path} must contain a mapping with a 'frames' list")
    frames = loaded.get("frames") or []
    if not isinstance(frames, list):
        raise RecordingError(f"'frames' in {path} must be a list")
    return [dict(entry) for entry in frames if isinstance(entry, Mapping)]


def perception_frame_from(entry: Mapping[str, Any]) -> PerceptionFrame:
    labels = tuple(
        ImageLabel(label=str(item.get("label", "")), confidence=float(item.get("confidence", 0.0)))
        for item in entry.get("labels") or ()
    )
    boxes = tuple(
        BoxDetection(
            label=str(item.get("label", "")),
            confidence=float(item.get("confidence", 0.0)),
            left=float(item.get("left", 0.0)),
            top=float(item.get("top", 0.0)),
            right=float(item.get("right", 0.0)),
            bottom=float(item.get("bottom", 0.0)),
            image_width=int(item.get("image_width", 1)),
            image_height=int(item.get("image_height", 1)),
        )
        for item in entry.get("boxes") or ()
    )
    luminance = None
    luminance_cfg = entry.get("luminance")
    if isinstance(luminance_cfg, Mapping):
        width = int(luminance_cfg.get("width", 0))
        height = int(luminance_cfg.get("height", 0))
        fill = int(luminance_cfg.get("fill", 128)) & 0xFF
        luminance = LuminanceFrame(data=bytes([fill]) * (width * height), width=width, height=height)
    return PerceptionFrame(
        timestamp_ms=int(entry.get("timestamp_ms", 0)),
        labels=labels,
        boxes=boxes,
        luminance=luminance,
    )


def depth_frame_from(entry: Mapping[str, Any], *, min_point_confidence: float = 0.5) -> DepthFrame:
    """Build a depth frame from explicit ``points`` or a row-major ``depths`` grid."""

    timestamp_ms = int(entry.get("timestamp_ms", 0))
    if entry.get("depths") is not None:
        return DepthFrame.from_samples(
            int(entry.get("width", 0)),
            int(entry.get("height", 0)),
            [float(value) for value in entry["depths"]],
            timestamp_ms,
            entry.get("confidences"),
            min_confidence=min_point_confidence,
        )
    points = [
        DepthPoint(
            x=float(item.get("x", 0.5)),
            y=float(item.get("y", 0.5)),
            depth=float(item.get("depth", 0.0)),
            confidence=float(item.get("confidence", 1.0)),
        )
        for item in entry.get("points") or ()
    ]
    return DepthFrame.from_points(points, timestamp_ms=timestamp_ms)


def gesture_observation_from(entry: Mapping[str, Any]) -> GestureObservation:
    gesture_id = entry.get("gesture_id")
    return GestureObservation(
        gesture_id=str(gesture_id) if gesture_id is not None else None,
        meaning=str(entry.get("meaning", "")),
        confidence=float(entry.get("confidence", 0.0)),
        timestamp_ms=int(entry["timestamp_ms"]) if "timestamp_ms" in entry else None,
    )


def replay(
    session: FusionSession,
    frames: Iterable[Mapping[str, Any]],
    *,
    min_point_confidence: float = 0.5,
) -> ReplaySummary:
    """Feed recorded frames to ``session`` in order and summarize the output."""

    summary = ReplaySummary()
    for entry in frames:
        frame_type = str(entry.get("type", "")).lower()
        if frame_type == "vision":
            alert = session.process_perception_frame(perception_frame_from(entry))
            if alert is not None:
                summary.alerts[alert.severity.value] += 1
        elif frame_type == "depth":
            alert = session.process_depth_frame(
                depth_frame_from(entry, min_point_confidence=min_point_confidence)
            )
            if alert is not None:
                summary.alerts[alert.severity.value] += 1
        elif frame_type == "gesture":
            gesture = session.process_gesture(gesture_observation_from(entry))
            if gesture is not None:
                summary.gestures.append(gesture.meaning or gesture.gesture_id)
        else:
            LOGGER.warning("[SESSION] skipping recorded frame with type %r", frame_type)
            summary.skipped += 1
            continue
        summary.frames += 1

    for event in session.event_bus.drain():
        summary.events[event.channel] += 1
        if event.channel == "speech":
            summary.spoken.append(str(event.payload))
    return summary
