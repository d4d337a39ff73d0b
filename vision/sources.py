"""Perception sources that turn raw model output into detections.

Each source reads its slice of a :class:`PerceptionFrame` and returns
detections in its own order. Priority between sources is decided by the
merger, not by the sources themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Collection, Iterable, Mapping, Sequence

from vision.detections import PLACEHOLDER_BOX, BoundingBox, Detection, Direction, normalize_label
from vision.geometry import DistanceEstimator, direction_of
from vision.luminance import LuminanceFrame, detect_obstacles


GENERIC_LABELS: frozenset[str] = frozenset(
    {
        "pattern", "texture", "design", "art", "material", "fabric",
        "sky", "cloud", "horizon", "floor", "ground", "wall", "ceiling",
        "indoor", "outdoor", "room", "building", "architecture",
        "color", "shape", "line", "circle", "rectangle", "square",
        "light", "shadow", "reflection", "background", "foreground",
        "nature", "landscape", "scene", "view", "space", "area",
        "surface", "wood", "metal", "plastic", "glass", "concrete",
        "tile", "carpet", "grass", "water", "sand", "snow", "ice",
    }
)

# Labels a box detector emits when it found a shape but could not classify it.
UNCLASSIFIED_LABELS: frozenset[str] = frozenset({"", "object", "unknown"})


class SourcePriority(IntEnum):
    """Merge order; lower values win label collisions."""

    LABELER = 0
    DETECTOR = 1
    FALLBACK = 2


@dataclass(frozen=True)
class ImageLabel:
    """Whole-frame label from an image classifier (no geometry)."""

    label: str
    confidence: float


@dataclass(frozen=True)
class BoxDetection:
    """Region detector result with a pixel-space rectangle."""

    label: str
    confidence: float
    left: float
    top: float
    right: float
    bottom: float
    image_width: int
    image_height: int

    @property
    def box(self) -> BoundingBox:
        return BoundingBox.from_pixels(
            self.left,
            self.top,
            self.right,
            self.bottom,
            self.image_width,
            self.image_height,
        )


@dataclass(frozen=True)
class PerceptionFrame:
    """Everything the vision pipeline produced for one camera frame."""

    timestamp_ms: int
    labels: Sequence[ImageLabel] = field(default_factory=tuple)
    boxes: Sequence[BoxDetection] = field(default_factory=tuple)
    luminance: LuminanceFrame | None = None


def is_generic_label(label: str, extra: Collection[str] = ()) -> bool:
    normalized = normalize_label(label)
    return normalized in GENERIC_LABELS or normalized in extra


class DetectionSource(ABC):
    """Capability shared by every perception source."""

    name: str = "source"
    priority: SourcePriority = SourcePriority.FALLBACK

    @abstractmethod
    def detect(self, frame: PerceptionFrame) -> list[Detection]:
        """Return detections for ``frame``; never raises for well-formed input."""


class ImageLabelerSource(DetectionSource):
    """Whole-frame labels placed at the frame center with confidence-based range."""

    name = "labeler"
    priority = SourcePriority.LABELER

    def __init__(
        self,
        estimator: DistanceEstimator | None = None,
        *,
        min_confidence: float = 0.5,
        extra_generic_labels: Iterable[str] = (),
    ) -> None:
        self._estimator = estimator or DistanceEstimator()
        self._min_confidence = float(min_confidence)
        self._extra_generic = frozenset(extra_generic_labels)

    def detect(self, frame: PerceptionFrame) -> list[Detection]:
        results: list[Detection] = []
        for item in frame.labels:
            if item.confidence < self._min_confidence:
                continue
            label = normalize_label(item.label)
            if not label or is_generic_label(label, self._extra_generic):
                continue
            results.append(
                Detection(
                    label=label,
                    confidence=item.confidence,
                    distance=self._estimator.from_confidence(item.confidence, label),
                    direction=Direction.CENTER,
                    bounding_box=PLACEHOLDER_BOX,
                    source=self.name,
                )
            )
        return results


class BoxDetectorSource(DetectionSource):
    """Region detector results with box-based range and direction.

    Unclassified boxes borrow the most confident useful labeler label of the
    same frame so the user hears a name instead of "object".
    """

    name = "detector"
    priority = SourcePriority.DETECTOR

    def __init__(
        self,
        estimator: DistanceEstimator | None = None,
        *,
        min_confidence: float = 0.3,
        extra_generic_labels: Iterable[str] = (),
    ) -> None:
        self._estimator = estimator or DistanceEstimator()
        self._min_confidence = float(min_confidence)
        self._extra_generic = frozenset(extra_generic_labels)

    def detect(self, frame: PerceptionFrame) -> list[Detection]:
        borrowed = self._best_useful_label(frame.labels)
        results: list[Detection] = []
        for item in frame.boxes:
            label = normalize_label(item.label)
            confidence = float(item.confidence)
            if label in UNCLASSIFIED_LABELS and borrowed is not None:
                label = normalize_label(borrowed.label)
                confidence = float(borrowed.confidence)
            if confidence < self._min_confidence:
                continue
            if is_generic_label(label, self._extra_generic):
                continue
            box = item.box
            results.append(
                Detection(
                    label=label or "object",
                    confidence=confidence,
                    distance=self._estimator.from_box(label, box, item.image_width, item.image_height),
                    direction=direction_of(box),
                    bounding_box=box,
                    source=self.name,
                )
            )
        return results

    def _best_useful_label(self, labels: Sequence[ImageLabel]) -> ImageLabel | None:
        best: ImageLabel | None = None
        for item in labels:
            if is_generic_label(item.label, self._extra_generic) or not normalize_label(item.label):
                continue
            if best is None or item.confidence > best.confidence:
                best = item
        return best


class LuminanceFallbackSource(DetectionSource):
    """Luminance heuristic consulted only when no real source found anything.

    Candidates are ordered nearest first so label dedup keeps the most urgent
    obstacle; equal distances keep center, left, right order.
    """

    name = "fallback"
    priority = SourcePriority.FALLBACK

    def __init__(self, *, min_confidence: float = 0.5, enabled: bool = True) -> None:
        self._min_confidence = float(min_confidence)
        self._enabled = bool(enabled)

    def detect(self, frame: PerceptionFrame) -> list[Detection]:
        if not self._enabled or frame.luminance is None:
            return []
        candidates = detect_obstacles(frame.luminance, min_confidence=self._min_confidence)
        return sorted(candidates, key=lambda detection: detection.distance)


def build_sources(config: Mapping[str, object]) -> tuple[list[DetectionSource], LuminanceFallbackSource]:
    """Build the real sources (priority order) and the fallback from config."""

    vision_cfg = config.get("vision") if isinstance(config, Mapping) else None
    if not isinstance(vision_cfg, Mapping):
        vision_cfg = {}
    estimator = DistanceEstimator.from_config(config)
    extra = tuple(vision_cfg.get("extra_generic_labels") or ())
    sources: list[DetectionSource] = [
        ImageLabelerSource(
            estimator,
            min_confidence=float(vision_cfg.get("labeler_min_confidence", 0.5)),
            extra_generic_labels=extra,
        ),
        BoxDetectorSource(
            estimator,
            min_confidence=float(vision_cfg.get("detector_min_confidence", 0.3)),
            extra_generic_labels=extra,
        ),
    ]
    fallback = LuminanceFallbackSource(
        min_confidence=float(vision_cfg.get("fallback_min_confidence", 0.5)),
        enabled=bool(vision_cfg.get("fallback_enabled", True)),
    )
    return sources, fallback
