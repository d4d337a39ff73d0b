"""Vision package exports."""

from vision.detections import BoundingBox, Detection, DetectionSet, Direction
from vision.geometry import DistanceEstimator, direction_of, estimate_distance, estimate_distance_from_confidence
from vision.luminance import LuminanceFrame
from vision.merger import DetectionMerger, merge_detections
from vision.sources import (
    BoxDetection,
    BoxDetectorSource,
    DetectionSource,
    ImageLabel,
    ImageLabelerSource,
    LuminanceFallbackSource,
    PerceptionFrame,
    SourcePriority,
)

__all__ = [
    "BoundingBox",
    "BoxDetection",
    "BoxDetectorSource",
    "Detection",
    "DetectionMerger",
    "DetectionSet",
    "DetectionSource",
    "Direction",
    "DistanceEstimator",
    "ImageLabel",
    "ImageLabelerSource",
    "LuminanceFallbackSource",
    "LuminanceFrame",
    "PerceptionFrame",
    "SourcePriority",
    "direction_of",
    "estimate_distance",
    "estimate_distance_from_confidence",
    "merge_detections",
]
