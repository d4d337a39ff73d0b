"""Merge per-source detections into one deduplicated set per frame."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from vision.detections import Detection, DetectionSet
from vision.sources import DetectionSource, LuminanceFallbackSource, PerceptionFrame, build_sources


LOGGER = logging.getLogger(__name__)


def merge_detections(result_lists: Iterable[Iterable[Detection]]) -> DetectionSet:
    """Concatenate result lists in the given order, first label wins."""

    merged: list[Detection] = []
    seen: set[str] = set()
    for results in result_lists:
        for detection in results:
            if detection.label in seen:
                continue
            seen.add(detection.label)
            merged.append(detection)
    return DetectionSet(merged)


class DetectionMerger:
    """Source-agnostic merge step over prioritized perception sources."""

    def __init__(
        self,
        sources: Sequence[DetectionSource],
        fallback: LuminanceFallbackSource | None = None,
    ) -> None:
        self._sources = sorted(sources, key=lambda source: source.priority)
        self._fallback = fallback

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "DetectionMerger":
        sources, fallback = build_sources(config)
        return cls(sources, fallback)

    @property
    def sources(self) -> list[DetectionSource]:
        return list(self._sources)

    def merge(self, frame: PerceptionFrame) -> DetectionSet:
        per_source = [(source.name, source.detect(frame)) for source in self._sources]
        merged = merge_detections(results for _, results in per_source)

        if not merged and self._fallback is not None:
            fallback_results = self._fallback.detect(frame)
            merged = merge_detections([fallback_results])
            if merged:
                LOGGER.debug(
                    "[MERGE] fallback obstacle at %.2fm %s",
                    merged[0].distance,
                    merged[0].direction.value,
                )

        if LOGGER.isEnabledFor(logging.DEBUG):
            counts = ", ".join(f"{name}={len(results)}" for name, results in per_source)
            LOGGER.debug(
                "[MERGE] t=%d %s -> %s",
                frame.timestamp_ms,
                counts,
                merged.labels(),
            )
        return merged
