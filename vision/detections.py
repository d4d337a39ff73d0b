"""Detection schemas shared by perception sources and the navigation classifier.

Bounding boxes are normalized to the source frame dimensions and represented
by their four edges ``left, top, right, bottom``, each expected in the
inclusive range ``[0.0, 1.0]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


class Direction(str, Enum):
    """Horizontal bucket of a detection relative to the camera axis."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    UNKNOWN = "unknown"


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class BoundingBox:
    """Normalized bounding box edges."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2.0

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2.0

    @classmethod
    def from_pixels(
        cls,
        left: float,
        top: float,
        right: float,
        bottom: float,
        image_width: int,
        image_height: int,
    ) -> "BoundingBox":
        """Normalize a pixel rectangle to the frame, clamping to the unit square."""

        if image_width <= 0 or image_height <= 0:
            return PLACEHOLDER_BOX
        return cls(
            left=_clamp_unit(left / image_width),
            top=_clamp_unit(top / image_height),
            right=_clamp_unit(right / image_width),
            bottom=_clamp_unit(bottom / image_height),
        )


# Stand-in geometry for sources that only label the whole frame.
PLACEHOLDER_BOX = BoundingBox(left=0.25, top=0.25, right=0.75, bottom=0.75)


def normalize_label(label: str | None) -> str:
    """Return the canonical form used for dedup and table lookups."""

    if not label:
        return ""
    return " ".join(str(label).strip().lower().split())


@dataclass(frozen=True)
class Detection:
    """Single perceived object in one frame."""

    label: str
    confidence: float
    distance: float
    direction: Direction
    bounding_box: BoundingBox = PLACEHOLDER_BOX
    source: str = "unknown"

    def __post_init__(self) -> None:
        object.__setattr__(self, "label", normalize_label(self.label))
        object.__setattr__(self, "confidence", _clamp_unit(self.confidence))
        object.__setattr__(self, "distance", max(0.0, float(self.distance)))


class DetectionSet:
    """Ordered, label-deduplicated detections for one frame.

    Built once by the merger and never mutated afterwards.
    """

    __slots__ = ("_items",)

    def __init__(self, detections: Iterable[Detection] = ()) -> None:
        items: list[Detection] = []
        seen: set[str] = set()
        for detection in detections:
            if detection.label in seen:
                continue
            seen.add(detection.label)
            items.append(detection)
        self._items: tuple[Detection, ...] = tuple(items)

    def __iter__(self) -> Iterator[Detection]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __getitem__(self, index: int) -> Detection:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DetectionSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"DetectionSet({list(self._items)!r})"

    @property
    def items(self) -> tuple[Detection, ...]:
        return self._items

    def labels(self) -> list[str]:
        return [item.label for item in self._items]

    def closest(self) -> Detection | None:
        """Return the minimum-distance detection; ties keep input order."""

        closest: Detection | None = None
        for detection in self._items:
            if closest is None or detection.distance < closest.distance:
                closest = detection
        return closest
