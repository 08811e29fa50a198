"""
Detection data models - boxes, per-frame detections, and frame geometry.
"""

import math
from dataclasses import dataclass
from typing import Any


class InvalidBoxError(ValueError):
    """Raised when a bounding box cannot be used for matching."""


class InvalidDetectionError(ValueError):
    """Raised when a raw detection dict is malformed."""


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in pixel space of the current frame.

    Attributes:
        x: Left edge
        y: Top edge
        width: Box width (>= 0)
        height: Box height (>= 0)
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_sequence(cls, values) -> "BoundingBox":
        """
        Build a box from an (x, y, w, h) sequence.

        Raises:
            InvalidBoxError: Wrong length, non-numeric or non-finite values,
                or negative width/height
        """
        try:
            items = list(values)
        except TypeError as e:
            raise InvalidBoxError(f"bbox must be a sequence, got {values!r}") from e

        if len(items) != 4:
            raise InvalidBoxError(f"bbox must have 4 values, got {len(items)}")

        try:
            x, y, w, h = (float(v) for v in items)
        except (TypeError, ValueError) as e:
            raise InvalidBoxError(f"bbox values must be numeric: {items!r}") from e

        if not all(math.isfinite(v) for v in (x, y, w, h)):
            raise InvalidBoxError(f"bbox values must be finite: {items!r}")
        if w < 0 or h < 0:
            raise InvalidBoxError(f"bbox has negative size: {items!r}")

        return cls(x, y, w, h)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]


@dataclass(frozen=True)
class FrameGeometry:
    """Dimensions of the frame the detections were produced from."""

    width: float
    height: float

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ValueError(f"Frame {name} must be a positive number, got {value!r}")

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class Detection:
    """
    Single detection from the external detector, valid for one frame.

    Attributes:
        id: Sequence number within the frame
        class_name: Detector class label (e.g. 'car')
        confidence: Detector score in [0, 1]
        bbox: Box in pixel space
    """

    id: int
    class_name: str
    confidence: float
    bbox: BoundingBox

    @classmethod
    def from_dict(cls, data: dict[str, Any], detection_id: int) -> "Detection":
        """
        Parse an inbound detection dict.

        Accepts `{class, confidence, bbox: [x, y, w, h]}`; `score` is accepted
        as an alias for `confidence`.

        Raises:
            InvalidDetectionError: Missing or invalid fields
            InvalidBoxError: Malformed bbox
        """
        if not isinstance(data, dict):
            raise InvalidDetectionError(f"Detection must be a dict, got {type(data).__name__}")

        class_name = data.get("class")
        if not isinstance(class_name, str) or not class_name.strip():
            raise InvalidDetectionError(f"Detection has no class: {data!r}")

        raw_conf = data.get("confidence", data.get("score"))
        try:
            confidence = float(raw_conf)
        except (TypeError, ValueError) as e:
            raise InvalidDetectionError(f"Invalid confidence: {raw_conf!r}") from e
        if not 0.0 <= confidence <= 1.0:  # also rejects NaN
            raise InvalidDetectionError(f"Confidence out of range: {confidence}")

        if "bbox" not in data:
            raise InvalidDetectionError(f"Detection has no bbox: {data!r}")
        bbox = BoundingBox.from_sequence(data["bbox"])

        return cls(
            id=detection_id,
            class_name=class_name.strip(),
            confidence=confidence,
            bbox=bbox,
        )


@dataclass(frozen=True)
class TrackedDetection:
    """A detection tagged with the identity it was associated to."""

    detection: Detection
    track_id: int
    frames_detected: int
    last_seen: float

    @property
    def id(self) -> int:
        return self.detection.id

    @property
    def class_name(self) -> str:
        return self.detection.class_name

    @property
    def confidence(self) -> float:
        return self.detection.confidence

    @property
    def bbox(self) -> BoundingBox:
        return self.detection.bbox

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.detection.id,
            "class": self.detection.class_name,
            "confidence": self.detection.confidence,
            "bbox": self.detection.bbox.as_list(),
            "track_id": self.track_id,
            "frames_detected": self.frames_detected,
            "last_seen": self.last_seen,
        }
