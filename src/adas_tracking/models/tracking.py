"""
Tracking data models - persistent identities across frames.
"""

from dataclasses import dataclass

from .detection import BoundingBox


@dataclass
class Track:
    """
    Represents a tracked object with its state across frames.

    Attributes:
        track_id: Session-unique identifier, never reused
        bbox: Box of the last associated detection
        frames_detected: Count of successful associations
        last_seen: Timestamp (seconds) of the last association
        class_name: Class of the last associated detection
    """

    track_id: int
    bbox: BoundingBox
    frames_detected: int
    last_seen: float
    class_name: str = ""

    def associate(self, bbox: BoundingBox, now: float, class_name: str | None = None) -> None:
        """Take over a new detection's box and refresh the last-seen time."""
        self.bbox = bbox
        self.frames_detected += 1
        self.last_seen = now
        if class_name:
            self.class_name = class_name

    def is_new(self) -> bool:
        """Check if this track has only been seen once."""
        return self.frames_detected <= 1

    def age(self, now: float) -> float:
        """Seconds since this track was last associated."""
        return now - self.last_seen
