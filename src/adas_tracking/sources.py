"""
Frame sources - where per-frame detection batches come from.

ReplaySource reads a JSONL detection log, one frame per line:

    {"timestamp": 12.3, "width": 1280, "height": 720,
     "detections": [{"class": "car", "confidence": 0.9, "bbox": [x, y, w, h]}],
     "scan_line": [..luminance samples..]}

`timestamp` and `scan_line` are optional. VideoScanSource pairs a replay log
with the video it was recorded from and samples the lane scan-line from the
decoded frames.
"""

import json
import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cv2
import numpy as np

from .analysis import sample_scan_line
from .models import FrameGeometry
from .utils.constants import DEFAULT_ASSUMED_FPS, DEFAULT_SCAN_LINE_PCT

logger = logging.getLogger(__name__)

MAX_VIDEO_OPEN_ATTEMPTS = 2
VIDEO_OPEN_RETRY_DELAY = 1.0  # Seconds between attempts


@dataclass
class SourceFrame:
    """One frame's worth of pipeline input."""

    index: int
    timestamp: float
    geometry: FrameGeometry
    detections: list[dict[str, Any]] = field(default_factory=list)
    scan_line: np.ndarray | list[float] | None = None


class ReplaySource:
    """Iterates frames from a JSONL detection log."""

    def __init__(self, path: str | Path, assumed_fps: float = DEFAULT_ASSUMED_FPS):
        """
        Args:
            path: JSONL file
            assumed_fps: Rate used to synthesize timestamps for lines without one
        """
        self.path = Path(path)
        if assumed_fps <= 0:
            raise ValueError(f"assumed_fps must be positive, got {assumed_fps}")
        self.frame_interval = 1.0 / assumed_fps
        self.skipped = 0

    def __iter__(self) -> Iterator[SourceFrame]:
        self.skipped = 0
        index = 0
        last_timestamp: float | None = None

        with open(self.path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    frame = self._parse_line(line, index, last_timestamp)
                except (ValueError, TypeError, KeyError) as e:
                    self.skipped += 1
                    logger.warning(f"{self.path}:{line_no}: skipping frame - {e}")
                    continue

                last_timestamp = frame.timestamp
                index += 1
                yield frame

        if self.skipped:
            logger.warning(f"Skipped {self.skipped} malformed line(s) in {self.path}")

    def _parse_line(self, line: str, index: int, last_timestamp: float | None) -> SourceFrame:
        data = json.loads(line)
        if not isinstance(data, dict):
            raise ValueError("frame record must be a JSON object")

        geometry = FrameGeometry(width=data["width"], height=data["height"])

        timestamp = data.get("timestamp")
        if timestamp is None:
            timestamp = 0.0 if last_timestamp is None else last_timestamp + self.frame_interval
        timestamp = float(timestamp)

        detections = data.get("detections") or []
        if not isinstance(detections, list):
            raise ValueError("detections must be a list")

        return SourceFrame(
            index=index,
            timestamp=timestamp,
            geometry=geometry,
            detections=detections,
            scan_line=data.get("scan_line"),
        )


def open_video(video_path: str) -> cv2.VideoCapture:
    """
    Open a video file with retry logic.

    Raises:
        RuntimeError: If the video cannot be opened after retries
    """
    for attempt in range(MAX_VIDEO_OPEN_ATTEMPTS):
        logger.info(f"Opening video: {video_path} (attempt {attempt + 1})")
        cap = cv2.VideoCapture(video_path)

        if cap.isOpened():
            return cap

        cap.release()
        if attempt < MAX_VIDEO_OPEN_ATTEMPTS - 1:
            logger.warning(f"Failed to open video, retrying in {VIDEO_OPEN_RETRY_DELAY}s...")
            time.sleep(VIDEO_OPEN_RETRY_DELAY)

    raise RuntimeError(f"Cannot open video: {video_path}")


class VideoScanSource:
    """
    Replay log frames with scan-lines sampled from the matching video.

    Frames are paired by index. Geometry comes from the decoded image, which
    overrides the log's width/height. The log ends the iteration; a video
    that runs out early leaves the remaining frames without a scan-line.
    """

    def __init__(
        self,
        replay: ReplaySource,
        video_path: str,
        scan_line_pct: float = DEFAULT_SCAN_LINE_PCT,
    ):
        self.replay = replay
        self.video_path = video_path
        self.scan_line_pct = scan_line_pct

    def __iter__(self) -> Iterator[SourceFrame]:
        cap = open_video(self.video_path)
        video_done = False
        try:
            for frame in self.replay:
                if not video_done:
                    ret, image = cap.read()
                    if not ret:
                        logger.warning(
                            f"Video ended at frame {frame.index} - continuing without scan-line"
                        )
                        video_done = True
                    else:
                        height, width = image.shape[:2]
                        frame.geometry = FrameGeometry(width=width, height=height)
                        frame.scan_line = sample_scan_line(image, self.scan_line_pct)
                yield frame
        finally:
            cap.release()
