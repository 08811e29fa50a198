"""
JSON Writer
Writes frame results to a JSONL file and reports alert events to the console.
"""

import json
import logging
import os
from datetime import datetime

from ..models import FrameResult
from ..utils import SUMMARY_EVENT_INTERVAL, get_event_summary

logger = logging.getLogger(__name__)


class ResultWriter:
    """
    Writes one JSON line per frame result.

    Usage:
        with ResultWriter("data", console_level="summary") as writer:
            writer.write(result)
    """

    def __init__(self, json_dir: str = "data", console_level: str = "detailed"):
        """
        Args:
            json_dir: Output directory (created if missing)
            console_level: 'detailed', 'summary' or 'silent'
        """
        self.json_dir = json_dir
        self.console_level = console_level
        self.filename: str | None = None
        self.frame_count = 0
        self.failed_frames = 0
        self.event_count = 0
        self.event_counts_by_type: dict[str, int] = {}
        self._file = None
        self._start_time = datetime.now()

    def open(self) -> "ResultWriter":
        os.makedirs(self.json_dir, exist_ok=True)
        self.filename = _generate_output_filename(self.json_dir)
        self._file = open(self.filename, "w", encoding="utf-8")
        self._start_time = datetime.now()
        logger.info(f"JSON Writer started: {self.filename}")
        logger.info(f"Console: {self.console_level}")
        return self

    def close(self) -> None:
        if self._file is None:
            return
        self._file.close()
        self._file = None
        self._log_final_summary()

    def __enter__(self) -> "ResultWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, result: FrameResult) -> None:
        """Append a frame result and report its events."""
        if self._file is None:
            raise RuntimeError("ResultWriter is not open")

        self.frame_count += 1
        if not result.ok:
            self.failed_frames += 1

        self._file.write(json.dumps(result.to_dict()) + "\n")
        self._file.flush()

        for event in result.events:
            self.event_count += 1
            event_type = event.get("event_type", "UNKNOWN")
            self.event_counts_by_type[event_type] = (
                self.event_counts_by_type.get(event_type, 0) + 1
            )
            self._print_event(event)

            if self.console_level == "summary" and self.event_count % SUMMARY_EVENT_INTERVAL == 0:
                self._print_summary()

    def _print_event(self, event: dict) -> None:
        """Print event to console based on verbosity level."""
        if self.console_level != "detailed":
            return
        logger.info(
            f"#{self.event_count:4d} | frame {event.get('frame_index', '?')} | "
            f"{event.get('event_type')}: {get_event_summary(event)}"
        )

    def _print_summary(self) -> None:
        """Print periodic summary for 'summary' console mode."""
        elapsed = (datetime.now() - self._start_time).total_seconds()

        logger.info(f"[{elapsed / 60:.1f}min] Events logged: {self.event_count}")
        for event_type, count in self.event_counts_by_type.items():
            if count > 0:
                logger.info(f"  {event_type}: {count}")

    def _log_final_summary(self) -> None:
        """Log final summary statistics."""
        logger.info("JSON Writer complete")
        logger.info(f"Frames: {self.frame_count} ({self.failed_frames} failed)")
        logger.info(f"Total events: {self.event_count}")
        for event_type, count in self.event_counts_by_type.items():
            if count > 0:
                logger.info(f"  {event_type}: {count}")
        logger.info(f"Output: {self.filename}")


def _generate_output_filename(json_dir: str) -> str:
    """Generate timestamped output filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{json_dir}/frames_{timestamp}.jsonl"
