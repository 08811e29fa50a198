"""
Frame loop - drives one pipeline from one frame source.

Frames are processed strictly one after another. Stopping is cooperative:
the loop checks the shutdown event before pulling each frame, and a frame in
progress always runs to completion.
"""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from threading import Event

from .output import ResultWriter
from .pipeline import FramePipeline
from .sources import SourceFrame
from .utils.constants import FPS_WINDOW_SIZE, STATUS_REPORT_INTERVAL
from .utils.queue_protocol import EventQueue

logger = logging.getLogger(__name__)


@dataclass
class LoopStats:
    """Counters for one loop run."""

    frames: int = 0
    failed_frames: int = 0
    events: int = 0
    sink_errors: int = 0
    writer_errors: int = 0
    elapsed: float = 0.0


class FrameLoop:
    """Pulls frames from a source and pushes them through a pipeline."""

    def __init__(
        self,
        pipeline: FramePipeline,
        source: Iterable[SourceFrame],
        sink: EventQueue | None = None,
        writer: ResultWriter | None = None,
        shutdown_event: Event | None = None,
    ):
        """
        Args:
            pipeline: Pipeline owning this source's track state
            source: Iterable of SourceFrame
            sink: Receives every alert event (e.g. an emergency handler)
            writer: Open ResultWriter for the JSONL frame log
            shutdown_event: Set to stop before the next frame
        """
        self.pipeline = pipeline
        self.source = source
        self.sink = sink
        self.writer = writer
        self.shutdown_event = shutdown_event
        self.stats = LoopStats()
        self._frame_times: list[float] = []

    def run(self) -> LoopStats:
        """Process frames until the source is exhausted or shutdown is signalled."""
        self.stats = LoopStats()
        start_time = time.time()
        logger.info(f"[{self.pipeline.source_id}] Frame loop started")

        try:
            for frame in self.source:
                if self.shutdown_event and self.shutdown_event.is_set():
                    logger.info("Shutdown signal received")
                    break

                self._process(frame)

                if self.stats.frames % STATUS_REPORT_INTERVAL == 0:
                    self._log_status(start_time)

        except KeyboardInterrupt:
            logger.info("Frame loop stopped by user")
        finally:
            self.stats.elapsed = time.time() - start_time
            self._log_final_stats()

        return self.stats

    def _process(self, frame: SourceFrame) -> None:
        t0 = time.perf_counter()
        result = self.pipeline.run_frame(
            frame.detections, frame.geometry, frame.timestamp, frame.scan_line
        )
        self._frame_times.append(time.perf_counter() - t0)
        if len(self._frame_times) > FPS_WINDOW_SIZE:
            self._frame_times.pop(0)

        self.stats.frames += 1
        if not result.ok:
            self.stats.failed_frames += 1

        for event in result.events:
            self.stats.events += 1
            if self.sink is None:
                continue
            try:
                self.sink.put(event)
            except Exception as e:
                self.stats.sink_errors += 1
                logger.warning(f"Event sink failed for {event.get('event_type')}: {e}")

        if self.writer is not None:
            try:
                self.writer.write(result)
            except OSError as e:
                self.stats.writer_errors += 1
                logger.warning(f"Could not write frame {result.frame_index}: {e}")

    def _log_status(self, start_time: float) -> None:
        """Log periodic status."""
        avg = sum(self._frame_times) / len(self._frame_times) if self._frame_times else 0.0
        rate = 1.0 / avg if avg > 0 else 0.0
        elapsed = time.time() - start_time
        logger.info(
            f"[{elapsed / 60:.1f}min] Frame {self.stats.frames} | "
            f"{rate:.0f} frames/s | Tracks: {len(self.pipeline.registry)} | "
            f"Events: {self.stats.events}"
        )

    def _log_final_stats(self) -> None:
        """Log final statistics."""
        logger.info("Frame loop complete")
        logger.info(f"Runtime: {self.stats.elapsed:.1f}s")
        logger.info(f"Frames: {self.stats.frames} ({self.stats.failed_frames} failed)")
        logger.info(f"Events: {self.stats.events}")
        if self.stats.sink_errors or self.stats.writer_errors:
            logger.warning(
                f"Output errors: {self.stats.sink_errors} sink, {self.stats.writer_errors} writer"
            )
        logger.info(f"Tracks issued: {self.pipeline.registry.next_track_id - 1}")
