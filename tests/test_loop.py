"""
Tests for the frame loop and the JSONL result writer
"""

import json
import tempfile
import unittest
from pathlib import Path
from queue import Queue
from threading import Event

from src.adas_tracking.analysis import FixedJitter
from src.adas_tracking.loop import FrameLoop
from src.adas_tracking.models import FrameGeometry
from src.adas_tracking.output import ResultWriter
from src.adas_tracking.pipeline import FramePipeline
from src.adas_tracking.sources import SourceFrame
from src.adas_tracking.utils import CallbackQueueAdapter

GEOMETRY = FrameGeometry(width=1000, height=500)

CLOSE_CAR = {"class": "car", "confidence": 0.9, "bbox": [100, 200, 800, 250]}


def _frames(count, detections=None):
    return [
        SourceFrame(index=i, timestamp=i / 30, geometry=GEOMETRY, detections=detections or [])
        for i in range(count)
    ]


class _BrokenLaneModel:
    def estimate(self, detections, geometry, scan_line=None):
        raise RuntimeError("boom")


class _FullDiskWriter:
    def __init__(self):
        self.attempts = 0

    def write(self, result):
        self.attempts += 1
        raise OSError(28, "No space left on device")


class TestFrameLoop(unittest.TestCase):
    """Test driving a pipeline from a frame source."""

    def setUp(self):
        self.pipeline = FramePipeline(jitter=FixedJitter(0.5))

    def test_processes_all_frames(self):
        stats = FrameLoop(self.pipeline, _frames(5)).run()

        self.assertEqual(stats.frames, 5)
        self.assertEqual(stats.failed_frames, 0)
        self.assertEqual(self.pipeline.frame_index, 5)

    def test_events_reach_sink(self):
        sink = Queue()

        stats = FrameLoop(self.pipeline, _frames(3, [CLOSE_CAR]), sink=sink).run()

        events = []
        while not sink.empty():
            events.append(sink.get())
        self.assertEqual(stats.events, len(events))
        # cooldown keeps the same track from re-alerting every frame
        self.assertEqual(
            sum(1 for e in events if e["event_type"] == "COLLISION_RISK"), 1
        )

    def test_callback_sink(self):
        received = []
        sink = CallbackQueueAdapter(received.append)

        FrameLoop(self.pipeline, _frames(1, [CLOSE_CAR]), sink=sink).run()

        self.assertTrue(any(e["event_type"] == "COLLISION_RISK" for e in received))

    def test_sink_failure_does_not_stop_loop(self):
        def fail(_event):
            raise ConnectionError("consumer gone")

        stats = FrameLoop(
            self.pipeline, _frames(3, [CLOSE_CAR]), sink=CallbackQueueAdapter(fail)
        ).run()

        self.assertEqual(stats.frames, 3)
        self.assertEqual(stats.sink_errors, stats.events)
        self.assertGreater(stats.sink_errors, 0)

    def test_writer_failure_does_not_stop_loop(self):
        """Test a frame log that cannot be written is counted and skipped."""
        writer = _FullDiskWriter()

        stats = FrameLoop(self.pipeline, _frames(3, [CLOSE_CAR]), writer=writer).run()

        self.assertEqual(stats.frames, 3)
        self.assertEqual(stats.writer_errors, 3)
        self.assertEqual(writer.attempts, 3)
        self.assertEqual(self.pipeline.registry.get(1).frames_detected, 3)

    def test_shutdown_event(self):
        shutdown = Event()
        shutdown.set()

        stats = FrameLoop(self.pipeline, _frames(5), shutdown_event=shutdown).run()

        self.assertEqual(stats.frames, 0)

    def test_shutdown_mid_run(self):
        shutdown = Event()
        seen = []

        def source():
            for frame in _frames(10):
                seen.append(frame.index)
                if frame.index == 3:
                    shutdown.set()
                yield frame

        stats = FrameLoop(self.pipeline, source(), shutdown_event=shutdown).run()

        self.assertEqual(stats.frames, 3)

    def test_failed_frames_counted(self):
        pipeline = FramePipeline(jitter=FixedJitter(0.5), lane_model=_BrokenLaneModel())

        stats = FrameLoop(pipeline, _frames(4)).run()

        self.assertEqual(stats.frames, 4)
        self.assertEqual(stats.failed_frames, 4)


class TestResultWriter(unittest.TestCase):
    """Test the JSONL frame log."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.out_dir = Path(self.temp_dir.name) / "out"

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_writes_one_line_per_frame(self):
        pipeline = FramePipeline(jitter=FixedJitter(0.5))

        with ResultWriter(str(self.out_dir), console_level="summary") as writer:
            stats = FrameLoop(pipeline, _frames(4, [CLOSE_CAR]), writer=writer).run()

        lines = Path(writer.filename).read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 4)
        records = [json.loads(line) for line in lines]
        self.assertEqual([r["frame_index"] for r in records], [0, 1, 2, 3])
        self.assertEqual(records[0]["detections"][0]["track_id"], 1)
        self.assertEqual(writer.frame_count, 4)
        self.assertEqual(writer.event_count, stats.events)
        self.assertEqual(writer.event_counts_by_type.get("COLLISION_RISK"), 1)

    def test_write_requires_open(self):
        writer = ResultWriter(str(self.out_dir))
        pipeline = FramePipeline(jitter=FixedJitter(0.5))

        with self.assertRaises(RuntimeError):
            writer.write(pipeline.run_frame([], GEOMETRY, 0.0))

    def test_close_idempotent(self):
        writer = ResultWriter(str(self.out_dir), console_level="silent").open()
        writer.close()
        writer.close()
        self.assertTrue(Path(writer.filename).exists())


if __name__ == "__main__":
    unittest.main()
