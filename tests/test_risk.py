"""
Tests for collision risk and traffic flow estimation
"""

import unittest

from src.adas_tracking.analysis import (
    FixedJitter,
    RiskAnalyzer,
    analyze_traffic_flow,
    classify_trajectory,
    congestion_level,
)
from src.adas_tracking.models import BoundingBox, Detection, FrameGeometry, TrackedDetection

GEOMETRY = FrameGeometry(width=100, height=100)


def _det(box, class_name="car", det_id=0):
    return Detection(id=det_id, class_name=class_name, confidence=0.9, bbox=BoundingBox(*box))


class TestTrajectory(unittest.TestCase):
    """Test vertical-position trajectory buckets."""

    def test_buckets(self):
        self.assertEqual(classify_trajectory(0.9), "approaching")
        self.assertEqual(classify_trajectory(0.51), "approaching")
        self.assertEqual(classify_trajectory(0.5), "parallel")
        self.assertEqual(classify_trajectory(0.31), "parallel")
        self.assertEqual(classify_trajectory(0.3), "departing")
        self.assertEqual(classify_trajectory(0.0), "departing")


class TestRiskAnalyzer(unittest.TestCase):
    """Test per-vehicle risk records."""

    def setUp(self):
        self.analyzer = RiskAnalyzer(jitter=FixedJitter(0.5))

    def test_large_approaching_vehicle_is_high_risk(self):
        """Test a vehicle covering 40% of the frame in the lower half."""
        # 80 x 50 = 40% of frame, center y = 70
        records = self.analyzer.estimate([_det((10, 45, 80, 50))], GEOMETRY)

        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.trajectory, "approaching")
        self.assertGreater(record.collision_risk, 0.5)
        self.assertEqual(record.collision_risk, 1.0)
        self.assertEqual(record.risk_level, "high")

    def test_parallel_risk(self):
        # 10% of frame, center y = 40
        records = self.analyzer.estimate([_det((0, 35, 100, 10))], GEOMETRY)

        self.assertEqual(records[0].trajectory, "parallel")
        self.assertAlmostEqual(records[0].collision_risk, 0.25)
        self.assertEqual(records[0].risk_level, "low")

    def test_approaching_multiplier(self):
        # 10% of frame, center y = 80
        records = self.analyzer.estimate([_det((0, 75, 100, 10))], GEOMETRY)
        self.assertAlmostEqual(records[0].collision_risk, 0.375)

    def test_distance(self):
        self.assertAlmostEqual(self.analyzer.estimate_distance(0.25), 25.0)
        self.assertAlmostEqual(self.analyzer.estimate_distance(0.0001), 49.5)

    def test_distance_floor(self):
        """Test a frame-filling vehicle is never closer than min_distance."""
        self.assertEqual(self.analyzer.estimate_distance(1.0), 5)
        self.assertEqual(self.analyzer.estimate_distance(0.95), 5)

    def test_speed_from_jitter(self):
        records = self.analyzer.estimate([_det((0, 0, 10, 10))], GEOMETRY)
        self.assertAlmostEqual(records[0].speed, 50.0)

    def test_only_vehicles(self):
        detections = [
            _det((0, 0, 10, 10), "person", 0),
            _det((0, 0, 10, 10), "Car", 1),
            _det((0, 0, 10, 10), "bicycle", 2),
            _det((0, 0, 10, 10), "dog", 3),
        ]

        records = self.analyzer.estimate(detections, GEOMETRY)

        self.assertEqual([r.detection_id for r in records], [1, 2])
        self.assertEqual(records[0].vehicle_type, "car")

    def test_track_id_carried(self):
        tagged = TrackedDetection(_det((0, 0, 10, 10)), track_id=9, frames_detected=3, last_seen=0.0)

        records = self.analyzer.estimate([tagged], GEOMETRY)

        self.assertEqual(records[0].track_id, 9)

    def test_untracked_detection(self):
        records = self.analyzer.estimate([_det((0, 0, 10, 10))], GEOMETRY)
        self.assertIsNone(records[0].track_id)

    def test_risk_bounded(self):
        for box in [(0, 0, 100, 100), (-50, -50, 500, 500), (0, 99, 1, 1), (50, 50, 0, 0)]:
            record = self.analyzer.estimate([_det(box)], GEOMETRY)[0]
            self.assertGreaterEqual(record.collision_risk, 0.0)
            self.assertLessEqual(record.collision_risk, 1.0)
            self.assertGreaterEqual(record.distance, 5)

    def test_invalid_distances(self):
        with self.assertRaises(ValueError):
            RiskAnalyzer(min_distance=10, max_distance=5)


class TestTrafficFlow(unittest.TestCase):
    """Test traffic flow summary."""

    def test_empty_frame(self):
        flow = analyze_traffic_flow([])

        self.assertEqual(flow.vehicle_count, 0)
        self.assertEqual(flow.density, 0.0)
        self.assertEqual(flow.speed, 80)
        self.assertEqual(flow.congestion, "low")

    def test_medium(self):
        flow = analyze_traffic_flow([_det((0, 0, 1, 1), det_id=i) for i in range(4)])

        self.assertEqual(flow.vehicle_count, 4)
        self.assertAlmostEqual(flow.density, 0.4)
        self.assertAlmostEqual(flow.speed, 52.0)
        self.assertEqual(flow.congestion, "medium")

    def test_saturated(self):
        """Test density and speed stay bounded for a very crowded frame."""
        flow = analyze_traffic_flow([_det((0, 0, 1, 1), det_id=i) for i in range(1000)])

        self.assertEqual(flow.vehicle_count, 1000)
        self.assertEqual(flow.density, 1.0)
        self.assertEqual(flow.speed, 10)
        self.assertEqual(flow.congestion, "high")

    def test_non_vehicles_ignored(self):
        detections = [_det((0, 0, 1, 1), "person", i) for i in range(20)]
        self.assertEqual(analyze_traffic_flow(detections).vehicle_count, 0)

    def test_congestion_levels(self):
        self.assertEqual(congestion_level(0.8), "high")
        self.assertEqual(congestion_level(0.7), "medium")
        self.assertEqual(congestion_level(0.31), "medium")
        self.assertEqual(congestion_level(0.3), "low")


if __name__ == "__main__":
    unittest.main()
