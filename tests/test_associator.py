"""
Tests for IoU association of detections to tracks
"""

import unittest

from src.adas_tracking.core import Associator, TrackRegistry
from src.adas_tracking.models import BoundingBox, Detection

FRAME = 1 / 30


def _dets(*boxes, class_name="car"):
    return [
        Detection(id=i, class_name=class_name, confidence=0.9, bbox=BoundingBox(*box))
        for i, box in enumerate(boxes)
    ]


class TestAssociation(unittest.TestCase):
    """Test frame-to-frame identity assignment."""

    def setUp(self):
        self.registry = TrackRegistry()
        self.associator = Associator(self.registry)

    def test_first_frame_creates_tracks(self):
        result = self.associator.associate(_dets((0, 0, 10, 10), (100, 100, 10, 10)), now=0.0)

        self.assertEqual([d.track_id for d in result.detections], [1, 2])
        self.assertEqual(result.created, [1, 2])
        self.assertTrue(all(d.frames_detected == 1 for d in result.detections))
        self.assertEqual(len(self.registry), 2)

    def test_moving_vehicle_keeps_identity(self):
        """Test a vehicle drifting between frames keeps its id, a distant one gets a new id."""
        first = self.associator.associate(_dets((10, 10, 50, 50)), now=0.0)
        second = self.associator.associate(_dets((12, 11, 50, 50)), now=FRAME)
        third = self.associator.associate(_dets((500, 500, 50, 50)), now=2 * FRAME)

        track_id = first.detections[0].track_id
        self.assertEqual(second.detections[0].track_id, track_id)
        self.assertEqual(second.detections[0].frames_detected, 2)
        self.assertGreater(third.detections[0].track_id, track_id)
        self.assertEqual(third.detections[0].frames_detected, 1)

    def test_match_increments_exactly_once(self):
        self.associator.associate(_dets((0, 0, 100, 100)), now=0.0)
        result = self.associator.associate(_dets((2, 2, 100, 100)), now=FRAME)

        track = self.registry.get(1)
        self.assertEqual(track.frames_detected, 2)
        self.assertEqual(track.last_seen, FRAME)
        self.assertEqual(track.bbox, BoundingBox(2, 2, 100, 100))
        self.assertEqual(result.matched, [1])
        self.assertEqual(result.created, [])

    def test_threshold_is_inclusive(self):
        """Test IoU exactly at the threshold still matches."""
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)
        # intersection 50, union 100
        result = self.associator.associate(_dets((0, 0, 10, 5)), now=FRAME)

        self.assertEqual(result.detections[0].track_id, 1)

    def test_below_threshold_creates_new_track(self):
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)
        result = self.associator.associate(_dets((5, 5, 10, 10)), now=FRAME)

        self.assertEqual(result.detections[0].track_id, 2)
        # unmatched track carried forward unchanged
        self.assertEqual(self.registry.get(1).frames_detected, 1)
        self.assertEqual(self.registry.get(1).last_seen, 0.0)

    def test_track_claimed_at_most_once(self):
        """Test two detections overlapping one track do not share its id."""
        self.associator.associate(_dets((0, 0, 100, 100)), now=0.0)
        result = self.associator.associate(_dets((0, 0, 100, 100), (1, 1, 100, 100)), now=FRAME)

        ids = [d.track_id for d in result.detections]
        self.assertEqual(ids, [1, 2])
        self.assertEqual(self.registry.get(1).frames_detected, 2)

    def test_highest_iou_wins(self):
        self.associator.associate(_dets((0, 0, 100, 100), (20, 0, 100, 100)), now=0.0)
        result = self.associator.associate(_dets((18, 0, 100, 100)), now=FRAME)

        self.assertEqual(result.detections[0].track_id, 2)

    def test_tie_goes_to_lowest_id(self):
        """Test equal IoU resolves to the older track."""
        associator = Associator(self.registry, iou_threshold=0.3)
        associator.associate(_dets((10, 0, 10, 10), (0, 0, 10, 10)), now=0.0)
        # IoU 1/3 with both tracks
        result = associator.associate(_dets((5, 0, 10, 10)), now=FRAME)

        self.assertEqual(result.detections[0].track_id, 1)

    def test_track_expires_after_max_age(self):
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)

        result = self.associator.associate([], now=6 * FRAME)

        self.assertEqual(result.expired, [1])
        self.assertNotIn(1, self.registry)

    def test_track_survives_short_gap(self):
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)
        self.associator.associate([], now=3 * FRAME)

        result = self.associator.associate(_dets((0, 0, 10, 10)), now=4 * FRAME)

        self.assertEqual(result.detections[0].track_id, 1)
        self.assertEqual(result.detections[0].frames_detected, 2)

    def test_expired_track_not_revived(self):
        """Test a detection at an expired track's box gets a fresh id."""
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)

        result = self.associator.associate(_dets((0, 0, 10, 10)), now=1.0)

        self.assertEqual(result.detections[0].track_id, 2)
        self.assertEqual(result.expired, [1])
        self.assertEqual(set(self.registry.tracks), {2})

    def test_ids_unique_and_increasing(self):
        """Test ids are never reused over a long run."""
        seen = set()
        last_next_id = self.registry.next_track_id

        for frame in range(60):
            x = (frame % 7) * 200
            result = self.associator.associate(
                _dets((x, 0, 40, 40), (x, 300, 40, 40)), now=frame * FRAME * 4
            )
            for det in result.detections:
                if det.frames_detected == 1:
                    self.assertNotIn(det.track_id, seen)
                    seen.add(det.track_id)
            self.assertGreaterEqual(self.registry.next_track_id, last_next_id)
            last_next_id = self.registry.next_track_id

    def test_detections_in_input_order(self):
        result = self.associator.associate(_dets((0, 0, 5, 5), (50, 50, 5, 5), (90, 0, 5, 5)), 0.0)
        self.assertEqual([d.id for d in result.detections], [0, 1, 2])

    def test_stage_leaves_registry_unchanged(self):
        """Test staging tags detections but only commit() changes the registry."""
        self.associator.associate(_dets((0, 0, 10, 10)), now=0.0)

        staged = self.associator.stage(_dets((1, 0, 10, 10), (200, 200, 10, 10)), now=FRAME)

        self.assertEqual([d.track_id for d in staged.detections], [1, 2])
        self.assertEqual(sorted(staged.tracks), [1, 2])
        self.assertEqual(len(self.registry), 1)
        self.assertEqual(self.registry.get(1).frames_detected, 1)
        self.assertEqual(self.registry.next_track_id, 2)

        self.associator.commit(staged)

        self.assertEqual(self.registry.get(1).frames_detected, 2)
        self.assertIn(2, self.registry)
        self.assertEqual(self.registry.next_track_id, 3)

    def test_discarded_stage_reuses_ids(self):
        """Test ids from a stage that is never committed are not burned."""
        self.associator.stage(_dets((0, 0, 10, 10)), now=0.0)

        result = self.associator.associate(_dets((300, 300, 10, 10)), now=FRAME)

        self.assertEqual(result.created, [1])

    def test_stale_stage_rejected(self):
        """Test committing the same staged frame twice is refused."""
        staged = self.associator.stage(_dets((0, 0, 10, 10)), now=0.0)
        self.associator.commit(staged)

        with self.assertRaises(ValueError):
            self.associator.commit(staged)
        self.assertEqual(self.registry.next_track_id, 2)

    def test_invalid_threshold(self):
        for threshold in (0.0, -0.1, 1.5):
            with self.assertRaises(ValueError):
                Associator(self.registry, iou_threshold=threshold)


if __name__ == "__main__":
    unittest.main()
