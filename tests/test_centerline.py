"""
Unit tests for centerline synthesis.
"""

import unittest
from unittest.mock import Mock

from centerline_worker.config import PairingThresholds, load_thresholds
from centerline_worker.pipeline.processors.centerline_processor import (
    CenterlineProcessor,
    synthesize_centerline,
)
from centerline_worker.pipeline.processors.geometry import LineSegment
from centerline_worker.pipeline.processors.parallel_pairs_processor import match_pair


def seg(x1, y1, x2, y2):
    return LineSegment.from_points((x1, y1, 0.0), (x2, y2, 0.0))


class TestSynthesizeCenterline(unittest.TestCase):
    def setUp(self):
        self.thresholds = PairingThresholds()

    def assertPointAlmostEqual(self, actual, expected, places=7):
        for a, b in zip(actual, expected):
            self.assertAlmostEqual(a, b, places=places)

    def _centerline(self, line1, line2, thresholds=None):
        pair = match_pair(line1, line2, thresholds or self.thresholds)
        self.assertIsNotNone(pair)
        return synthesize_centerline(pair)

    def test_full_overlap(self):
        centerline = self._centerline(seg(0, 0, 10, 0), seg(0, 1, 10, 1))
        self.assertPointAlmostEqual(centerline.start, (0.0, 0.5, 0.0))
        self.assertPointAlmostEqual(centerline.end, (10.0, 0.5, 0.0))
        self.assertAlmostEqual(centerline.width, 1.0)
        self.assertAlmostEqual(centerline.length, 10.0)

    def test_partial_overlap_is_clipped(self):
        centerline = self._centerline(seg(0, 0, 10, 0), seg(4, 1, 14, 1))
        self.assertPointAlmostEqual(centerline.start, (4.0, 0.5, 0.0))
        self.assertPointAlmostEqual(centerline.end, (10.0, 0.5, 0.0))
        self.assertAlmostEqual(centerline.length, 6.0)

    def test_anti_parallel_edges(self):
        centerline = self._centerline(seg(0, 0, 10, 0), seg(10, 1, 0, 1))
        self.assertPointAlmostEqual(centerline.start, (0.0, 0.5, 0.0))
        self.assertPointAlmostEqual(centerline.end, (10.0, 0.5, 0.0))

    def test_diagonal_edges_midpoint(self):
        # line2 is line1 shifted 0.5 along the unit normal (-0.8, 0.6)
        centerline = self._centerline(seg(0, 0, 3, 4), seg(-0.4, 0.3, 2.6, 4.3))
        self.assertPointAlmostEqual(centerline.start, (-0.2, 0.15, 0.0))
        self.assertPointAlmostEqual(centerline.end, (2.8, 4.15, 0.0))
        self.assertAlmostEqual(centerline.width, 0.5)

    def test_endpoints_are_equidistant_from_both_edges(self):
        line1, line2 = seg(0, 0, 10, 0), seg(2, 2, 12, 2)
        centerline = self._centerline(line1, line2)
        for point in (centerline.start, centerline.end):
            self.assertAlmostEqual(point[1] - 0.0, 2.0 - point[1])

    def test_touching_pair_uses_whole_first_edge(self):
        thresholds = load_thresholds(min_distance=0.005)
        centerline = self._centerline(seg(0, 0, 5, 0), seg(5, 0.01, 10, 0.01), thresholds)
        self.assertPointAlmostEqual(centerline.start, (2.5, 0.005, 0.0))
        self.assertPointAlmostEqual(centerline.end, (5.0, 0.005, 0.0))
        self.assertAlmostEqual(centerline.width, 0.01)

    def test_to_dict(self):
        centerline = self._centerline(seg(0, 0, 10, 0), seg(0, 1, 10, 1))
        data = centerline.to_dict()
        self.assertEqual(set(data), {"Start", "End", "Width", "Length"})
        self.assertAlmostEqual(data["Start"]["Y"], 0.5)
        self.assertAlmostEqual(data["Length"], 10.0)


class TestCenterlineProcessor(unittest.TestCase):
    def setUp(self):
        self.processor = CenterlineProcessor(job_id=Mock())
        self.processor.log_info = Mock()

    def test_one_centerline_per_pair(self):
        thresholds = PairingThresholds()
        pairs = [
            match_pair(seg(0, 0, 10, 0), seg(0, 1, 10, 1), thresholds),
            match_pair(seg(0, 0, 10, 0), seg(4, 1, 14, 1), thresholds),
        ]
        result = self.processor.process({'parallel_pairs_results': {'pairs': pairs}})
        self.assertEqual(len(result['centerlines']), 2)
        self.assertEqual(result['totals']['centerlines'], 2)
        self.assertAlmostEqual(result['totals']['total_length'], 16.0)

    def test_no_pairs(self):
        result = self.processor.process({'parallel_pairs_results': {'pairs': []}})
        self.assertEqual(result['centerlines'], [])
        self.assertEqual(result['totals']['total_length'], 0)
