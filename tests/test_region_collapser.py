#!/usr/bin/env python3
"""
Tests for collapsing outlier positions into regions
"""

import unittest

from madmax.models import Region, Sample
from madmax.region_collapser import collapse_outliers, is_consecutive, sorted_unique

from tests import make_samples


class TestRegionCollapser(unittest.TestCase):

    def test_run_of_min_length_is_not_emitted(self):
        outliers = make_samples([50, 50, 50], start=10)
        self.assertEqual(collapse_outliers(outliers, [], 3), [])

    def test_run_longer_than_min_length_is_emitted(self):
        outliers = make_samples([50, 50, 50, 50], start=10)

        regions = collapse_outliers(outliers, [], 3)

        self.assertEqual(regions, [Region(0, 10, 13, 4, 200)])

    def test_duplicate_samples_count_once(self):
        shared = make_samples([10, 20, 30, 40], start=100)

        regions = collapse_outliers(shared, shared, 2)

        self.assertEqual(len(regions), 1)
        self.assertEqual(regions[0].sample_count, 4)
        self.assertEqual(regions[0].depth_sum, 100)
        self.assertEqual(regions[0].average_depth, 25.0)

    def test_overlapping_sets_merge_across_seam(self):
        left = make_samples([50, 50, 50], start=57)
        right = make_samples([50] * 6, start=57)

        regions = collapse_outliers(left, right, 3)

        self.assertEqual(regions, [Region(0, 57, 62, 6, 300)])

    def test_single_skipped_position_splits_run(self):
        outliers = make_samples([50] * 5, start=10) + make_samples([60] * 5, start=16)

        regions = collapse_outliers(outliers, [], 2)

        self.assertEqual([(r.start, r.end) for r in regions], [(10, 14), (16, 20)])
        self.assertEqual(regions[1].average_depth, 60.0)

    def test_reference_change_splits_run(self):
        first = make_samples([50] * 4, start=6, reference_id=0)
        second = make_samples([50] * 4, start=10, reference_id=1)

        regions = collapse_outliers(second, first, 2)

        self.assertEqual([(r.reference_id, r.start, r.end) for r in regions], [(0, 6, 9), (1, 10, 13)])

    def test_zero_depth_run_is_not_emitted(self):
        self.assertEqual(collapse_outliers(make_samples([0] * 10), [], 1), [])

    def test_unsorted_input_is_ordered(self):
        outliers = list(reversed(make_samples([30] * 4, start=200))) + make_samples([20] * 4, start=5)

        regions = collapse_outliers(outliers, [], 1)

        self.assertEqual([r.start for r in regions], [5, 200])

    def test_empty_input(self):
        self.assertEqual(collapse_outliers([], [], 0), [])

    def test_min_run_zero_emits_single_positions(self):
        regions = collapse_outliers([Sample(0, 5, 9)], [], 0)
        self.assertEqual(regions, [Region(0, 5, 5, 1, 9)])


class TestHelpers(unittest.TestCase):

    def test_is_consecutive(self):
        self.assertTrue(is_consecutive(Sample(0, 4, 1), Sample(0, 5, 1)))
        self.assertFalse(is_consecutive(Sample(0, 4, 1), Sample(0, 6, 1)))
        self.assertFalse(is_consecutive(Sample(0, 4, 1), Sample(1, 5, 1)))
        self.assertFalse(is_consecutive(None, Sample(0, 0, 1)))

    def test_sorted_unique(self):
        a = [Sample(0, 3, 1), Sample(0, 1, 1)]
        b = [Sample(0, 1, 1), Sample(0, 2, 1)]
        self.assertEqual([s.position for s in sorted_unique(a, b)], [1, 2, 3])


if __name__ == '__main__':
    unittest.main()
