"""
Tests for the streaming t-digest quantile estimator.
"""

import math
import random
import unittest

import numpy as np

from s3skunk.algorithms.quantile import TDigest


class TestTDigest(unittest.TestCase):
    """Accuracy and ingestion rules of TDigest."""

    def test_percentiles_of_one_to_hundred(self):
        digest = TDigest()
        for value in range(1, 101):
            digest.add(float(value))

        self.assertAlmostEqual(digest.quantile(0.50), 50.0, delta=1.0)
        self.assertAlmostEqual(digest.quantile(0.95), 95.0, delta=1.0)
        self.assertAlmostEqual(digest.quantile(0.99), 99.0, delta=1.0)

    def test_order_of_ingestion_does_not_matter(self):
        values = list(range(1, 101))
        shuffled = values[:]
        random.Random(7).shuffle(shuffled)

        ordered, mixed = TDigest(), TDigest()
        for v in values:
            ordered.add(v)
        for v in shuffled:
            mixed.add(v)

        for q in (0.5, 0.95, 0.99):
            self.assertAlmostEqual(ordered.quantile(q), mixed.quantile(q), places=9)

    def test_extremes_are_exact(self):
        digest = TDigest()
        for value in (0.3, 0.1, 0.9, 0.5):
            digest.add(value)
        self.assertEqual(digest.quantile(0.0), 0.1)
        self.assertEqual(digest.quantile(1.0), 0.9)

    def test_large_stream_stays_bounded_and_accurate(self):
        rng = np.random.default_rng(42)
        samples = rng.exponential(scale=0.05, size=200_000)

        digest = TDigest(compression=200)
        for value in samples:
            digest.add(value)

        self.assertEqual(digest.count, len(samples))
        self.assertLessEqual(digest.centroid_count, 200)
        for q in (0.5, 0.95, 0.99):
            expected = float(np.quantile(samples, q))
            self.assertAlmostEqual(digest.quantile(q), expected, delta=expected * 0.05)

    def test_higher_compression_keeps_more_centroids(self):
        rng = np.random.default_rng(1)
        samples = rng.uniform(0, 1, size=50_000)
        coarse, fine = TDigest(compression=50), TDigest(compression=500)
        for value in samples:
            coarse.add(value)
            fine.add(value)
        self.assertLess(coarse.centroid_count, fine.centroid_count)

    def test_empty_digest_returns_nan(self):
        self.assertTrue(math.isnan(TDigest().quantile(0.5)))

    def test_single_sample(self):
        digest = TDigest()
        digest.add(0.25)
        self.assertEqual(digest.quantile(0.5), 0.25)
        self.assertEqual(digest.quantile(0.99), 0.25)

    def test_add_after_read_is_rejected(self):
        digest = TDigest()
        digest.add(1.0)
        digest.quantile(0.5)
        with self.assertRaises(RuntimeError):
            digest.add(2.0)

    def test_rejects_negative_and_nan_samples(self):
        digest = TDigest()
        with self.assertRaises(ValueError):
            digest.add(-0.001)
        with self.assertRaises(ValueError):
            digest.add(float("nan"))
        with self.assertRaises(ValueError):
            digest.add(1.0, weight=0)
        self.assertEqual(digest.count, 0)

    def test_rejects_out_of_range_quantile(self):
        digest = TDigest()
        digest.add(1.0)
        with self.assertRaises(ValueError):
            digest.quantile(1.5)
        with self.assertRaises(ValueError):
            digest.quantile(-0.1)

    def test_rejects_non_positive_compression(self):
        with self.assertRaises(ValueError):
            TDigest(compression=0)

    def test_merge_matches_single_digest(self):
        left, right, combined = TDigest(), TDigest(), TDigest()
        for value in range(1, 51):
            left.add(value)
            combined.add(value)
        for value in range(51, 101):
            right.add(value)
            combined.add(value)

        left.merge(right)
        self.assertEqual(left.count, 100)
        self.assertEqual(left.min, 1)
        self.assertEqual(left.max, 100)
        self.assertAlmostEqual(left.quantile(0.5), combined.quantile(0.5), delta=1.0)


if __name__ == '__main__':
    unittest.main()
