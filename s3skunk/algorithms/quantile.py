"""
Streaming quantile estimation with a merging t-digest.

Samples are buffered and periodically merged into a bounded set of centroids.
Centroid sizes are limited by the arcsine scale function, so centroids near
the tails stay small and extreme quantiles keep their accuracy. The number of
centroids is bounded by roughly ``compression / 2``; higher compression gives
tighter quantile estimates at the cost of memory and merge time.
"""

import logging
import math

import numpy as np

from s3skunk.configuration import DEFAULT_COMPRESSION, DIGEST_BUFFER_FACTOR

logger = logging.getLogger(__name__)


class TDigest:
    """Mergeable, bounded-memory quantile sketch.

    All samples must be added before the first quantile is read; adding after
    a read raises RuntimeError.
    """

    def __init__(self, compression: float = DEFAULT_COMPRESSION):
        if compression <= 0:
            raise ValueError(f"compression must be positive, got {compression}")
        self.compression = float(compression)
        self._buffer_limit = max(int(DIGEST_BUFFER_FACTOR * compression), 32)

        self._means = np.empty(0, dtype=np.float64)
        self._weights = np.empty(0, dtype=np.float64)
        self._buffer_values = []
        self._buffer_weights = []

        self._count = 0.0
        self._min = math.inf
        self._max = -math.inf
        self._sealed = False

    @property
    def count(self) -> float:
        """Total weight ingested so far."""
        return self._count

    @property
    def min(self) -> float:
        return self._min if self._count else math.nan

    @property
    def max(self) -> float:
        return self._max if self._count else math.nan

    @property
    def centroid_count(self) -> int:
        self._flush()
        return len(self._means)

    def add(self, value: float, weight: float = 1.0) -> None:
        """Ingest one sample."""
        if self._sealed:
            raise RuntimeError("cannot add samples after quantiles have been read")
        if math.isnan(value) or value < 0:
            raise ValueError(f"samples must be non-negative numbers, got {value}")
        if weight <= 0:
            raise ValueError(f"weight must be positive, got {weight}")

        self._buffer_values.append(float(value))
        self._buffer_weights.append(float(weight))
        self._count += weight
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

        if len(self._buffer_values) >= self._buffer_limit:
            self._flush()

    def merge(self, other: "TDigest") -> None:
        """Fold another digest's samples into this one."""
        if self._sealed:
            raise RuntimeError("cannot merge into a digest that has been read")
        other._flush()
        if other._count == 0:
            return

        self._buffer_values.extend(other._means.tolist())
        self._buffer_weights.extend(other._weights.tolist())
        self._count += other._count
        self._min = min(self._min, other._min)
        self._max = max(self._max, other._max)
        self._flush()

    def quantile(self, q: float) -> float:
        """Approximate value below which a fraction ``q`` of samples fall.

        Reading seals the digest against further ingestion. Returns NaN when
        no samples were added.
        """
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"quantile must be within [0, 1], got {q}")

        self._sealed = True
        self._flush()

        if self._count == 0:
            return math.nan
        if q == 0.0:
            return self._min
        if q == 1.0:
            return self._max

        means = self._means
        weights = self._weights
        if len(means) == 1:
            return float(means[0])

        index = q * self._count

        # Left tail: between the minimum and the first centroid's center
        first_half = weights[0] / 2.0
        if index < first_half:
            return self._interpolate(self._min, means[0], index / first_half)

        # Right tail: between the last centroid's center and the maximum
        last_half = weights[-1] / 2.0
        if index > self._count - last_half:
            remaining = self._count - index
            return self._interpolate(self._max, means[-1], remaining / last_half)

        centers = np.cumsum(weights) - weights / 2.0
        right = int(np.searchsorted(centers, index, side="right"))
        left = right - 1
        if right >= len(means):
            return float(means[-1])

        span = centers[right] - centers[left]
        fraction = (index - centers[left]) / span if span > 0 else 0.0
        return self._interpolate(means[left], means[right], fraction)

    @staticmethod
    def _interpolate(start: float, end: float, fraction: float) -> float:
        return float(start + (end - start) * fraction)

    def _k(self, q: float) -> float:
        return self.compression / (2.0 * math.pi) * math.asin(2.0 * q - 1.0)

    def _q_limit(self, q: float) -> float:
        """Largest cumulative fraction a centroid starting at ``q`` may reach."""
        k_next = self._k(q) + 1.0
        if k_next >= self.compression / 4.0:
            return 1.0
        return (math.sin(k_next * 2.0 * math.pi / self.compression) + 1.0) / 2.0

    def _flush(self) -> None:
        """Merge buffered samples into the centroid list."""
        if not self._buffer_values:
            return

        means = np.concatenate((self._means, np.asarray(self._buffer_values)))
        weights = np.concatenate((self._weights, np.asarray(self._buffer_weights)))
        self._buffer_values = []
        self._buffer_weights = []

        order = np.argsort(means, kind="mergesort")
        means = means[order]
        weights = weights[order]
        total = weights.sum()

        merged_means = []
        merged_weights = []
        current_mean = means[0]
        current_weight = weights[0]
        weight_so_far = 0.0
        limit = total * self._q_limit(0.0)

        for mean, weight in zip(means[1:], weights[1:]):
            proposed = current_weight + weight
            if weight_so_far + proposed <= limit:
                current_mean += (mean - current_mean) * weight / proposed
                current_weight = proposed
            else:
                merged_means.append(current_mean)
                merged_weights.append(current_weight)
                weight_so_far += current_weight
                limit = total * self._q_limit(weight_so_far / total)
                current_mean = mean
                current_weight = weight

        merged_means.append(current_mean)
        merged_weights.append(current_weight)

        self._means = np.asarray(merged_means, dtype=np.float64)
        self._weights = np.asarray(merged_weights, dtype=np.float64)
        logger.debug(f"Merged digest down to {len(self._means)} centroids")

    def __repr__(self) -> str:
        return f"TDigest(compression={self.compression:g}, count={self._count:g})"
