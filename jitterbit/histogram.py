"""Fixed-size integer histograms keyed by bit-sum or bit pattern."""

from __future__ import annotations

import numpy as np

from jitterbit.errors import BucketOutOfRangeError, HistogramFrozenError
from jitterbit.generator import validate_count


class Histogram:
    """Zero-initialised occurrence counts over buckets ``0 .. size-1``.

    ``total`` always equals ``counts.sum()`` and the number of
    ``increment`` calls.  Call ``freeze`` when a run completes; further
    increments then raise.
    """

    def __init__(self, size: int) -> None:
        size = validate_count(size, "histogram size")
        self._counts = np.zeros(size, dtype=np.int64)
        self._total = 0
        self._frozen = False

    @classmethod
    def for_bit_sums(cls, num_bits: int) -> Histogram:
        """Buckets for every possible sum of *num_bits* bits (``num_bits + 1``)."""
        return cls(num_bits + 1)

    @classmethod
    def for_patterns(cls, pattern_bits: int) -> Histogram:
        """Buckets for every *pattern_bits*-bit pattern (``2 ** pattern_bits``)."""
        return cls(2 ** pattern_bits)

    @property
    def size(self) -> int:
        return len(self._counts)

    @property
    def total(self) -> int:
        return self._total

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def counts(self) -> np.ndarray:
        """Read-only copy of the bucket counts."""
        out = self._counts.copy()
        out.setflags(write=False)
        return out

    def increment(self, bucket: int) -> None:
        if self._frozen:
            raise HistogramFrozenError("histogram is frozen")
        self._check_bucket(bucket)
        self._counts[bucket] += 1
        self._total += 1

    def _check_bucket(self, bucket: int) -> None:
        if isinstance(bucket, bool) or not isinstance(bucket, (int, np.integer)):
            raise BucketOutOfRangeError(f"bucket must be an integer, got {bucket!r}")
        if not 0 <= bucket < len(self._counts):
            raise BucketOutOfRangeError(
                f"bucket {bucket} outside [0, {len(self._counts)})"
            )

    def freeze(self) -> Histogram:
        self._frozen = True
        return self

    def __len__(self) -> int:
        return len(self._counts)

    def __getitem__(self, bucket: int) -> int:
        self._check_bucket(bucket)
        return int(self._counts[bucket])

    def __repr__(self) -> str:
        return f"<Histogram size={self.size} total={self._total}>"
