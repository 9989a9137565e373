"""Goodness-of-fit tests over a generated bit stream.

Each test pulls bits from any object with a ``next_bit()`` method,
accumulates them in a fresh ``Histogram`` and reports descriptive
statistics.  No pass/fail threshold is applied; larger chi-squared
values simply mean a worse fit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np
from scipy import stats as sp_stats

from jitterbit.generator import checked_bit, sum_bits, validate_count
from jitterbit.histogram import Histogram

logger = logging.getLogger(__name__)

DEFAULT_NUM_BITS = 20
DEFAULT_REPETITIONS = 10
PATTERN_BITS = 3


class SupportsNextBit(Protocol):
    def next_bit(self) -> int: ...


# ═══════════════════════ CHI-SQUARED HELPERS ═══════════════════════

def binomial_expected(n_trials: int, num_bits: int, p: float = 0.5) -> np.ndarray:
    """Expected count of each bit-sum ``0..num_bits`` over *n_trials* trials.

    ``binom.pmf`` works in log space, so there is no factorial overflow
    for large *num_bits*.  Values are left real; round only for display.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be in [0, 1], got {p}")
    ks = np.arange(num_bits + 1)
    return n_trials * sp_stats.binom.pmf(ks, num_bits, p)


def chi_squared_statistic(observed, expected) -> float:
    """Sum of ``(e - o)^2 / e``; buckets with ``e == 0`` contribute 0."""
    observed = np.asarray(observed, dtype=float)
    expected = np.asarray(expected, dtype=float)
    if observed.shape != expected.shape:
        raise ValueError(f"shape mismatch: observed {observed.shape}, expected {expected.shape}")
    mask = expected > 0
    return float(np.sum((expected[mask] - observed[mask]) ** 2 / expected[mask]))


def _p_value(statistic: float, df: int) -> float:
    return float(sp_stats.chi2.sf(statistic, df))


# ═══════════════════════ RESULTS ═══════════════════════

@dataclass
class ChiSquaredResult:
    """Bit-sum chi-squared run.  ``statistic`` is the headline number."""
    statistic: float
    p_value: float
    n_trials: int
    num_bits: int
    observed: np.ndarray
    expected: np.ndarray

    @property
    def expected_rounded(self) -> np.ndarray:
        return np.rint(self.expected).astype(np.int64)

    def __float__(self) -> float:
        return self.statistic


@dataclass
class FrequencyResult:
    n: int
    ones: int
    zeros: int

    @property
    def ones_pct(self) -> float:
        return 100.0 * self.ones / self.n

    @property
    def zeros_pct(self) -> float:
        return 100.0 * self.zeros / self.n


@dataclass
class PermutationResult:
    """Per-repetition chi-squared values for 3-bit patterns (not aggregated)."""
    n: int
    statistics: list[float]
    p_values: list[float]
    histograms: list[np.ndarray] = field(default_factory=list)
    pattern_bits: int = PATTERN_BITS

    @property
    def expected(self) -> float:
        return self.n / 2 ** self.pattern_bits

    @staticmethod
    def pattern_label(value: int, pattern_bits: int = PATTERN_BITS) -> str:
        return format(value, f"0{pattern_bits}b")


# ═══════════════════════ TESTS ═══════════════════════

def chi_squared_test(generator: SupportsNextBit, n_trials: int,
                     num_bits: int = DEFAULT_NUM_BITS) -> ChiSquaredResult:
    """Sum *num_bits* bits per trial and fit the sums to Binomial(num_bits, 0.5)."""
    n_trials = validate_count(n_trials, "N")
    num_bits = validate_count(num_bits, "num_bits")
    expected = binomial_expected(n_trials, num_bits)
    hist = Histogram.for_bit_sums(num_bits)
    logger.debug("chi-squared run: N=%d, num_bits=%d", n_trials, num_bits)

    for _ in range(n_trials):
        hist.increment(sum_bits(generator, num_bits))

    hist.freeze()
    observed = hist.counts
    chi2 = chi_squared_statistic(observed, expected)
    p = _p_value(chi2, num_bits)
    logger.debug("chi-squared run done: chi2=%.4f p=%.4f", chi2, p)
    return ChiSquaredResult(statistic=chi2, p_value=p, n_trials=n_trials,
                            num_bits=num_bits, observed=observed, expected=expected)


def frequency_test(generator: SupportsNextBit, n: int) -> FrequencyResult:
    """Count ones and zeros in *n* bits."""
    n = validate_count(n, "N")
    ones = 0
    for _ in range(n):
        ones += checked_bit(generator)
    logger.debug("frequency run: N=%d ones=%d", n, ones)
    return FrequencyResult(n=n, ones=ones, zeros=n - ones)


def read_pattern(generator: SupportsNextBit, pattern_bits: int = PATTERN_BITS) -> int:
    """Assemble *pattern_bits* bits high-bit-first, e.g. 1,0,0 -> 0b100 = 4."""
    value = 0
    for _ in range(pattern_bits):
        value = (value << 1) | checked_bit(generator)
    return value


def permutation_test(generator: SupportsNextBit, n: int,
                     repetitions: int = DEFAULT_REPETITIONS,
                     pattern_bits: int = PATTERN_BITS) -> PermutationResult:
    """Tally *n* patterns per repetition against the uniform expectation.

    Every repetition starts from a new zeroed histogram.
    """
    n = validate_count(n, "N")
    repetitions = validate_count(repetitions, "repetitions")
    pattern_bits = validate_count(pattern_bits, "pattern_bits")
    n_patterns = 2 ** pattern_bits
    expected = np.full(n_patterns, n / n_patterns)

    statistics: list[float] = []
    p_values: list[float] = []
    histograms: list[np.ndarray] = []
    for rep in range(repetitions):
        hist = Histogram.for_patterns(pattern_bits)
        for _ in range(n):
            hist.increment(read_pattern(generator, pattern_bits))
        hist.freeze()
        chi2 = chi_squared_statistic(hist.counts, expected)
        statistics.append(chi2)
        p_values.append(_p_value(chi2, n_patterns - 1))
        histograms.append(hist.counts)
        logger.debug("permutation repetition %d: chi2=%.4f", rep + 1, chi2)

    return PermutationResult(n=n, statistics=statistics, p_values=p_values,
                             histograms=histograms, pattern_bits=pattern_bits)
