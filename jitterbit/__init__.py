"""
jitterbit: single bits from clock jitter, and the tests to judge them.

Harvests one bit at a time from the variance of a short sleep measured
against a system clock, XORed with a pseudo-random bit, and evaluates the
resulting stream with chi-squared, frequency and permutation statistics.

Not a CSPRNG. Do not use the output for anything security related.
"""

__version__ = "0.3.0"
__author__ = "Amenti Labs"

from jitterbit.errors import (
    BucketOutOfRangeError,
    ClockUnavailableError,
    InvalidCountError,
    JitterBitError,
)
from jitterbit.evaluators import chi_squared_test, frequency_test, permutation_test
from jitterbit.generator import BitGenerator
from jitterbit.histogram import Histogram
from jitterbit.sources.base import BitSource
from jitterbit.sources.timing import ClockJitterSampler

__all__ = [
    "BitGenerator",
    "BitSource",
    "BucketOutOfRangeError",
    "ClockJitterSampler",
    "ClockUnavailableError",
    "Histogram",
    "InvalidCountError",
    "JitterBitError",
    "chi_squared_test",
    "frequency_test",
    "permutation_test",
    "__version__",
]
