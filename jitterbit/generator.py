"""Bit generator: clock jitter XOR a pseudo-random bit.

Usage::

    from jitterbit.generator import BitGenerator
    gen = BitGenerator()
    gen.next_bit()      # 0 or 1
    gen.bits(64)        # uint8 array of 64 bits
"""

from __future__ import annotations

import numpy as np

from jitterbit.errors import InvalidBitError, InvalidCountError
from jitterbit.sources.base import BitSource


def validate_count(n: int, what: str = "N") -> int:
    """Return *n* as an int, or raise ``InvalidCountError`` unless n >= 1."""
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidCountError(f"{what} must be an integer, got {n!r}")
    if n < 1:
        raise InvalidCountError(f"{what} must be at least 1, got {n}")
    return int(n)


def checked_bit(generator) -> int:
    """Draw one bit from *generator*, raising ``InvalidBitError`` unless 0 or 1."""
    bit = generator.next_bit()
    if isinstance(bit, bool) or bit not in (0, 1):
        raise InvalidBitError(f"expected a bit, got {bit!r}")
    return int(bit)


def sum_bits(generator, k: int) -> int:
    """Sum of *k* bits drawn from anything with a ``next_bit()`` method."""
    s = 0
    for _ in range(k):
        s += checked_bit(generator)
    return s


class BitGenerator:
    """One bit per call from a jitter source mixed with a PRNG.

    The jitter source alone is heavily biased towards 1 (consecutive sleeps
    rarely measure the same), and the PRNG alone is periodic.  XORing the
    two keeps the PRNG's balance and the source's unpredictability.

    Parameters
    ----------
    source : BitSource or None
        Raw bit source.  If None, a fresh ``ClockJitterSampler`` is used.
    rng : numpy.random.Generator or None
        PRNG supplying the mixing bit.  If None, ``default_rng(seed)``.
    seed : int or None
        Seed for the default PRNG.  Left unseeded by default since the
        jitter half is unpredictable anyway.
    """

    def __init__(
        self,
        source: BitSource | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ) -> None:
        if source is None:
            from jitterbit.sources.timing import ClockJitterSampler
            source = ClockJitterSampler()
        self.source = source
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def prng_bit(self) -> int:
        return int(self._rng.integers(0, 2))

    def next_bit(self) -> int:
        return self.source.sample() ^ self.prng_bit()

    def bits(self, n: int) -> np.ndarray:
        """Return *n* fresh bits as a uint8 array."""
        n = validate_count(n, "bit count")
        out = np.empty(n, dtype=np.uint8)
        for i in range(n):
            out[i] = self.next_bit()
        return out

    def bit_sum(self, k: int) -> int:
        """Sum of *k* fresh bits, in ``[0, k]``."""
        k = validate_count(k, "bits per sum")
        return sum_bits(self, k)

    def __repr__(self) -> str:
        return f"<BitGenerator source={self.source!r}>"
