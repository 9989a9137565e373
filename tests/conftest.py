"""Shared stubs: scripted sources and generators that need no real clock."""

from __future__ import annotations

import itertools

import numpy as np
import pytest

from jitterbit.generator import BitGenerator
from jitterbit.sources.base import BitSource
from jitterbit.sources.timing import ClockJitterSampler


class ConstantSource(BitSource):
    name = "constant"

    def __init__(self, bit: int) -> None:
        self.bit = bit

    def is_available(self) -> bool:
        return True

    def sample(self) -> int:
        return self.bit


class SequenceGenerator:
    """Replays *bits* forever; anything with ``next_bit`` is a generator."""

    def __init__(self, bits) -> None:
        self._it = itertools.cycle(list(bits))
        self.calls = 0

    def next_bit(self) -> int:
        self.calls += 1
        return next(self._it)


@pytest.fixture
def fast_sampler():
    """A clock jitter sampler that never sleeps, driven by perf_counter."""
    return ClockJitterSampler(clock="perf_counter", sleep_us=0, resolution_ns=1,
                              sleep=lambda s: None)


@pytest.fixture
def fast_generator(fast_sampler):
    return BitGenerator(source=fast_sampler, rng=np.random.default_rng(1234))
