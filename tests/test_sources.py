"""Tests for bit sources."""

import pytest

from jitterbit.errors import ClockUnavailableError
from jitterbit.sources import SOURCES, make_source
from jitterbit.sources.base import BitSource
from jitterbit.sources.timing import ClockDomainSampler, ClockJitterSampler


def scripted(values):
    it = iter(values)
    return lambda: next(it)


class TestClockJitterSampler:
    def test_is_available(self):
        assert ClockJitterSampler().is_available()

    @pytest.mark.parametrize("clock", ["monotonic", "perf_counter", "wall"])
    def test_sample_is_a_bit(self, clock):
        s = ClockJitterSampler(clock=clock)
        assert all(s.sample() in (0, 1) for _ in range(20))

    def test_unknown_clock(self):
        with pytest.raises(ValueError, match="unknown clock"):
            ClockJitterSampler(clock="sundial")

    def test_initial_state(self):
        s = ClockJitterSampler(timer=scripted([]), sleep=lambda _: None)
        assert s.last_variance == 0
        assert s.samples == 0

    def test_variance_in_microsecond_ticks(self):
        s = ClockJitterSampler(timer=scripted([1_000, 146_999]), sleep=lambda _: None)
        assert s.measure() == 145

    def test_bit_follows_change(self):
        # variances: 5, 5, 7, 0
        timer = scripted([0, 5000, 100, 5100, 0, 7000, 10, 20])
        s = ClockJitterSampler(timer=timer, sleep=lambda _: None)
        assert [s.sample() for _ in range(4)] == [1, 0, 1, 1]

    def test_state_recorded_every_call(self):
        timer = scripted([0, 3000, 0, 3000, 0, 9000])
        s = ClockJitterSampler(timer=timer, sleep=lambda _: None)
        seen = []
        for _ in range(3):
            bit = s.sample()
            seen.append((bit, s.last_variance, s.samples))
        assert seen == [(1, 3, 1), (0, 3, 2), (1, 9, 3)]

    def test_equal_to_initial_state_gives_zero(self):
        s = ClockJitterSampler(timer=scripted([10, 10]), sleep=lambda _: None)
        assert s.sample() == 0
        assert s.samples == 1

    def test_requested_sleep(self):
        slept = []
        s = ClockJitterSampler(sleep_us=10, timer=scripted([0, 1]), sleep=slept.append)
        s.sample()
        assert slept == [pytest.approx(10e-6)]

    def test_timer_failure_is_fatal(self):
        def broken():
            raise OSError(22, "Invalid argument")

        s = ClockJitterSampler(timer=broken, sleep=lambda _: None)
        with pytest.raises(ClockUnavailableError):
            s.sample()
        assert not s.is_available()

    def test_instances_do_not_share_state(self):
        a = ClockJitterSampler(timer=scripted([0, 4000]), sleep=lambda _: None)
        b = ClockJitterSampler(timer=scripted([]), sleep=lambda _: None)
        a.sample()
        assert a.last_variance == 4
        assert b.last_variance == 0

    @pytest.mark.parametrize("kwargs", [{"sleep_us": -1}, {"resolution_ns": 0}])
    def test_bad_parameters(self, kwargs):
        with pytest.raises(ValueError):
            ClockJitterSampler(**kwargs)


class TestClockDomainSampler:
    def test_offset_drift(self):
        s = ClockDomainSampler(fast=scripted([100, 100, 105]), slow=scripted([0, 0, 0]))
        assert [s.sample() for _ in range(3)] == [1, 0, 1]
        assert s.last_variance == 105

    def test_real_clocks(self):
        s = ClockDomainSampler()
        assert s.is_available()
        assert s.sample() in (0, 1)


class TestRegistry:
    def test_names(self):
        assert set(SOURCES) == {"clock_jitter", "clock_domain"}

    @pytest.mark.parametrize("name", sorted(SOURCES))
    def test_make_source(self, name):
        src = make_source(name)
        assert isinstance(src, BitSource)
        assert src.name == name

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown source"):
            make_source("serial_temperature")

    def test_kwargs_forwarded(self):
        src = make_source("clock_jitter", clock="wall", sleep_us=0)
        assert src.clock == "wall"
        assert src.sleep_us == 0
