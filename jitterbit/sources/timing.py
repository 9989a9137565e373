"""Clock jitter bit sources.

Both sources here reduce a timing measurement to a small integer and
emit 1 when it differs from the previous measurement, 0 when it repeats.
"""

from __future__ import annotations

import time
from typing import Callable

from jitterbit.errors import ClockUnavailableError
from jitterbit.sources.base import BitSource

# clock name -> (time.get_clock_info name, nanosecond reader)
CLOCKS: dict[str, tuple[str, Callable[[], int]]] = {
    "monotonic": ("monotonic", time.monotonic_ns),
    "perf_counter": ("perf_counter", time.perf_counter_ns),
    "wall": ("time", time.time_ns),
}


def _clock_reader(clock: str) -> Callable[[], int]:
    try:
        info_name, reader = CLOCKS[clock]
    except KeyError:
        raise ValueError(
            f"unknown clock {clock!r}; choose from {', '.join(sorted(CLOCKS))}"
        ) from None
    try:
        time.get_clock_info(info_name)
    except (OSError, ValueError) as e:
        raise ClockUnavailableError(f"clock {clock!r} is unavailable: {e}") from e
    return reader


class ClockJitterSampler(BitSource):
    """Bits from the variance of a fixed short sleep.

    Each ``sample`` reads the clock, sleeps ``sleep_us`` microseconds and
    reads the clock again.  The elapsed time, in units of
    ``resolution_ns`` (microseconds by default), is the measured variance.
    The OS scheduler never honours a 10 µs sleep exactly, so the elapsed
    value wanders from call to call.

    ``last_variance`` always holds the most recent measurement, including
    when the returned bit is 0.

    Parameters
    ----------
    clock:
        ``"monotonic"``, ``"perf_counter"`` or ``"wall"``.  The wall clock
        can jump when the system time is adjusted.
    sleep_us:
        Requested sleep per sample, in microseconds.
    resolution_ns:
        Size of one variance tick in nanoseconds.
    timer, sleep:
        Replacements for the clock reader (returning nanoseconds) and for
        ``time.sleep``; used for instrumentation.
    """

    name = "clock_jitter"
    description = "Elapsed-time variance of a short sleep"
    platform_requirements: list[str] = []

    def __init__(
        self,
        clock: str = "monotonic",
        sleep_us: float = 10.0,
        resolution_ns: int = 1000,
        timer: Callable[[], int] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        if sleep_us < 0:
            raise ValueError(f"sleep_us must be >= 0, got {sleep_us}")
        if resolution_ns < 1:
            raise ValueError(f"resolution_ns must be >= 1, got {resolution_ns}")
        self.clock = clock
        self.sleep_us = sleep_us
        self.resolution_ns = int(resolution_ns)
        self._timer = timer if timer is not None else _clock_reader(clock)
        self._sleep = sleep if sleep is not None else time.sleep
        self.last_variance = 0
        self.samples = 0

    def is_available(self) -> bool:
        try:
            self._read()
        except ClockUnavailableError:
            return False
        return True

    def _read(self) -> int:
        try:
            return int(self._timer())
        except OSError as e:
            raise ClockUnavailableError(f"failed to read clock {self.clock!r}: {e}") from e

    def measure(self) -> int:
        """Return the elapsed ticks of one sleep without touching state."""
        start = self._read()
        self._sleep(self.sleep_us / 1_000_000)
        stop = self._read()
        return (stop - start) // self.resolution_ns

    def sample(self) -> int:
        variance = self.measure()
        bit = 0 if variance == self.last_variance else 1
        self.last_variance = variance
        self.samples += 1
        return bit


class ClockDomainSampler(BitSource):
    """Bits from the drift between two clock domains.

    ``time.perf_counter_ns()`` and ``time.monotonic_ns()`` may be driven
    by different oscillators.  The offset between them, in
    ``resolution_ns`` ticks, is compared with the previous offset.
    No sleep is involved, so this source is fast but its bits are far
    more correlated on machines where both clocks share a counter.
    """

    name = "clock_domain"
    description = "Offset drift between perf_counter and monotonic clocks"
    platform_requirements: list[str] = []

    def __init__(
        self,
        resolution_ns: int = 1,
        fast: Callable[[], int] | None = None,
        slow: Callable[[], int] | None = None,
    ) -> None:
        if resolution_ns < 1:
            raise ValueError(f"resolution_ns must be >= 1, got {resolution_ns}")
        self.resolution_ns = int(resolution_ns)
        self._fast = fast if fast is not None else _clock_reader("perf_counter")
        self._slow = slow if slow is not None else _clock_reader("monotonic")
        self.last_variance = 0
        self.samples = 0

    def is_available(self) -> bool:
        try:
            self.measure()
        except ClockUnavailableError:
            return False
        return True

    def measure(self) -> int:
        try:
            offset = int(self._fast()) - int(self._slow())
        except OSError as e:
            raise ClockUnavailableError(f"failed to read clocks: {e}") from e
        return offset // self.resolution_ns

    def sample(self) -> int:
        variance = self.measure()
        bit = 0 if variance == self.last_variance else 1
        self.last_variance = variance
        self.samples += 1
        return bit
