"""Run configuration assembled from CLI options."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields

from jitterbit.evaluators import DEFAULT_NUM_BITS, DEFAULT_REPETITIONS
from jitterbit.generator import BitGenerator, validate_count
from jitterbit.sources import SOURCES, make_source
from jitterbit.sources.timing import CLOCKS

logger = logging.getLogger(__name__)

# options read only by the clock_jitter source
CLOCK_JITTER_OPTIONS = ("clock", "sleep_us", "resolution_ns")


@dataclass
class RunConfig:
    """Everything needed to build a generator and run the evaluators."""

    source: str = "clock_jitter"
    clock: str = "monotonic"
    sleep_us: float = 10.0
    resolution_ns: int = 1000
    num_bits: int = DEFAULT_NUM_BITS
    runs: int = 10
    repetitions: int = DEFAULT_REPETITIONS
    seed: int | None = None

    def validate(self) -> RunConfig:
        if self.source not in SOURCES:
            raise ValueError(f"unknown source {self.source!r}")
        if self.clock not in CLOCKS:
            raise ValueError(f"unknown clock {self.clock!r}")
        if self.sleep_us < 0:
            raise ValueError(f"sleep_us must be >= 0, got {self.sleep_us}")
        validate_count(self.resolution_ns, "resolution_ns")
        validate_count(self.num_bits, "num_bits")
        validate_count(self.runs, "runs")
        validate_count(self.repetitions, "repetitions")
        return self

    def source_kwargs(self) -> dict:
        if self.source == "clock_jitter":
            return {"clock": self.clock, "sleep_us": self.sleep_us,
                    "resolution_ns": self.resolution_ns}
        defaults = {f.name: f.default for f in fields(self)}
        ignored = [name for name in CLOCK_JITTER_OPTIONS
                   if getattr(self, name) != defaults[name]]
        if ignored:
            logger.warning("source %r ignores %s", self.source, ", ".join(ignored))
        return {}

    def build_generator(self) -> BitGenerator:
        """Validate, then build a generator over a new source instance."""
        self.validate()
        return BitGenerator(source=make_source(self.source, **self.source_kwargs()),
                            seed=self.seed)
