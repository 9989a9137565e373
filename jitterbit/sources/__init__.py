"""Bit source implementations."""

from __future__ import annotations

from jitterbit.sources.base import BitSource
from jitterbit.sources.timing import ClockDomainSampler, ClockJitterSampler

SOURCES: dict[str, type[BitSource]] = {
    ClockJitterSampler.name: ClockJitterSampler,
    ClockDomainSampler.name: ClockDomainSampler,
}


def make_source(name: str, **kwargs) -> BitSource:
    """Instantiate the source registered under *name*."""
    try:
        cls = SOURCES[name]
    except KeyError:
        raise ValueError(
            f"unknown source {name!r}; choose from {', '.join(sorted(SOURCES))}"
        ) from None
    return cls(**kwargs)


__all__ = ["BitSource", "ClockDomainSampler", "ClockJitterSampler", "SOURCES", "make_source"]
