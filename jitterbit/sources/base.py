"""Abstract base class for all single-bit entropy sources."""

from abc import ABC, abstractmethod


class BitSource(ABC):
    """Base class for a source that yields one raw bit per call.

    Every source must declare metadata and implement two methods:
    ``is_available`` and ``sample``.  A source owns whatever state it
    compares against between calls, so one instance must never be shared
    by concurrent callers; give each thread its own source.
    """

    name: str = "unnamed"
    description: str = ""
    platform_requirements: list[str] = []

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the source can operate on this machine."""
        ...

    @abstractmethod
    def sample(self) -> int:
        """Take one measurement and return a raw bit, 0 or 1.

        Raises
        ------
        ClockUnavailableError
            If the underlying timer cannot be read.
        """
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
