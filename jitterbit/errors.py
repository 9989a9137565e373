"""Exception hierarchy for jitterbit."""


class JitterBitError(Exception):
    """Base class for all jitterbit errors."""


class ClockUnavailableError(JitterBitError, RuntimeError):
    """The timer backing an entropy source cannot be read."""


class InvalidCountError(JitterBitError, ValueError):
    """A trial or bit count is not a positive integer."""


class BucketOutOfRangeError(JitterBitError, IndexError):
    """A histogram bucket index falls outside the histogram."""


class HistogramFrozenError(JitterBitError):
    """A histogram was modified after its run completed."""


class InvalidBitError(JitterBitError, ValueError):
    """A generator produced something other than 0 or 1."""
