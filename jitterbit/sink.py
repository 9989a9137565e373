"""File output of generated bit-sums as delimited decimal text."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from jitterbit.evaluators import DEFAULT_NUM_BITS, SupportsNextBit
from jitterbit.generator import sum_bits, validate_count

logger = logging.getLogger(__name__)


def encode_values(values, delimiter: str = ",") -> str:
    """Encode integers as decimal text, each followed by *delimiter*."""
    return "".join(f"{int(v)}{delimiter}" for v in values)


def write_bit_sums(
    generator: SupportsNextBit,
    n: int,
    path: str | Path,
    bits_per_value: int = DEFAULT_NUM_BITS,
    delimiter: str = ",",
    chunk_size: int = 4096,
) -> int:
    """Write *n* sums of *bits_per_value* fresh bits to *path*.

    Values are staged in a growable text buffer and flushed whenever it
    reaches *chunk_size* characters.  The file is opened before any bits
    are generated, so an unwritable path fails fast with ``OSError``.

    Returns the number of characters written.
    """
    n = validate_count(n, "N")
    bits_per_value = validate_count(bits_per_value, "bits_per_value")
    chunk_size = validate_count(chunk_size, "chunk_size")

    written = 0
    with open(path, "w", encoding="ascii", newline="") as fh:
        buf = io.StringIO()
        for _ in range(n):
            buf.write(encode_values((sum_bits(generator, bits_per_value),), delimiter))
            if buf.tell() >= chunk_size:
                written += fh.write(buf.getvalue())
                buf = io.StringIO()
        written += fh.write(buf.getvalue())

    logger.info("wrote %d values (%d chars) to %s", n, written, path)
    return written
