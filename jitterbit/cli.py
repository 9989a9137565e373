"""CLI for jitterbit.

    jitterbit N              print N bits, 80 per line, then the counts
    jitterbit N chi          bit-sum chi-squared, repeated --runs times
    jitterbit N freq         percentage of ones and zeros in N bits
    jitterbit N perm         3-bit pattern chi-squared, 10 repetitions
    jitterbit N FILE         write N comma-separated bit-sums to FILE
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager

import click
import numpy as np

from jitterbit import __version__
from jitterbit.config import RunConfig
from jitterbit.errors import JitterBitError
from jitterbit.sources import SOURCES
from jitterbit.sources.timing import CLOCKS

logger = logging.getLogger(__name__)

MODES = ("chi", "freq", "perm")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
@click.argument("count", metavar="N", type=click.IntRange(min=1))
@click.argument("target", required=False, metavar="[chi|freq|perm|FILE]")
@click.option("--source", type=click.Choice(sorted(SOURCES)), default="clock_jitter",
              show_default=True, help="Raw bit source.")
@click.option("--clock", type=click.Choice(sorted(CLOCKS)), default="monotonic",
              show_default=True, help="Timer used by clock_jitter.")
@click.option("--sleep-us", default=10.0, type=click.FloatRange(min=0), show_default=True,
              help="Sleep per sample in microseconds.")
@click.option("--num-bits", default=20, type=click.IntRange(min=1), show_default=True,
              help="Bits summed per trial (chi and FILE modes).")
@click.option("--runs", default=10, type=click.IntRange(min=1), show_default=True,
              help="Chi-squared runs in chi mode.")
@click.option("--seed", default=None, type=int, help="Seed the mixing PRNG.")
@click.option("--progress", "show_progress", is_flag=True,
              help="Show a progress bar on stderr.")
@click.option("--report", "report_path", default=None, type=click.Path(dir_okay=False),
              help="Also write a Markdown report (chi, freq and perm modes).")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
def main(count: int, target: str | None, source: str, clock: str, sleep_us: float,
         num_bits: int, runs: int, seed: int | None, show_progress: bool,
         report_path: str | None, verbose: bool) -> None:
    """Generate N jitter bits, test them, or write them to FILE."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(levelname)s %(name)s: %(message)s")

    config = RunConfig(source=source, clock=clock, sleep_us=sleep_us,
                       num_bits=num_bits, runs=runs, seed=seed)
    if report_path and target not in MODES:
        click.echo("Warning: --report only applies to chi, freq and perm", err=True)
        report_path = None

    try:
        gen = config.build_generator()
        if target is None:
            _print_bits(gen, count, show_progress)
        elif target == "chi":
            _chi(gen, count, config, show_progress, report_path)
        elif target == "freq":
            _freq(gen, count, config, show_progress, report_path)
        elif target == "perm":
            _perm(gen, count, config, show_progress, report_path)
        else:
            _write_file(gen, count, target, config, show_progress)
    except OSError as e:
        click.echo(f"Error: {e.errno} ({e.strerror})")
        sys.exit(1)
    except (JitterBitError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Interrupted.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.debug("unhandled error", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


# ────────────────────────────────────────────────────────────
# Modes
# ────────────────────────────────────────────────────────────


def _print_bits(gen, count: int, show_progress: bool) -> None:
    from jitterbit.report import format_bits

    with _tracked(gen, count, show_progress, "bits") as g:
        bits = np.fromiter((g.next_bit() for _ in range(count)), dtype=np.uint8, count=count)
    click.echo(format_bits(bits))


def _chi(gen, count: int, config: RunConfig, show_progress: bool, report_path: str | None) -> None:
    from jitterbit.evaluators import chi_squared_test
    from jitterbit.report import format_chi_squared

    results = []
    total = config.runs * count * config.num_bits
    with _tracked(gen, total, show_progress, "chi-squared") as g:
        for _ in range(config.runs):
            result = chi_squared_test(g, count, config.num_bits)
            results.append(result)
            click.echo(format_chi_squared(result))
    _maybe_report(report_path, config, chi_results=results)


def _freq(gen, count: int, config: RunConfig, show_progress: bool, report_path: str | None) -> None:
    from jitterbit.evaluators import frequency_test
    from jitterbit.report import format_frequency

    with _tracked(gen, count, show_progress, "frequency") as g:
        result = frequency_test(g, count)
    click.echo(format_frequency(result))
    _maybe_report(report_path, config, frequency=result)


def _perm(gen, count: int, config: RunConfig, show_progress: bool, report_path: str | None) -> None:
    from jitterbit.evaluators import PATTERN_BITS, permutation_test
    from jitterbit.report import format_permutation

    total = config.repetitions * count * PATTERN_BITS
    with _tracked(gen, total, show_progress, "permutations") as g:
        result = permutation_test(g, count, config.repetitions)
    click.echo(format_permutation(result))
    _maybe_report(report_path, config, permutation=result)


def _write_file(gen, count: int, path: str, config: RunConfig, show_progress: bool) -> None:
    from jitterbit.sink import write_bit_sums

    with _tracked(gen, count * config.num_bits, show_progress, "writing") as g:
        write_bit_sums(g, count, path, bits_per_value=config.num_bits)
    click.echo(f"Wrote {count:,} values to {path}", err=True)


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────


class _ProgressBits:
    """Wrap a generator so every bit advances a rich progress task."""

    def __init__(self, gen, progress, task) -> None:
        self._gen = gen
        self._progress = progress
        self._task = task

    def next_bit(self) -> int:
        bit = self._gen.next_bit()
        self._progress.advance(self._task)
        return bit


@contextmanager
def _tracked(gen, total: int, enabled: bool, label: str):
    if not enabled:
        yield gen
        return

    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed:,.0f}/{task.total:,.0f} bits"),
        console=Console(stderr=True),
        transient=True,
    )
    with progress:
        task = progress.add_task(label, total=total)
        yield _ProgressBits(gen, progress, task)


def _maybe_report(report_path: str | None, config: RunConfig, **results) -> None:
    if not report_path:
        return
    from jitterbit.report import generate_markdown_report

    generate_markdown_report(source_name=config.source, output_path=report_path, **results)
    click.echo(f"Report saved to: {report_path}", err=True)


if __name__ == "__main__":
    main()
