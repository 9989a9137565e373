"""Text and Markdown rendering of evaluator results."""

from __future__ import annotations

import platform
from datetime import datetime
from pathlib import Path
from typing import Sequence

import numpy as np

from jitterbit.evaluators import ChiSquaredResult, FrequencyResult, PermutationResult


def format_bits(bits: Sequence[int] | np.ndarray, width: int = 80) -> str:
    """One character per bit, wrapped at *width* columns, then a count line."""
    bits = np.asarray(bits, dtype=np.uint8).flatten()
    chars = "".join("1" if b else "0" for b in bits)
    lines = [chars[i:i + width] for i in range(0, len(chars), width)]
    ones = int(np.count_nonzero(bits))
    lines.append(f"number of ones: {ones}\tnumber of zeros: {len(bits) - ones}")
    return "\n".join(lines)


def format_chi_squared(result: ChiSquaredResult) -> str:
    return f"The chi^2 over {result.n_trials} runs is {result.statistic:f}"


def format_frequency(result: FrequencyResult) -> str:
    return "\n".join([
        "Statistics",
        "-" * 43,
        f"number of 1's: {result.ones}\tnumber of 0's: {result.zeros}\tN: {result.n}",
        f"frequency of 1's: {result.ones_pct:f} percent \t"
        f"frequency of 0's: {result.zeros_pct:f} percent",
    ])


def format_permutation(result: PermutationResult) -> str:
    return "\n".join(f"{result.n} {chi2:f}" for chi2 in result.statistics)


# ── Markdown ──

def _chi_section(results: Sequence[ChiSquaredResult]) -> list[str]:
    first = results[0]
    lines = [
        "## Bit-sum chi-squared",
        f"**N:** {first.n_trials:,} | **Bits per trial:** {first.num_bits} "
        f"| **Degrees of freedom:** {first.num_bits}\n",
        "| Run | χ² | P-Value |",
        "|-----|----|---------|",
    ]
    for i, r in enumerate(results, 1):
        lines.append(f"| {i} | {r.statistic:.4f} | {r.p_value:.6f} |")
    lines += [
        "",
        "Last run, observed vs expected:",
        "",
        "| Sum | Observed | Expected |",
        "|-----|----------|----------|",
    ]
    last = results[-1]
    for k, (o, e) in enumerate(zip(last.observed, last.expected_rounded)):
        lines.append(f"| {k} | {int(o)} | {int(e)} |")
    lines.append("")
    return lines


def _frequency_section(result: FrequencyResult) -> list[str]:
    return [
        "## Frequency",
        "| N | Ones | Zeros | Ones % | Zeros % |",
        "|---|------|-------|--------|---------|",
        f"| {result.n:,} | {result.ones:,} | {result.zeros:,} "
        f"| {result.ones_pct:.3f} | {result.zeros_pct:.3f} |",
        "",
    ]


def _permutation_section(result: PermutationResult) -> list[str]:
    labels = [PermutationResult.pattern_label(v, result.pattern_bits)
              for v in range(2 ** result.pattern_bits)]
    lines = [
        f"## {result.pattern_bits}-bit permutations",
        f"**N:** {result.n:,} per repetition | **Expected per pattern:** {result.expected:.2f}\n",
        "| Rep | χ² | P-Value | " + " | ".join(labels) + " |",
        "|-----|----|---------|" + "|".join("---" for _ in labels) + "|",
    ]
    for i, (chi2, p, hist) in enumerate(
        zip(result.statistics, result.p_values, result.histograms), 1
    ):
        counts = " | ".join(str(int(c)) for c in hist)
        lines.append(f"| {i} | {chi2:.4f} | {p:.6f} | {counts} |")
    lines.append("")
    return lines


def generate_markdown_report(
    chi_results: Sequence[ChiSquaredResult] = (),
    frequency: FrequencyResult | None = None,
    permutation: PermutationResult | None = None,
    source_name: str = "",
    output_path: str | Path | None = None,
) -> str:
    """Render whichever results are given as one Markdown document."""
    now = datetime.now()
    lines = [
        "# jitterbit — Bit Stream Report",
        "",
        f"**Generated:** {now.strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Machine:** {platform.node()} ({platform.machine()}, {platform.system()} {platform.release()})",
        f"**Python:** {platform.python_version()}",
    ]
    if source_name:
        lines.append(f"**Source:** {source_name}")
    lines += ["", "Statistics are descriptive; no pass/fail threshold is applied.", ""]

    if chi_results:
        lines += _chi_section(chi_results)
    if frequency is not None:
        lines += _frequency_section(frequency)
    if permutation is not None:
        lines += _permutation_section(permutation)

    report = "\n".join(lines)

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report)

    return report
