"""Tests for text and Markdown rendering."""

import itertools

from conftest import SequenceGenerator
from jitterbit.evaluators import chi_squared_test, frequency_test, permutation_test
from jitterbit.report import (
    format_bits,
    format_chi_squared,
    format_frequency,
    format_permutation,
    generate_markdown_report,
)


class TestFormatBits:
    def test_wraps_at_80(self):
        lines = format_bits([1, 0] * 50).splitlines()
        assert [len(line) for line in lines[:2]] == [80, 20]
        assert lines[2] == "number of ones: 50\tnumber of zeros: 50"

    def test_exact_multiple(self):
        lines = format_bits([1] * 160).splitlines()
        assert len(lines) == 3
        assert lines[-1] == "number of ones: 160\tnumber of zeros: 0"

    def test_custom_width(self):
        assert format_bits([0, 1, 1], width=2).splitlines()[:2] == ["01", "1"]


class TestFormatResults:
    def test_chi(self):
        r = chi_squared_test(SequenceGenerator([0, 1]), 12)
        assert format_chi_squared(r).startswith("The chi^2 over 12 runs is ")

    def test_frequency(self):
        text = format_frequency(frequency_test(SequenceGenerator([1]), 10))
        assert "number of 1's: 10\tnumber of 0's: 0\tN: 10" in text
        assert "frequency of 1's: 100.000000 percent" in text

    def test_permutation(self):
        r = permutation_test(SequenceGenerator([0, 1, 1]), 16)
        lines = format_permutation(r).splitlines()
        assert len(lines) == 10
        assert all(line.startswith("16 ") for line in lines)


class TestMarkdown:
    def test_all_sections(self, tmp_path):
        bits = [b for p in itertools.product([0, 1], repeat=3) for b in p]
        gen = SequenceGenerator(bits)
        out = tmp_path / "nested" / "report.md"
        text = generate_markdown_report(
            chi_results=[chi_squared_test(gen, 8)],
            frequency=frequency_test(gen, 24),
            permutation=permutation_test(gen, 16),
            source_name="clock_jitter",
            output_path=out,
        )
        assert out.read_text() == text
        assert "## Bit-sum chi-squared" in text
        assert "## Frequency" in text
        assert "## 3-bit permutations" in text
        assert "| 000 | 001 |" in text
        assert "**Source:** clock_jitter" in text

    def test_no_file_without_path(self):
        text = generate_markdown_report(frequency=frequency_test(SequenceGenerator([1]), 4))
        assert "## Bit-sum chi-squared" not in text
        assert "## Frequency" in text
