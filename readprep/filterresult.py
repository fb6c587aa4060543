"""Filtering statistics gathered while processing reads, and their report parts."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .common import ATCG_BASES, FILTER_RESULT_TYPES, FilterOutcome
from .htmlreporter import format_number, output_row

_CORRECTION_SIZE = 64
_REPORT_THRESHOLD = 0.01


@dataclass
class ReportFlags:
    """The run settings that decide which statistics the reports show."""

    paired: bool = False
    length_filter: bool = True
    max_length: int = 0
    complexity_filter: bool = False
    adapter_trimming: bool = True
    polyx_trimming: bool = False
    correction: bool = False
    adapter1: str = ""
    adapter2: str = ""


def _fixed(value: float) -> str:
    return f"{value:f}"


def _percent(numerator: float, denominator: float) -> str:
    if denominator == 0:
        value = math.nan if numerator == 0 else math.copysign(math.inf, numerator)
    else:
        value = numerator * 100.0 / denominator
    return _fixed(value)


def _ordered(adapter_counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """Adapters from short to long, equal lengths in lexical order."""
    return sorted(adapter_counts.items(), key=lambda item: (len(item[0]), item[0]))


def _correction_index(from_base: str, to_base: str) -> int:
    return (ord(from_base) & 0x07) * 8 + (ord(to_base) & 0x07)


def _base_counts_json(pad: str, key: str, total: int, counts: list[int]) -> str:
    body = ", ".join(f'"{base}": {count}' for base, count in zip(ATCG_BASES, counts))
    return f'{pad}\t"total_{key}": {total},\n{pad}\t"{key}":{{{body}}}'


class FilterResult:
    """Counts of filter outcomes, trimmed adapters, polyX tails and corrections."""

    def __init__(self, flags: ReportFlags | None = None, paired: bool = False) -> None:
        self.flags = flags if flags is not None else ReportFlags()
        self.paired = paired
        self.filter_read_stats = [0] * FILTER_RESULT_TYPES
        self.trimmed_adapter_reads = 0
        self.trimmed_adapter_bases = 0
        self.merged_pairs = 0
        self.corrected_reads = 0
        self.trimmed_polyx_reads = [0] * len(ATCG_BASES)
        self.trimmed_polyx_bases = [0] * len(ATCG_BASES)
        self.adapter1: dict[str, int] = {}
        self.adapter2: dict[str, int] = {}
        self.correction_matrix = [0] * _CORRECTION_SIZE

    # ---- counting -------------------------------------------------------

    def add_filter_result(self, result: int, read_num: int = 1) -> None:
        """Count `read_num` reads with the given outcome; unknown codes are ignored."""
        code = int(result)
        if not 0 <= code < FILTER_RESULT_TYPES:
            return
        self.filter_read_stats[code] += read_num

    def add_merged_pairs(self, pairs: int) -> None:
        self.merged_pairs += pairs

    def total_corrected_bases(self) -> int:
        return sum(self.correction_matrix)

    def add_correction(self, from_base: str, to_base: str) -> None:
        self.correction_matrix[_correction_index(from_base, to_base)] += 1

    def correction_count(self, from_base: str, to_base: str) -> int:
        return self.correction_matrix[_correction_index(from_base, to_base)]

    def inc_corrected_reads(self, count: int) -> None:
        self.corrected_reads += count

    def add_adapter_trimmed(
        self, adapter: str, is_r2: bool = False, inc_trimmed_counter: bool = True
    ) -> None:
        """Record an adapter trimmed from a single read; empty adapters are ignored."""
        if not adapter:
            return
        if inc_trimmed_counter:
            self.trimmed_adapter_reads += 1
        self.trimmed_adapter_bases += len(adapter)
        target = self.adapter2 if is_r2 else self.adapter1
        target[adapter] = target.get(adapter, 0) + 1

    def add_paired_adapter_trimmed(self, adapter1: str, adapter2: str) -> None:
        """Record adapters trimmed from both reads of a pair."""
        self.trimmed_adapter_reads += 2
        self.trimmed_adapter_bases += len(adapter1) + len(adapter2)
        if adapter1:
            self.adapter1[adapter1] = self.adapter1.get(adapter1, 0) + 1
        if adapter2:
            self.adapter2[adapter2] = self.adapter2.get(adapter2, 0) + 1

    def add_polyx_trimmed(self, base: int, length: int) -> None:
        """Record a polyX tail; `base` indexes A, T, C, G."""
        self.trimmed_polyx_reads[base] += 1
        self.trimmed_polyx_bases[base] += length

    def total_polyx_trimmed_reads(self) -> int:
        return sum(self.trimmed_polyx_reads)

    def total_polyx_trimmed_bases(self) -> int:
        return sum(self.trimmed_polyx_bases)

    # ---- console summary ------------------------------------------------

    def summary_lines(self) -> list[str]:
        """Lines summarising the filtering, as printed at the end of a run."""
        stats = self.filter_read_stats
        flags = self.flags
        lines = [
            f"reads passed filter: {stats[FilterOutcome.PASS_FILTER]}",
            f"reads failed due to low quality: {stats[FilterOutcome.FAIL_QUALITY]}",
            f"reads failed due to too many N: {stats[FilterOutcome.FAIL_N_BASE]}",
        ]
        if flags.length_filter:
            lines.append(f"reads failed due to too short: {stats[FilterOutcome.FAIL_LENGTH]}")
            if flags.max_length > 0:
                lines.append(
                    f"reads failed due to too long: {stats[FilterOutcome.FAIL_TOO_LONG]}"
                )
        if flags.complexity_filter:
            lines.append(
                f"reads failed due to low complexity: {stats[FilterOutcome.FAIL_COMPLEXITY]}"
            )
        if flags.adapter_trimming:
            lines.append(f"reads with adapter trimmed: {self.trimmed_adapter_reads}")
            lines.append(f"bases trimmed due to adapters: {self.trimmed_adapter_bases}")
        if flags.polyx_trimming:
            lines.append(f"reads with polyX in 3' end: {self.total_polyx_trimmed_reads()}")
            lines.append(f"bases trimmed in polyX tail: {self.total_polyx_trimmed_bases()}")
        if flags.correction:
            lines.append(f"reads corrected by overlap analysis: {self.corrected_reads}")
            lines.append(f"bases corrected by overlap analysis: {self.total_corrected_bases()}")
        return lines

    # ---- JSON -----------------------------------------------------------

    def report_json(self, padding: str) -> str:
        """The filtering_result object of the JSON report."""
        stats = self.filter_read_stats
        inner = padding + "\t"
        parts = ["{\n", f'{inner}"passed_filter_reads": {stats[FilterOutcome.PASS_FILTER]},\n']
        if self.flags.correction:
            parts.append(f'{inner}"corrected_reads": {self.corrected_reads},\n')
            parts.append(f'{inner}"corrected_bases": {self.total_corrected_bases()},\n')
        parts.append(f'{inner}"low_quality_reads": {stats[FilterOutcome.FAIL_QUALITY]},\n')
        parts.append(f'{inner}"too_many_N_reads": {stats[FilterOutcome.FAIL_N_BASE]},\n')
        if self.flags.complexity_filter:
            parts.append(
                f'{inner}"low_complexity_reads": {stats[FilterOutcome.FAIL_COMPLEXITY]},\n'
            )
        parts.append(f'{inner}"too_short_reads": {stats[FilterOutcome.FAIL_LENGTH]},\n')
        parts.append(f'{inner}"too_long_reads": {stats[FilterOutcome.FAIL_TOO_LONG]}\n')
        parts.append(f"{padding}}},\n")
        return "".join(parts)

    def adapters_json(self, adapter_counts: Mapping[str, int]) -> str:
        """Adapter counts as JSON members; rare adapters are folded into 'others'."""
        total = sum(adapter_counts.values())
        if total == 0:
            return ""
        items = []
        reported = 0
        for adapter, count in _ordered(adapter_counts):
            if count / total < _REPORT_THRESHOLD:
                continue
            items.append(f'"{adapter}":{count}')
            reported += count
        unreported = total - reported
        if unreported > 0:
            items.append(f'"others":{unreported}')
        return ", ".join(items)

    def report_adapter_json(self, padding: str) -> str:
        """The adapter_cutting object of the JSON report."""
        inner = padding + "\t"
        paired = self.flags.paired
        parts = [
            "{\n",
            f'{inner}"adapter_trimmed_reads": {self.trimmed_adapter_reads},\n',
            f'{inner}"adapter_trimmed_bases": {self.trimmed_adapter_bases},\n',
            f'{inner}"read1_adapter_sequence": "{self.flags.adapter1}",\n',
        ]
        if paired:
            parts.append(f'{inner}"read2_adapter_sequence": "{self.flags.adapter2}",\n')
        parts.append(f'{inner}"read1_adapter_counts": {{{self.adapters_json(self.adapter1)}}}')
        if paired:
            parts.append(",")
        parts.append("\n")
        if paired:
            parts.append(
                f'{inner}"read2_adapter_counts": {{{self.adapters_json(self.adapter2)}}}\n'
            )
        parts.append(f"{padding}}},\n")
        return "".join(parts)

    def report_polyx_trim_json(self, padding: str) -> str:
        """The polyx_trimming object of the JSON report."""
        return (
            f"{padding}{{\n"
            + _base_counts_json(
                padding,
                "polyx_trimmed_reads",
                self.total_polyx_trimmed_reads(),
                self.trimmed_polyx_reads,
            )
            + ",\n"
            + _base_counts_json(
                padding,
                "polyx_trimmed_bases",
                self.total_polyx_trimmed_bases(),
                self.trimmed_polyx_bases,
            )
            + f"\n{padding}}},\n"
        )

    # ---- HTML -----------------------------------------------------------

    def report_html(self, total_reads: int, total_bases: int) -> str:
        """The filtering result table of the HTML report."""
        stats = self.filter_read_stats
        flags = self.flags

        def counted(count: int, denominator: int) -> str:
            return f"{format_number(count)} ({_percent(count, denominator)}%)"

        rows = ["<table class='summary_table'>\n"]
        rows.append(
            output_row("reads passed filters:", counted(stats[FilterOutcome.PASS_FILTER], total_reads))
        )
        if flags.correction:
            rows.append(output_row("reads corrected:", counted(self.corrected_reads, total_reads)))
            rows.append(
                output_row("bases corrected:", counted(self.total_corrected_bases(), total_bases))
            )
        rows.append(
            output_row(
                "reads with low quality:", counted(stats[FilterOutcome.FAIL_QUALITY], total_reads)
            )
        )
        rows.append(
            output_row(
                "reads with too many N:", counted(stats[FilterOutcome.FAIL_N_BASE], total_reads)
            )
        )
        if flags.length_filter:
            rows.append(
                output_row("reads too short:", counted(stats[FilterOutcome.FAIL_LENGTH], total_reads))
            )
            if flags.max_length > 0:
                rows.append(
                    output_row(
                        "reads too long:", counted(stats[FilterOutcome.FAIL_TOO_LONG], total_reads)
                    )
                )
        if flags.complexity_filter:
            rows.append(
                output_row(
                    "reads with low complexity:",
                    counted(stats[FilterOutcome.FAIL_COMPLEXITY], total_reads),
                )
            )
        rows.append("</table>\n")
        return "".join(rows)

    def adapters_html(self, adapter_counts: Mapping[str, int], total_bases: int) -> str:
        """An adapter occurrence table, with a tip when adapters are rare."""
        total = sum(adapter_counts.values())
        adapter_bases = sum(len(adapter) * count for adapter, count in adapter_counts.items())
        if total_bases == 0:
            frac = math.nan if adapter_bases == 0 else math.inf
        else:
            frac = adapter_bases / total_bases
        if self.flags.paired:
            frac *= 2.0

        parts = []
        if frac < 0.01:
            parts.append(
                "<div class='sub_section_tips'>The input has little adapter percentage (~"
                f"{_fixed(frac * 100.0)}%), probably it's trimmed before.</div>\n"
            )
        if total == 0:
            return "".join(parts)

        parts.append("<table class='summary_table'>\n")
        parts.append(
            "<tr><td class='adapter_col' style='font-size:14px;color:#ffffff;background:#556699'>"
            "Sequence</td><td class='col2' style='font-size:14px;color:#ffffff;"
            "background:#556699'>Occurrences</td></tr>\n"
        )
        reported = 0
        for adapter, count in _ordered(adapter_counts):
            if count / total < _REPORT_THRESHOLD:
                continue
            parts.append(
                f"<tr><td class='adapter_col'>{adapter}</td><td class='col2'>{count}</td></tr>\n"
            )
            reported += count
        unreported = total - reported
        if unreported > 0:
            tag = "all adapter sequences" if reported == 0 else "other adapter sequences"
            parts.append(
                f"<tr><td class='adapter_col'>{tag}</td><td class='col2'>{unreported}</td></tr>\n"
            )
        parts.append("</table>\n")
        return "".join(parts)

    def report_adapter_html(self, total_bases: int) -> str:
        """The adapter sections of the HTML report, one per read."""
        parts = [
            "<div class='subsection_title' onclick=showOrHide('read1_adapters')>"
            "Adapter or bad ligation of read1</div>\n",
            "<div id='read1_adapters'>\n",
            self.adapters_html(self.adapter1, total_bases),
            "</div>\n",
        ]
        if self.flags.paired:
            parts.extend(
                [
                    "<div class='subsection_title' onclick=showOrHide('read2_adapters')>"
                    "Adapter or bad ligation of read2</div>\n",
                    "<div id='read2_adapters'>\n",
                    self.adapters_html(self.adapter2, total_bases),
                    "</div>\n",
                ]
            )
        return "".join(parts)


def merge(results: Iterable[FilterResult]) -> FilterResult | None:
    """Sum several results into a new one; None when there are none."""
    results = list(results)
    if not results:
        return None
    merged = FilterResult(results[0].flags, results[0].paired)
    for result in results:
        merged.filter_read_stats = [
            a + b for a, b in zip(merged.filter_read_stats, result.filter_read_stats)
        ]
        merged.trimmed_adapter_reads += result.trimmed_adapter_reads
        merged.trimmed_adapter_bases += result.trimmed_adapter_bases
        merged.merged_pairs += result.merged_pairs
        merged.trimmed_polyx_reads = [
            a + b for a, b in zip(merged.trimmed_polyx_reads, result.trimmed_polyx_reads)
        ]
        merged.trimmed_polyx_bases = [
            a + b for a, b in zip(merged.trimmed_polyx_bases, result.trimmed_polyx_bases)
        ]
        for adapter, count in result.adapter1.items():
            merged.adapter1[adapter] = merged.adapter1.get(adapter, 0) + count
        for adapter, count in result.adapter2.items():
            merged.adapter2[adapter] = merged.adapter2.get(adapter, 0) + count
        merged.correction_matrix = [
            a + b for a, b in zip(merged.correction_matrix, result.correction_matrix)
        ]
        merged.corrected_reads += result.corrected_reads
    return merged