"""Read filtering by quality, length and complexity, and quality-based cutting."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .common import PHRED_OFFSET, FilterOutcome
from .fastqreader import Read


@dataclass
class FilterOptions:
    """Settings for filtering and cutting reads."""

    quality_filter: bool = True
    qualified_quality: int = 15
    unqualified_percent_limit: int = 40
    avg_qual_req: int = 0
    n_base_limit: int = 5

    length_filter: bool = True
    required_length: int = 15
    max_length: int = 0

    complexity_filter: bool = False
    complexity_threshold: float = 0.3

    cut_front: bool = False
    cut_tail: bool = False
    cut_right: bool = False
    window_size_front: int = 4
    quality_front: int = 20
    window_size_tail: int = 4
    quality_tail: int = 20
    window_size_right: int = 4
    quality_right: int = 20

    index_filter: bool = False
    blacklist1: list[str] = field(default_factory=list)
    blacklist2: list[str] = field(default_factory=list)
    index_threshold: int = 0

    @property
    def cutting_enabled(self) -> bool:
        return self.cut_front or self.cut_tail or self.cut_right


def _matches_any(candidates: Sequence[str], target: str, threshold: int) -> bool:
    for candidate in candidates:
        diff = 0
        for a, b in zip(candidate, target):
            if a != b:
                diff += 1
                if diff > threshold:
                    break
        if diff <= threshold:
            return True
    return False


class Filter:
    """Applies the configured filters and quality cutting to reads."""

    def __init__(self, options: FilterOptions | None = None) -> None:
        self.options = options if options is not None else FilterOptions()

    def pass_filter(self, read: Read | None) -> FilterOutcome:
        """Return the first filter the read fails, or PASS_FILTER."""
        opt = self.options
        if read is None or read.length() == 0:
            return FilterOutcome.FAIL_LENGTH

        rlen = read.length()
        low_qual = 0
        n_bases = 0
        total_qual = 0
        if opt.quality_filter or opt.length_filter:
            threshold = PHRED_OFFSET + opt.qualified_quality
            for base, qual in zip(read.seq, read.quality):
                code = ord(qual)
                total_qual += code - PHRED_OFFSET
                if code < threshold:
                    low_qual += 1
                if base == "N":
                    n_bases += 1

        if opt.quality_filter:
            if low_qual > opt.unqualified_percent_limit * rlen / 100.0:
                return FilterOutcome.FAIL_QUALITY
            if opt.avg_qual_req > 0 and int(total_qual / rlen) < opt.avg_qual_req:
                return FilterOutcome.FAIL_QUALITY
            if n_bases > opt.n_base_limit:
                return FilterOutcome.FAIL_N_BASE

        if opt.length_filter:
            if rlen < opt.required_length:
                return FilterOutcome.FAIL_LENGTH
            if opt.max_length > 0 and rlen > opt.max_length:
                return FilterOutcome.FAIL_TOO_LONG

        if opt.complexity_filter and not self.pass_low_complexity_filter(read):
            return FilterOutcome.FAIL_COMPLEXITY

        return FilterOutcome.PASS_FILTER

    def pass_low_complexity_filter(self, read: Read) -> bool:
        """True if enough neighbouring bases differ from each other."""
        seq = read.seq
        if len(seq) <= 1:
            return False
        diff = sum(1 for a, b in zip(seq, seq[1:]) if a != b)
        return diff / (len(seq) - 1) >= self.options.complexity_threshold

    def trim_and_cut(self, read: Read, front: int, tail: int) -> tuple[Read | None, int]:
        """Trim fixed bases and cut by sliding-window quality.

        The read is changed in place. Returns the read, or None when nothing is
        left, together with the number of bases removed from the front.
        """
        opt = self.options
        if front == 0 and tail == 0 and not opt.cutting_enabled:
            return read, 0

        rlen = read.length() - front - tail
        if rlen < 0:
            return None, 0

        if not opt.cutting_enabled:
            if front == 0:
                read.resize(rlen)
                return read, 0
            read.seq = read.seq[front:front + rlen]
            read.quality = read.quality[front:front + rlen]
            return read, front

        length = read.length()
        seq = read.seq
        quals = [ord(q) for q in read.quality]

        if opt.cut_front:
            w = opt.window_size_front
            if length - front - tail - w <= 0:
                return None, 0
            required = PHRED_OFFSET + opt.quality_front
            total = sum(quals[front:front + w - 1])
            s = front
            while s + w < length - tail:
                total += quals[s + w - 1]
                if s > front:
                    total -= quals[s - 1]
                if total / w >= required:
                    break
                s += 1
            if s > 0:
                s = s + w - 1
            while s < length and seq[s] == "N":
                s += 1
            front = s
            rlen = length - front - tail

        if opt.cut_right:
            w = opt.window_size_right
            if length - front - tail - w <= 0:
                return None, 0
            required = PHRED_OFFSET + opt.quality_right
            total = sum(quals[front:front + w - 1])
            s = front
            found_low = False
            while s + w < length - tail:
                total += quals[s + w - 1]
                if s > front:
                    total -= quals[s - 1]
                if total / w < required:
                    found_low = True
                    break
                s += 1
            if found_low:
                # keep the good bases at the start of the window
                while s < length - 1 and quals[s] >= required:
                    s += 1
                rlen = s - front

        if not opt.cut_right and opt.cut_tail:
            w = opt.window_size_tail
            if length - front - tail - w <= 0:
                return None, 0
            required = PHRED_OFFSET + opt.quality_tail
            last = length - tail - 1
            total = sum(quals[last - i] for i in range(w - 1))
            t = last
            while t - w >= front:
                total += quals[t - w + 1]
                if t < last:
                    total -= quals[t + 1]
                if total / w >= required:
                    break
                t -= 1
            if t < length - 1:
                t = t - w + 1
            while t >= 0 and seq[t] == "N":
                t -= 1
            rlen = t - front + 1

        if rlen <= 0 or front >= length - 1:
            return None, 0

        read.seq = read.seq[front:front + rlen]
        read.quality = read.quality[front:front + rlen]
        return read, front

    def filter_by_index(self, index1: str, index2: str | None = None) -> bool:
        """True if an index barcode is close enough to a blacklisted one."""
        opt = self.options
        if not opt.index_filter:
            return False
        if _matches_any(opt.blacklist1, index1, opt.index_threshold):
            return True
        if index2 is not None and _matches_any(opt.blacklist2, index2, opt.index_threshold):
            return True
        return False