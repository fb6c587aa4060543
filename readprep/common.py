"""Shared constants, filter outcome codes and small base helpers."""

from __future__ import annotations

from enum import IntEnum

VERSION = "0.24.0"

ATCG_BASES = ("A", "T", "C", "G")

# how many reads one pack holds
PACK_SIZE = 256

# how many produced but unconsumed packs may be kept in memory
PACK_IN_MEM_LIMIT = 128

# how many filter result codes are supported in total
FILTER_RESULT_TYPES = 32

PHRED_OFFSET = 33
_MAX_PHRED = 126 - PHRED_OFFSET


class FilterOutcome(IntEnum):
    """Result of filtering a read; a bigger value means a worse result."""

    PASS_FILTER = 0
    FAIL_POLY_X = 4
    FAIL_OVERLAP = 8
    FAIL_N_BASE = 12
    FAIL_LENGTH = 16
    FAIL_TOO_LONG = 17
    FAIL_QUALITY = 20
    FAIL_COMPLEXITY = 24


_FAILED_TYPES = {
    FilterOutcome.PASS_FILTER: "passed",
    FilterOutcome.FAIL_POLY_X: "failed_polyx_filter",
    FilterOutcome.FAIL_OVERLAP: "failed_bad_overlap",
    FilterOutcome.FAIL_N_BASE: "failed_too_many_n_bases",
    FilterOutcome.FAIL_LENGTH: "failed_too_short",
    FilterOutcome.FAIL_TOO_LONG: "failed_too_long",
    FilterOutcome.FAIL_QUALITY: "failed_quality_filter",
    FilterOutcome.FAIL_COMPLEXITY: "failed_low_complexity",
}

_COMPLEMENT = {
    "A": "T", "a": "T",
    "T": "A", "t": "A",
    "C": "G", "c": "G",
    "G": "C", "g": "C",
}


def failed_type_name(result: int) -> str:
    """Return the report name of a filter result code ('' for reserved codes)."""
    code = int(result)
    if not 0 <= code < FILTER_RESULT_TYPES:
        raise ValueError(f"filter result code out of range: {code}")
    return _FAILED_TYPES.get(code, "")


def complement(base: str) -> str:
    """Return the complementary base; anything but A/T/C/G maps to 'N'."""
    return _COMPLEMENT.get(base, "N")


def num2qual(num: int) -> str:
    """Convert a phred score to its phred33 quality character."""
    return chr(max(0, min(int(num), _MAX_PHRED)) + PHRED_OFFSET)