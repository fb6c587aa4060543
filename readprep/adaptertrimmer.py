"""Adapter trimming by paired-end overlap or by known adapter sequences."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .fastqreader import Read
from .filterresult import FilterResult

# one mismatch is tolerated for every this many compared bases
_ALLOW_ONE_MISMATCH_FOR_EACH = 8


@dataclass(frozen=True)
class OverlapResult:
    """Outcome of overlap analysis between read1 and the reverse complement of read2."""

    overlapped: bool = False
    offset: int = 0
    overlap_len: int = 0
    diff: int = 0


def trim_by_overlap(
    r1: Read,
    r2: Read,
    fr: FilterResult | None,
    ov: OverlapResult,
    front_trimmed1: int = 0,
    front_trimmed2: int = 0,
) -> bool:
    """Cut both reads back to their overlap when read2 runs past read1's start.

    Returns True when the reads were trimmed.
    """
    if not (ov.overlapped and ov.offset < 0):
        return False
    ol = ov.overlap_len
    len1 = min(r1.length(), ol + front_trimmed2)
    len2 = min(r2.length(), ol + front_trimmed1)
    adapter1 = r1.seq[len1:]
    adapter2 = r2.seq[len2:]
    r1.resize(len1)
    r2.resize(len2)
    if fr is not None:
        fr.add_paired_adapter_trimmed(adapter1, adapter2)
    return True


def _start_offset(adapter_len: int) -> int:
    # negative starts catch adapter dimers whose first A was skipped by A-tailing
    if adapter_len >= 16:
        return -4
    if adapter_len >= 12:
        return -3
    if adapter_len >= 8:
        return -2
    return 0


def _matches_at(read_seq: str, adapter: str, pos: int) -> bool:
    cmplen = min(len(read_seq) - pos, len(adapter))
    allowed = cmplen // _ALLOW_ONE_MISMATCH_FOR_EACH
    mismatches = 0
    for i in range(max(0, -pos), cmplen):
        if adapter[i] != read_seq[i + pos]:
            mismatches += 1
            if mismatches > allowed:
                return False
    return True


def trim_by_sequence(
    read: Read,
    fr: FilterResult | None,
    adapter: str,
    is_r2: bool = False,
    match_req: int = 4,
) -> bool:
    """Cut the read at the first place the adapter matches; True if it was cut."""
    rlen = read.length()
    alen = len(adapter)
    if alen < match_req:
        return False

    pos = next(
        (
            p
            for p in range(_start_offset(alen), rlen - match_req)
            if _matches_at(read.seq, adapter, p)
        ),
        None,
    )
    if pos is None:
        return False

    if pos < 0:
        trimmed = adapter[: alen + pos]
        read.resize(0)
    else:
        trimmed = read.seq[pos:]
        read.resize(pos)
    if fr is not None:
        fr.add_adapter_trimmed(trimmed, is_r2)
    return True


def trim_by_multi_sequences(
    read: Read,
    fr: FilterResult | None,
    adapters: Sequence[str],
    is_r2: bool = False,
    inc_trimmed_counter: bool = True,
) -> bool:
    """Trim the read by every adapter in turn; True if any of them cut it."""
    if len(adapters) > 256:
        match_req = 6
    elif len(adapters) > 16:
        match_req = 5
    else:
        match_req = 4

    original = read.seq
    trimmed = False
    for adapter in adapters:
        trimmed |= trim_by_sequence(read, None, adapter, is_r2, match_req)

    if trimmed and fr is not None:
        fr.add_adapter_trimmed(original[read.length():], is_r2, inc_trimmed_counter)
    return trimmed