"""Sampling of input files to estimate read length, read count and adapters."""

from __future__ import annotations

import logging
import os
from collections import Counter
from collections.abc import Iterator, Mapping

from .fastqreader import FastqReader
from .nucleotidetree import NucleotideTree

_log = logging.getLogger(__name__)

_BASES = ("A", "T", "C", "G")
_BASE_CODE = {"A": 0, "T": 1, "C": 2, "G": 3}

_TWO_COLOR_PREFIXES = ("@NS", "@NB", "@NDX", "@A0")

_SEQ_LEN_RECORDS = 1000
_OVER_REP_BASE_LIMIT = 151 * 10000
_READ_NUM_READ_LIMIT = 512 * 1024
_READ_NUM_BASE_LIMIT = 151 * 512 * 1024
_ADAPTER_READ_LIMIT = 256 * 1024
_ADAPTER_BASE_LIMIT = 151 * _ADAPTER_READ_LIMIT
_ADAPTER_MIN_RECORDS = 10000
_KEY_LEN = 10
_SCAN_START = 20
_TOP_NUM = 10
_FOLD_THRESHOLD = 20
_MAX_ADAPTER_LEN = 60


def int2seq(val: int, seq_len: int) -> str:
    """Decode a 2-bit packed key (A=0, T=1, C=2, G=3) into a sequence."""
    bases = []
    for _ in range(seq_len):
        bases.append(_BASES[val & 0x03])
        val >>= 2
    return "".join(reversed(bases))


def seq2int(seq: str, pos: int, key_len: int, last_val: int = -1) -> int:
    """Pack seq[pos:pos+key_len] into an integer key, or -1 if it holds a non-ACGT base.

    With a non-negative `last_val` (the key at pos-1) the key is rolled forward
    by one base instead of being computed from scratch.
    """
    if last_val >= 0:
        mask = (1 << (key_len * 2)) - 1
        code = _BASE_CODE.get(seq[pos + key_len - 1])
        if code is None:
            return -1
        return ((last_val << 2) & mask) + code
    key = 0
    for base in seq[pos:pos + key_len]:
        code = _BASE_CODE.get(base)
        if code is None:
            return -1
        key = (key << 2) + code
    return key


def _kmer_keys(seq: str, key_len: int, shift_tail: int) -> Iterator[tuple[int, int]]:
    key = -1
    for pos in range(_SCAN_START, len(seq) - key_len - shift_tail + 1):
        key = seq2int(seq, pos, key_len, key)
        yield pos, key


def _is_candidate_key(key: int, key_len: int) -> bool:
    atcg = [0, 0, 0, 0]
    for i in range(key_len):
        atcg[(key >> (i * 2)) & 0x03] += 1
    if max(atcg) >= key_len - 4:
        return False
    # too many GC
    if atcg[2] + atcg[3] >= key_len - 2:
        return False
    # starts with GGGG
    if key >> 12 == 0xFF:
        return False
    return True


def _adjacent_diffs(seq: str) -> int:
    return sum(1 for a, b in zip(seq, seq[1:]) if a != b)


def _estimate_read_num(
    reader: FastqReader, records: int, reached_eof: bool, first_pos: int
) -> int:
    if reached_eof:
        return records
    if records == 0:
        return 0
    consumed, total = reader.bytes_progress()
    bytes_per_read = (consumed - first_pos) / records
    if bytes_per_read <= 0:
        return records
    # raised by 1% since bad-quality tails compress worse than the sampled head
    return int(total * 1.01 / bytes_per_read)


class Evaluator:
    """Looks at the start of the input files to guess their properties.

    `known_adapters` maps adapter sequences to descriptions; a detected
    adapter that starts with one of them is reported as that adapter.
    """

    def __init__(
        self,
        in1="",
        in2="",
        trim_tail1: int = 0,
        known_adapters: Mapping[str, str] | None = None,
    ) -> None:
        self.in1 = os.fspath(in1) if in1 else ""
        self.in2 = os.fspath(in2) if in2 else ""
        self.trim_tail1 = trim_tail1
        self.known_adapters = dict(known_adapters or {})
        self.seq_len1 = 0
        self.seq_len2 = 0

    def is_two_color_system(self) -> bool:
        """True if the first read name looks like NextSeq or NovaSeq output."""
        with FastqReader(self.in1) as reader:
            read = reader.read()
        return read is not None and read.name.startswith(_TWO_COLOR_PREFIXES)

    def compute_seq_len(self, filename) -> int:
        """The longest read among the first thousand records."""
        longest = 0
        with FastqReader(filename) as reader:
            for count, read in enumerate(reader):
                if count >= _SEQ_LEN_RECORDS:
                    break
                longest = max(longest, read.length())
        return longest

    def evaluate_seq_len(self) -> tuple[int, int]:
        """Set and return the read lengths of read1 and read2 (0 when absent)."""
        if self.in1:
            self.seq_len1 = self.compute_seq_len(self.in1)
        if self.in2:
            self.seq_len2 = self.compute_seq_len(self.in2)
        return self.seq_len1, self.seq_len2

    def compute_over_rep_seq(self, filename, seq_len: int) -> dict[str, int]:
        """Find overrepresented subsequences in the head of a file.

        Returns a mapping from sequence to count, keeping only sequences that
        are not mere parts of a comparably frequent longer one.
        """
        seq_counts: Counter[str] = Counter()
        bases = 0
        steps = (10, 20, 40, 100, min(150, seq_len - 2))
        with FastqReader(filename) as reader:
            while bases < _OVER_REP_BASE_LIMIT:
                read = reader.read()
                if read is None:
                    break
                seq = read.seq
                rlen = len(seq)
                bases += rlen
                for step in steps:
                    if step <= 0:
                        continue
                    for i in range(rlen - step):
                        seq_counts[seq[i:i + step]] += 1

        hot: dict[str, int] = {}
        for seq in sorted(seq_counts):
            count = seq_counts[seq]
            length = len(seq)
            if seq_len - 1 >= 0 and length >= seq_len - 1:
                required = 3
            elif length >= 100:
                required = 5
            elif length >= 40:
                required = 20
            elif length >= 20:
                required = 100
            elif length >= 10:
                required = 500
            else:
                continue
            if count >= required:
                hot[seq] = count

        for seq in sorted(hot):
            count = hot[seq]
            if any(
                other != seq and seq in other and count // other_count < 10
                for other, other_count in hot.items()
            ):
                del hot[seq]
        return hot

    def evaluate_read_num(self) -> int:
        """Estimate the number of reads in read1 from its head and file size."""
        records = 0
        bases = 0
        first_pos = 0
        reached_eof = False
        with FastqReader(self.in1) as reader:
            while records < _READ_NUM_READ_LIMIT and bases < _READ_NUM_BASE_LIMIT:
                read = reader.read()
                if read is None:
                    reached_eof = True
                    break
                if records == 0:
                    first_pos = reader.bytes_progress()[0]
                records += 1
                bases += read.length()
            return _estimate_read_num(reader, records, reached_eof, first_pos)

    def eval_adapter_and_read_num(self, is_r2: bool = False) -> tuple[str, int]:
        """Detect the adapter of read1 (or read2) and estimate the read count.

        Returns the adapter, '' when none was found, and the estimated number
        of reads.
        """
        filename = self.in2 if is_r2 else self.in1
        seqs: list[str] = []
        bases = 0
        first_pos = 0
        reached_eof = False
        with FastqReader(filename) as reader:
            while len(seqs) < _ADAPTER_READ_LIMIT and bases < _ADAPTER_BASE_LIMIT:
                read = reader.read()
                if read is None:
                    reached_eof = True
                    break
                if not seqs:
                    first_pos = reader.bytes_progress()[0]
                bases += read.length()
                seqs.append(read.seq)
            read_num = _estimate_read_num(reader, len(seqs), reached_eof, first_pos)

        if len(seqs) < _ADAPTER_MIN_RECORDS:
            return "", read_num

        shift_tail = max(1, self.trim_tail1)
        counts: Counter[int] = Counter()
        for seq in seqs:
            for _, key in _kmer_keys(seq, _KEY_LEN, shift_tail):
                if key >= 0:
                    counts[key] += 1
        # AAAAAAAAAA carries no information
        counts.pop(0, None)

        candidates = [
            (count, key) for key, count in counts.items() if _is_candidate_key(key, _KEY_LEN)
        ]
        total = sum(count for count, _ in candidates)
        candidates.sort(key=lambda item: (-item[0], -item[1]))
        size = 1 << (_KEY_LEN * 2)

        for count, key in candidates[:_TOP_NUM]:
            if count < 10 or count * size < total * _FOLD_THRESHOLD:
                break
            if _adjacent_diffs(int2seq(key, _KEY_LEN)) < 3:
                continue
            adapter = self._adapter_with_seed(key, seqs, _KEY_LEN)
            if adapter:
                return adapter, read_num
        return "", read_num

    def _adapter_with_seed(self, seed: int, seqs: list[str], key_len: int) -> str:
        shift_tail = max(1, self.trim_tail1)
        forward = NucleotideTree()
        backward = NucleotideTree()
        for seq in seqs:
            for pos, key in _kmer_keys(seq, key_len, shift_tail):
                if key == seed:
                    forward.add_seq(seq[pos + key_len:len(seq) - shift_tail])
                    backward.add_seq(seq[:pos][::-1])
        forward_path, forward_leaf = forward.dominant_path()
        backward_path, backward_leaf = backward.dominant_path()

        adapter = backward_path[::-1] + int2seq(seed, key_len) + forward_path
        adapter = adapter[:_MAX_ADAPTER_LEN]

        matched = self.match_known_adapter(adapter)
        if matched:
            _log.info("%s: %s", self.known_adapters[matched], matched)
            return matched
        if forward_leaf and backward_leaf:
            _log.info("%s", adapter)
            return adapter
        return ""

    def match_known_adapter(self, seq: str) -> str:
        """Return the first known adapter (in sorted order) that `seq` starts with, or ''."""
        for adapter in sorted(self.known_adapters):
            if len(seq) >= len(adapter) and seq.startswith(adapter):
                return adapter
        return ""