"""Duplicate detection for reads and read pairs with a Bloom filter."""

from __future__ import annotations

import threading
from functools import lru_cache

PRIME_ARRAY_LEN = 1 << 9
_BASE_BUF_LEN_IN_BYTES = 1 << 29
_BASE_BUF_NUM = 2
_UINT64_MASK = (1 << 64) - 1

# (byte length multiplier, buffer count multiplier) for each accuracy level
_LEVELS = {
    1: (1, 1),
    2: (2, 1),
    3: (2, 2),
    4: (4, 2),
    5: (8, 2),
    6: (8, 3),
}

_BASE_WEIGHTS = {"A": 7, "T": 222, "C": 74, "G": 31}
_OTHER_WEIGHT = 13

_WITNESSES = (2, 3, 5, 7, 11, 13, 17)


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    for p in _WITNESSES:
        if n % p == 0:
            return n == p
    d = n - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1
    for a in _WITNESSES:
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(r - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


@lru_cache(maxsize=None)
def _prime_array(count: int) -> tuple[int, ...]:
    """Primes above 10000, each found at least 10000 past the previous one."""
    primes = []
    number = 10000
    while len(primes) < count:
        number += 1
        if _is_prime(number):
            primes.append(number)
            number += 10000
    return tuple(primes)


class Duplicate:
    """Estimates duplication by hashing sequences into several bit buffers.

    Higher accuracy levels use larger and more buffers. Levels outside 1..6
    use the sizes of level 1. Bits are stored sparsely, so memory grows with
    the number of reads checked rather than with the nominal buffer size.
    """

    def __init__(self, accuracy_level: int = 1) -> None:
        byte_factor, num_factor = _LEVELS.get(accuracy_level, (1, 1))
        self.accuracy_level = accuracy_level
        self.buf_len_in_bytes = _BASE_BUF_LEN_IN_BYTES * byte_factor
        self.buf_num = _BASE_BUF_NUM * num_factor
        self.buf_len_in_bits = self.buf_len_in_bytes << 3
        self.offset_mask = PRIME_ARRAY_LEN * self.buf_num - 1
        self.primes = _prime_array(self.buf_num * PRIME_ARRAY_LEN)
        self._buffers: list[set[int]] = [set() for _ in range(self.buf_num)]
        self._lock = threading.Lock()
        self.total_reads = 0
        self.dup_reads = 0

    def seq_to_int_vector(self, seq: str, pos_offset: int = 0) -> list[int]:
        """Hash a sequence into one 64-bit value per buffer."""
        output = [0] * self.buf_num
        self._accumulate(seq, pos_offset, output)
        return output

    def _accumulate(self, seq: str, pos_offset: int, output: list[int]) -> None:
        for p, base in enumerate(seq):
            position = p + pos_offset
            weight = _BASE_WEIGHTS.get(base, _OTHER_WEIGHT) + position
            for i in range(self.buf_num):
                offset = (position * self.buf_num + i) & self.offset_mask
                output[i] = (output[i] + self.primes[offset] * weight) & _UINT64_MASK

    def _apply_bloom_filter(self, positions: list[int]) -> bool:
        is_dup = True
        with self._lock:
            for buffer, value in zip(self._buffers, positions):
                bit = value % self.buf_len_in_bits
                is_dup = bit in buffer
                buffer.add(bit)
        return is_dup

    def _record(self, is_dup: bool) -> bool:
        with self._lock:
            self.total_reads += 1
            if is_dup:
                self.dup_reads += 1
        return is_dup

    def check_read(self, seq: str) -> bool:
        """Register a single read; True if it was seen before."""
        positions = self.seq_to_int_vector(seq)
        return self._record(self._apply_bloom_filter(positions))

    def check_pair(self, seq1: str, seq2: str) -> bool:
        """Register a read pair; True if the pair was seen before."""
        positions = [0] * self.buf_num
        self._accumulate(seq1, 0, positions)
        self._accumulate(seq2, len(seq1), positions)
        return self._record(self._apply_bloom_filter(positions))

    def dup_rate(self) -> float:
        """Fraction of checked reads found to be duplicates."""
        with self._lock:
            if self.total_reads == 0:
                return 0.0
            return self.dup_reads / self.total_reads