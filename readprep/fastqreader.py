"""Reading FASTQ records from plain or gzip-compressed files."""

from __future__ import annotations

import gzip
import os
import sys
import zlib
from collections.abc import Iterator
from dataclasses import dataclass

from .common import complement

_PHRED64_TO_PHRED33 = {code: code - 31 for code in range(31, 256)}


class FastqError(ValueError):
    """Raised when FASTQ input is malformed or cannot be decompressed."""


@dataclass
class Read:
    """One FASTQ record."""

    name: str
    seq: str
    strand: str = "+"
    quality: str = ""

    def length(self) -> int:
        return len(self.seq)

    def resize(self, length: int) -> None:
        """Shorten sequence and quality to `length`; larger or negative lengths are ignored."""
        if length < 0 or length > len(self.seq):
            return
        self.seq = self.seq[:length]
        self.quality = self.quality[:length]

    def reverse_complement(self) -> Read:
        """Return a new read with reverse-complemented sequence and reversed quality."""
        return Read(
            name=self.name,
            seq="".join(complement(base) for base in reversed(self.seq)),
            strand="-" if self.strand == "+" else "+",
            quality=self.quality[::-1],
        )


@dataclass
class ReadPair:
    left: Read
    right: Read


def is_zip_fastq(filename: str) -> bool:
    return filename.endswith((".fastq.gz", ".fq.gz", ".fasta.gz", ".fa.gz"))


def is_fastq(filename: str) -> bool:
    return filename.endswith((".fastq", ".fq", ".fasta", ".fa"))


class FastqReader:
    """Reads records from a FASTQ file; names ending in .gz are decompressed."""

    def __init__(self, filename, has_quality: bool = True, phred64: bool = False) -> None:
        self.filename = os.fspath(filename)
        self.has_quality = has_quality
        self.phred64 = phred64
        self.zipped = self.filename.endswith(".gz")
        self._owns_raw = True
        if self.filename == "/dev/stdin" and not self.zipped:
            self._raw = sys.stdin.buffer
            self._owns_raw = False
        else:
            self._raw = open(self.filename, "rb")
        self._stream = self._raw
        if self.zipped:
            self._stream = gzip.GzipFile(fileobj=self._raw, mode="rb")
            try:
                self._stream.peek(1)
            except (OSError, EOFError, zlib.error) as exc:
                self.close()
                raise FastqError(f"invalid gzip header found: {self.filename}") from exc
        self._lines = self._iter_lines()

    def _iter_lines(self) -> Iterator[str]:
        try:
            for raw in self._stream:
                text = raw.decode("latin-1")
                if text.endswith("\n"):
                    text = text[:-1]
                if text.endswith("\r"):
                    text = text[:-1]
                yield from text.split("\r")
        except (EOFError, zlib.error, gzip.BadGzipFile) as exc:
            raise FastqError(f"error while decompressing file: {self.filename}") from exc

    def _next_line(self) -> str | None:
        return next(self._lines, None)

    def read(self) -> Read | None:
        """Return the next record, or None when the input is exhausted."""
        name = self._next_line()
        while name is not None and not name.startswith("@"):
            name = self._next_line()
        if name is None:
            return None
        seq = self._next_line() or ""
        strand = self._next_line() or ""
        quality = self._next_line() or ""
        if not strand.startswith("+"):
            raise FastqError(f"'+' expected, got {strand!r}")
        if len(quality) != len(seq):
            raise FastqError(
                f"sequence and quality have different length in record {name}"
            )
        if self.phred64:
            quality = quality.translate(_PHRED64_TO_PHRED33)
        return Read(name, seq, strand, quality)

    def __iter__(self) -> Iterator[Read]:
        while (record := self.read()) is not None:
            yield record

    def bytes_progress(self) -> tuple[int, int]:
        """Return (bytes consumed from the file, total file size)."""
        try:
            consumed = self._raw.tell()
        except (OSError, ValueError):
            consumed = 0
        try:
            total = os.path.getsize(self.filename)
        except OSError:
            total = 0
        return consumed, total

    def close(self) -> None:
        if self._stream is not self._raw:
            self._stream.close()
        if self._owns_raw:
            self._raw.close()

    def __enter__(self) -> FastqReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FastqReaderPair:
    """Reads paired records from two files, or from one interleaved file."""

    def __init__(
        self,
        left_name,
        right_name=None,
        has_quality: bool = True,
        phred64: bool = False,
        interleaved: bool = False,
    ) -> None:
        self.interleaved = interleaved
        if not interleaved and right_name is None:
            raise ValueError("a second file is required unless input is interleaved")
        self.left = FastqReader(left_name, has_quality, phred64)
        self.right = None if interleaved else FastqReader(right_name, has_quality, phred64)

    def read(self) -> ReadPair | None:
        """Return the next pair, or None when either side is exhausted."""
        left = self.left.read()
        right = self.left.read() if self.interleaved else self.right.read()
        if left is None or right is None:
            return None
        return ReadPair(left, right)

    def __iter__(self) -> Iterator[ReadPair]:
        while (pair := self.read()) is not None:
            yield pair

    def close(self) -> None:
        self.left.close()
        if self.right is not None:
            self.right.close()

    def __enter__(self) -> FastqReaderPair:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()