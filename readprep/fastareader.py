"""Reader for FASTA files."""

from __future__ import annotations

import os
import string
from collections.abc import Iterator

_VALID = frozenset(string.ascii_letters + "-")


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _keep_valid_sequence(line: str, upper: bool) -> str:
    kept = "".join(ch for ch in line if ch in _VALID)
    return kept.upper() if upper else kept


class FastaReader:
    """Reads FASTA records one at a time or all at once into `contigs`."""

    def __init__(self, path, force_upper_case: bool = True) -> None:
        self.path = os.fspath(path)
        self.force_upper_case = force_upper_case
        self.current_id = ""
        self.current_description = ""
        self.current_sequence = ""
        self.contigs: dict[str, str] = {}
        if os.path.isdir(self.path):
            raise ValueError(
                "There is a problem with the provided fasta file: "
                f"'{self.path}' is a directory NOT a file"
            )
        try:
            self._file = open(self.path, encoding="latin-1")
        except OSError as exc:
            raise ValueError(
                "There is a problem with the provided fasta file: "
                f"could NOT read {self.path}"
            ) from exc
        self._pending_header: str | None = None
        for line in self._file:
            marker = line.find(">")
            if marker >= 0:
                self._pending_header = _strip_eol(line[marker + 1:])
                break

    def has_next(self) -> bool:
        """Whether another record is waiting to be read."""
        return self._pending_header is not None

    def read_next(self) -> None:
        """Read the next record into current_id and current_sequence."""
        header = self._pending_header
        self._pending_header = None
        self.current_description = ""
        if header is None:
            self.current_id = ""
            self.current_sequence = ""
            return
        chunks: list[str] = []
        for line in self._file:
            if line.startswith(">"):
                self._pending_header = _strip_eol(line[1:])
                break
            chunks.append(_keep_valid_sequence(_strip_eol(line), self.force_upper_case))
        self.current_id = header
        self.current_sequence = "".join(chunks)

    def read_all(self) -> dict[str, str]:
        """Read every remaining record into `contigs` and return it."""
        while self.has_next():
            self.read_next()
            self.contigs[self.current_id] = self.current_sequence
        return self.contigs

    def __iter__(self) -> Iterator[tuple[str, str]]:
        while self.has_next():
            self.read_next()
            yield self.current_id, self.current_sequence

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> FastaReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()