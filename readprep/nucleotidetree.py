"""Prefix tree of nucleotide sequences used to extend adapter seeds."""

from __future__ import annotations

from dataclasses import dataclass, field

RATIO_THRESHOLD = 0.95
NUM_THRESHOLD = 50


def _key(base: str) -> int:
    # (A,T,C,G,N) & 0x07 = (1,4,7,6,3)
    return ord(base) & 0x07


@dataclass
class NucleotideNode:
    """One base in the tree with the number of sequences passing through it."""

    base: str = "N"
    count: int = 0
    children: dict[int, NucleotideNode] = field(default_factory=dict)

    def dfs(self) -> str:
        """Render the subtree depth first as base+count, one line per leaf."""
        parts = [f"{self.base}{self.count}"]
        for key in sorted(self.children):
            parts.append(self.children[key].dfs())
        if not self.children:
            parts.append("\n")
        return "".join(parts)


class NucleotideTree:
    """Counts sequence prefixes and finds the dominant path through them."""

    def __init__(self) -> None:
        self.root = NucleotideNode()

    def add_seq(self, seq: str) -> None:
        """Add a sequence, stopping at the first 'N'."""
        node = self.root
        for base in seq:
            if base == "N":
                break
            key = _key(base)
            child = node.children.get(key)
            if child is None:
                child = node.children[key] = NucleotideNode(base=base)
            child.count += 1
            node = child

    def dominant_path(self) -> tuple[str, bool]:
        """Follow children holding at least 95% of the counts.

        Returns the path and whether it ended because too few sequences
        remained (True) rather than because no child dominated (False).
        """
        path: list[str] = []
        node = self.root
        while True:
            total = sum(child.count for child in node.children.values())
            if total < NUM_THRESHOLD:
                return "".join(path), True
            dominant = next(
                (
                    child
                    for _, child in sorted(node.children.items())
                    if child.count / total >= RATIO_THRESHOLD
                ),
                None,
            )
            if dominant is None:
                return "".join(path), False
            path.append(dominant.base)
            node = dominant