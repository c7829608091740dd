"""
Result report writer.

One `id1,id2,similarity` line per pair, highest similarity first; equal
similarities are ordered by id1 then id2.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, TextIO, Union

from ..core.types import SimilarPair


def sort_pairs(pairs: Iterable[SimilarPair]) -> List[SimilarPair]:
    return sorted(pairs, key=lambda p: (-p.similarity, p.id1, p.id2))


def format_pairs(pairs: Iterable[SimilarPair]) -> List[str]:
    return [pair.to_line() for pair in sort_pairs(pairs)]


def write_pairs(pairs: Iterable[SimilarPair], destination: Union[str, Path, TextIO]) -> int:
    """
    Write pairs in report order.

    Returns the number of lines written.
    """
    lines = format_pairs(pairs)
    if isinstance(destination, (str, Path)):
        with open(destination, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    else:
        for line in lines:
            destination.write(line + "\n")
    return len(lines)
