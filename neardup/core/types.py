"""
Result pair types.

A pair's identity is its two document ids. The similarity is metadata: a
pair rediscovered through another band keeps the similarity it was first
stored with.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class SimilarPair:
    """Two document ids (id1 < id2) and their similarity."""
    id1: int
    id2: int
    similarity: float = field(compare=False, hash=False)

    @classmethod
    def of(cls, a: int, b: int, similarity: float) -> "SimilarPair":
        if a > b:
            a, b = b, a
        return cls(a, b, similarity)

    @property
    def key(self) -> Tuple[int, int]:
        return (self.id1, self.id2)

    def to_line(self) -> str:
        return f"{self.id1},{self.id2},{self.similarity}"


class PairSet:
    """
    Insertion-ordered set of SimilarPair keyed by id pair.
    """
    __slots__ = ("_pairs",)

    def __init__(self, pairs: Optional[Iterable[SimilarPair]] = None) -> None:
        self._pairs: Dict[Tuple[int, int], SimilarPair] = {}
        if pairs is not None:
            for pair in pairs:
                self.add(pair)

    def add(self, pair: SimilarPair) -> bool:
        """
        Store pair unless its id pair is already present.

        Returns True when the pair was new.
        """
        if pair.key in self._pairs:
            return False
        self._pairs[pair.key] = pair
        return True

    def add_pair(self, a: int, b: int, similarity: float) -> bool:
        return self.add(SimilarPair.of(a, b, similarity))

    def get(self, a: int, b: int) -> Optional[SimilarPair]:
        if a > b:
            a, b = b, a
        return self._pairs.get((a, b))

    def pairs(self) -> List[SimilarPair]:
        return list(self._pairs.values())

    def copy(self) -> "PairSet":
        return PairSet(self._pairs.values())

    def __contains__(self, item) -> bool:
        if isinstance(item, SimilarPair):
            return item.key in self._pairs
        a, b = item
        if a > b:
            a, b = b, a
        return (a, b) in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[SimilarPair]:
        return iter(self._pairs.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, PairSet):
            return NotImplemented
        return self.triples() == other.triples()

    def triples(self) -> Dict[Tuple[int, int], float]:
        return {key: pair.similarity for key, pair in self._pairs.items()}

    def __repr__(self) -> str:
        return f"PairSet({len(self)} pairs)"
