"""
Character shingling.

Each document's text becomes the set of its overlapping length-k character
windows, each hashed to a signed 32-bit integer with MurmurHash3.
"""
from __future__ import annotations

from typing import Set

import mmh3

SHINGLE_HASH_SEED = 0


class Shingler:
    """Deterministic text -> token-set mapping."""
    __slots__ = ("shingle_length", "seed")

    def __init__(self, shingle_length: int, seed: int = SHINGLE_HASH_SEED) -> None:
        if shingle_length <= 0:
            raise ValueError("shingle_length must be > 0")
        self.shingle_length = shingle_length
        self.seed = seed

    def shingle(self, text: str) -> Set[int]:
        if not text:
            return set()
        k = self.shingle_length
        if len(text) <= k:
            return {mmh3.hash(text, self.seed)}
        return {mmh3.hash(text[i:i + k], self.seed) for i in range(len(text) - k + 1)}

    __call__ = shingle
