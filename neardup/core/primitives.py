"""
Primitive containers shared by the LSH stages.
"""
from __future__ import annotations

from typing import Iterator

import numpy as np

GROWTH_FACTOR = 1.5


class IntArrayList:
    """
    Growable list of int32 values backed by a numpy array.

    Used for bucket membership so that a bucket holding thousands of
    document ids costs 4 bytes per id rather than one Python object each.
    Capacity grows geometrically by GROWTH_FACTOR.
    """
    __slots__ = ("_data", "_size")

    def __init__(self, initial_capacity: int = 16) -> None:
        if initial_capacity <= 0:
            raise ValueError("initial_capacity must be > 0")
        self._data = np.empty(initial_capacity, dtype=np.int32)
        self._size = 0

    def append(self, value: int) -> None:
        if self._size == len(self._data):
            self._grow()
        self._data[self._size] = value
        self._size += 1

    def get(self, index: int) -> int:
        if index < 0 or index >= self._size:
            raise IndexError(f"index {index} out of range for length {self._size}")
        return int(self._data[index])

    __getitem__ = get

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[int]:
        for i in range(self._size):
            yield int(self._data[i])

    @property
    def capacity(self) -> int:
        return len(self._data)

    def to_array(self) -> np.ndarray:
        """Return a read-only view of the filled part of the buffer."""
        view = self._data[:self._size]
        view.flags.writeable = False
        return view

    def _grow(self) -> None:
        current = len(self._data)
        new_capacity = max(current + 1, int(current * GROWTH_FACTOR))
        bigger = np.empty(new_capacity, dtype=np.int32)
        bigger[:current] = self._data
        self._data = bigger

    def __repr__(self) -> str:
        return f"IntArrayList({list(self)!r})"


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def next_prime(n: int) -> int:
    """Least prime p with p >= n."""
    candidate = max(n, 2)
    while not is_prime(candidate):
        candidate += 1
    return candidate
