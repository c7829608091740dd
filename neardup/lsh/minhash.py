# neardup/lsh/minhash.py
"""
MinHash signatures backed by a precomputed universal-hash table.

Hash function i is h_i(x) = ((a_i * x + b_i) mod p) mod N, where N is the
token universe size and p the least prime >= N + 1. Rather than evaluating
h_i for every token occurrence, all values are computed once into a dense
[num_hash_functions, N] table; a signature is then a column gather plus a
row-wise minimum.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from ..core.primitives import next_prime
from ..io.sources import DocumentSource

logger = logging.getLogger(__name__)

# Value stored in every slot of an empty document's signature. Table values
# are in [0, N), so -1 never collides with a real minimum.
EMPTY_SENTINEL = -1

DEFAULT_SEED = 1234

_COEFFICIENT_LIMIT = 2 ** 31 - 1


@dataclass(frozen=True)
class HashCoefficients:
    """Coefficients of the universal hash family."""
    a: np.ndarray
    b: np.ndarray
    prime: int


def draw_coefficients(num_hash_functions: int, n_shingles: int, seed: int) -> HashCoefficients:
    """
    Draw a_i in [1, 2^31 - 2] and b_i in [0, 2^31 - 2] from a seeded generator.
    """
    rng = np.random.default_rng(seed)
    a = rng.integers(1, _COEFFICIENT_LIMIT, size=num_hash_functions, dtype=np.int64)
    b = rng.integers(0, _COEFFICIENT_LIMIT, size=num_hash_functions, dtype=np.int64)
    return HashCoefficients(a=a, b=b, prime=next_prime(n_shingles + 1))


def build_hash_table(num_hash_functions: int, n_shingles: int, seed: int) -> np.ndarray:
    """
    Precompute h_i(j) for every hash index i and token column j.

    Arithmetic is int64 throughout: a_i < 2^31 and j < 2^31, so a_i * j + b_i
    stays below 2^63. The table is returned read-only.
    """
    coeffs = draw_coefficients(num_hash_functions, n_shingles, seed)
    columns = np.arange(n_shingles, dtype=np.int64)
    table = np.empty((num_hash_functions, n_shingles), dtype=np.int32)
    for i in range(num_hash_functions):
        # one row at a time keeps the int64 scratch space at O(N)
        row = (coeffs.a[i] * columns + coeffs.b[i]) % coeffs.prime
        table[i] = row % n_shingles
    table.flags.writeable = False
    return table


class SignatureEngine:
    """
    MinHash signature generator.

    The hash table is built once in the constructor and shared read-only by
    every signature computed afterwards.
    """
    __slots__ = ("num_hash_functions", "n_shingles", "seed", "_table")

    def __init__(self, num_hash_functions: int, n_shingles: int, seed: int = DEFAULT_SEED) -> None:
        if num_hash_functions <= 0:
            raise ValueError("num_hash_functions must be > 0")
        if n_shingles <= 0:
            raise ValueError("n_shingles must be > 0")
        self.num_hash_functions = num_hash_functions
        self.n_shingles = n_shingles
        self.seed = seed
        self._table = build_hash_table(num_hash_functions, n_shingles, seed)
        logger.debug(
            "Hash table built (hash_functions=%d, n_shingles=%d, seed=%d, %.1f MiB)",
            num_hash_functions, n_shingles, seed, self._table.nbytes / (1024 * 1024),
        )

    @property
    def table(self) -> np.ndarray:
        return self._table

    def _columns(self, tokens: Iterable[int]) -> np.ndarray:
        # Tokens span the whole signed 32-bit range; fold them into [0, N).
        cols = np.fromiter(tokens, dtype=np.int64)
        return np.mod(cols, self.n_shingles)

    def signature(self, tokens: Iterable[int]) -> np.ndarray:
        out = np.empty(self.num_hash_functions, dtype=np.int32)
        self.signature_into(tokens, out, 0)
        return out

    def signature_into(self, tokens: Iterable[int], buffer: np.ndarray, offset: int) -> bool:
        """
        Write the signature of tokens into buffer[offset:offset + num_hash_functions].

        Returns False when tokens is empty and the sentinel was written.
        """
        end = offset + self.num_hash_functions
        if offset < 0 or len(buffer) < end:
            raise ValueError(
                f"buffer of length {len(buffer)} cannot hold a signature at offset {offset}"
            )
        cols = self._columns(tokens)
        if cols.size == 0:
            buffer[offset:end] = EMPTY_SENTINEL
            return False
        np.min(self._table[:, cols], axis=1, out=buffer[offset:end])
        return True

    def sign_all(self, source: DocumentSource,
                 max_documents: Optional[int] = None) -> Tuple[np.ndarray, int, int]:
        """
        Sign every document the source yields, in order.

        Returns (flat signature buffer, documents read, empty documents). The
        buffer holds exactly documents_read * num_hash_functions cells.
        """
        limit = source.max_documents if max_documents is None else max_documents
        L = self.num_hash_functions
        signatures = np.empty(max(limit, 0) * L, dtype=np.int32)
        count = 0
        empty = 0
        while count < limit and source.has_next():
            if not self.signature_into(source.next(), signatures, count * L):
                logger.debug("Document %d has an empty token set", count)
                empty += 1
            count += 1
        if empty:
            logger.info("%d of %d documents had empty token sets", empty, count)
        return signatures[:count * L], count, empty


def estimate_similarity(sig_a: np.ndarray, sig_b: np.ndarray) -> float:
    """Fraction of signature positions on which the two sketches agree."""
    if len(sig_a) != len(sig_b):
        raise ValueError("signature length mismatch")
    if len(sig_a) == 0:
        return 0.0
    return int(np.count_nonzero(sig_a == sig_b)) / len(sig_a)
