"""
Hashing helpers for band keys.

Band slices are serialised as big-endian int32 so the byte layout, and with
it every bucket assignment, is identical across runs and platforms.
"""
from __future__ import annotations

import mmh3
import numpy as np

BAND_HASH_SEED = 0x1B873593

_BIG_ENDIAN_INT32 = np.dtype(">i4")


def band_bytes(values: np.ndarray) -> bytes:
    return np.ascontiguousarray(values, dtype=_BIG_ENDIAN_INT32).tobytes()


def band_hash(values: np.ndarray, seed: int = BAND_HASH_SEED) -> int:
    """
    Signed 32-bit MurmurHash3 of a band slice.
    """
    return mmh3.hash(band_bytes(values), seed, signed=True)


def bucket_for(values: np.ndarray, bucket_count: int, seed: int = BAND_HASH_SEED) -> int:
    """
    Reduce a band hash into [0, bucket_count).

    Truncated remainder followed by absolute value; for a positive modulus
    this equals abs(h) % bucket_count.
    """
    return abs(band_hash(values, seed)) % bucket_count
