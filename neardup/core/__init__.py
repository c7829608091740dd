"""Shared primitives: growable int container, band hashing, result pairs."""

from .hashing import BAND_HASH_SEED, band_hash, bucket_for
from .primitives import IntArrayList, next_prime
from .types import PairSet, SimilarPair

__all__ = [
    "BAND_HASH_SEED",
    "IntArrayList",
    "PairSet",
    "SimilarPair",
    "band_hash",
    "bucket_for",
    "next_prime",
]
