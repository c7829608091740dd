# neardup/lsh/buckets.py
"""
LSH banding.

A signature of b * r values is split into b bands of r rows. For one band,
every document is placed in the bucket its band slice hashes to; documents
sharing a bucket become candidate pairs. Only one band's buckets exist at a
time, which keeps memory at O(documents) instead of O(bands * documents).
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator

import numpy as np

from ..core.hashing import BAND_HASH_SEED, bucket_for
from ..core.primitives import IntArrayList

logger = logging.getLogger(__name__)

BucketTable = Dict[int, IntArrayList]

INITIAL_BUCKET_CAPACITY = 4


@dataclass
class BandStats:
    band: int
    documents: int = 0
    buckets: int = 0
    non_singleton_buckets: int = 0
    largest_bucket: int = 0


class BucketEngine:
    """
    Builds per-band bucket tables over a flat signature buffer.

    The engine owns a single mapping that is filled for the band being
    processed and cleared when that band's scope ends.
    """

    def __init__(self, signatures: np.ndarray, n_documents: int, bands: int, rows: int,
                 bucket_count: int, seed: int = BAND_HASH_SEED) -> None:
        if bands <= 0 or rows <= 0:
            raise ValueError("bands and rows must be > 0")
        if bucket_count <= 0:
            raise ValueError("bucket_count must be > 0")
        self.signature_length = bands * rows
        if len(signatures) < n_documents * self.signature_length:
            raise ValueError("signature buffer is shorter than n_documents signatures")
        self.signatures = signatures
        self.n_documents = n_documents
        self.bands = bands
        self.rows = rows
        self.bucket_count = bucket_count
        self.seed = seed
        self._table: BucketTable = {}
        self._active_band: int = -1

    def bucket_index(self, document: int, band: int) -> int:
        """Bucket of document's band slice, in [0, bucket_count)."""
        start = document * self.signature_length + band * self.rows
        return bucket_for(self.signatures[start:start + self.rows], self.bucket_count, self.seed)

    def _fill(self, band: int) -> BucketTable:
        table = self._table
        for document in range(self.n_documents):
            index = self.bucket_index(document, band)
            members = table.get(index)
            if members is None:
                members = IntArrayList(INITIAL_BUCKET_CAPACITY)
                table[index] = members
            members.append(document)
        return table

    @contextmanager
    def band(self, band: int) -> Iterator[BucketTable]:
        """
        Yield the bucket table for band; the table is emptied on exit.
        """
        if not 0 <= band < self.bands:
            raise ValueError(f"band {band} out of range [0, {self.bands})")
        if self._active_band != -1:
            raise RuntimeError(f"band {self._active_band} is still open")
        self._active_band = band
        try:
            yield self._fill(band)
        finally:
            self.release()

    def release(self) -> None:
        self._table.clear()
        self._active_band = -1

    @property
    def live_buckets(self) -> int:
        return len(self._table)

    def band_stats(self, band: int, table: BucketTable) -> BandStats:
        sizes = [len(members) for members in table.values()]
        return BandStats(
            band=band,
            documents=self.n_documents,
            buckets=len(sizes),
            non_singleton_buckets=sum(1 for s in sizes if s > 1),
            largest_bucket=max(sizes) if sizes else 0,
        )
