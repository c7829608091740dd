# neardup/lsh/verifier.py
"""
Candidate verification within buckets.

Every pair sharing a bucket is compared over the *whole* signature, not just
the band that brought them together, and kept when the estimated Jaccard
similarity reaches the threshold.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..core.types import PairSet, SimilarPair
from .buckets import BucketTable

logger = logging.getLogger(__name__)


@dataclass
class VerifierStats:
    buckets_examined: int = 0
    comparisons: int = 0
    accepted: int = 0
    rediscovered: int = 0

    def as_dict(self) -> dict:
        return {
            "buckets_examined": self.buckets_examined,
            "comparisons": self.comparisons,
            "accepted": self.accepted,
            "rediscovered": self.rediscovered,
        }


class CandidateVerifier:
    """Accumulates accepted pairs across bands into one PairSet."""

    def __init__(self, signatures: np.ndarray, signature_length: int, threshold: float) -> None:
        if signature_length <= 0:
            raise ValueError("signature_length must be > 0")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        self.signature_length = signature_length
        self.threshold = threshold
        n_documents = len(signatures) // signature_length
        self._matrix = signatures[:n_documents * signature_length].reshape(
            n_documents, signature_length
        )
        self.stats = VerifierStats()

    def similarity(self, id1: int, id2: int) -> float:
        equal = np.count_nonzero(self._matrix[id1] == self._matrix[id2])
        return int(equal) / self.signature_length

    def verify_band(self, buckets: BucketTable, result: PairSet) -> PairSet:
        """
        Compare every pair inside every bucket of one band.

        Pairs already in result keep the similarity they were stored with.
        """
        for members in buckets.values():
            size = len(members)
            if size < 2:
                continue
            self.stats.buckets_examined += 1
            ids = members.to_array()
            for i in range(size):
                id1 = int(ids[i])
                for j in range(i + 1, size):
                    id2 = int(ids[j])
                    self.stats.comparisons += 1
                    if (min(id1, id2), max(id1, id2)) in result:
                        self.stats.rediscovered += 1
                        continue
                    sim = self.similarity(id1, id2)
                    if sim >= self.threshold:
                        result.add(SimilarPair.of(id1, id2, sim))
                        self.stats.accepted += 1
        return result
