# neardup/lsh/refiner.py
"""
Exact second pass over approximate results.

Holding every document's token set in memory at once is what MinHash exists
to avoid, so pairs are re-checked in batches: for each batch the source is
rewound and walked forward once, materialising only the documents that batch
references. A pair survives when its exact Jaccard similarity reaches the
threshold; it keeps the similarity estimated in the first pass.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Sequence, Set

from ..core.types import PairSet, SimilarPair
from ..errors import DocumentSourceError
from ..io.sources import DocumentSource

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 475_000


def jaccard_similarity(a: AbstractSet[int], b: AbstractSet[int]) -> float:
    """|a & b| / |a | b|, or 0.0 when both sets are empty."""
    small, large = (a, b) if len(a) <= len(b) else (b, a)
    common = sum(1 for x in small if x in large)
    total = len(a) + len(b) - common
    if total == 0:
        return 0.0
    return common / total


@dataclass
class RefinerStats:
    batches: int = 0
    pairs_in: int = 0
    pairs_kept: int = 0
    documents_loaded: int = 0

    @property
    def pairs_dropped(self) -> int:
        return self.pairs_in - self.pairs_kept


class ExactRefiner:
    """Filters a PairSet by exact Jaccard similarity over the original token sets."""

    def __init__(self, source: DocumentSource, threshold: float,
                 batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        self.source = source
        self.threshold = threshold
        self.batch_size = batch_size
        self.stats = RefinerStats()

    def refine(self, pairs: PairSet) -> PairSet:
        """
        Return a new PairSet holding the pairs that pass exact verification.

        The input is not modified.
        """
        if len(pairs) == 0:
            return pairs
        self.stats = RefinerStats(pairs_in=len(pairs))
        ordered = pairs.pairs()
        refined = PairSet()
        for start in range(0, len(ordered), self.batch_size):
            batch = ordered[start:start + self.batch_size]
            self._refine_batch(batch, refined)
            self.stats.batches += 1
            logger.debug("Refined batch %d (%d pairs, %d kept so far)",
                         self.stats.batches, len(batch), len(refined))
        self.stats.pairs_kept = len(refined)
        logger.info("Exact pass kept %d of %d pairs in %d batches",
                    self.stats.pairs_kept, self.stats.pairs_in, self.stats.batches)
        return refined

    def _refine_batch(self, batch: Sequence[SimilarPair], refined: PairSet) -> None:
        wanted = sorted({doc for pair in batch for doc in (pair.id1, pair.id2)})
        documents = self.load_documents(wanted)
        for pair in batch:
            exact = jaccard_similarity(documents[pair.id1], documents[pair.id2])
            if exact >= self.threshold:
                refined.add(pair)

    def load_documents(self, ids: List[int]) -> Dict[int, Set[int]]:
        """
        Materialise the token sets of ids (ascending) in one forward walk.
        """
        self.source.reset()
        documents: Dict[int, Set[int]] = {}
        position = 0
        for doc_id in ids:
            while position < doc_id:
                if not self.source.has_next():
                    raise DocumentSourceError(
                        f"document {doc_id} requested but source ended at {position}",
                        position=position,
                    )
                self.source.skip_next()
                position += 1
            if not self.source.has_next():
                raise DocumentSourceError(
                    f"document {doc_id} requested but source ended at {position}",
                    position=position,
                )
            documents[doc_id] = self.source.next()
            position += 1
        self.stats.documents_loaded += len(documents)
        return documents
