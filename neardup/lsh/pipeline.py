# neardup/lsh/pipeline.py
"""
End-to-end near-duplicate search: sign, band, verify, optionally refine.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..config import LSHConfig
from ..core.types import PairSet
from ..io.sources import DocumentSource
from .buckets import BucketEngine
from .minhash import SignatureEngine
from .refiner import ExactRefiner
from .verifier import CandidateVerifier

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    documents: int = 0
    empty_documents: int = 0
    non_singleton_buckets: int = 0
    comparisons: int = 0
    approximate_pairs: int = 0
    refined_pairs: Optional[int] = None
    timings: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, float]:
        out = {
            "documents": float(self.documents),
            "empty_documents": float(self.empty_documents),
            "non_singleton_buckets": float(self.non_singleton_buckets),
            "comparisons": float(self.comparisons),
            "approximate_pairs": float(self.approximate_pairs),
        }
        if self.refined_pairs is not None:
            out["refined_pairs"] = float(self.refined_pairs)
        out.update({f"time_{k}": v for k, v in self.timings.items()})
        return out


class LSHPipeline:
    """
    Runs one batch near-duplicate search over a document source.

    The Signature Engine, and with it the hash table, is created once per
    pipeline and reused by every run.
    """

    def __init__(self, config: LSHConfig, signature_engine: Optional[SignatureEngine] = None) -> None:
        self.config = config.validate()
        if signature_engine is None:
            signature_engine = SignatureEngine(config.signature_length, config.n_shingles, config.seed)
        elif (signature_engine.num_hash_functions != config.signature_length
              or signature_engine.n_shingles != config.n_shingles
              or signature_engine.seed != config.seed):
            raise ValueError("signature engine does not match configuration")
        self.signature_engine = signature_engine
        self.stats = PipelineStats()

    def run(self, source: DocumentSource) -> Tuple[PairSet, PipelineStats]:
        cfg = self.config
        self.stats = stats = PipelineStats()
        # document ids are positions from the start of the source
        source.reset()

        t0 = time.perf_counter()
        signatures, n_documents, empty = self.signature_engine.sign_all(source, cfg.max_documents)
        stats.documents = n_documents
        stats.empty_documents = empty
        stats.timings["signatures"] = time.perf_counter() - t0
        logger.info("Signed %d documents (signature length %d)", n_documents, cfg.signature_length)

        t0 = time.perf_counter()
        result = PairSet()
        if n_documents >= 2:
            buckets = BucketEngine(signatures, n_documents, cfg.bands, cfg.rows, cfg.bucket_count)
            verifier = CandidateVerifier(signatures, cfg.signature_length, cfg.threshold)
            for band in range(cfg.bands):
                with buckets.band(band) as table:
                    band_stats = buckets.band_stats(band, table)
                    stats.non_singleton_buckets += band_stats.non_singleton_buckets
                    verifier.verify_band(table, result)
                logger.debug("Band %d/%d: %d buckets, %d shared, %d pairs so far",
                             band + 1, cfg.bands, band_stats.buckets,
                             band_stats.non_singleton_buckets, len(result))
            stats.comparisons = verifier.stats.comparisons
        stats.approximate_pairs = len(result)
        stats.timings["banding"] = time.perf_counter() - t0
        logger.info("LSH found %d pairs with estimated similarity >= %.3f",
                    len(result), cfg.threshold)

        if cfg.two_pass:
            t0 = time.perf_counter()
            refiner = ExactRefiner(source, cfg.threshold, cfg.batch_size)
            result = refiner.refine(result)
            stats.refined_pairs = len(result)
            stats.timings["refine"] = time.perf_counter() - t0

        return result, stats


def find_similar_pairs(config: LSHConfig, source: DocumentSource) -> PairSet:
    """Convenience wrapper returning only the pair set."""
    pairs, _ = LSHPipeline(config).run(source)
    return pairs
