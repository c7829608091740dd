"""MinHash signatures, LSH banding, candidate verification and exact refinement."""

from .buckets import BucketEngine
from .minhash import EMPTY_SENTINEL, SignatureEngine, build_hash_table, estimate_similarity
from .pipeline import LSHPipeline, PipelineStats, find_similar_pairs
from .refiner import ExactRefiner, jaccard_similarity
from .verifier import CandidateVerifier

__all__ = [
    "BucketEngine",
    "CandidateVerifier",
    "EMPTY_SENTINEL",
    "ExactRefiner",
    "LSHPipeline",
    "PipelineStats",
    "SignatureEngine",
    "build_hash_table",
    "estimate_similarity",
    "find_similar_pairs",
    "jaccard_similarity",
]
