"""Near-duplicate detection with MinHash and locality-sensitive hashing."""

__version__ = "0.1.0"

from .config import LSHConfig, load_config
from .core.types import PairSet, SimilarPair
from .errors import ConfigurationError, DocumentSourceError, NearDupError
from .io.shingler import Shingler
from .io.sources import DocumentSource, InMemoryDocumentSource, TSVDocumentReader
from .lsh.pipeline import LSHPipeline, find_similar_pairs

__all__ = [
    "ConfigurationError",
    "DocumentSource",
    "DocumentSourceError",
    "InMemoryDocumentSource",
    "LSHConfig",
    "LSHPipeline",
    "NearDupError",
    "PairSet",
    "Shingler",
    "SimilarPair",
    "TSVDocumentReader",
    "__version__",
    "find_similar_pairs",
    "load_config",
]
