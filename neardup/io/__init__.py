"""Document sources, shingling and report output."""

from .output import format_pairs, sort_pairs, write_pairs
from .shingler import Shingler
from .sources import DocumentSource, InMemoryDocumentSource, TSVDocumentReader

__all__ = [
    "DocumentSource",
    "InMemoryDocumentSource",
    "Shingler",
    "TSVDocumentReader",
    "format_pairs",
    "sort_pairs",
    "write_pairs",
]
