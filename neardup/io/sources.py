"""
Forward-only document cursors.

Documents are only ever read front to back. A consumer that needs an
earlier document again calls reset() and walks forward, using skip_next()
to pass over documents it does not need without shingling them.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Iterable, List, Optional, Sequence, Set, Union

from ..errors import DocumentSourceError
from .shingler import Shingler

logger = logging.getLogger(__name__)


class DocumentSource(ABC):
    """
    Stateful cursor over at most max_documents token sets.

    next() and skip_next() each consume exactly one record; reset() rewinds
    to the first record. position is the id of the record next() would
    return.
    """

    max_documents: int
    position: int

    @abstractmethod
    def has_next(self) -> bool:
        ...

    @abstractmethod
    def next(self) -> Set[int]:
        ...

    @abstractmethod
    def skip_next(self) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...

    def close(self) -> None:
        pass

    def __enter__(self) -> "DocumentSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _exhausted(self) -> DocumentSourceError:
        return DocumentSourceError(
            f"document source exhausted at position {self.position}",
            position=self.position,
        )


class InMemoryDocumentSource(DocumentSource):
    """Cursor over token sets already held in memory."""

    def __init__(self, token_sets: Iterable[Iterable[int]],
                 max_documents: Optional[int] = None) -> None:
        self._documents: List[Set[int]] = [set(ts) for ts in token_sets]
        if max_documents is None:
            max_documents = len(self._documents)
        self.max_documents = max_documents
        self.position = 0
        self.decoded = 0
        self.skipped = 0

    def has_next(self) -> bool:
        return self.position < min(self.max_documents, len(self._documents))

    def next(self) -> Set[int]:
        if not self.has_next():
            raise self._exhausted()
        document = set(self._documents[self.position])
        self.position += 1
        self.decoded += 1
        return document

    def skip_next(self) -> None:
        if not self.has_next():
            raise self._exhausted()
        self.position += 1
        self.skipped += 1

    def reset(self) -> None:
        self.position = 0


class TSVDocumentReader(DocumentSource):
    """
    Cursor over a tab-separated file, one document per line.

    The document text is taken from column text_column; lines too short to
    have that column contribute an empty token set.
    """

    def __init__(self, path: Union[str, Path], shingler: Shingler,
                 max_documents: int, text_column: int = 2,
                 encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.shingler = shingler
        self.max_documents = max_documents
        self.text_column = text_column
        self.encoding = encoding
        self.position = 0
        self._handle: Optional[IO[str]] = None
        self._pending: Optional[str] = None
        self._open()

    def _open(self) -> None:
        self.close()
        try:
            self._handle = open(self.path, "r", encoding=self.encoding, newline="\n")
        except OSError as e:
            raise DocumentSourceError(
                f"cannot open document source {self.path}: {e}",
                path=str(self.path),
            ) from e
        self.position = 0
        self._pending = None

    def _peek(self) -> Optional[str]:
        if self._pending is None and self._handle is not None:
            try:
                line = self._handle.readline()
            except (OSError, UnicodeDecodeError) as e:
                raise DocumentSourceError(
                    f"failed reading {self.path}: {e}",
                    path=str(self.path),
                    position=self.position,
                ) from e
            self._pending = line if line else None
        return self._pending

    def _take(self) -> str:
        if not self.has_next():
            raise DocumentSourceError(
                f"document source {self.path} exhausted at position {self.position}",
                path=str(self.path),
                position=self.position,
            )
        line = self._pending
        self._pending = None
        self.position += 1
        return line

    def has_next(self) -> bool:
        if self.position >= self.max_documents:
            return False
        return self._peek() is not None

    def next(self) -> Set[int]:
        line = self._take().rstrip("\r\n")
        columns: Sequence[str] = line.split("\t")
        if len(columns) <= self.text_column:
            logger.warning("Line %d of %s has no column %d; treating as empty",
                           self.position - 1, self.path, self.text_column)
            return set()
        return self.shingler.shingle(columns[self.text_column])

    def skip_next(self) -> None:
        self._take()

    def reset(self) -> None:
        self._open()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
