"""
Tests for shingling, document cursors and report output.
"""

import io

import mmh3
import pytest

from neardup.core.types import PairSet, SimilarPair
from neardup.errors import DocumentSourceError
from neardup.io.output import format_pairs, sort_pairs, write_pairs
from neardup.io.shingler import Shingler
from neardup.io.sources import InMemoryDocumentSource, TSVDocumentReader


class TestShingler:
    """Test character shingling."""

    def test_overlapping_windows(self):
        shingler = Shingler(2)
        assert shingler.shingle("abcd") == {mmh3.hash("ab"), mmh3.hash("bc"), mmh3.hash("cd")}

    def test_deterministic(self):
        assert Shingler(3)("hello world") == Shingler(3)("hello world")

    def test_repeated_windows_collapse(self):
        assert len(Shingler(2).shingle("aaaa")) == 1

    def test_short_and_empty_text(self):
        shingler = Shingler(5)
        assert shingler.shingle("") == set()
        assert shingler.shingle("abc") == {mmh3.hash("abc")}

    def test_tokens_are_signed_32_bit(self):
        tokens = Shingler(3).shingle("the quick brown fox jumps over the lazy dog")
        assert all(-2 ** 31 <= t < 2 ** 31 for t in tokens)

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            Shingler(0)


class TestInMemoryDocumentSource:
    """Test the in-memory cursor."""

    def test_cursor_protocol(self):
        source = InMemoryDocumentSource([{1}, {2}, {3}])
        assert source.next() == {1}
        source.skip_next()
        assert source.next() == {3}
        assert not source.has_next()

        source.reset()
        assert source.has_next()
        assert source.next() == {1}

    def test_max_documents_caps_cursor(self):
        source = InMemoryDocumentSource([{1}, {2}, {3}], max_documents=2)
        source.next()
        source.next()
        assert not source.has_next()
        with pytest.raises(DocumentSourceError):
            source.next()

    def test_returned_sets_are_copies(self):
        source = InMemoryDocumentSource([{1, 2}])
        source.next().add(99)
        source.reset()
        assert source.next() == {1, 2}


class TestTSVDocumentReader:
    """Test the file-backed cursor."""

    @pytest.fixture
    def tsv(self, tmp_path):
        path = tmp_path / "docs.tsv"
        path.write_text(
            "1\talice\thello world\n"
            "2\tbob\thello world!\n"
            "3\tcarol\n"
            "4\tdave\tsomething else\n",
            encoding="utf-8",
        )
        return path

    def test_reads_text_column(self, tsv):
        shingler = Shingler(3)
        with TSVDocumentReader(tsv, shingler, max_documents=10) as reader:
            assert reader.next() == shingler("hello world")
            assert reader.next() == shingler("hello world!")

    def test_short_line_is_empty_document(self, tsv):
        with TSVDocumentReader(tsv, Shingler(3), max_documents=10) as reader:
            reader.skip_next()
            reader.skip_next()
            assert reader.next() == set()
            assert reader.position == 3

    def test_end_of_file(self, tsv):
        with TSVDocumentReader(tsv, Shingler(3), max_documents=10) as reader:
            for _ in range(4):
                assert reader.has_next()
                reader.skip_next()
            assert not reader.has_next()
            with pytest.raises(DocumentSourceError):
                reader.skip_next()

    def test_max_documents(self, tsv):
        with TSVDocumentReader(tsv, Shingler(3), max_documents=2) as reader:
            reader.next()
            reader.next()
            assert not reader.has_next()

    def test_reset_rewinds(self, tsv):
        shingler = Shingler(3)
        with TSVDocumentReader(tsv, shingler, max_documents=10) as reader:
            reader.skip_next()
            reader.skip_next()
            reader.reset()
            assert reader.position == 0
            assert reader.next() == shingler("hello world")

    def test_custom_column(self, tsv):
        shingler = Shingler(2)
        with TSVDocumentReader(tsv, shingler, max_documents=10, text_column=1) as reader:
            assert reader.next() == shingler("alice")

    def test_carriage_return_inside_text(self, tmp_path):
        """A lone \\r in the text does not start a new document."""
        path = tmp_path / "cr.tsv"
        path.write_bytes(b"1\tu\thello\rworld\n2\tu\tsecond doc\n")
        shingler = Shingler(3)
        with TSVDocumentReader(path, shingler, max_documents=10) as reader:
            assert reader.next() == shingler("hello\rworld")
            assert reader.next() == shingler("second doc")
            assert not reader.has_next()

    def test_crlf_line_endings(self, tmp_path):
        path = tmp_path / "crlf.tsv"
        path.write_bytes(b"1\tu\tfirst\r\n2\tu\tsecond\r\n")
        shingler = Shingler(3)
        with TSVDocumentReader(path, shingler, max_documents=10) as reader:
            assert reader.next() == shingler("first")
            assert reader.next() == shingler("second")
            assert not reader.has_next()

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentSourceError) as exc_info:
            TSVDocumentReader(tmp_path / "missing.tsv", Shingler(3), max_documents=1)
        assert exc_info.value.path.endswith("missing.tsv")


class TestOutput:
    """Test the report ordering and format."""

    @pytest.fixture
    def pairs(self):
        return PairSet([
            SimilarPair(4, 5, 0.5),
            SimilarPair(0, 9, 0.9),
            SimilarPair(1, 3, 0.5),
            SimilarPair(1, 2, 0.5),
        ])

    def test_sorted_by_similarity_then_ids(self, pairs):
        ordered = [p.key for p in sort_pairs(pairs)]
        assert ordered == [(0, 9), (1, 2), (1, 3), (4, 5)]

    def test_format(self, pairs):
        assert format_pairs(pairs)[0] == "0,9,0.9"

    def test_write_to_stream(self, pairs):
        buffer = io.StringIO()
        assert write_pairs(pairs, buffer) == 4
        assert buffer.getvalue().splitlines() == ["0,9,0.9", "1,2,0.5", "1,3,0.5", "4,5,0.5"]

    def test_write_to_file(self, pairs, tmp_path):
        path = tmp_path / "out.csv"
        write_pairs(pairs, path)
        assert path.read_text().splitlines()[0] == "0,9,0.9"

    def test_write_empty(self, tmp_path):
        path = tmp_path / "out.csv"
        assert write_pairs(PairSet(), path) == 0
        assert path.read_text() == ""
