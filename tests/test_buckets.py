"""
Tests for per-band bucketing.
"""

import numpy as np
import pytest

from neardup.core.hashing import bucket_for
from neardup.lsh.buckets import BucketEngine


def _signatures(rows):
    return np.array(rows, dtype=np.int32).ravel()


class TestBucketEngine:
    """Test bucket assignment and band scoping."""

    @pytest.fixture
    def engine(self):
        # 4 documents, 2 bands of 3 rows. Docs 0 and 1 share band 0 only,
        # docs 0 and 2 are identical, doc 3 shares nothing.
        sigs = _signatures([
            [1, 2, 3, 4, 5, 6],
            [1, 2, 3, 9, 9, 9],
            [1, 2, 3, 4, 5, 6],
            [7, 7, 7, 8, 8, 8],
        ])
        return BucketEngine(sigs, n_documents=4, bands=2, rows=3, bucket_count=2 ** 31 - 1)

    def test_bucket_index_uses_band_slice(self, engine):
        """Bucket index is the reduced hash of the band's r values."""
        expected = bucket_for(np.array([4, 5, 6], dtype=np.int32), 2 ** 31 - 1)
        assert engine.bucket_index(0, 1) == expected
        assert engine.bucket_index(2, 1) == expected

    def test_shared_band_shares_bucket(self, engine):
        assert engine.bucket_index(0, 0) == engine.bucket_index(1, 0)
        assert engine.bucket_index(0, 1) != engine.bucket_index(1, 1)

    def test_band_groups_documents(self, engine):
        with engine.band(0) as table:
            groups = sorted(list(members) for members in table.values())
        assert groups == [[0, 1, 2], [3]]

        with engine.band(1) as table:
            groups = sorted(list(members) for members in table.values())
        assert groups == [[0, 2], [1], [3]]

    def test_table_released_after_band(self, engine):
        """Bucket tables do not outlive their band."""
        with engine.band(0) as table:
            assert engine.live_buckets == len(table) > 0
        assert engine.live_buckets == 0
        assert len(table) == 0

    def test_table_released_on_error(self, engine):
        with pytest.raises(KeyError):
            with engine.band(0):
                raise KeyError("boom")
        assert engine.live_buckets == 0

    def test_nested_bands_rejected(self, engine):
        with engine.band(0):
            with pytest.raises(RuntimeError):
                with engine.band(1):
                    pass

    def test_band_out_of_range(self, engine):
        with pytest.raises(ValueError):
            with engine.band(2):
                pass

    def test_single_bucket_collects_everything(self):
        sigs = _signatures([[1, 2], [3, 4], [5, 6]])
        engine = BucketEngine(sigs, n_documents=3, bands=2, rows=1, bucket_count=1)
        with engine.band(1) as table:
            assert list(table) == [0]
            assert list(table[0]) == [0, 1, 2]

    def test_band_stats(self, engine):
        with engine.band(0) as table:
            stats = engine.band_stats(0, table)
        assert stats.buckets == 2
        assert stats.non_singleton_buckets == 1
        assert stats.largest_bucket == 3

    def test_deterministic_assignment(self):
        sigs = np.random.default_rng(11).integers(0, 50, size=40 * 6).astype(np.int32)
        first = BucketEngine(sigs, 40, 3, 2, 97)
        second = BucketEngine(sigs.copy(), 40, 3, 2, 97)
        for d in range(40):
            for band in range(3):
                assert first.bucket_index(d, band) == second.bucket_index(d, band)

    def test_invalid_parameters(self):
        sigs = _signatures([[1, 2]])
        with pytest.raises(ValueError):
            BucketEngine(sigs, 1, 0, 2, 10)
        with pytest.raises(ValueError):
            BucketEngine(sigs, 1, 1, 2, 0)
        with pytest.raises(ValueError):
            BucketEngine(sigs, 2, 1, 2, 10)
