"""Tests for suffix array, LCP array and LCP intervals."""

import random

import numpy as np

from cpdscan.analysis.suffix_array import (
    LcpInterval,
    build_lcp_array,
    build_suffix_array,
    iter_lcp_intervals,
)


def naive_suffix_array(ids):
    return sorted(range(len(ids)), key=lambda i: ids[i:])


def common_prefix(ids, i, j):
    length = 0
    while i + length < len(ids) and j + length < len(ids) and ids[i + length] == ids[j + length]:
        length += 1
    return length


class TestBuildSuffixArray:
    """Test suffix sorting."""

    def test_empty(self):
        """Test an empty input."""
        assert build_suffix_array(np.array([], dtype=np.int64)).tolist() == []

    def test_banana(self):
        """Test the classic example with b=1, a=0, n=2."""
        ids = np.array([1, 0, 2, 0, 2, 0], dtype=np.int64)
        assert build_suffix_array(ids).tolist() == [5, 3, 1, 0, 4, 2]

    def test_negative_sentinels(self):
        """Test that negative sentinel ids sort first."""
        ids = np.array([0, 1, -1, 0, 1, -2], dtype=np.int64)
        assert build_suffix_array(ids).tolist() == naive_suffix_array(ids.tolist())

    def test_matches_naive_sort(self):
        """Test random inputs against a naive sort."""
        rng = random.Random(7)
        for _ in range(20):
            values = [rng.randrange(3) for _ in range(rng.randrange(1, 60))]
            ids = np.array(values, dtype=np.int64)
            assert build_suffix_array(ids).tolist() == naive_suffix_array(values)

    def test_repetitive_input(self):
        """Test a single repeated token, the worst case for doubling."""
        values = [4] * 33
        assert build_suffix_array(np.array(values)).tolist() == list(range(32, -1, -1))


class TestBuildLcpArray:
    """Test Kasai's algorithm."""

    def test_banana(self):
        """Test LCP values of the classic example."""
        ids = [1, 0, 2, 0, 2, 0]
        assert build_lcp_array(ids, [5, 3, 1, 0, 4, 2]) == [0, 1, 3, 0, 0, 2]

    def test_matches_naive(self):
        """Test random inputs against pairwise comparison."""
        rng = random.Random(11)
        for _ in range(20):
            values = [rng.randrange(4) for _ in range(rng.randrange(1, 50))]
            sa = naive_suffix_array(values)
            lcp = build_lcp_array(values, sa)
            expected = [0] + [common_prefix(values, sa[k - 1], sa[k]) for k in range(1, len(sa))]
            assert lcp == expected


class TestIterLcpIntervals:
    """Test LCP interval enumeration."""

    def test_banana_intervals(self):
        """Test the intervals of the classic example."""
        intervals = list(iter_lcp_intervals([0, 1, 3, 0, 0, 2]))
        assert LcpInterval(3, 1, 2) in intervals
        assert LcpInterval(1, 0, 2) in intervals
        assert LcpInterval(2, 4, 5) in intervals
        assert len(intervals) == 3

    def test_children_before_parent(self):
        """Test that nested intervals are reported first."""
        intervals = list(iter_lcp_intervals([0, 1, 3, 0, 0, 2]))
        assert intervals.index(LcpInterval(3, 1, 2)) < intervals.index(LcpInterval(1, 0, 2))

    def test_min_lcp(self):
        """Test that shallow intervals are filtered out."""
        assert list(iter_lcp_intervals([0, 1, 3, 0, 0, 2], min_lcp=2)) == [
            LcpInterval(3, 1, 2),
            LcpInterval(2, 4, 5),
        ]

    def test_no_repeats(self):
        """Test that unique tokens have no intervals."""
        assert list(iter_lcp_intervals([0, 0, 0])) == []
