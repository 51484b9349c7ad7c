"""Tests for candidate discovery strategies."""

import random

import numpy as np
import pytest

from cpdscan.analysis.match_strategies import (
    CandidateGroup,
    find_candidates_hash,
    find_candidates_suffix,
    get_strategy,
)


def encode(*streams):
    """Concatenate id lists, closing each with a unique negative sentinel."""
    ids = []
    for k, stream in enumerate(streams, start=1):
        ids.extend(stream)
        ids.append(-k)
    return np.array(ids, dtype=np.int64)


@pytest.fixture(params=["suffix", "hash"])
def strategy(request):
    """Both strategies must satisfy the same tests."""
    return get_strategy(request.param)


class TestCandidateGroups:
    """Test groups found by each strategy."""

    def test_two_streams(self, strategy):
        """Test a run shared by two streams, with its right-maximal suffix."""
        ids = encode([9, 1, 2, 3, 4, 8], [7, 1, 2, 3, 4, 6])
        assert strategy(ids, 3) == [CandidateGroup(4, (1, 8)), CandidateGroup(3, (2, 9))]

    def test_below_tile_size(self, strategy):
        """Test that short runs are not candidates."""
        ids = encode([9, 1, 2, 8], [7, 1, 2, 6])
        assert strategy(ids, 3) == []

    def test_runs_stop_at_sentinels(self, strategy):
        """Test that no run crosses the end of a stream."""
        ids = encode([1, 2, 3], [4, 5, 6], [1, 2, 3, 4, 5, 6])
        groups = strategy(ids, 3)

        assert CandidateGroup(3, (0, 8)) in groups
        assert CandidateGroup(3, (4, 11)) in groups
        assert all(group.length == 3 for group in groups)

    def test_nested_groups(self, strategy):
        """Test a longer run shared by fewer positions."""
        ids = encode([1, 2, 3, 4, 5], [1, 2, 3, 4, 5], [1, 2, 3, 9])
        groups = strategy(ids, 3)

        assert groups[0] == CandidateGroup(5, (0, 6))
        assert CandidateGroup(3, (0, 6, 12)) in groups

    def test_periodic_stream(self, strategy):
        """Test overlapping repeats inside one stream."""
        ids = encode([0, 1, 0, 1, 0, 1])
        assert strategy(ids, 2) == [
            CandidateGroup(4, (0, 2)),
            CandidateGroup(2, (0, 2, 4)),
            CandidateGroup(3, (1, 3)),
        ]

    def test_empty(self, strategy):
        """Test an input shorter than the tile."""
        assert strategy(encode([1]), 3) == []


class TestStrategyAgreement:
    """Test that both strategies find exactly the same groups."""

    @pytest.mark.parametrize("seed", range(12))
    def test_random_corpora(self, seed):
        """Test random small-alphabet corpora."""
        rng = random.Random(seed)
        streams = [
            [rng.randrange(4) for _ in range(rng.randrange(5, 80))] for _ in range(rng.randrange(1, 5))
        ]
        ids = encode(*streams)
        tile = rng.randrange(2, 6)

        assert find_candidates_suffix(ids, tile) == find_candidates_hash(ids, tile)

    def test_long_repetitive_stream(self):
        """Test one statement repeated hundreds of times."""
        ids = encode([0, 1] + [2, 3, 4, 5, 6, 7] * 300 + [8], [0, 2, 3, 4, 5, 6, 7] * 4)
        hashed = find_candidates_hash(ids, 20)

        assert hashed == find_candidates_suffix(ids, 20)
        assert hashed[0] == CandidateGroup(1794, (2, 8))


class TestGetStrategy:
    """Test strategy lookup."""

    def test_unknown(self):
        """Test ValueError for an unknown name."""
        with pytest.raises(ValueError, match="Unknown match strategy"):
            get_strategy("bogus")
