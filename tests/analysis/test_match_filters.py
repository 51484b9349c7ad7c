"""Tests for duplicate-file, maximality, overlap and subsumption filters."""

from cpdscan.analysis.match_filters import (
    eliminate_subsumed,
    filter_duplicate_files,
    is_left_maximal,
    prune_overlaps,
)
from cpdscan.analysis.match_strategies import CandidateGroup
from cpdscan.core.results import Match, Occurrence
from cpdscan.core.tokens import Token, TokenStream, eof_token


def stream(source_id, name, length):
    return TokenStream(source_id, name, length, (Token("x", source_id, 1), eof_token(source_id, 1)))


def occ(source_id, start, length):
    return Occurrence(source_id, start, length, start_line=start + 1, end_line=start + length)


def match(length, *starts):
    return Match(length, [occ(source_id, start, length) for source_id, start in starts])


class TestFilterDuplicateFiles:
    """Test duplicate-file exclusion."""

    def test_same_name_and_length(self):
        """Test that later copies are excluded."""
        kept, excluded = filter_duplicate_files(
            [stream("one/A.java", "A.java", 40), stream("two/A.java", "A.java", 40)]
        )
        assert [s.source_id for s in kept] == ["one/A.java"]
        assert [s.source_id for s in excluded] == ["two/A.java"]

    def test_different_length_kept(self):
        """Test that equal names with different lengths are both kept."""
        kept, excluded = filter_duplicate_files(
            [stream("one/A.java", "A.java", 40), stream("two/A.java", "A.java", 41)]
        )
        assert len(kept) == 2
        assert excluded == []

    def test_different_name_kept(self):
        """Test that equal lengths with different names are both kept."""
        kept, _ = filter_duplicate_files([stream("A.java", "A.java", 40), stream("B.java", "B.java", 40)])
        assert len(kept) == 2


class TestIsLeftMaximal:
    """Test left maximality of candidate groups."""

    def test_same_predecessor(self):
        """Test that a group extendable to the left is rejected."""
        ids = [5, 1, 2, -1, 5, 1, 2, -2]
        assert not is_left_maximal(CandidateGroup(2, (1, 5)), ids, {0, 4})

    def test_different_predecessor(self):
        """Test that differing predecessors make the group maximal."""
        ids = [5, 1, 2, -1, 6, 1, 2, -2]
        assert is_left_maximal(CandidateGroup(2, (1, 5)), ids, {0, 4})

    def test_adjacent_copies(self):
        """Test that back-to-back copies stay when the longer group would overlap."""
        ids = [0, 1, 0, 1, 0, -1]
        assert is_left_maximal(CandidateGroup(2, (1, 3)), ids, {0})

    def test_longer_group_keeps_same_occurrences(self):
        """Test rejection when the longer group prunes to the same positions."""
        ids = [0, 1, 2, 0, 1, 2, 9, 0, 1, 2, -1]
        assert not is_left_maximal(CandidateGroup(2, (1, 4, 8)), ids, {0})

    def test_stream_start(self):
        """Test that a position at a stream start cannot be extended."""
        ids = [1, 2, -1, 5, 1, 2, -2]
        assert is_left_maximal(CandidateGroup(2, (0, 4)), ids, {0, 3})


class TestPruneOverlaps:
    """Test overlap pruning within one source."""

    def test_keeps_earliest(self):
        """Test that later overlapping occurrences are dropped."""
        kept = prune_overlaps([occ("a", 0, 4), occ("a", 2, 4), occ("a", 4, 4)])
        assert [o.start_index for o in kept] == [0, 4]

    def test_other_sources_untouched(self):
        """Test that only occurrences in the same source conflict."""
        kept = prune_overlaps([occ("a", 0, 4), occ("b", 2, 4), occ("a", 2, 4)])
        assert [(o.source_id, o.start_index) for o in kept] == [("a", 0), ("b", 2)]

    def test_adjacent_occurrences(self):
        """Test that touching ranges do not overlap."""
        assert len(prune_overlaps([occ("a", 0, 3), occ("a", 3, 3)])) == 2


class TestEliminateSubsumed:
    """Test subsumption elimination."""

    def test_contained_at_common_offset(self):
        """Test that a match inside a longer one at one offset is dropped."""
        longer = match(10, ("a", 0), ("b", 20))
        shorter = match(4, ("a", 3), ("b", 23))

        assert eliminate_subsumed([shorter, longer]) == [longer]

    def test_different_offsets_kept(self):
        """Test that containment at different offsets is not subsumption."""
        longer = match(10, ("a", 0), ("b", 20))
        shorter = match(4, ("a", 3), ("b", 25))

        assert eliminate_subsumed([longer, shorter]) == [longer, shorter]

    def test_extra_occurrence_kept(self):
        """Test that a shorter match with an occurrence elsewhere survives."""
        longer = match(10, ("a", 0), ("b", 20))
        shorter = match(4, ("a", 3), ("b", 23), ("c", 7))

        assert eliminate_subsumed([longer, shorter]) == [longer, shorter]

    def test_identical_matches(self):
        """Test that of two identical matches the first is kept."""
        first = match(5, ("a", 0), ("b", 0))
        second = match(5, ("a", 0), ("b", 0))

        result = eliminate_subsumed([first, second])

        assert len(result) == 1
        assert result[0] is first

    def test_end_beyond_longer_kept(self):
        """Test that a run reaching past the longer match survives."""
        longer = match(10, ("a", 0), ("b", 20))
        shorter = match(4, ("a", 8), ("b", 28))

        assert eliminate_subsumed([longer, shorter]) == [longer, shorter]

    def test_order_preserved(self):
        """Test that surviving matches keep their input order."""
        small = match(3, ("c", 0), ("d", 0))
        large = match(8, ("a", 0), ("b", 0))

        assert eliminate_subsumed([small, large]) == [small, large]
