"""Filters applied around candidate discovery.

Before discovery: duplicate-file exclusion. After discovery: left
maximality, per-source overlap pruning and subsumption elimination.
"""

from bisect import bisect_left, bisect_right, insort
import logging
from typing import Iterable, Sequence

from cpdscan.analysis.match_strategies import CandidateGroup
from cpdscan.core.results import Match, Occurrence
from cpdscan.core.tokens import TokenStream

logger = logging.getLogger(__name__)


def filter_duplicate_files(streams: Iterable[TokenStream]) -> tuple[list[TokenStream], list[TokenStream]]:
    """Keep only the first stream of each (base name, content length) pair.

    Returns:
        (kept streams, excluded streams), both in input order
    """
    seen: dict[tuple[str, int], str] = {}
    kept: list[TokenStream] = []
    excluded: list[TokenStream] = []
    for stream in streams:
        key = (stream.name, stream.content_length)
        if key in seen:
            logger.info(f"Skipping {stream.source_id}: same name and length as {seen[key]}")
            excluded.append(stream)
            continue
        seen[key] = stream.source_id
        kept.append(stream)
    return kept, excluded


def _spaced(positions: Sequence[int], length: int) -> tuple[int, ...]:
    """Positions left by overlap pruning of runs of ``length`` tokens.

    A run never crosses a sentinel, so two positions closer than ``length``
    always lie in the same source.
    """
    kept: list[int] = []
    for position in positions:
        if not kept or position >= kept[-1] + length:
            kept.append(position)
    return tuple(kept)


def is_left_maximal(group: CandidateGroup, ids: Sequence[int], stream_starts: set[int]) -> bool:
    """False only when the group one token to the left reports the same occurrences.

    That is the case when every position is preceded by the same token and
    overlap pruning keeps the same positions at ``length`` and ``length + 1``.
    A position at the start of a stream can never be extended backwards.
    """
    previous = None
    for position in group.positions:
        if position in stream_starts:
            return True
        token = ids[position - 1]
        if previous is None:
            previous = token
        elif token != previous:
            return True
    return _spaced(group.positions, group.length) != _spaced(group.positions, group.length + 1)


def prune_overlaps(occurrences: list[Occurrence]) -> list[Occurrence]:
    """Drop occurrences overlapping an earlier kept one in the same source.

    Args:
        occurrences: Occurrences sorted by corpus position
    """
    last_end: dict[str, int] = {}
    kept = []
    for occurrence in occurrences:
        if occurrence.start_index < last_end.get(occurrence.source_id, 0):
            continue
        last_end[occurrence.source_id] = occurrence.end_index
        kept.append(occurrence)
    return kept


class _RetainedIndex:
    """Per-source sorted occurrence starts of the retained matches."""

    def __init__(self) -> None:
        self._starts: dict[str, list[tuple[int, int]]] = {}
        self._keys: list[frozenset[tuple[str, int]]] = []
        self._lengths: list[int] = []
        self.max_length = 0

    def add(self, match: Match) -> None:
        match_id = len(self._keys)
        self._keys.append(frozenset((o.source_id, o.start_index) for o in match.occurrences))
        self._lengths.append(match.token_length)
        self.max_length = max(self.max_length, match.token_length)
        for occurrence in match.occurrences:
            insort(self._starts.setdefault(occurrence.source_id, []), (occurrence.start_index, match_id))

    def covering(self, occurrence: Occurrence) -> Iterable[tuple[int, int]]:
        """Yield (match_id, offset) of retained occurrences containing ``occurrence``."""
        starts = self._starts.get(occurrence.source_id, [])
        lowest = occurrence.end_index - self.max_length
        lo = bisect_left(starts, (lowest, -1))
        hi = bisect_right(starts, (occurrence.start_index, len(self._keys)))
        for start, match_id in starts[lo:hi]:
            if start + self._lengths[match_id] >= occurrence.end_index:
                yield match_id, occurrence.start_index - start

    def contains_all(self, match_id: int, match: Match, offset: int) -> bool:
        if offset + match.token_length > self._lengths[match_id]:
            return False
        keys = self._keys[match_id]
        return all((o.source_id, o.start_index - offset) in keys for o in match.occurrences)


def eliminate_subsumed(matches: list[Match]) -> list[Match]:
    """Discard matches whose every occurrence sits inside a retained longer-or-equal match.

    Containment is tested at one common offset for all occurrences. Matches
    are visited longest first and, among equal lengths, in the given order,
    so the first discovered of two identical matches is the one kept.
    """
    order = sorted(range(len(matches)), key=lambda k: -matches[k].token_length)
    index = _RetainedIndex()
    retained: list[int] = []
    for k in order:
        match = matches[k]
        first = match.occurrences[0]
        if any(index.contains_all(match_id, match, offset) for match_id, offset in index.covering(first)):
            logger.debug(f"Discarding subsumed match of {match.token_length} tokens at {first.source_id}:{first.start_line}")
            continue
        index.add(match)
        retained.append(k)
    return [matches[k] for k in sorted(retained)]
