"""Candidate discovery strategies.

Each strategy takes the encoded corpus and the minimum tile size and returns
the same thing: every group of corpus positions that share a token run of
some length ``>= tile_size`` which cannot be extended to the right for the
whole group. Groups come back sorted by (first position, descending length).

- suffix: suffix array + LCP intervals (default)
- hash: Rabin-Karp tile buckets, suffix order inside each bucket, union-find
"""

from dataclasses import dataclass
from functools import cmp_to_key
from itertools import groupby
import logging
from operator import itemgetter
from typing import Callable, Sequence

import numpy as np

from cpdscan.analysis.matching_constants import RollingHash
from cpdscan.analysis.suffix_array import build_lcp_array, build_suffix_array, iter_lcp_intervals
from cpdscan.analysis.union_find import UnionFind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateGroup:
    """Positions sharing a run of ``length`` tokens, right-maximal as a group."""

    length: int
    positions: tuple[int, ...]


def _sorted_groups(groups: list[CandidateGroup]) -> list[CandidateGroup]:
    return sorted(groups, key=lambda g: (g.positions[0], -g.length))


def find_candidates_suffix(ids: np.ndarray, tile_size: int) -> list[CandidateGroup]:
    """Candidate groups from the LCP intervals of the suffix array.

    Args:
        ids: Encoded corpus; sentinels carry unique ids
        tile_size: Minimum run length

    Returns:
        Candidate groups sorted by first position, then descending length
    """
    if len(ids) < tile_size:
        return []

    sa = build_suffix_array(ids)
    sa_list = sa.tolist()
    lcp = build_lcp_array(ids.tolist(), sa_list)

    groups = [
        CandidateGroup(interval.lcp, tuple(sorted(sa_list[interval.lb : interval.rb + 1])))
        for interval in iter_lcp_intervals(lcp, min_lcp=tile_size)
    ]
    logger.debug(f"suffix strategy: {len(groups)} LCP intervals with lcp >= {tile_size}")
    return _sorted_groups(groups)


class _PrefixHash:
    """Polynomial prefix hashes; any window hash in O(1)."""

    def __init__(self, ids: Sequence[int]) -> None:
        modulus = RollingHash.MODULUS
        base = RollingHash.BASE
        self._prefix = [0] * (len(ids) + 1)
        self._powers = [1] * (len(ids) + 1)
        for position, token in enumerate(ids):
            self._prefix[position + 1] = (self._prefix[position] * base + token) % modulus
            self._powers[position + 1] = self._powers[position] * base % modulus

    def window(self, start: int, length: int) -> int:
        value = self._prefix[start + length] - self._prefix[start] * self._powers[length]
        return value % RollingHash.MODULUS


def _free_runs(ids: Sequence[int]) -> list[int]:
    """Number of sentinel-free tokens starting at each position."""
    free = [0] * (len(ids) + 1)
    for position in range(len(ids) - 1, -1, -1):
        if ids[position] >= 0:
            free[position] = free[position + 1] + 1
    return free


def _tile_buckets(hashes: _PrefixHash, free: Sequence[int], tile_size: int) -> dict[int, list[int]]:
    """Bucket every sentinel-free tile window by its hash."""
    buckets: dict[int, list[int]] = {}
    for position in range(len(free) - 1):
        if free[position] >= tile_size:
            buckets.setdefault(hashes.window(position, tile_size), []).append(position)
    return buckets


def _verified_groups(ids: Sequence[int], bucket: list[int], tile_size: int) -> list[list[int]]:
    """Split a hash bucket into groups of truly equal tile windows."""
    groups: list[tuple[list[int], list[int]]] = []
    for position in bucket:
        window = ids[position : position + tile_size]
        for representative, members in groups:
            if representative == window:
                members.append(position)
                break
        else:
            groups.append((window, [position]))
    return [members for _, members in groups if len(members) > 1]


class _RunIndex:
    """Common run lengths between corpus positions by binary search on window hashes."""

    def __init__(self, ids: Sequence[int], hashes: _PrefixHash, free: Sequence[int]) -> None:
        self.ids = ids
        self.hashes = hashes
        self.free = free

    def common_run(self, i: int, j: int, known: int) -> int:
        """Length of the common run at i and j, knowing the first ``known`` tokens match.

        Bounded by the distance to the nearer sentinel, so a run never
        crosses the end of a stream.
        """
        lo, hi = known, min(self.free[i], self.free[j])
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if self.hashes.window(i, mid) == self.hashes.window(j, mid):
                lo = mid
            else:
                hi = mid - 1
        return lo

    def suffix_order(self, positions: list[int], known: int) -> list[int]:
        """Sort positions by the token sequence starting at each one."""

        def compare(i: int, j: int) -> int:
            length = self.common_run(i, j, known)
            return -1 if self.ids[i + length] < self.ids[j + length] else 1

        return sorted(positions, key=cmp_to_key(compare))


def _run_groups(members: list[int], index: _RunIndex, tile_size: int) -> list[CandidateGroup]:
    """Split positions sharing one tile into their maximal-run groups.

    In suffix order, neighbours are linked by their common run length.
    Linking longest first with a union-find, every component touched while
    linking at length ``L`` holds exactly the positions sharing a run of
    ``L`` tokens: the same sets as the LCP intervals of the suffix strategy.
    """
    order = index.suffix_order(members, tile_size)
    links = sorted(
        ((index.common_run(a, b, tile_size), a, b) for a, b in zip(order, order[1:])),
        key=itemgetter(0),
        reverse=True,
    )

    uf: UnionFind[int] = UnionFind()
    positions = {position: [position] for position in order}
    groups = []
    for length, batch in groupby(links, key=itemgetter(0)):
        touched: set[int] = set()
        for _, a, b in batch:
            root_a, root_b = uf.find(a), uf.find(b)
            uf.union(root_a, root_b)
            root = uf.find(root_a)
            absorbed = root_b if root == root_a else root_a
            positions[root].extend(positions.pop(absorbed))
            touched.discard(absorbed)
            touched.add(root)
        groups.extend(CandidateGroup(length, tuple(sorted(positions[root]))) for root in touched)
    return groups


def find_candidates_hash(ids: np.ndarray, tile_size: int) -> list[CandidateGroup]:
    """Candidate groups from hash tile buckets.

    Each verified bucket is put in suffix order with hash-based run lengths
    (``O(log n)`` window comparisons per pair) and split into groups by
    :func:`_run_groups`, so the work per bucket is ``O(k log k log n)``.
    """
    id_list = ids.tolist()
    if len(id_list) < tile_size:
        return []

    hashes = _PrefixHash(id_list)
    free = _free_runs(id_list)
    index = _RunIndex(id_list, hashes, free)
    buckets = _tile_buckets(hashes, free, tile_size)

    groups: list[CandidateGroup] = []
    verified = 0
    for bucket in buckets.values():
        if len(bucket) < 2:
            continue
        for members in _verified_groups(id_list, bucket, tile_size):
            groups.extend(_run_groups(members, index, tile_size))
            verified += len(members)

    logger.debug(f"hash strategy: {len(buckets)} buckets, {verified} verified positions, {len(groups)} groups")
    return _sorted_groups(groups)


STRATEGIES: dict[str, Callable[[np.ndarray, int], list[CandidateGroup]]] = {
    "suffix": find_candidates_suffix,
    "hash": find_candidates_hash,
}


def get_strategy(name: str) -> Callable[[np.ndarray, int], list[CandidateGroup]]:
    if name not in STRATEGIES:
        raise ValueError(f"Unknown match strategy: {name}. Available: {', '.join(STRATEGIES)}")
    return STRATEGIES[name]
