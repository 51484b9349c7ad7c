"""Suffix array, LCP array and LCP-interval enumeration over token ids.

The suffix array is built by prefix doubling with NumPy sorts
(O(n log n) sort passes, each vectorized). The LCP array uses Kasai's
linear algorithm. Every LCP interval of value ``l`` is a set of corpus
positions that share exactly ``l`` leading tokens and diverge after that,
i.e. a right-maximal repeat.
"""

from typing import Iterator, NamedTuple, Sequence

import numpy as np


class LcpInterval(NamedTuple):
    """Suffix array range ``[lb, rb]`` whose suffixes share ``lcp`` tokens."""

    lcp: int
    lb: int
    rb: int


def build_suffix_array(ids: np.ndarray) -> np.ndarray:
    """Sort all suffixes of ``ids``.

    Args:
        ids: 1-D integer array of token ids

    Returns:
        Array ``sa`` where ``sa[k]`` is the start of the k-th smallest suffix
    """
    n = len(ids)
    if n == 0:
        return np.zeros(0, dtype=np.int64)

    _, rank = np.unique(ids, return_inverse=True)
    rank = rank.astype(np.int64).reshape(-1)
    sa = np.argsort(rank, kind="stable")

    k = 1
    while k < n:
        # Suffixes shorter than k sort before any longer suffix with the same prefix
        second = np.full(n, -1, dtype=np.int64)
        second[: n - k] = rank[k:]
        sa = np.lexsort((second, rank))

        sorted_rank = rank[sa]
        sorted_second = second[sa]
        changed = (sorted_rank[1:] != sorted_rank[:-1]) | (sorted_second[1:] != sorted_second[:-1])
        new_rank = np.empty(n, dtype=np.int64)
        new_rank[sa] = np.concatenate(([0], np.cumsum(changed)))
        rank = new_rank

        if rank[sa[-1]] == n - 1:
            break
        k *= 2

    return sa.astype(np.int64)


def build_lcp_array(ids: Sequence[int], sa: Sequence[int]) -> list[int]:
    """Kasai's algorithm.

    Returns:
        ``lcp`` where ``lcp[k]`` is the common prefix length of suffixes
        ``sa[k - 1]`` and ``sa[k]``; ``lcp[0]`` is 0
    """
    n = len(sa)
    rank = [0] * n
    for index, position in enumerate(sa):
        rank[position] = index

    lcp = [0] * n
    h = 0
    for position in range(n):
        r = rank[position]
        if r == 0:
            h = 0
            continue
        previous = sa[r - 1]
        while position + h < n and previous + h < n and ids[position + h] == ids[previous + h]:
            h += 1
        lcp[r] = h
        if h > 0:
            h -= 1
    return lcp


def iter_lcp_intervals(lcp: Sequence[int], min_lcp: int = 1) -> Iterator[LcpInterval]:
    """Enumerate LCP intervals with ``lcp >= min_lcp`` bottom-up.

    Nested intervals are reported before the interval enclosing them.
    """
    n = len(lcp)
    stack: list[tuple[int, int]] = [(0, 0)]
    for i in range(1, n + 1):
        current = lcp[i] if i < n else 0
        lb = i - 1
        while current < stack[-1][0]:
            top_lcp, top_lb = stack.pop()
            if top_lcp >= min_lcp:
                yield LcpInterval(top_lcp, top_lb, i - 1)
            lb = top_lb
        if current > stack[-1][0]:
            stack.append((current, lb))
