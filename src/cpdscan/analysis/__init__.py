"""Analysis modules for duplicate code detection.

This package provides the match engine and its building blocks:
- Suffix array / LCP and rolling-hash candidate discovery
- Union-Find data structure for grouping equal runs
- Maximality, overlap and subsumption filters
- Corpus assembly and the CPD run facade
"""

from cpdscan.analysis.corpus_builder import build_corpus, tokenize_units
from cpdscan.analysis.cpd import CPD, CPDResult
from cpdscan.analysis.match_engine import MatchEngine, encode_corpus, find_matches
from cpdscan.analysis.match_strategies import CandidateGroup, find_candidates_hash, find_candidates_suffix
from cpdscan.analysis.union_find import UnionFind

__all__ = [
    "CPD",
    "CPDResult",
    "CandidateGroup",
    "MatchEngine",
    "UnionFind",
    "build_corpus",
    "encode_corpus",
    "find_candidates_hash",
    "find_candidates_suffix",
    "find_matches",
    "tokenize_units",
]
