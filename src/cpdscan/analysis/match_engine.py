"""Duplicate detection over a token corpus."""

import logging

import numpy as np

from cpdscan.analysis.match_filters import (
    eliminate_subsumed,
    filter_duplicate_files,
    is_left_maximal,
    prune_overlaps,
)
from cpdscan.analysis.match_strategies import CandidateGroup, get_strategy
from cpdscan.core.config import CPDConfig
from cpdscan.core.results import Match, Occurrence
from cpdscan.core.tokens import TokenCorpus, TokenStream

logger = logging.getLogger(__name__)


def encode_corpus(corpus: TokenCorpus) -> np.ndarray:
    """Intern token images to integer ids.

    Images get ids ``0, 1, ...`` in order of first appearance; the k-th
    sentinel gets ``-(k + 1)`` so no run can ever extend across one.
    """
    interned: dict[str, int] = {}
    ids = np.empty(len(corpus), dtype=np.int64)
    sentinels = 0
    for position, token in enumerate(corpus):
        if token.is_eof:
            sentinels += 1
            ids[position] = -sentinels
        else:
            ids[position] = interned.setdefault(token.image, len(interned))
    return ids


class MatchEngine:
    """Finds all maximal duplicated token runs in a corpus.

    Attributes:
        config: Validated configuration
        excluded_sources: Sources left out by duplicate-file filtering in the last run
    """

    def __init__(self, config: CPDConfig) -> None:
        self.config = config
        self.excluded_sources: list[str] = []

    def find_matches(self, corpus: TokenCorpus) -> list[Match]:
        """Run candidate discovery, grouping and filtering.

        Args:
            corpus: Token corpus in a deterministic order

        Returns:
            Matches ordered by descending token length, then first occurrence
        """
        streams = list(corpus.streams)
        self.excluded_sources = []
        if self.config.skip_duplicate_files:
            streams, excluded = filter_duplicate_files(streams)
            self.excluded_sources = [stream.source_id for stream in excluded]
            corpus = TokenCorpus.from_streams(streams)

        tile_size = self.config.minimum_tile_size
        if corpus.token_count < tile_size:
            logger.info(f"Corpus of {corpus.token_count} tokens is below the tile size {tile_size}")
            return []

        ids = encode_corpus(corpus)
        strategy = get_strategy(self.config.match_strategy)
        candidates = strategy(ids, tile_size)

        id_list = ids.tolist()
        stream_starts = {corpus.offset_of(k) for k in range(len(corpus.streams))}
        matches = []
        for group in candidates:
            if not is_left_maximal(group, id_list, stream_starts):
                continue
            match = self._build_match(corpus, group)
            if match is not None:
                matches.append(match)

        matches = eliminate_subsumed(matches)
        matches.sort(key=lambda m: m.sort_key)

        logger.info(
            f"{len(matches)} duplications from {len(candidates)} candidate groups "
            f"over {corpus.token_count} tokens in {len(corpus.streams)} sources"
        )
        return matches

    def _build_match(self, corpus: TokenCorpus, group: CandidateGroup) -> Match | None:
        occurrences = []
        first_stream: TokenStream | None = None
        first_local = 0
        for position in group.positions:
            stream_index, local = corpus.locate(position)
            stream = corpus.streams[stream_index]
            tokens = stream.tokens
            occurrences.append(
                Occurrence(
                    source_id=stream.source_id,
                    start_index=local,
                    token_length=group.length,
                    start_line=tokens[local].line,
                    end_line=tokens[local + group.length - 1].line,
                )
            )
            if first_stream is None:
                first_stream, first_local = stream, local

        occurrences = prune_overlaps(occurrences)
        if len(occurrences) < 2:
            return None

        images = tuple(
            token.image for token in first_stream.tokens[first_local : first_local + group.length]
        )
        return Match(token_length=group.length, occurrences=occurrences, images=images)


def find_matches(corpus: TokenCorpus, config: CPDConfig) -> list[Match]:
    """Find all maximal duplications in ``corpus``."""
    return MatchEngine(config).find_matches(corpus)
