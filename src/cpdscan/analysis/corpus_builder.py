"""Tokenize source units, in parallel when asked, and assemble the corpus."""

from concurrent.futures import ProcessPoolExecutor
import logging
from typing import Sequence

from tqdm import tqdm

from cpdscan.core.config import CPDConfig
from cpdscan.core.sources import SourceUnit
from cpdscan.core.tokens import TokenCorpus, TokenStream
from cpdscan.tokenizer.pipeline import tokenize

logger = logging.getLogger(__name__)


def _tokenize_unit(args: tuple[SourceUnit, CPDConfig]) -> TokenStream:
    """Worker entry point; module level so it can be pickled."""
    unit, config = args
    return tokenize(unit, config)


def tokenize_units(
    units: Sequence[SourceUnit], config: CPDConfig, show_progress: bool = False
) -> list[TokenStream]:
    """Tokenize every unit; the result keeps the order of ``units``.

    Raises:
        LexicalError: From the first failing unit when lexical errors are not skipped
    """
    work = [(unit, config) for unit in units]
    if config.jobs > 1 and len(units) > 1:
        with ProcessPoolExecutor(max_workers=config.jobs) as executor:
            results = executor.map(_tokenize_unit, work, chunksize=max(1, len(work) // (config.jobs * 4)))
            return list(tqdm(results, total=len(work), desc="Tokenizing", disable=not show_progress))

    return [
        _tokenize_unit(item)
        for item in tqdm(work, desc="Tokenizing", disable=not show_progress)
    ]


def build_corpus(
    units: Sequence[SourceUnit], config: CPDConfig, show_progress: bool = False
) -> TokenCorpus:
    """Tokenize all units and concatenate their streams in input order.

    This is the join point of a run: matching starts only after every unit
    has been tokenized or recorded as partial.
    """
    streams = tokenize_units(units, config, show_progress=show_progress)
    partial = [stream.source_id for stream in streams if stream.partial]
    if partial:
        logger.warning(f"{len(partial)} source(s) only partially tokenized: {', '.join(partial)}")
    corpus = TokenCorpus.from_streams(streams)
    logger.info(f"Added {len(streams)} sources with {corpus.token_count} tokens")
    return corpus
