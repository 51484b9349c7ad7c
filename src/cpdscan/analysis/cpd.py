"""One analysis run: load sources, tokenize, match."""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable

from cpdscan.analysis.corpus_builder import build_corpus
from cpdscan.analysis.match_engine import MatchEngine
from cpdscan.core.config import CPDConfig
from cpdscan.core.results import Match
from cpdscan.core.sources import SourceUnit, discover_sources, load_source
from cpdscan.core.tokens import TokenCorpus
from cpdscan.tokenizer.registry import get_lexer

logger = logging.getLogger(__name__)


@dataclass
class CPDResult:
    """Outcome of one run.

    Attributes:
        matches: Ordered duplications
        sources: Source ids in corpus order
        partial_sources: Sources cut short by a skipped lexical error
        excluded_sources: Sources skipped as duplicate files
        token_count: Tokens in the corpus, sentinels excluded
    """

    matches: list[Match]
    sources: list[str] = field(default_factory=list)
    partial_sources: list[str] = field(default_factory=list)
    excluded_sources: list[str] = field(default_factory=list)
    token_count: int = 0

    @property
    def has_duplications(self) -> bool:
        return bool(self.matches)


class CPD:
    """Copy-paste detector for one configuration.

    Example:
        >>> cpd = CPD(CPDConfig.create(minimum_tile_size=50))
        >>> cpd.add_paths([Path("src")])
        >>> result = cpd.run()
    """

    def __init__(self, config: CPDConfig) -> None:
        self.config = config
        self._units: dict[str, SourceUnit] = {}

    @property
    def units(self) -> list[SourceUnit]:
        return list(self._units.values())

    def add_unit(self, unit: SourceUnit) -> None:
        if unit.source_id in self._units:
            logger.debug(f"Ignoring {unit.source_id}: already added")
            return
        self._units[unit.source_id] = unit

    def add_units(self, units: Iterable[SourceUnit]) -> None:
        for unit in units:
            self.add_unit(unit)

    def add_paths(
        self,
        paths: Iterable[Path],
        excludes: Iterable[Path] | None = None,
        recursive: bool = True,
    ) -> None:
        """Discover and load files of the configured language.

        Raises:
            FileNotFoundError: If a path does not exist
            SourceLoadError: If a file cannot be read or decoded
        """
        extensions = get_lexer(self.config.language).extensions
        for path in discover_sources(paths, extensions=extensions, excludes=excludes, recursive=recursive):
            self.add_unit(load_source(path, self.config.encoding))

    def build_corpus(self, show_progress: bool = False) -> TokenCorpus:
        return build_corpus(self.units, self.config, show_progress=show_progress)

    def run(self, show_progress: bool = False) -> CPDResult:
        corpus = self.build_corpus(show_progress=show_progress)
        engine = MatchEngine(self.config)
        matches = engine.find_matches(corpus)
        return CPDResult(
            matches=matches,
            sources=[stream.source_id for stream in corpus.streams],
            partial_sources=[stream.source_id for stream in corpus.streams if stream.partial],
            excluded_sources=list(engine.excluded_sources),
            token_count=corpus.token_count,
        )
