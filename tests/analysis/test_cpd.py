"""Tests for corpus assembly and the CPD run facade."""

import pytest

from cpdscan.analysis.corpus_builder import build_corpus, tokenize_units
from cpdscan.analysis.cpd import CPD
from cpdscan.core.config import CPDConfig
from cpdscan.core.sources import SourceUnit
from cpdscan.error.exceptions import LexicalError

SHARED = "total = left + right * scale - offset;"


def units(count):
    return [
        SourceUnit.from_text(f"Unit{k}.java", f"class Unit{k} {{ void m{k}() {{ {SHARED} }} }}")
        for k in range(count)
    ]


class TestTokenizeUnits:
    """Test sequential and parallel tokenization."""

    def test_sequential_order(self):
        """Test that streams follow the input order."""
        config = CPDConfig.create(minimum_tile_size=10)
        streams = tokenize_units(units(3), config)
        assert [s.source_id for s in streams] == ["Unit0.java", "Unit1.java", "Unit2.java"]

    def test_parallel_matches_sequential(self):
        """Test that worker processes give the same corpus in the same order."""
        sequential = tokenize_units(units(6), CPDConfig.create(minimum_tile_size=10))
        parallel = tokenize_units(units(6), CPDConfig.create(minimum_tile_size=10, jobs=2))
        assert parallel == sequential

    def test_parallel_error_propagates(self):
        """Test that a lexical error in a worker reaches the caller."""
        broken = units(2) + [SourceUnit.from_text("Broken.java", 'String s = "open;')]
        config = CPDConfig.create(minimum_tile_size=10, jobs=2)

        with pytest.raises(LexicalError) as exc_info:
            tokenize_units(broken, config)
        assert exc_info.value.source_id == "Broken.java"


class TestBuildCorpus:
    """Test corpus assembly."""

    def test_corpus(self):
        """Test that the corpus holds one stream per unit."""
        corpus = build_corpus(units(2), CPDConfig.create(minimum_tile_size=10))
        assert len(corpus.streams) == 2
        assert corpus.token_count == sum(len(s) for s in corpus.streams)


class TestCPD:
    """Test the run facade."""

    def test_run_on_units(self):
        """Test a run over in-memory units."""
        cpd = CPD(CPDConfig.create(minimum_tile_size=10))
        cpd.add_units(units(3))

        result = cpd.run()

        assert result.has_duplications
        assert result.sources == ["Unit0.java", "Unit1.java", "Unit2.java"]
        assert len(result.matches) == 1
        assert result.matches[0].occurrence_count == 3
        assert result.partial_sources == []

    def test_duplicate_unit_ignored(self):
        """Test that a source id is added only once."""
        cpd = CPD(CPDConfig.create(minimum_tile_size=10))
        cpd.add_units(units(1) + units(1))
        assert len(cpd.units) == 1

    def test_add_paths(self, tmp_path):
        """Test discovering files of the configured language."""
        (tmp_path / "src").mkdir()
        for unit in units(2):
            (tmp_path / "src" / unit.source_id).write_text(unit.text)
        (tmp_path / "src" / "notes.md").write_text(SHARED)

        cpd = CPD(CPDConfig.create(minimum_tile_size=10))
        cpd.add_paths([tmp_path / "src"])
        result = cpd.run()

        assert [u.name for u in cpd.units] == ["Unit0.java", "Unit1.java"]
        assert len(result.matches) == 1

    def test_partial_and_excluded_sources(self, tmp_path):
        """Test bookkeeping of partial and duplicate files."""
        config = CPDConfig.create(minimum_tile_size=10, skip_lexical_errors=True, skip_duplicate_files=True)
        cpd = CPD(config)
        cpd.add_units(units(2))
        cpd.add_unit(SourceUnit.from_text("copy/Unit0.java", units(1)[0].text))
        cpd.add_unit(SourceUnit.from_text("Broken.java", 'String s = "open;'))

        result = cpd.run()

        assert result.partial_sources == ["Broken.java"]
        assert result.excluded_sources == ["copy/Unit0.java"]
        assert result.matches[0].source_ids() == ["Unit0.java", "Unit1.java"]

    def test_no_duplications(self):
        """Test a run without matches."""
        cpd = CPD(CPDConfig.create(minimum_tile_size=10))
        cpd.add_units(units(1))

        result = cpd.run()

        assert not result.has_duplications
        assert result.token_count > 0
