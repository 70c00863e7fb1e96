"""
Pytest tests for the analysis engine: registration, ranking, structure
flattening and failure isolation.
"""

from __future__ import annotations

import pytest

from hexaminer.analyzers.elf import ELFAnalyzer
from hexaminer.analyzers.pe import PEAnalyzer
from hexaminer.analyzers.signature import SignatureAnalyzer
from hexaminer.core.engine import AnalysisEngine
from hexaminer.core.models import AnalysisResult


class ExplodingAnalyzer:
    name = "Exploding Analyzer"
    description = "Raises from analyze"

    def can_analyze(self, data, offset=0):
        return True

    def analyze(self, data, offset=0, length=None):
        raise RuntimeError("boom")


class BrokenGateAnalyzer(ExplodingAnalyzer):
    name = "Broken Gate Analyzer"

    def can_analyze(self, data, offset=0):
        raise KeyError("gate")


class FixedAnalyzer:
    description = "Returns a fixed confidence"

    def __init__(self, name: str, confidence: float) -> None:
        self.name = name
        self._confidence = confidence

    def can_analyze(self, data, offset=0):
        return True

    def analyze(self, data, offset=0, length=None):
        return AnalysisResult(
            analyzer_name=self.name,
            data_type="Fixed",
            confidence=self._confidence,
        )


class CountingPEAnalyzer(PEAnalyzer):
    def __init__(self) -> None:
        self.calls = 0

    def analyze(self, data, offset=0, length=None):
        self.calls += 1
        return super().analyze(data, offset, length)


def test_default_registration_order(engine):
    assert [type(a) for a in engine.analyzers] == [SignatureAnalyzer, PEAnalyzer, ELFAnalyzer]
    assert isinstance(engine.analyzers, tuple)


def test_register_rejects_non_analyzers(engine):
    with pytest.raises(TypeError):
        engine.register_analyzer(object())


def test_register_appends(engine):
    extra = FixedAnalyzer("Extra", 0.5)
    engine.register_analyzer(extra)
    assert engine.analyzers[-1] is extra


def test_results_ranked_by_confidence(engine, pe_data):
    results = engine.analyze_data(pe_data)
    assert [r.analyzer_name for r in results] == [
        "PE (Portable Executable) Analyzer",
        "File Signature Analyzer",
    ]
    confidences = [r.confidence for r in results]
    assert confidences == sorted(confidences, reverse=True)


def test_ranking_is_stable_for_ties(quiet_logger):
    engine = AnalysisEngine(
        logger=quiet_logger,
        analyzers=[FixedAnalyzer("a", 0.5), FixedAnalyzer("b", 0.7), FixedAnalyzer("c", 0.5)],
    )
    assert [r.analyzer_name for r in engine.analyze_data(b"data")] == ["b", "a", "c"]


def test_best_match(engine, elf64_data):
    best = engine.get_best_match(elf64_data)
    assert best is not None
    assert best.data_type == "ELF File"


def test_best_match_none_when_nothing_applies(quiet_logger):
    engine = AnalysisEngine(logger=quiet_logger, analyzers=[PEAnalyzer()])
    assert engine.get_best_match(b"not an executable") is None


def test_short_mz_buffer_never_reaches_pe_analyze(quiet_logger):
    counting = CountingPEAnalyzer()
    engine = AnalysisEngine(logger=quiet_logger, analyzers=[SignatureAnalyzer(), counting])

    results = engine.analyze_data(b"MZ" + bytes(20))
    assert counting.calls == 0
    assert [r.analyzer_name for r in results] == ["File Signature Analyzer"]


def test_structures_sorted_by_offset_regardless_of_order(quiet_logger, pe_data):
    for analyzers in ([PEAnalyzer(), SignatureAnalyzer()], [SignatureAnalyzer(), PEAnalyzer()]):
        engine = AnalysisEngine(logger=quiet_logger, analyzers=analyzers)
        offsets = [s.offset for s in engine.extract_structures(pe_data)]
        assert offsets == sorted(offsets)
        assert offsets[-1] == 0x80


def test_failing_analyzer_is_isolated(quiet_logger, png_data):
    engine = AnalysisEngine(
        logger=quiet_logger,
        analyzers=[ExplodingAnalyzer(), SignatureAnalyzer()],
    )
    results = engine.analyze_data(png_data)

    assert len(results) == 2
    assert results[0].analyzer_name == "File Signature Analyzer"
    failed = results[-1]
    assert failed.analyzer_name == "Exploding Analyzer"
    assert failed.data_type == "Error"
    assert failed.confidence == 0.0
    assert failed.error == "RuntimeError: boom"
    assert failed.length == len(png_data)


def test_failing_can_analyze_is_isolated(quiet_logger):
    engine = AnalysisEngine(logger=quiet_logger, analyzers=[BrokenGateAnalyzer()])
    [result] = engine.analyze_data(b"abc")
    assert result.data_type == "Error"
    assert result.error.startswith("KeyError")


def test_offset_and_length_are_forwarded(engine, png_data):
    data = bytes(8) + png_data
    best = engine.get_best_match(data, offset=8, length=len(png_data))
    assert best.properties["primary_format"] == "PNG"
    assert (best.offset, best.length) == (8, len(png_data))


def test_non_result_return_is_a_failure(quiet_logger):
    class SloppyAnalyzer(ExplodingAnalyzer):
        name = "Sloppy Analyzer"

        def analyze(self, data, offset=0, length=None):
            return {"data_type": "dict"}

    engine = AnalysisEngine(logger=quiet_logger, analyzers=[SloppyAnalyzer()])
    [result] = engine.analyze_data(b"abc")
    assert result.error == "TypeError: analyze() returned dict, not AnalysisResult"
