"""
Hexaminer Analysis Engine
==========================

Runs every registered analyzer over a buffer slice and aggregates their
output.

Analysis Pipeline:
    1. Ask each analyzer, in registration order, whether it applies
       (``can_analyze``).
    2. Invoke ``analyze`` on the applicable ones through a failure boundary
       that turns unexpected exceptions into :class:`AnalyzerFailure` values.
    3. Convert failures into zero-confidence ``"Error"`` results.
    4. Rank results by confidence (stable) or flatten their structures by
       offset (stable).

The engine is synchronous and keeps no per-call state; the analyzer list is
the only thing it owns.
"""

from __future__ import annotations

from typing import Iterable

from hexaminer.analyzers.elf import ELFAnalyzer
from hexaminer.analyzers.pe import PEAnalyzer
from hexaminer.analyzers.signature import SignatureAnalyzer
from hexaminer.core.analyzer import Buffer, DataAnalyzer
from hexaminer.core.cursor import resolve_slice
from hexaminer.core.errors import AnalyzerFailure
from hexaminer.core.models import AnalysisResult, DataStructure
from hexaminer.shared.config import HexaminerConfig
from hexaminer.shared.logger import HexLogger


def default_analyzers() -> list[DataAnalyzer]:
    """The built-in analyzers in their default registration order."""
    return [SignatureAnalyzer(), PEAnalyzer(), ELFAnalyzer()]


class AnalysisEngine:
    """Orchestrates analyzers over a byte buffer.

    Usage::

        engine = AnalysisEngine()
        best = engine.get_best_match(data)
        if best is not None:
            print(best.data_type, best.confidence)

        for structure in engine.extract_structures(data):
            print(f"0x{structure.offset:08x} {structure.name}")
    """

    def __init__(
        self,
        config: HexaminerConfig | None = None,
        logger: HexLogger | None = None,
        analyzers: Iterable[DataAnalyzer] | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Hexaminer configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
            analyzers: Initial analyzer list.  ``None`` registers the
                built-in signature, PE and ELF analyzers.
        """
        self._config: HexaminerConfig = config or HexaminerConfig()
        self._logger: HexLogger = logger or HexLogger(
            "engine",
            log_level=self._config.global_settings.log_level,
            log_file=self._config.global_settings.log_file,
            json_logs=self._config.global_settings.log_json,
        )
        self._analyzers: list[DataAnalyzer] = []

        for analyzer in (default_analyzers() if analyzers is None else analyzers):
            self.register_analyzer(analyzer)

    # ------------------------------------------------------------------ #
    #  Registry
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> HexaminerConfig:
        return self._config

    @property
    def analyzers(self) -> tuple[DataAnalyzer, ...]:
        """Registered analyzers in invocation order."""
        return tuple(self._analyzers)

    def register_analyzer(self, analyzer: DataAnalyzer) -> None:
        """Append *analyzer* to the registry.

        Raises:
            TypeError: If *analyzer* does not provide the analyzer members.
        """
        if not isinstance(analyzer, DataAnalyzer):
            raise TypeError(
                f"{type(analyzer).__name__} does not implement the DataAnalyzer protocol"
            )
        self._analyzers.append(analyzer)
        self._logger.debug("Registered analyzer: %s", analyzer.name)

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def analyze_data(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> list[AnalysisResult]:
        """Run all applicable analyzers and rank their results.

        Returns:
            Results sorted by confidence, highest first.  Analyzers with
            equal confidence keep their registration order.
        """
        results: list[AnalysisResult] = []

        with self._logger.operation("analyze_data"):
            self._logger.debug(
                "Analyzing %d byte(s) at offset %d", len(data), offset,
                analyzers=len(self._analyzers),
            )
            for analyzer in self._analyzers:
                outcome = self._invoke(analyzer, data, offset, length)
                if outcome is None:
                    continue
                if isinstance(outcome, AnalyzerFailure):
                    self._logger.warning(
                        "Analyzer failed: %s", outcome.description,
                        analyzer=outcome.analyzer_name,
                    )
                    outcome = self._failure_result(outcome, len(data), offset, length)
                results.append(outcome)

        results.sort(key=lambda r: r.confidence, reverse=True)
        return results

    def get_best_match(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> AnalysisResult | None:
        """Highest-confidence result, or ``None`` when nothing applied."""
        results = self.analyze_data(data, offset, length)
        return results[0] if results else None

    def extract_structures(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> list[DataStructure]:
        """Every result's structures, flattened and sorted by offset."""
        structures = [
            structure
            for result in self.analyze_data(data, offset, length)
            for structure in result.structures
        ]
        structures.sort(key=lambda s: s.offset)
        return structures

    # ------------------------------------------------------------------ #
    #  Failure boundary
    # ------------------------------------------------------------------ #

    def _invoke(
        self,
        analyzer: DataAnalyzer,
        data: Buffer,
        offset: int,
        length: int | None,
    ) -> AnalysisResult | AnalyzerFailure | None:
        """Run one analyzer; ``None`` means it declined the buffer."""
        try:
            if not analyzer.can_analyze(data, offset):
                self._logger.debug("Skipped analyzer: %s", analyzer.name)
                return None
            with self._logger.timed(analyzer.name):
                result = analyzer.analyze(data, offset, length)
            if not isinstance(result, AnalysisResult):
                raise TypeError(f"analyze() returned {type(result).__name__}, not AnalysisResult")
            return result
        except Exception as exc:
            return AnalyzerFailure.from_exception(
                getattr(analyzer, "name", type(analyzer).__name__), exc
            )

    @staticmethod
    def _failure_result(
        failure: AnalyzerFailure,
        data_length: int,
        offset: int,
        length: int | None,
    ) -> AnalysisResult:
        start, size = resolve_slice(data_length, offset, length)
        return AnalysisResult(
            analyzer_name=failure.analyzer_name,
            data_type="Error",
            offset=start,
            length=size,
            confidence=0.0,
            properties={"error": failure.description},
        )
