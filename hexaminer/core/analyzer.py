"""
Analyzer Contract
==================

Every format analyzer, built-in or supplied by a host application,
satisfies :class:`DataAnalyzer`.  The protocol is structural: an object
only needs the four members below to be accepted by
:meth:`hexaminer.core.engine.AnalysisEngine.register_analyzer`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hexaminer.core.models import AnalysisResult


Buffer = bytes | bytearray | memoryview


@runtime_checkable
class DataAnalyzer(Protocol):
    """Uniform capability set shared by all format analyzers.

    Attributes:
        name: Analyzer identity, copied into every result it produces.
        description: One-line summary of what the analyzer recognises.
    """

    name: str
    description: str

    def can_analyze(self, data: Buffer, offset: int = 0) -> bool:
        """Cheap applicability test.

        Must not raise and must not mutate state.  Returns ``False`` when
        the buffer is too short for even a magic check.
        """
        ...

    def analyze(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> AnalysisResult:
        """Decode the slice ``data[offset:offset + length]``.

        Always returns a result; decode failures lower the confidence and
        add an ``error`` property instead of propagating.
        """
        ...
