"""
Hexaminer Error Taxonomy
=========================

``EndOfData`` and ``MalformedHeader`` are raised while decoding and are
caught by the structural analyzers themselves.  ``AnalyzerFailure`` is not
an exception: it is the value the engine's failure boundary produces when
an analyzer raises anything unexpected.
"""

from __future__ import annotations

from dataclasses import dataclass


class HexaminerError(Exception):
    """Base class for all errors raised by the analysis core."""


class EndOfData(HexaminerError, EOFError):
    """A cursor read ran past the end of its buffer slice.

    Attributes:
        position: Slice-relative position of the failed read.
        requested: Number of bytes requested.
        available: Number of bytes actually remaining at *position*.
    """

    def __init__(self, position: int, requested: int, available: int) -> None:
        self.position = position
        self.requested = requested
        self.available = max(0, available)
        super().__init__(
            f"Unexpected end of data at position {position}: "
            f"requested {requested} byte(s), {self.available} available"
        )


class MalformedHeader(HexaminerError, ValueError):
    """A structural magic/signature check failed after ``can_analyze`` passed."""


@dataclass(frozen=True, slots=True)
class AnalyzerFailure:
    """Outcome of an analyzer invocation that raised an unexpected error.

    Attributes:
        analyzer_name: Name of the failing analyzer.
        description: ``"<ExceptionType>: <message>"`` of the failure.
    """
    analyzer_name: str
    description: str

    @classmethod
    def from_exception(cls, analyzer_name: str, exc: BaseException) -> AnalyzerFailure:
        message = str(exc) or "no details"
        return cls(analyzer_name, f"{type(exc).__name__}: {message}")
