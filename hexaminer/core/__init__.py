"""
Hexaminer Core
===============

Byte cursor, analyzer contract, result models, error taxonomy and the
analysis engine.
"""

from hexaminer.core.analyzer import Buffer, DataAnalyzer
from hexaminer.core.cursor import ByteCursor, Endian
from hexaminer.core.errors import (
    AnalyzerFailure,
    EndOfData,
    HexaminerError,
    MalformedHeader,
)
from hexaminer.core.models import (
    AnalysisResult,
    DataStructure,
    PatternCategory,
    PatternMatch,
    PropertyValue,
)
from hexaminer.core.engine import AnalysisEngine

__all__ = [
    "AnalysisEngine",
    "AnalysisResult",
    "AnalyzerFailure",
    "Buffer",
    "ByteCursor",
    "DataAnalyzer",
    "DataStructure",
    "EndOfData",
    "Endian",
    "HexaminerError",
    "MalformedHeader",
    "PatternCategory",
    "PatternMatch",
    "PropertyValue",
]
