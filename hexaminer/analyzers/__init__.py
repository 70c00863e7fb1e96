"""
Hexaminer Format Analyzers
===========================

Built-in implementations of :class:`~hexaminer.core.analyzer.DataAnalyzer`.
"""

from hexaminer.analyzers.elf import ELFAnalyzer
from hexaminer.analyzers.pe import PEAnalyzer
from hexaminer.analyzers.signature import SIGNATURES, Signature, SignatureAnalyzer

__all__ = [
    "ELFAnalyzer",
    "PEAnalyzer",
    "SIGNATURES",
    "Signature",
    "SignatureAnalyzer",
]
