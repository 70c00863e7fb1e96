"""
Hexaminer -- Binary Data Analysis Engine
=========================================

Hexaminer inspects a byte buffer and reports what it is and how it is laid
out.

Capabilities:
    - Magic-signature file type identification
    - PE (DOS + COFF file header) and ELF header decoding
    - Confidence-ranked aggregation across pluggable analyzers
    - Printable string, e-mail, URL and card-number scanning
    - Sliding-window Shannon entropy anomaly detection
    - Colourised hex dumps

References:
    - Microsoft. (2024). PE Format.
    - TIS Committee. (1995). ELF Specification.
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
"""

__version__ = "1.0.0"
__all__ = [
    "AnalysisEngine",
    "AnalysisResult",
    "DataStructure",
    "PatternMatch",
]

from hexaminer.core import AnalysisEngine, AnalysisResult, DataStructure, PatternMatch
