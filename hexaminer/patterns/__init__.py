"""
Hexaminer Pattern Scanner
==========================

Stateless scanners that run over a raw buffer independently of the
analysis engine.  Every match offset is an absolute byte offset.
"""

from __future__ import annotations

from hexaminer.core.analyzer import Buffer
from hexaminer.core.models import PatternCategory, PatternMatch
from hexaminer.patterns.entropy import find_entropy_anomalies, window_entropy
from hexaminer.patterns.strings import (
    find_credit_card_patterns,
    find_email_patterns,
    find_string_patterns,
    find_url_patterns,
    is_luhn_valid,
)
from hexaminer.shared.config import PatternConfig


def scan_all(
    data: Buffer,
    config: PatternConfig | None = None,
) -> dict[str, list[PatternMatch]]:
    """Run every scanner and group the matches by scanner.

    Keys, in order: ``strings``, ``emails``, ``urls``, ``cards``, ``entropy``.
    """
    cfg = config or PatternConfig()
    return {
        "strings": find_string_patterns(data, cfg.min_string_length),
        "emails": find_email_patterns(data),
        "urls": find_url_patterns(data),
        "cards": find_credit_card_patterns(data),
        "entropy": find_entropy_anomalies(
            data,
            window_size=cfg.entropy_window_size,
            high_threshold=cfg.high_entropy_threshold,
            low_threshold=cfg.low_entropy_threshold,
        ),
    }


__all__ = [
    "PatternCategory",
    "PatternMatch",
    "find_credit_card_patterns",
    "find_email_patterns",
    "find_entropy_anomalies",
    "find_string_patterns",
    "find_url_patterns",
    "is_luhn_valid",
    "scan_all",
    "window_entropy",
]
