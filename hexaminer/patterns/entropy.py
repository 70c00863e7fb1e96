"""
Sliding-Window Entropy Scanner
===============================

Flags windows whose Shannon entropy is unusually high (encrypted or
compressed content) or unusually low (padding, repeated fill bytes).

Windows advance by half a window, so consecutive windows overlap by 50%.
A trailing partial window is never scanned.

References:
    - Lyda, R., & Hamrock, J. (2007). Using Entropy Analysis to Find
      Encrypted and Packed Malware. IEEE Security & Privacy, 5(2), 40-45.
"""

from __future__ import annotations

from hexaminer.core.analyzer import Buffer
from hexaminer.core.models import PatternCategory, PatternMatch
from hexaminer.shared.math_utils import shannon_entropy


DEFAULT_WINDOW_SIZE: int = 256
HIGH_ENTROPY_THRESHOLD: float = 7.5
LOW_ENTROPY_THRESHOLD: float = 1.0


def window_entropy(window: Buffer) -> float:
    """Shannon entropy of one window, in bits per byte (0.0 to 8.0)."""
    return shannon_entropy(memoryview(window).cast("B"))


def find_entropy_anomalies(
    data: Buffer,
    window_size: int = DEFAULT_WINDOW_SIZE,
    high_threshold: float = HIGH_ENTROPY_THRESHOLD,
    low_threshold: float = LOW_ENTROPY_THRESHOLD,
) -> list[PatternMatch]:
    """Scan overlapping windows and report those outside the thresholds.

    Args:
        data: Buffer to scan.
        window_size: Window length in bytes; the stride is half of it.
        high_threshold: Entropy strictly above this is reported as high.
        low_threshold: Entropy strictly below this is reported as low.

    Returns:
        Matches in ascending offset order, each spanning one full window.
    """
    if window_size <= 0:
        raise ValueError(f"window_size must be positive, got {window_size}")

    view = memoryview(data).cast("B")
    stride = max(1, window_size // 2)
    matches: list[PatternMatch] = []

    for start in range(0, len(view) - window_size + 1, stride):
        entropy = window_entropy(view[start : start + window_size])

        if entropy > high_threshold:
            category = PatternCategory.HIGH_ENTROPY
        elif entropy < low_threshold:
            category = PatternCategory.LOW_ENTROPY
        else:
            continue

        matches.append(PatternMatch(
            category=category,
            offset=start,
            length=window_size,
            value=f"Entropy: {entropy:.2f}",
        ))

    return matches
