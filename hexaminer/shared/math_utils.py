"""
Hexaminer Mathematical Utilities
=================================

Byte-frequency histograms and Shannon entropy estimators used by the
entropy anomaly scanner and the CLI summaries.

References:
    [1] Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    [2] Lyda, R., & Hamrock, J. (2007). Using Entropy Analysis to Find
        Encrypted and Packed Malware. IEEE Security & Privacy, 5(2), 40-45.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


FloatArray = NDArray[np.floating]


def frequency_distribution(data: bytes | memoryview) -> FloatArray:
    """Compute a 256-bin byte-value frequency histogram.

    Returns the raw count of each byte value (0-255) as a NumPy array.

    Args:
        data: Raw byte sequence.

    Returns:
        1-D float64 array of length 256 containing occurrence counts.
    """
    hist = np.zeros(256, dtype=np.float64)
    if len(data) == 0:
        return hist

    byte_arr = np.frombuffer(data, dtype=np.uint8)
    hist[:] = np.bincount(byte_arr, minlength=256).astype(np.float64)
    return hist


def entropy_from_histogram(hist: FloatArray) -> float:
    """Shannon entropy (bits per symbol) of a count histogram.

    .. math::

        H = -\\sum_{i} p_i \\, \\log_2(p_i)

    Empty bins contribute nothing.  A histogram with a single populated bin
    yields exactly ``0.0``; 256 equally populated bins yield exactly ``8.0``.

    Args:
        hist: Occurrence counts, e.g. from :func:`frequency_distribution`.

    Returns:
        Entropy in bits; ``0.0`` for an empty histogram.
    """
    total = float(hist.sum())
    if total <= 0.0:
        return 0.0

    probs = hist[hist > 0] / total
    # max() folds the -0.0 of a single-symbol stream back to 0.0
    return max(0.0, float(-np.sum(probs * np.log2(probs))))


def shannon_entropy(data: bytes | memoryview) -> float:
    """Compute the Shannon entropy of a byte sequence.

    The result is in **bits per byte** and ranges from 0.0 (constant
    stream) to 8.0 (perfectly uniform distribution over 256 symbols).

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.

    Args:
        data: Raw byte sequence to analyse.

    Returns:
        Shannon entropy in bits per byte. Returns 0.0 for empty input.
    """
    return entropy_from_histogram(frequency_distribution(data))
