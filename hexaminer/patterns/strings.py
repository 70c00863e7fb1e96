"""
Text Pattern Scanner
=====================

Heuristic scanners that locate human-meaningful text inside binary data:

- printable ASCII runs (the classic ``strings(1)`` algorithm),
- e-mail addresses,
- ``http://`` / ``https://`` URLs,
- payment-card numbers, filtered by the Luhn checksum.

The regex scanners decode the buffer as ASCII with one character per byte
(bytes >= 0x80 become U+FFFD), so a match's string index is also its
absolute byte offset.

References:
    - Strings(1) Unix utility algorithm.
    - ISO/IEC 7812-1:2017. Identification cards -- Numbering system.
    - Luhn, H. P. (1960). Computer for Verifying Numbers. US Patent 2,950,048.
"""

from __future__ import annotations

import re

from hexaminer.core.analyzer import Buffer
from hexaminer.core.models import PatternCategory, PatternMatch


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_EMAIL_PATTERN = re.compile(
    r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b",
    re.ASCII,
)

# Stops at whitespace, quoting/bracket characters and anything non-ASCII
_URL_PATTERN = re.compile(
    r"https?://[^\s<>\"{}|\\^`\[\]\x00-\x1f\x7f-\U0010ffff]+",
    re.ASCII,
)

# Common card groupings with one separator style per number: 4-4-4-4 with an
# optional 3-digit tail, 4-6-5, or an ungrouped run of 13-19 digits
_CARD_PATTERN = re.compile(
    r"\b(?:"
    r"\d{4}(?P<sep>[ \-]?)\d{4}(?P=sep)\d{4}(?P=sep)\d{4}(?P<tail>(?P=sep)\d{3})?"
    r"|\d{4}(?P<amex_sep>[ \-]?)\d{6}(?P=amex_sep)\d{5}"
    r"|\d{13,19}"
    r")\b",
    re.ASCII,
)

_PRINTABLE_MIN: int = 0x20
_PRINTABLE_MAX: int = 0x7E


def _as_text(data: Buffer) -> str:
    return bytes(data).decode("ascii", errors="replace")


# ---------------------------------------------------------------------------
# Printable runs
# ---------------------------------------------------------------------------

def find_string_patterns(data: Buffer, min_length: int = 4) -> list[PatternMatch]:
    """Extract runs of printable ASCII (0x20-0x7E) of at least *min_length*.

    A run still open at the end of the buffer is reported like any other.
    """
    matches: list[PatternMatch] = []
    raw = bytes(data)
    start = -1

    for idx, byte in enumerate(raw):
        if _PRINTABLE_MIN <= byte <= _PRINTABLE_MAX:
            if start < 0:
                start = idx
            continue
        if start >= 0 and idx - start >= min_length:
            matches.append(_string_match(raw, start, idx))
        start = -1

    if start >= 0 and len(raw) - start >= min_length:
        matches.append(_string_match(raw, start, len(raw)))

    return matches


def _string_match(raw: bytes, start: int, end: int) -> PatternMatch:
    return PatternMatch(
        category=PatternCategory.ASCII_STRING,
        offset=start,
        length=end - start,
        value=raw[start:end].decode("ascii"),
    )


# ---------------------------------------------------------------------------
# Regex scanners
# ---------------------------------------------------------------------------

def _regex_matches(
    pattern: re.Pattern[str],
    category: PatternCategory,
    data: Buffer,
) -> list[PatternMatch]:
    return [
        PatternMatch(
            category=category,
            offset=m.start(),
            length=m.end() - m.start(),
            value=m.group(0),
        )
        for m in pattern.finditer(_as_text(data))
    ]


def find_email_patterns(data: Buffer) -> list[PatternMatch]:
    """Locate e-mail addresses."""
    return _regex_matches(_EMAIL_PATTERN, PatternCategory.EMAIL, data)


def find_url_patterns(data: Buffer) -> list[PatternMatch]:
    """Locate ``http://`` and ``https://`` URLs."""
    return _regex_matches(_URL_PATTERN, PatternCategory.URL, data)


def find_credit_card_patterns(data: Buffer) -> list[PatternMatch]:
    """Locate card-number-shaped digit runs that pass the Luhn check.

    The reported value keeps the original separators.  A grouped 19-digit
    candidate that fails the check falls back to its leading 16 digits.
    """
    text = _as_text(data)
    matches: list[PatternMatch] = []

    for m in _CARD_PATTERN.finditer(text):
        end = m.end()
        if not _passes_luhn(m.group(0)) and m.group("sep") and m.group("tail"):
            end = m.start("tail")
        value = text[m.start():end]
        if _passes_luhn(value):
            matches.append(
                PatternMatch(
                    category=PatternCategory.CREDIT_CARD,
                    offset=m.start(),
                    length=end - m.start(),
                    value=value,
                )
            )

    return matches


def _passes_luhn(candidate: str) -> bool:
    return is_luhn_valid(candidate.replace(" ", "").replace("-", ""))


def is_luhn_valid(number: str) -> bool:
    """Luhn (mod 10) checksum for a 13-19 digit string.

    Every second digit from the right is doubled (minus 9 when above 9);
    the number is valid when the digit sum is a multiple of 10.

    >>> is_luhn_valid("4532015112830366")
    True
    >>> is_luhn_valid("4532015112830367")
    False
    """
    if not 13 <= len(number) <= 19 or not number.isascii() or not number.isdigit():
        return False

    total = 0
    for idx, char in enumerate(reversed(number)):
        digit = int(char)
        if idx % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0
