"""
Pytest tests for the text pattern and entropy scanners.
"""

from __future__ import annotations

import pytest

from hexaminer.core.models import PatternCategory
from hexaminer.patterns import (
    find_credit_card_patterns,
    find_email_patterns,
    find_entropy_anomalies,
    find_string_patterns,
    find_url_patterns,
    is_luhn_valid,
    scan_all,
    window_entropy,
)
from hexaminer.shared.config import PatternConfig


# --- Printable strings ---


def test_string_runs_including_trailing_run():
    data = b"\x00\x01hello\x00ab\x00world!"
    matches = find_string_patterns(data)
    assert [(m.offset, m.length, m.value) for m in matches] == [
        (2, 5, "hello"),
        (11, 6, "world!"),
    ]
    assert all(m.category is PatternCategory.ASCII_STRING for m in matches)


def test_string_min_length():
    data = b"abc\x00abcdef"
    assert [m.value for m in find_string_patterns(data, min_length=3)] == ["abc", "abcdef"]
    assert [m.value for m in find_string_patterns(data, min_length=7)] == []


def test_tab_and_newline_break_runs():
    assert [m.value for m in find_string_patterns(b"line\nnext\ttabs")] == ["line", "next", "tabs"]


# --- Regex scanners ---


def test_email_offset_is_byte_offset():
    data = b"\xff\xfeMail: john.doe@example.org\x00"
    [match] = find_email_patterns(data)
    assert match.value == "john.doe@example.org"
    assert match.offset == 8
    assert match.length == len("john.doe@example.org")
    assert match.category is PatternCategory.EMAIL


def test_email_rejects_pipe_in_tld():
    assert find_email_patterns(b"user@example.c|m") == []


def test_url_patterns():
    data = b"\x00see http://example.com/path?q=1 next https://a.b/c\xffzz"
    matches = find_url_patterns(data)
    assert [m.value for m in matches] == ["http://example.com/path?q=1", "https://a.b/c"]
    assert matches[0].offset == 5
    assert all(m.category is PatternCategory.URL for m in matches)


def test_url_stops_at_quote_and_angle_bracket():
    [match] = find_url_patterns(b'<a href="https://example.com/x">')
    assert match.value == "https://example.com/x"


def test_card_numbers_are_luhn_filtered():
    data = b"card 4532 0151 1283 0366 bad 4532015112830367 ok 4532-0151-1283-0366"
    matches = find_credit_card_patterns(data)
    assert [m.value for m in matches] == ["4532 0151 1283 0366", "4532-0151-1283-0366"]
    assert matches[0].offset == 5
    assert matches[0].category is PatternCategory.CREDIT_CARD


def test_card_followed_by_stray_digit_is_found():
    [match] = find_credit_card_patterns(b"card 4532 0151 1283 0366 1 item")
    assert match.value == "4532 0151 1283 0366"
    assert (match.offset, match.length) == (5, 19)


def test_card_with_failing_tail_keeps_leading_sixteen_digits():
    [match] = find_credit_card_patterns(b"4532 0151 1283 0366 123")
    assert match.value == "4532 0151 1283 0366"


def test_amex_grouping():
    [match] = find_credit_card_patterns(b"amex 3782 822463 10005.")
    assert match.value == "3782 822463 10005"


@pytest.mark.parametrize(
    "data",
    [
        b"values 4 5 3 2 0 1 5 1 1 2 8 3 0 3 6 6 end",
        b"id 4532 01 5112 830366 end",
        b"id 45-3201-5112-8303-66 end",
        b"mixed 4532-0151 1283 0366 end",
    ],
)
def test_irregular_groupings_are_not_cards(data):
    assert find_credit_card_patterns(data) == []


def test_luhn():
    assert is_luhn_valid("4532015112830366")
    assert not is_luhn_valid("4532015112830367")
    assert not is_luhn_valid("123")
    assert not is_luhn_valid("45320151128303a6")


# --- Entropy ---


def test_constant_window_is_low_entropy():
    assert window_entropy(bytes(256)) == 0.0
    [match] = find_entropy_anomalies(bytes(256))
    assert match.category is PatternCategory.LOW_ENTROPY
    assert (match.offset, match.length, match.value) == (0, 256, "Entropy: 0.00")


def test_uniform_window_is_high_entropy():
    data = bytes(range(256))
    assert window_entropy(data) == 8.0
    [match] = find_entropy_anomalies(data)
    assert match.category is PatternCategory.HIGH_ENTROPY
    assert match.value == "Entropy: 8.00"


def test_windows_overlap_by_half():
    matches = find_entropy_anomalies(bytes(512))
    assert [m.offset for m in matches] == [0, 128, 256]


def test_partial_window_is_not_scanned():
    assert find_entropy_anomalies(bytes(255)) == []


def test_thresholds_are_strict():
    # two symbols at equal frequency: exactly 1.0 bit
    assert window_entropy(b"ab" * 128) == 1.0
    assert find_entropy_anomalies(b"ab" * 128) == []


def test_custom_window_size():
    matches = find_entropy_anomalies(bytes(64), window_size=32)
    assert [m.offset for m in matches] == [0, 16, 32]
    assert all(m.length == 32 for m in matches)


def test_invalid_window_size():
    with pytest.raises(ValueError):
        find_entropy_anomalies(b"abc", window_size=0)


# --- Combined scan ---


def test_scan_all_groups_by_scanner():
    data = b"contact admin@example.com or https://example.com/help\x00" + bytes(512)
    grouped = scan_all(data, PatternConfig(min_string_length=6))

    assert list(grouped) == ["strings", "emails", "urls", "cards", "entropy"]
    assert grouped["emails"][0].value == "admin@example.com"
    assert grouped["urls"][0].value == "https://example.com/help"
    assert grouped["cards"] == []
    assert any(m.category is PatternCategory.LOW_ENTROPY for m in grouped["entropy"])
