"""
Pytest tests for hex dump formatting.
"""

from __future__ import annotations

import pytest

from hexaminer.core.models import DataStructure
from hexaminer.output.hexdump import byte_style, format_hex_dump, render_hex_dump


def test_full_line():
    data = b"\x7fELF" + bytes(12)
    assert format_hex_dump(data) == (
        "00000000  7f 45 4c 46 00 00 00 00 00 00 00 00 00 00 00 00  .ELF............\n"
    )


def test_short_last_line_is_padded():
    assert format_hex_dump(b"ABC", offset=0x10, width=4) == (
        "00000010  " + "41 42 43   " + "  " + "ABC\n"
    )


def test_offsets_advance_per_line():
    lines = format_hex_dump(bytes(40), offset=0x100).splitlines()
    assert [line[:8] for line in lines] == ["00000100", "00000110", "00000120"]


def test_empty_buffer():
    assert format_hex_dump(b"") == ""


def test_invalid_width():
    with pytest.raises(ValueError):
        format_hex_dump(b"abc", width=0)


def test_byte_classes():
    assert byte_style(ord("A")) == "green"
    assert byte_style(ord("a")) == "cyan"
    assert byte_style(ord("7")) == "yellow"
    assert byte_style(ord("!")) == "magenta"
    assert byte_style(0x00) == "dark_red"
    assert byte_style(0x0A) == "red"
    assert byte_style(0xFF) == "blue"


def test_render_underlines_structure_bytes():
    structure = DataStructure(name="Magic", offset=0x10, size=2, type="File Signature")
    text = render_hex_dump(b"MZ\x90\x00", offset=0x10, width=4, structures=[structure])

    assert text.plain.startswith("00000010  4D 5A 90 00 ")
    underlined = [span for span in text.spans if "underline" in str(span.style)]
    assert len(underlined) == 2
