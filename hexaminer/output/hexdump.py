"""
Hex Dump Rendering
===================

Plain-text and Rich-colourised hex dumps.

Each line shows the absolute offset, up to ``width`` bytes in hex and their
printable-ASCII rendering (non-printable bytes shown as ``.``)::

    00000000  7f 45 4c 46 02 01 01 00 00 00 00 00 00 00 00 00  .ELF............

The colourised form tints each byte by class (letters, digits, punctuation,
NUL, control, high bytes) so that text, padding and binary stand out, and
can underline bytes covered by decoded structures.
"""

from __future__ import annotations

from typing import Iterable

from rich.text import Text

from hexaminer.core.analyzer import Buffer
from hexaminer.core.models import DataStructure


DEFAULT_WIDTH: int = 16


def _ascii_char(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def byte_style(byte: int) -> str:
    """Rich style for one byte value, chosen by character class."""
    if 0x41 <= byte <= 0x5A:
        return "green"
    if 0x61 <= byte <= 0x7A:
        return "cyan"
    if 0x30 <= byte <= 0x39:
        return "yellow"
    if byte == 0x20:
        return "bright_black"
    if 0x21 <= byte <= 0x7E:
        return "magenta"
    if byte == 0x00:
        return "dark_red"
    if byte < 0x20:
        return "red"
    if byte <= 0x9F:
        return "dark_orange3"
    return "blue"


def format_hex_dump(data: Buffer, offset: int = 0, width: int = DEFAULT_WIDTH) -> str:
    """Plain-text hex dump of *data*, labelling the first byte as *offset*.

    Returns:
        One ``"%08x  hex  ascii"`` line per *width* bytes, each terminated
        by a newline.  An empty buffer yields an empty string.
    """
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")

    raw = bytes(data)
    lines: list[str] = []
    for start in range(0, len(raw), width):
        chunk = raw[start : start + width]
        hex_part = " ".join(f"{b:02x}" for b in chunk).ljust(width * 3 - 1)
        ascii_part = "".join(_ascii_char(b) for b in chunk)
        lines.append(f"{offset + start:08x}  {hex_part}  {ascii_part}\n")
    return "".join(lines)


def render_hex_dump(
    data: Buffer,
    offset: int = 0,
    width: int = DEFAULT_WIDTH,
    structures: Iterable[DataStructure] = (),
) -> Text:
    """Colourised hex dump as a Rich :class:`~rich.text.Text`.

    Bytes whose absolute offset falls inside any of *structures* are
    underlined.
    """
    if width <= 0:
        raise ValueError(f"width must be positive, got {width}")

    spans = [(s.offset, s.end) for s in structures if s.size > 0]
    raw = bytes(data)
    text = Text()

    for start in range(0, len(raw), width):
        chunk = raw[start : start + width]
        text.append(f"{offset + start:08X}  ", style="bright_black")

        for idx, byte in enumerate(chunk):
            style = byte_style(byte)
            absolute = offset + start + idx
            if any(lo <= absolute < hi for lo, hi in spans):
                style += " underline"
            text.append(f"{byte:02X} ", style=style)
        text.append("   " * (width - len(chunk)))

        text.append(" ")
        for byte in chunk:
            text.append(_ascii_char(byte), style=byte_style(byte))
        text.append("\n")

    return text
