"""
Bounds-Checked Byte Cursor
===========================

:class:`ByteCursor` is a sequential reader over a slice of a byte buffer.
It owns a :class:`memoryview` of the slice, never a copy of the bytes, and
keeps a mutable read position relative to the slice start.

Reads that would run past the slice end raise
:class:`~hexaminer.core.errors.EndOfData` and leave the position unchanged.
Seeking is unchecked: moving past the end is legal, reading there is not.

Usage::

    cursor = ByteCursor(data, offset=0x200)
    magic = cursor.read_bytes(4)
    e_type = cursor.read_u16(Endian.LITTLE)
    cursor.seek(0x3C)
"""

from __future__ import annotations

import enum
import struct

from hexaminer.core.errors import EndOfData


class Endian(str, enum.Enum):
    """Byte order for multi-byte integer reads."""
    LITTLE = "little"
    BIG = "big"

    @property
    def struct_prefix(self) -> str:
        return "<" if self is Endian.LITTLE else ">"


def resolve_slice(data_length: int, offset: int, length: int | None) -> tuple[int, int]:
    """Clamp an ``(offset, length)`` request to a buffer of *data_length* bytes.

    A ``None`` or negative *length* means "to the end of the buffer".

    Returns:
        ``(start, size)`` with ``0 <= start <= data_length`` and
        ``start + size <= data_length``.
    """
    start = min(max(offset, 0), data_length)
    available = data_length - start
    if length is None or length < 0:
        return start, available
    return start, min(length, available)


class ByteCursor:
    """Sequential, bounds-checked reader over a buffer slice.

    Args:
        data: Underlying bytes-like buffer.
        offset: Absolute offset where the slice starts.
        length: Slice length; ``None`` or negative means "to the end".
    """

    __slots__ = ("_view", "_base", "_pos")

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        offset: int = 0,
        length: int | None = None,
    ) -> None:
        view = memoryview(data).cast("B")
        start, size = resolve_slice(len(view), offset, length)
        self._view: memoryview = view[start : start + size]
        self._base: int = start
        self._pos: int = 0

    # ------------------------------------------------------------------ #
    #  Position
    # ------------------------------------------------------------------ #

    @property
    def position(self) -> int:
        """Current read position relative to the slice start."""
        return self._pos

    @property
    def length(self) -> int:
        """Number of bytes in the slice."""
        return len(self._view)

    @property
    def remaining(self) -> int:
        """Bytes left between the position and the slice end (never negative)."""
        return max(0, len(self._view) - self._pos)

    @property
    def base_offset(self) -> int:
        """Absolute buffer offset of the slice start."""
        return self._base

    def absolute(self, position: int | None = None) -> int:
        """Translate a slice-relative *position* (default: current) to an absolute offset."""
        return self._base + (self._pos if position is None else position)

    def seek(self, position: int) -> None:
        """Move to a slice-relative *position*; validated on the next read."""
        self._pos = position

    # ------------------------------------------------------------------ #
    #  Raw reads
    # ------------------------------------------------------------------ #

    def _take(self, count: int) -> memoryview:
        if count < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {count}")
        pos = self._pos
        if pos < 0 or pos + count > len(self._view):
            raise EndOfData(pos, count, len(self._view) - pos)
        self._pos = pos + count
        return self._view[pos : pos + count]

    def read_byte(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def read_bytes(self, count: int) -> bytes:
        """Read exactly *count* bytes; no partial results."""
        return self._take(count).tobytes()

    # ------------------------------------------------------------------ #
    #  Integer reads
    # ------------------------------------------------------------------ #

    def read_u16(self, endian: Endian = Endian.LITTLE) -> int:
        return struct.unpack(endian.struct_prefix + "H", self._take(2))[0]

    def read_u32(self, endian: Endian = Endian.LITTLE) -> int:
        return struct.unpack(endian.struct_prefix + "I", self._take(4))[0]

    def read_u64(self, endian: Endian = Endian.LITTLE) -> int:
        return struct.unpack(endian.struct_prefix + "Q", self._take(8))[0]

    # ------------------------------------------------------------------ #
    #  Text reads
    # ------------------------------------------------------------------ #

    def read_string(self, count: int, encoding: str = "utf-8") -> str:
        """Decode *count* bytes as text, stripping trailing NUL characters.

        Undecodable bytes are replaced rather than raising.
        """
        raw = self.read_bytes(count)
        return raw.decode(encoding, errors="replace").rstrip("\x00")
