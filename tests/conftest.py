"""
Pytest fixtures for Hexaminer tests. Minimal hand-built file headers, no
sample binaries on disk.
"""

from __future__ import annotations

import struct

import pytest

from hexaminer.core.engine import AnalysisEngine
from hexaminer.shared.logger import HexLogger


PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

PE_LFANEW = 0x80
PE_MACHINE_AMD64 = 0x8664
PE_TIMESTAMP = 100_000_000
PE_CHARACTERISTICS = 0x0022  # EXECUTABLE_IMAGE | LARGE_ADDRESS_AWARE


def build_elf(elf_class: int = 2, osabi: int = 3) -> bytes:
    """ELF file header for an x86_64 (or i386 for class 1) executable."""
    ident = b"\x7fELF" + bytes([elf_class, 1, 1, osabi, 0]) + bytes(7)
    if elf_class == 2:
        body = struct.pack("<HHIQQQIHHHHHH", 2, 62, 1, 0x401000, 64, 0x2000, 0, 64, 56, 2, 64, 5, 4)
    else:
        body = struct.pack("<HHIIIIIHHHHHH", 2, 3, 1, 0x8048000, 52, 0x1000, 0, 52, 32, 2, 40, 5, 4)
    return ident + body


def build_pe(signature: bytes = b"PE\x00\x00", e_lfanew: int = PE_LFANEW) -> bytes:
    """DOS stub + PE signature + COFF file header + padding."""
    dos = bytearray(64)
    dos[0:2] = b"MZ"
    struct.pack_into("<H", dos, 2, 0x90)
    struct.pack_into("<I", dos, 60, e_lfanew)

    image = bytearray(dos) + bytes(PE_LFANEW - len(dos))
    image += signature
    image += struct.pack(
        "<HHIIIHH",
        PE_MACHINE_AMD64,
        3,
        PE_TIMESTAMP,
        0,
        0,
        240,
        PE_CHARACTERISTICS,
    )
    image += bytes(32)
    return bytes(image)


@pytest.fixture
def png_data() -> bytes:
    return PNG_MAGIC + struct.pack(">I", 13) + b"IHDR" + bytes(13)


@pytest.fixture
def elf64_data() -> bytes:
    return build_elf(2)


@pytest.fixture
def elf32_data() -> bytes:
    return build_elf(1)


@pytest.fixture
def pe_data() -> bytes:
    return build_pe()


@pytest.fixture
def dos_only_data() -> bytes:
    """Valid DOS header whose e_lfanew points at something other than PE\\0\\0."""
    return build_pe(signature=b"NE\x00\x00")


@pytest.fixture
def riff_data() -> bytes:
    return b"RIFF" + struct.pack("<I", 36) + b"WAVEfmt " + bytes(24)


@pytest.fixture
def quiet_logger() -> HexLogger:
    return HexLogger("test", console_output=False)


@pytest.fixture
def engine(quiet_logger) -> AnalysisEngine:
    return AnalysisEngine(logger=quiet_logger)
