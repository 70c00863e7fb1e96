"""
ELF Header Analyzer
====================

Decodes the leading header of an Executable and Linkable Format image: the
16-byte ``e_ident`` block followed by the fixed-layout ``ElfN_Ehdr``
fields.  The class byte selects 4-byte (ELF32) or 8-byte (ELF64) address
fields; multi-byte fields are read little-endian.

Only the file header is decoded.  Program headers, section headers and
symbol tables are left to dedicated tooling.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from typing import Any

from hexaminer.core.analyzer import Buffer
from hexaminer.core.cursor import ByteCursor, Endian
from hexaminer.core.errors import EndOfData, MalformedHeader
from hexaminer.core.models import AnalysisResult, DataStructure


# ---------------------------------------------------------------------------
# ELF Constants
# ---------------------------------------------------------------------------

ELF_MAGIC: bytes = b"\x7fELF"

ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATA2LSB: int = 1
ELFDATA2MSB: int = 2

EI_NIDENT: int = 16
ELF32_EHDR_SIZE: int = 52
ELF64_EHDR_SIZE: int = 64

SUCCESS_CONFIDENCE: float = 0.95
FAILURE_CONFIDENCE: float = 0.3

_CLASS_NAMES: dict[int, str] = {
    ELFCLASS32: "32-bit",
    ELFCLASS64: "64-bit",
}

_DATA_NAMES: dict[int, str] = {
    ELFDATA2LSB: "Little Endian",
    ELFDATA2MSB: "Big Endian",
}

_ET_NAMES: dict[int, str] = {
    0: "NONE",
    1: "REL (Relocatable)",
    2: "EXEC (Executable)",
    3: "DYN (Shared object)",
    4: "CORE (Core dump)",
}

_EM_NAMES: dict[int, str] = {
    0: "None",
    2: "SPARC",
    3: "x86",
    8: "MIPS",
    20: "PowerPC",
    21: "PowerPC64",
    40: "ARM",
    62: "x86_64",
    183: "AArch64",
    243: "RISC-V",
}

_OSABI_NAMES: dict[int, str] = {
    0: "UNIX System V",
    1: "HP-UX",
    2: "NetBSD",
    3: "Linux",
    6: "Solaris",
    9: "FreeBSD",
    12: "OpenBSD",
    97: "ARM",
    255: "Standalone",
}


class ELFAnalyzer:
    """Decode the ELF file header.

    Usage::

        analyzer = ELFAnalyzer()
        if analyzer.can_analyze(raw_bytes):
            result = analyzer.analyze(raw_bytes)
            result.properties["elf_header"]["Class"]
            # => "64-bit"
    """

    name = "ELF (Executable and Linkable Format) Analyzer"
    description = "Analyzes Linux/Unix ELF binaries"

    def can_analyze(self, data: Buffer, offset: int = 0) -> bool:
        if offset < 0 or len(data) < offset + len(ELF_MAGIC):
            return False
        return bytes(data[offset : offset + len(ELF_MAGIC)]) == ELF_MAGIC

    def analyze(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> AnalysisResult:
        cursor = ByteCursor(data, offset, length)
        properties: dict[str, Any] = {}
        structures: list[DataStructure] = []
        confidence = SUCCESS_CONFIDENCE

        try:
            header = self._read_header(cursor)
        except (EndOfData, MalformedHeader) as exc:
            properties["error"] = str(exc)
            confidence = FAILURE_CONFIDENCE
        else:
            is_64 = header["Class"] == _CLASS_NAMES[ELFCLASS64]
            structures.append(DataStructure(
                name="ELF Header",
                offset=cursor.base_offset,
                size=ELF64_EHDR_SIZE if is_64 else ELF32_EHDR_SIZE,
                type="Elf64_Ehdr" if is_64 else "Elf32_Ehdr",
            ))
            properties["class"] = header["Class"]
            properties["elf_header"] = header

        return AnalysisResult(
            analyzer_name=self.name,
            data_type="ELF File",
            offset=cursor.base_offset,
            length=cursor.length,
            confidence=confidence,
            properties=properties,
            structures=structures,
        )

    # ------------------------------------------------------------------ #
    #  Header decoding
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_header(cursor: ByteCursor) -> dict[str, Any]:
        """Read ``e_ident`` then branch the remaining fields on the class byte."""
        header: dict[str, Any] = {}

        magic = cursor.read_bytes(4)
        if magic != ELF_MAGIC:
            raise MalformedHeader(f"Bad ELF magic: {magic.hex()}")
        header["Magic"] = magic.decode("ascii", errors="replace")

        elf_class = cursor.read_byte()
        header["Class"] = _CLASS_NAMES.get(elf_class, "Unknown")

        data_encoding = cursor.read_byte()
        header["Data"] = _DATA_NAMES.get(data_encoding, "Unknown")

        header["Version"] = cursor.read_byte()
        osabi = cursor.read_byte()
        header["OS/ABI"] = osabi
        header["OSABIName"] = _OSABI_NAMES.get(osabi, f"Unknown ({osabi})")
        header["ABI_Version"] = cursor.read_byte()

        # e_ident padding up to EI_NIDENT
        cursor.read_bytes(EI_NIDENT - cursor.position)

        le = Endian.LITTLE
        e_type = cursor.read_u16(le)
        e_machine = cursor.read_u16(le)
        header["Type"] = e_type
        header["TypeName"] = _ET_NAMES.get(e_type, f"Unknown (0x{e_type:04x})")
        header["Machine"] = e_machine
        header["MachineName"] = _EM_NAMES.get(e_machine, f"Unknown ({e_machine})")
        header["ObjectVersion"] = cursor.read_u32(le)

        read_addr = cursor.read_u64 if elf_class == ELFCLASS64 else cursor.read_u32
        header["Entry"] = read_addr(le)
        header["ProgramHeaderOffset"] = read_addr(le)
        header["SectionHeaderOffset"] = read_addr(le)

        header["Flags"] = cursor.read_u32(le)
        header["HeaderSize"] = cursor.read_u16(le)
        header["ProgramHeaderEntrySize"] = cursor.read_u16(le)
        header["ProgramHeaderCount"] = cursor.read_u16(le)
        header["SectionHeaderEntrySize"] = cursor.read_u16(le)
        header["SectionHeaderCount"] = cursor.read_u16(le)
        header["SectionHeaderStringIndex"] = cursor.read_u16(le)

        return header
