"""
PE/COFF Header Analyzer
========================

Decodes the leading headers of a Portable Executable image in two stages:

1. The legacy MS-DOS header (``IMAGE_DOS_HEADER``): fourteen 16-bit fields
   followed, at offset 0x3C, by ``e_lfanew``, the 32-bit file offset of
   the PE header.
2. At ``e_lfanew``, the ``PE\\0\\0`` signature and the COFF file header
   (``IMAGE_FILE_HEADER``).

A DOS image whose ``e_lfanew`` does not point at a PE signature is still a
valid result: the DOS header structure is reported and decoding stops.

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
      https://learn.microsoft.com/en-us/windows/win32/debug/pe-format
    - Pietrek, M. (1994). Peering Inside the PE: A Tour of the Win32
      Portable Executable File Format. Microsoft Systems Journal.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from hexaminer.core.analyzer import Buffer
from hexaminer.core.cursor import ByteCursor, Endian
from hexaminer.core.errors import EndOfData, MalformedHeader
from hexaminer.core.models import AnalysisResult, DataStructure


# ---------------------------------------------------------------------------
# PE Constants
# ---------------------------------------------------------------------------

MZ_MAGIC: bytes = b"MZ"
PE_SIGNATURE: int = 0x00004550  # "PE\0\0" read little-endian

DOS_HEADER_SIZE: int = 64
E_LFANEW_OFFSET: int = 0x3C
FILE_HEADER_SIZE: int = 24  # signature + IMAGE_FILE_HEADER

SUCCESS_CONFIDENCE: float = 0.95
FAILURE_CONFIDENCE: float = 0.3

_DOS_FIELDS: tuple[str, ...] = (
    "e_magic", "e_cblp", "e_cp", "e_crlc", "e_cparhdr", "e_minalloc",
    "e_maxalloc", "e_ss", "e_sp", "e_csum", "e_ip", "e_cs", "e_lfarlc",
    "e_ovno",
)

_MACHINE_NAMES: dict[int, str] = {
    0x0: "Unknown",
    0x14C: "x86",
    0x162: "MIPS R3000",
    0x166: "MIPS R4000",
    0x1C0: "ARM",
    0x1C4: "ARM Thumb-2",
    0x200: "IA-64",
    0x5032: "RISC-V 32",
    0x5064: "RISC-V 64",
    0x8664: "x86_64",
    0xAA64: "AArch64",
}

_CHARACTERISTICS_FLAGS: tuple[tuple[int, str], ...] = (
    (0x0001, "RELOCS_STRIPPED"),
    (0x0002, "EXECUTABLE_IMAGE"),
    (0x0004, "LINE_NUMS_STRIPPED"),
    (0x0008, "LOCAL_SYMS_STRIPPED"),
    (0x0020, "LARGE_ADDRESS_AWARE"),
    (0x0100, "32BIT_MACHINE"),
    (0x0200, "DEBUG_STRIPPED"),
    (0x0400, "REMOVABLE_RUN_FROM_SWAP"),
    (0x0800, "NET_RUN_FROM_SWAP"),
    (0x1000, "SYSTEM"),
    (0x2000, "DLL"),
    (0x4000, "UP_SYSTEM_ONLY"),
)


def characteristics_flags(value: int) -> list[str]:
    """Names of the ``IMAGE_FILE_*`` flags set in *value*, lowest bit first."""
    return [name for bit, name in _CHARACTERISTICS_FLAGS if value & bit]


class PEAnalyzer:
    """Decode the DOS header and, when present, the PE file header.

    Usage::

        analyzer = PEAnalyzer()
        if analyzer.can_analyze(raw_bytes):
            result = analyzer.analyze(raw_bytes)
            result.properties["file_header"]["MachineName"]
            # => "x86_64"
    """

    name = "PE (Portable Executable) Analyzer"
    description = "Analyzes Windows PE files (EXE, DLL)"

    def can_analyze(self, data: Buffer, offset: int = 0) -> bool:
        if offset < 0 or len(data) < offset + DOS_HEADER_SIZE:
            return False
        return bytes(data[offset : offset + len(MZ_MAGIC)]) == MZ_MAGIC

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
            dos_header = self._read_dos_header(cursor)
            structures.append(DataStructure(
                name="DOS Header",
                offset=cursor.base_offset,
                size=DOS_HEADER_SIZE,
                type="IMAGE_DOS_HEADER",
            ))
            properties["dos_header"] = dos_header

            e_lfanew = dos_header["e_lfanew"]
            cursor.seek(e_lfanew)
            file_header = self._read_file_header(cursor)
            if file_header is None:
                properties["pe_signature_valid"] = False
            else:
                structures.append(DataStructure(
                    name="PE File Header",
                    offset=cursor.absolute(e_lfanew),
                    size=FILE_HEADER_SIZE,
                    type="IMAGE_FILE_HEADER",
                ))
                properties["pe_signature_valid"] = True
                properties["file_header"] = file_header
        except (EndOfData, MalformedHeader) as exc:
            properties["error"] = str(exc)
            confidence = FAILURE_CONFIDENCE

        return AnalysisResult(
            analyzer_name=self.name,
            data_type="PE File",
            offset=cursor.base_offset,
            length=cursor.length,
            confidence=confidence,
            properties=properties,
            structures=structures,
        )

    # ------------------------------------------------------------------ #
    #  Stage 1: DOS header
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_dos_header(cursor: ByteCursor) -> dict[str, Any]:
        header: dict[str, Any] = {
            field: cursor.read_u16(Endian.LITTLE) for field in _DOS_FIELDS
        }
        if header["e_magic"] != int.from_bytes(MZ_MAGIC, "little"):
            raise MalformedHeader(f"Bad DOS magic: 0x{header['e_magic']:04x}")

        cursor.seek(E_LFANEW_OFFSET)
        header["e_lfanew"] = cursor.read_u32(Endian.LITTLE)
        return header

    # ------------------------------------------------------------------ #
    #  Stage 2: PE signature + COFF file header
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_file_header(cursor: ByteCursor) -> dict[str, Any] | None:
        """Return the decoded file header, or ``None`` without a PE signature."""
        if cursor.read_u32(Endian.LITTLE) != PE_SIGNATURE:
            return None

        le = Endian.LITTLE
        machine = cursor.read_u16(le)
        header: dict[str, Any] = {
            "Machine": machine,
            "MachineName": _MACHINE_NAMES.get(machine, f"Unknown (0x{machine:04x})"),
            "NumberOfSections": cursor.read_u16(le),
            "TimeDateStamp": cursor.read_u32(le),
            "PointerToSymbolTable": cursor.read_u32(le),
            "NumberOfSymbols": cursor.read_u32(le),
            "SizeOfOptionalHeader": cursor.read_u16(le),
            "Characteristics": cursor.read_u16(le),
        }
        header["TimeDateStampUtc"] = datetime.fromtimestamp(
            header["TimeDateStamp"], tz=timezone.utc
        ).isoformat()
        header["CharacteristicsFlags"] = characteristics_flags(header["Characteristics"])
        return header
