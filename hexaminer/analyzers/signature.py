"""
Magic Signature Catalog Analyzer
=================================

Identifies file types by comparing the buffer against a static table of
magic byte signatures, each expected at a fixed offset from the start of
the analysed slice.

The scan is exhaustive: every catalog entry is tested and every match is
reported.  Formats that share a prefix are not disambiguated here; a RIFF
buffer matches both ``WAV`` and ``AVI``.  When several entries match, the
first one in catalog order is the primary format, so the order of
:data:`SIGNATURES` is part of this module's contract.

References:
    - Gary Kessler's File Signatures Table.
      https://www.garykessler.net/library/file_sigs.html
    - Wikipedia. (2024). List of file signatures.
"""

from __future__ import annotations

from dataclasses import dataclass

from hexaminer.core.analyzer import Buffer
from hexaminer.core.cursor import resolve_slice
from hexaminer.core.models import AnalysisResult, DataStructure


MATCH_CONFIDENCE: float = 0.9


@dataclass(frozen=True, slots=True)
class Signature:
    """A single file-type magic signature entry.

    Attributes:
        key: Short identifying key (``"PNG"``).
        magic: Byte pattern to match.
        offset: Offset of *magic* relative to the analysed slice start.
        description: Human-readable type description.
    """
    key: str
    magic: bytes
    offset: int
    description: str


# ---------------------------------------------------------------------------
# Signature table -- iteration order is the tie-break for the primary format
# ---------------------------------------------------------------------------

SIGNATURES: tuple[Signature, ...] = (
    # ── Images & documents ──────────────────────────────────────────────
    Signature("PNG", b"\x89PNG\r\n\x1a\n", 0, "PNG Image"),
    Signature("JPEG", b"\xff\xd8\xff", 0, "JPEG Image"),
    Signature("GIF87", b"GIF87a", 0, "GIF87a Image"),
    Signature("GIF89", b"GIF89a", 0, "GIF89a Image"),
    Signature("PDF", b"%PDF", 0, "PDF Document"),

    # ── Archives ────────────────────────────────────────────────────────
    Signature("ZIP", b"PK\x03\x04", 0, "ZIP Archive"),
    Signature("ZIP_EMPTY", b"PK\x05\x06", 0, "Empty ZIP Archive"),
    Signature("RAR", b"Rar!\x1a\x07\x00", 0, "RAR Archive"),
    Signature("7Z", b"7z\xbc\xaf\x27\x1c", 0, "7-Zip Archive"),
    Signature("SQLITE", b"SQLite format 3\x00", 0, "SQLite Database"),

    # ── Audio / video (RIFF is shared by WAV and AVI) ───────────────────
    Signature("MP3", b"ID3", 0, "MP3 Audio (ID3v2)"),
    Signature("MP3_MPEG", b"\xff\xfb", 0, "MP3 Audio (MPEG)"),
    Signature("WAV", b"RIFF", 0, "WAV Audio"),
    Signature("AVI", b"RIFF", 0, "AVI Video"),

    # ── Executables & bytecode ──────────────────────────────────────────
    Signature("MZ", b"MZ", 0, "MS-DOS/Windows Executable"),
    Signature("ELF", b"\x7fELF", 0, "ELF Executable"),
    Signature("MACH_O_32", b"\xfe\xed\xfa\xce", 0, "Mach-O 32-bit"),
    Signature("MACH_O_64", b"\xfe\xed\xfa\xcf", 0, "Mach-O 64-bit"),
    Signature("CLASS", b"\xca\xfe\xba\xbe", 0, "Java Class File"),

    # ── Compression ─────────────────────────────────────────────────────
    Signature("TAR", b"ustar", 257, "TAR Archive"),
    Signature("GZIP", b"\x1f\x8b", 0, "GZIP Compressed"),
    Signature("BZ2", b"BZh", 0, "BZIP2 Compressed"),
    Signature("XZ", b"\xfd7zXZ\x00", 0, "XZ Compressed"),

    # ── Models, forensic and disk images ────────────────────────────────
    Signature("GGUF", b"GGUF", 0, "GGUF GPT-Generated Unified Format"),
    Signature("EWF-E01", b"EWF\x01", 0, "Expert Witness Format E01"),
    Signature("EWF-AD1", b"EWF\x02", 0, "Expert Witness Format AD1"),
    Signature("EWF-S01", b"EWF\x03", 0, "Expert Witness Format S01"),
    Signature("EWF-S02", b"EWF\x04", 0, "Expert Witness Format S02"),
    Signature("VMDK", b"KDMV", 0, "VMware Virtual Disk"),
    Signature("VHD", b"\xeb\x00\x00\x00", 0, "Virtual Hard Disk"),
    Signature("ISO", b"CD00", 32769, "ISO9660 CD/DVD Image"),

    # ── Additional containers ───────────────────────────────────────────
    Signature("DEX", b"dex\n", 0, "Android DEX Bytecode"),
    Signature("WASM", b"\x00asm", 0, "WebAssembly Binary"),
    Signature("OGG", b"OggS", 0, "OGG Container"),
    Signature("FLAC", b"fLaC", 0, "FLAC Audio"),
    Signature("PCAP", b"\xd4\xc3\xb2\xa1", 0, "PCAP Capture (little-endian)"),
    Signature("PCAPNG", b"\x0a\x0d\x0d\x0a", 0, "PCAPNG Capture"),
    Signature("ZSTD", b"\x28\xb5\x2f\xfd", 0, "Zstandard Compressed"),
    Signature("LZ4", b"\x04\x22\x4d\x18", 0, "LZ4 Compressed"),
    Signature("OLE2", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", 0, "MS Office (OLE2 Compound)"),
    Signature("RTF", b"{\\rtf", 0, "RTF Document"),
    Signature("MBR", b"\x55\xaa", 510, "MBR Boot Signature"),
)


class SignatureAnalyzer:
    """Match a buffer against the magic signature catalog.

    Usage::

        analyzer = SignatureAnalyzer()
        result = analyzer.analyze(raw_bytes)
        result.properties["primary_format"]
        # => "PNG"
    """

    name = "File Signature Analyzer"
    description = "Identifies file types by magic number signatures"

    def __init__(self, signatures: tuple[Signature, ...] = SIGNATURES) -> None:
        self._signatures = signatures

    @property
    def signatures(self) -> tuple[Signature, ...]:
        return self._signatures

    def can_analyze(self, data: Buffer, offset: int = 0) -> bool:
        """Signature scanning is not gated: any non-empty slice qualifies."""
        return 0 <= offset < len(data)

    def analyze(
        self,
        data: Buffer,
        offset: int = 0,
        length: int | None = None,
    ) -> AnalysisResult:
        """Test every catalog entry at ``offset + entry.offset``.

        The full pattern must lie inside the buffer and match byte for
        byte.  Each match contributes one ``"<KEY> Signature"`` structure.
        """
        start, size = resolve_slice(len(data), offset, length)
        view = memoryview(data).cast("B")
        data_len = len(view)

        matches: list[Signature] = []
        structures: list[DataStructure] = []

        for sig in self._signatures:
            check = start + sig.offset
            end = check + len(sig.magic)
            if end > data_len:
                continue
            if view[check:end] != sig.magic:
                continue

            matches.append(sig)
            structures.append(DataStructure(
                name=f"{sig.key} Signature",
                offset=check,
                size=len(sig.magic),
                type="File Signature",
                value=sig.description,
            ))

        if not matches:
            return AnalysisResult(
                analyzer_name=self.name,
                data_type="Unknown",
                offset=start,
                length=size,
                confidence=0.0,
                properties={"status": "No known file signatures detected"},
            )

        primary = matches[0]
        return AnalysisResult(
            analyzer_name=self.name,
            data_type=primary.description,
            offset=start,
            length=size,
            confidence=MATCH_CONFIDENCE,
            properties={
                "detected_formats": [sig.key for sig in matches],
                "primary_format": primary.key,
            },
            structures=structures,
        )
