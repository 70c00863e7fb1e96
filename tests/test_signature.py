"""
Pytest tests for the magic signature catalog analyzer.
"""

from __future__ import annotations

from hexaminer.analyzers.signature import MATCH_CONFIDENCE, SIGNATURES, SignatureAnalyzer
from hexaminer.core.analyzer import DataAnalyzer


def test_satisfies_analyzer_protocol():
    assert isinstance(SignatureAnalyzer(), DataAnalyzer)


def test_png_match(png_data):
    result = SignatureAnalyzer().analyze(png_data)
    assert result.confidence == MATCH_CONFIDENCE == 0.9
    assert result.data_type == "PNG Image"
    assert result.properties["primary_format"] == "PNG"
    assert result.properties["detected_formats"] == ("PNG",)

    [structure] = result.structures
    assert (structure.offset, structure.size) == (0, 8)
    assert structure.name == "PNG Signature"
    assert structure.type == "File Signature"
    assert structure.value == "PNG Image"


def test_riff_reports_every_match_in_catalog_order(riff_data):
    result = SignatureAnalyzer().analyze(riff_data)
    assert result.properties["detected_formats"] == ("WAV", "AVI")
    assert result.properties["primary_format"] == "WAV"
    assert result.data_type == "WAV Audio"
    assert [s.name for s in result.structures] == ["WAV Signature", "AVI Signature"]


def test_no_match():
    result = SignatureAnalyzer().analyze(b"\x13\x37" * 8)
    assert result.confidence == 0.0
    assert result.data_type == "Unknown"
    assert result.properties == {"status": "No known file signatures detected"}
    assert result.structures == ()


def test_pattern_must_fit_in_buffer():
    result = SignatureAnalyzer().analyze(b"\x89PN")
    assert result.data_type == "Unknown"


def test_offset_shifts_match_location(png_data):
    data = b"\xde\xad\xbe\xef" + png_data
    result = SignatureAnalyzer().analyze(data, offset=4)
    assert result.offset == 4
    assert result.structures[0].offset == 4


def test_non_zero_entry_offset():
    data = bytearray(512)
    data[257:262] = b"ustar"
    result = SignatureAnalyzer().analyze(bytes(data))
    assert "TAR" in result.properties["detected_formats"]
    tar = next(s for s in result.structures if s.name == "TAR Signature")
    assert (tar.offset, tar.size) == (257, 5)


def test_can_analyze_requires_data_at_offset():
    analyzer = SignatureAnalyzer()
    assert analyzer.can_analyze(b"x")
    assert not analyzer.can_analyze(b"")
    assert not analyzer.can_analyze(b"abc", offset=3)


def test_catalog_order_is_stable():
    keys = [sig.key for sig in SIGNATURES]
    assert keys[:5] == ["PNG", "JPEG", "GIF87", "GIF89", "PDF"]
    assert keys.index("WAV") < keys.index("AVI")
    assert keys.index("ISO") < keys.index("DEX")
    assert len(keys) == len(set(keys))
