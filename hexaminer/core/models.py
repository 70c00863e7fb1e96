"""
Hexaminer Data Models
======================

Pydantic-based value objects produced by the analysis core: per-analyzer
results, the decoded structures they contain, and the matches emitted by
the pattern / entropy scanner.

Property values use pydantic's :data:`~pydantic.JsonValue`, a closed union
of string, integer, float, boolean, ``None``, list and string-keyed mapping,
so every consumer can match exhaustively on the possible shapes.

All models are frozen: a result is immutable once an analyzer returns it.
Structure lists are stored as tuples and property values are frozen deeply
(mappings become read-only proxies, lists become tuples).  Serialisation
turns them back into plain dicts and lists.

References:
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    field_serializer,
    field_validator,
)


PropertyValue = JsonValue


def _freeze(value: Any) -> Any:
    """Read-only copy of a property value: mappings to proxies, lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of :func:`_freeze`, producing plain ``dict`` / ``list`` values."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PatternCategory(str, enum.Enum):
    """Labels attached to pattern / entropy scanner matches."""
    ASCII_STRING = "ASCII String"
    EMAIL = "Email Address"
    URL = "URL"
    CREDIT_CARD = "Credit Card Number"
    HIGH_ENTROPY = "High Entropy (Possible Encryption/Compression)"
    LOW_ENTROPY = "Low Entropy (Repetitive Data)"


# ---------------------------------------------------------------------------
# Structures
# ---------------------------------------------------------------------------

class DataStructure(BaseModel):
    """A named, typed region inside the analysed buffer.

    Attributes:
        name: Display name (``"ELF Header"``, ``"PNG Signature"``).
        offset: Absolute offset of the region in the buffer.
        size: Region size in bytes.
        type: Format-level type name (``"IMAGE_DOS_HEADER"``).
        value: Optional decoded value.
        children: Nested structures lying within this region.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    offset: int = Field(ge=0)
    size: int = Field(ge=0)
    type: str = ""
    value: PropertyValue = None
    children: tuple[DataStructure, ...] = ()

    @field_validator("value", mode="before")
    @classmethod
    def _thaw_value(cls, v: Any) -> Any:
        return _thaw(v)

    @field_validator("value")
    @classmethod
    def _freeze_value(cls, v: Any) -> Any:
        return _freeze(v)

    @field_serializer("value")
    def _serialize_value(self, v: Any) -> Any:
        return _thaw(v)

    @property
    def end(self) -> int:
        """Absolute offset one past the last byte of the region."""
        return self.offset + self.size


# ---------------------------------------------------------------------------
# Analysis result
# ---------------------------------------------------------------------------

class AnalysisResult(BaseModel):
    """Output of exactly one analyzer invocation.

    Confidence is a ranking heuristic, not a probability: the engine only
    relies on its relative order.

    Attributes:
        analyzer_name: Identity of the producing analyzer.
        data_type: Human-readable classification of the data.
        offset: Absolute start offset of the analysed slice.
        length: Number of bytes in the analysed slice.
        confidence: Score in [0.0, 1.0].
        properties: Named decoded values.
        structures: Decoded regions in emission order.
    """
    model_config = ConfigDict(frozen=True)

    analyzer_name: str
    data_type: str
    offset: int = Field(default=0, ge=0)
    length: int = Field(default=0, ge=0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    properties: Mapping[str, PropertyValue] = Field(
        default_factory=dict, validate_default=True,
    )
    structures: tuple[DataStructure, ...] = ()

    @field_validator("properties", mode="before")
    @classmethod
    def _thaw_properties(cls, v: Any) -> Any:
        """Accept frozen mappings from another result as plain input."""
        return _thaw(v)

    @field_validator("properties")
    @classmethod
    def _freeze_properties(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(v)

    @field_serializer("properties")
    def _serialize_properties(self, v: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(v)

    @property
    def error(self) -> str | None:
        """The ``error`` property, if the analyzer reported one."""
        value = self.properties.get("error")
        return value if isinstance(value, str) else None


# ---------------------------------------------------------------------------
# Pattern match
# ---------------------------------------------------------------------------

class PatternMatch(BaseModel):
    """A region found by the pattern / entropy scanner.

    Attributes:
        category: What kind of pattern was found.
        offset: Absolute byte offset of the match.
        length: Match length in bytes.
        value: Extracted text (or an ``"Entropy: X.XX"`` summary).
    """
    model_config = ConfigDict(frozen=True)

    category: PatternCategory
    offset: int = Field(ge=0)
    length: int = Field(ge=0)
    value: str = ""
