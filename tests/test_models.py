"""
Pytest tests for result models and the error taxonomy.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from hexaminer.core.errors import AnalyzerFailure, MalformedHeader
from hexaminer.core.models import AnalysisResult, DataStructure


def test_structure_end_and_children():
    child = DataStructure(name="e_magic", offset=0, size=2, type="WORD", value=0x5A4D)
    parent = DataStructure(name="DOS Header", offset=0, size=64, children=[child])
    assert parent.end == 64
    assert parent.children[0].value == 0x5A4D


def test_models_are_frozen():
    result = AnalysisResult(analyzer_name="x", data_type="y")
    with pytest.raises(ValidationError):
        result.confidence = 0.5


def test_confidence_bounds():
    with pytest.raises(ValidationError):
        AnalysisResult(analyzer_name="x", data_type="y", confidence=1.5)


def test_negative_offset_rejected():
    with pytest.raises(ValidationError):
        DataStructure(name="x", offset=-1, size=0)


def test_nested_property_values_serialise():
    result = AnalysisResult(
        analyzer_name="x",
        data_type="y",
        properties={"header": {"flags": ["A", "B"], "valid": True, "ratio": 0.5}},
    )
    dumped = result.model_dump(mode="json")
    assert dumped["properties"]["header"]["flags"] == ["A", "B"]
    assert result.error is None


def test_failure_description():
    failure = AnalyzerFailure.from_exception("PE", ZeroDivisionError("division by zero"))
    assert failure == AnalyzerFailure("PE", "ZeroDivisionError: division by zero")


def test_malformed_header_is_value_error():
    assert issubclass(MalformedHeader, ValueError)


def test_returned_collections_are_read_only():
    result = AnalysisResult(
        analyzer_name="x",
        data_type="y",
        properties={"header": {"flags": ["A"]}},
        structures=[DataStructure(name="s", offset=0, size=1)],
    )
    with pytest.raises(TypeError):
        result.properties["error"] = "late"
    with pytest.raises(TypeError):
        result.properties["header"]["flags"] = []
    with pytest.raises(AttributeError):
        result.properties["header"]["flags"].append("B")
    with pytest.raises(AttributeError):
        result.structures.append(DataStructure(name="t", offset=1, size=1))

    assert result.model_dump()["properties"] == {"header": {"flags": ["A"]}}


def test_frozen_properties_can_seed_a_new_result():
    first = AnalysisResult(analyzer_name="x", data_type="y", properties={"k": [1, 2]})
    second = AnalysisResult(analyzer_name="z", data_type="y", properties=first.properties)
    assert second.properties == {"k": (1, 2)}
