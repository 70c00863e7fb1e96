"""
Pytest tests for the structured logger's file output.
"""

from __future__ import annotations

import json

from hexaminer.shared.logger import HexLogger


def test_json_file_records_carry_component_and_operation(tmp_path):
    log_path = tmp_path / "logs" / "hexaminer.jsonl"
    log = HexLogger("unit", log_file=log_path, json_logs=True, console_output=False)

    with log.operation("scan"):
        log.info("Scanned %d byte(s)", 42, matches=3)
    log.warning("outside")

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert records[0]["message"] == "Scanned 42 byte(s)"
    assert records[0]["logger"] == "hexaminer.unit"
    assert records[0]["component"] == "unit"
    assert records[0]["operation"] == "scan"
    assert records[0]["extra"] == {"matches": 3}
    assert "operation" not in records[1]


def test_level_filters_debug(tmp_path):
    log_path = tmp_path / "plain.log"
    log = HexLogger("levels", log_level="WARNING", log_file=log_path, console_output=False)
    log.debug("hidden")
    log.error("shown")

    text = log_path.read_text(encoding="utf-8")
    assert "hidden" not in text
    assert "shown" in text


def test_reinstantiation_does_not_stack_handlers():
    HexLogger("dup", console_output=False)
    log = HexLogger("dup", console_output=False)
    assert log.underlying.handlers == []


def test_reinstantiation_closes_previous_file_handler(tmp_path):
    first = HexLogger("reopen", log_file=tmp_path / "a.log", console_output=False)
    [old_handler] = first.underlying.handlers
    assert old_handler.stream is not None

    second = HexLogger("reopen", log_file=tmp_path / "b.log", console_output=False)
    assert old_handler.stream is None
    [new_handler] = second.underlying.handlers
    assert new_handler is not old_handler


def test_timed_reports_elapsed():
    log = HexLogger("timing", console_output=False)
    assert log.component == "timing"
    with log.timed("noop") as timer:
        pass
    assert timer.elapsed >= 0.0
