"""End-to-end pipeline tests."""

from __future__ import annotations

import json
from typing import Any, Dict

import pytest

from argmap.errors import CycleError, ParseError, SchemaError
from argmap.pipeline import build_argument_map

CYCLIC = {
    "premises": [
        {"id": "p1", "text": "A", "type": "axiom"},
        {"id": "p2", "text": "B", "type": "intermediate"},
    ],
    "connections": [
        {"id": "c1", "source": "p1", "target": "p2"},
        {"id": "c2", "source": "p2", "target": "p1"},
    ],
    "conclusion": "C",
}


def test_text_response_becomes_laid_out_map(socrates_payload: Dict[str, Any]) -> None:
    raw = "Here is the breakdown:\n" + json.dumps(socrates_payload) + "\nLet me know!"
    argument_map = build_argument_map(raw)
    assert argument_map.result.premise_ids() == ["p1", "p2", "conclusion"]
    assert set(argument_map.layout) == {"p1", "p2", "conclusion"}
    assert argument_map.layout["conclusion"].level == 2
    assert argument_map.diagnostics == []


def test_payload_serializes_with_wire_names(socrates_payload: Dict[str, Any]) -> None:
    payload = build_argument_map(socrates_payload).to_payload()
    assert payload["result"]["conclusion"] == "Socrates is mortal"
    assert payload["layout"]["p1"] == {"level": 0, "x": 250.0, "y": 50.0}
    assert "supportingTheories" in payload["result"]["premises"][0]
    json.dumps(payload)


def test_parse_failure_propagates() -> None:
    with pytest.raises(ParseError):
        build_argument_map("I could not analyze that argument.")


def test_schema_failure_propagates() -> None:
    with pytest.raises(SchemaError):
        build_argument_map('{"premises": []}')


def test_cycles_tolerated_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ARGMAP_REJECT_CYCLES", raising=False)
    argument_map = build_argument_map(CYCLIC)
    assert [diag.kind for diag in argument_map.diagnostics if diag.kind == "cycle"] == ["cycle"]


def test_cycle_rejection_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARGMAP_REJECT_CYCLES", "true")
    with pytest.raises(CycleError):
        build_argument_map(CYCLIC)
    argument_map = build_argument_map(CYCLIC, reject_cycles=False)
    assert argument_map.layout["conclusion"].level == 1
