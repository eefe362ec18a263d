"""Command-line entry point tests."""

from __future__ import annotations

import importlib.util
import json
import sys
from pathlib import Path
from types import ModuleType

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "analyze_argument.py"


def _load_script() -> ModuleType:
    location = importlib.util.spec_from_file_location("analyze_argument", SCRIPT)
    module = importlib.util.module_from_spec(location)
    location.loader.exec_module(module)
    return module


def test_blank_text_reports_failure(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    script = _load_script()
    monkeypatch.setattr(sys, "argv", ["analyze_argument.py", "--text", "   "])
    assert script.main() == 1
    assert "Failed to analyze the argument" in capsys.readouterr().err


def test_saved_response_is_laid_out(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    response = tmp_path / "response.txt"
    response.write_text(
        'Analysis:\n{"premises": [{"id": "p1", "text": "A", "type": "axiom"}],'
        ' "connections": [{"source": "p1", "target": "conclusion"}], "conclusion": "C"}',
        encoding="utf-8",
    )
    script = _load_script()
    monkeypatch.setattr(sys, "argv", ["analyze_argument.py", "--response-file", str(response)])
    assert script.main() == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["layout"]["conclusion"]["level"] == 2
    assert [premise["id"] for premise in payload["result"]["premises"]] == ["p1", "conclusion"]
