"""Shared fixtures for argument map tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def socrates_payload() -> Dict[str, Any]:
    return {
        "premises": [
            {"id": "p1", "text": "All humans are mortal", "type": "axiom"},
            {"id": "p2", "text": "Socrates is a human", "type": "assumption"},
            {"id": "conclusion", "text": "Socrates is mortal", "type": "conclusion"},
        ],
        "connections": [
            {"id": "c1", "source": "p1", "target": "conclusion", "strength": "strong"},
            {"id": "c2", "source": "p2", "target": "conclusion"},
        ],
        "conclusion": "Socrates is mortal",
    }
