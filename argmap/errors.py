"""Error kinds raised across the analysis pipeline."""

from __future__ import annotations

from typing import List, Optional


class ArgmapError(Exception):
    """Base class for every failure surfaced to callers."""


class ConfigError(ArgmapError, RuntimeError):
    """A required credential or setting for the model call is missing."""


class APIError(ArgmapError, RuntimeError):
    """The upstream model call failed or returned an unusable response."""


TransportError = APIError


class ParseError(ArgmapError, ValueError):
    """No structured payload could be extracted from the model response."""


class SchemaError(ArgmapError, ValueError):
    """The payload does not have the shape of an analysis result."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class CycleError(SchemaError):
    """The connections contain a directed cycle and cycles are rejected."""

    def __init__(self, cycle: List[str]) -> None:
        path = " -> ".join(cycle + cycle[:1])
        super().__init__(f"Connections form a cycle: {path}", field="connections")
        self.cycle = cycle
