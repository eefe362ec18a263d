"""Argument decomposition: model response -> validated graph -> layered layout."""

from .errors import APIError, ArgmapError, ConfigError, CycleError, ParseError, SchemaError, TransportError
from .layout import compute_layout, compute_levels
from .normalizer import normalize_response
from .pipeline import build_argument_map
from .schemas import AnalysisResult, ArgumentMap, Connection, NodePosition, Premise
from .validator import validate_payload, validate_result

__all__ = [
    "APIError",
    "AnalysisResult",
    "ArgmapError",
    "ArgumentMap",
    "ConfigError",
    "Connection",
    "CycleError",
    "NodePosition",
    "ParseError",
    "Premise",
    "SchemaError",
    "TransportError",
    "build_argument_map",
    "compute_layout",
    "compute_levels",
    "normalize_response",
    "validate_payload",
    "validate_result",
]
