"""Normalizer -> validator -> layout, as one all-or-nothing step."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .layout import compute_layout
from .normalizer import normalize_response
from .schemas import ArgumentMap
from .utils import configure_logging, env_flag
from .validator import validate_payload

configure_logging()
logger = logging.getLogger(__name__)


def _reject_cycles_default() -> bool:
    return env_flag("ARGMAP_REJECT_CYCLES", default=False)


def build_argument_map(raw: Any, reject_cycles: Optional[bool] = None) -> ArgumentMap:
    """Turn a raw model response into a validated, laid-out argument map."""
    if reject_cycles is None:
        reject_cycles = _reject_cycles_default()
    payload = normalize_response(raw)
    report = validate_payload(payload, reject_cycles=reject_cycles)
    layout = compute_layout(report.result.premises, report.result.connections)
    logger.info("Laid out %d nodes", len(layout))
    return ArgumentMap(result=report.result, layout=layout, diagnostics=report.diagnostics)
