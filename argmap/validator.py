"""Schema validation and minimal repair of analysis payloads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple, Type

import networkx as nx
from pydantic import AliasChoices, BaseModel, ValidationError

from .errors import CycleError, SchemaError
from .schemas import (
    CONCLUSION_ID,
    DEFAULT_PREMISE_TYPE,
    DEFAULT_STRENGTH,
    PREMISE_TYPES,
    STRENGTHS,
    AnalysisResult,
    Connection,
    Diagnostic,
    Premise,
    ValidationReport,
    coerce_id,
    lowered_label,
)
from .utils import configure_logging

configure_logging()
logger = logging.getLogger(__name__)


def _location(prefix: str, exc: ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    if not prefix:
        return loc or "(root)"
    return f"{prefix}.{loc}" if loc else prefix


def _first_message(exc: ValidationError) -> str:
    return exc.errors()[0].get("msg", str(exc))


def _check_shape(payload: Any) -> None:
    if not isinstance(payload, Mapping):
        raise SchemaError(
            f"Analysis result must be an object, got {type(payload).__name__}",
            field="(root)",
        )
    if not isinstance(payload.get("premises"), list):
        raise SchemaError("Analysis result is missing a 'premises' list", field="premises")
    if not isinstance(payload.get("connections"), list):
        raise SchemaError("Analysis result is missing a 'connections' list", field="connections")
    conclusion = payload.get("conclusion")
    if not conclusion:
        raise SchemaError("Analysis result is missing a 'conclusion'", field="conclusion")
    if not isinstance(conclusion, str):
        raise SchemaError("Analysis result 'conclusion' must be text", field="conclusion")


def _input_keys(model: Type[BaseModel], key: Any) -> Tuple[Optional[str], Set[str]]:
    """Field name for an error location plus every input key that feeds it."""
    for name, info in model.model_fields.items():
        keys = {name}
        if info.alias:
            keys.add(info.alias)
        choices = info.validation_alias
        if isinstance(choices, AliasChoices):
            keys.update(choice for choice in choices.choices if isinstance(choice, str))
        elif isinstance(choices, str):
            keys.add(choices)
        if key in keys:
            return name, keys
    return None, {str(key)}


def _repaired(location: str, value: Any, default: Any) -> Diagnostic:
    logger.warning("Replacing invalid %s (%r) with %r", location, value, default)
    return Diagnostic(
        kind="repaired_field",
        message=f"Invalid value at {location} replaced with {default!r}",
        details={"location": location, "value": value, "default": default},
    )


def _parse_premise(idx: int, entry: Any, diagnostics: List[Diagnostic]) -> Premise:
    prefix = f"premises[{idx}]"
    if not isinstance(entry, Mapping):
        raise SchemaError(f"Invalid premise at {prefix}: expected an object", field=prefix)
    data = dict(entry)

    kind = lowered_label(data.get("type"))
    if kind not in PREMISE_TYPES:
        diagnostics.append(_repaired(f"{prefix}.type", data.get("type"), DEFAULT_PREMISE_TYPE))
        data["type"] = DEFAULT_PREMISE_TYPE

    while True:
        try:
            return Premise.model_validate(data)
        except ValidationError as exc:
            error = exc.errors()[0]
            loc = error.get("loc", ())
            name, keys = _input_keys(Premise, loc[0] if loc else None)
            if name is None or name == "id" or not keys & data.keys():
                field = _location(prefix, exc)
                raise SchemaError(f"Invalid premise at {field}: {_first_message(exc)}", field=field) from exc
            key = next(key for key in keys if key in data)
            default = Premise.model_fields[name].get_default(call_default_factory=True)
            diagnostics.append(_repaired(f"{prefix}.{key}", data[key], default))
            for key in keys:
                data.pop(key, None)


def _parse_premises(entries: Sequence[Any], diagnostics: List[Diagnostic]) -> List[Premise]:
    """Parse premise entries; only a missing or unusable ``id`` is fatal.

    An unknown ``type`` becomes ``intermediate``. Any other invalid optional
    field falls back to its default. Each repair is recorded as a
    ``repaired_field`` diagnostic.
    """
    return [_parse_premise(idx, entry, diagnostics) for idx, entry in enumerate(entries)]


def _repair_conclusion(
    premises: List[Premise], conclusion: str, diagnostics: List[Diagnostic]
) -> None:
    conclusions = [premise for premise in premises if premise.is_conclusion]
    if not conclusions:
        premises.append(Premise(id=CONCLUSION_ID, text=conclusion, type="conclusion"))
        diagnostics.append(
            Diagnostic(
                kind="synthesized_conclusion",
                message="No conclusion premise found; appended one from the conclusion text",
                details={"id": CONCLUSION_ID},
            )
        )
        logger.info("Synthesized missing conclusion premise")
    elif len(conclusions) > 1:
        ids = [premise.id for premise in conclusions]
        diagnostics.append(
            Diagnostic(
                kind="duplicate_conclusion",
                message=f"{len(ids)} premises are marked as the conclusion",
                details={"ids": ids},
            )
        )
        logger.warning("Multiple conclusion premises: %s", ids)


def _check_unique_ids(premises: Sequence[Premise]) -> None:
    seen: Set[str] = set()
    for idx, premise in enumerate(premises):
        if premise.id in seen:
            raise SchemaError(
                f"Duplicate premise id '{premise.id}'",
                field=f"premises[{idx}].id",
            )
        seen.add(premise.id)


def _endpoint(value: Any) -> Optional[str]:
    value = coerce_id(value)
    return value if isinstance(value, str) else None


def _filter_connections(
    entries: Sequence[Any], valid_ids: Set[str], diagnostics: List[Diagnostic]
) -> List[Connection]:
    kept: List[Connection] = []
    sorted_ids = sorted(valid_ids)
    for idx, entry in enumerate(entries):
        source = target = None
        if isinstance(entry, Mapping):
            source = _endpoint(entry.get("source"))
            target = _endpoint(entry.get("target"))
        if source not in valid_ids or target not in valid_ids:
            logger.warning(
                "Dropping invalid connection %s; valid premise ids: %s",
                entry,
                sorted_ids,
            )
            diagnostics.append(
                Diagnostic(
                    kind="dropped_connection",
                    message=f"Connection {source!r} -> {target!r} references an unknown premise",
                    details={"connection": entry, "valid_ids": sorted_ids},
                )
            )
            continue
        data = dict(entry)
        strength = data.get("strength")
        if strength is not None and lowered_label(strength) not in STRENGTHS:
            diagnostics.append(_repaired(f"connections[{idx}].strength", strength, DEFAULT_STRENGTH))
            data["strength"] = DEFAULT_STRENGTH
        try:
            kept.append(Connection.model_validate(data))
        except ValidationError as exc:
            field = _location(f"connections[{idx}]", exc)
            logger.warning("Dropping malformed connection %s: %s", entry, _first_message(exc))
            diagnostics.append(
                Diagnostic(
                    kind="dropped_connection",
                    message=f"Connection at {field} is malformed: {_first_message(exc)}",
                    details={"connection": entry, "valid_ids": sorted_ids},
                )
            )
    return kept


def build_digraph(premises: Sequence[Premise], connections: Sequence[Connection]) -> nx.DiGraph:
    """Directed graph of premise ids, preserving premise and connection order."""
    graph = nx.DiGraph()
    for premise in premises:
        graph.add_node(premise.id)
    for connection in connections:
        graph.add_edge(connection.source, connection.target, id=connection.id)
    return graph


def find_cycles(premises: Sequence[Premise], connections: Sequence[Connection]) -> List[List[str]]:
    """Return one representative cycle per strongly connected component."""
    graph = build_digraph(premises, connections)
    order = {premise.id: idx for idx, premise in enumerate(premises)}
    cycles: List[List[str]] = []
    for component in nx.strongly_connected_components(graph):
        if len(component) == 1:
            node = next(iter(component))
            if graph.has_edge(node, node):
                cycles.append([node])
            continue
        start = min(component, key=order.__getitem__)
        edges = nx.find_cycle(graph.subgraph(component), source=start)
        cycles.append([u for u, _v in edges])
    cycles.sort(key=lambda cycle: min(order[node] for node in cycle))
    return cycles


def _check_acyclic(
    result: AnalysisResult, reject_cycles: bool, diagnostics: List[Diagnostic]
) -> None:
    for cycle in find_cycles(result.premises, result.connections):
        if reject_cycles:
            raise CycleError(cycle)
        logger.warning("Connections contain a cycle: %s", cycle)
        diagnostics.append(
            Diagnostic(
                kind="cycle",
                message="Connections contain a cycle",
                details={"cycle": cycle},
            )
        )


def _check_reachability(result: AnalysisResult, diagnostics: List[Diagnostic]) -> None:
    graph = build_digraph(result.premises, result.connections)
    reaching: Set[str] = set()
    sinks = [premise.id for premise in result.premises if premise.is_conclusion]
    for sink in sinks:
        reaching.add(sink)
        reaching.update(nx.ancestors(graph, sink))
    unreachable = [premise.id for premise in result.premises if premise.id not in reaching]
    if unreachable:
        logger.info("Premises without a path to the conclusion: %s", unreachable)
        diagnostics.append(
            Diagnostic(
                kind="unreachable",
                message=f"{len(unreachable)} premise(s) do not lead to the conclusion",
                details={"ids": unreachable},
            )
        )


def validate_payload(payload: Any, reject_cycles: bool = False) -> ValidationReport:
    """Validate an untyped payload, repair what is recoverable, and report.

    Raises ``SchemaError`` for the first structural problem or a premise
    without a usable id. Connections that reference unknown premises or are
    malformed are dropped, and invalid optional fields are reset, each
    reported as a diagnostic.
    """
    _check_shape(payload)
    diagnostics: List[Diagnostic] = []

    premises = _parse_premises(payload["premises"], diagnostics)
    _repair_conclusion(premises, payload["conclusion"], diagnostics)
    _check_unique_ids(premises)

    valid_ids = {premise.id for premise in premises}
    connections = _filter_connections(payload["connections"], valid_ids, diagnostics)

    data: Dict[str, Any] = dict(payload)
    data["premises"] = premises
    data["connections"] = connections
    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as exc:
        field = _location("", exc)
        raise SchemaError(f"Invalid analysis result at {field}: {_first_message(exc)}", field=field) from exc

    _check_acyclic(result, reject_cycles, diagnostics)
    _check_reachability(result, diagnostics)
    logger.info(
        "Validated analysis: %d premises, %d connections, %d diagnostics",
        len(result.premises),
        len(result.connections),
        len(diagnostics),
    )
    return ValidationReport(result=result, diagnostics=diagnostics)


def validate_result(payload: Any, reject_cycles: bool = False) -> AnalysisResult:
    """Validate and repair ``payload``, returning only the analysis result."""
    return validate_payload(payload, reject_cycles=reject_cycles).result
