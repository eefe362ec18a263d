"""Graphviz DOT rendering of a laid-out argument map."""

from __future__ import annotations

from typing import Collection, Dict, List

from .layout import NODE_WIDTH
from .schemas import ArgumentMap, Connection, Premise

NODE_STYLES: Dict[str, Dict[str, str]] = {
    "axiom": {"color": "#22c55e", "fillcolor": "#dcfce7"},
    "assumption": {"color": "#f59e0b", "fillcolor": "#fef3c7"},
    "intermediate": {"color": "#3b82f6", "fillcolor": "#dbeafe"},
    "conclusion": {"color": "#8b5cf6", "fillcolor": "#f3e8ff"},
}

EDGE_STYLES: Dict[str, Dict[str, str]] = {
    "strong": {"color": "#22c55e", "penwidth": "3"},
    "moderate": {"color": "#64748b", "penwidth": "2"},
    "weak": {"color": "#ef4444", "penwidth": "1", "style": "dashed"},
}

HIGHLIGHT_COLOR = "#2563eb"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _attrs(attrs: Dict[str, str]) -> str:
    return ", ".join(f"{key}={_quote(value)}" for key, value in attrs.items())


def _dot_header() -> str:
    return (
        "digraph argument {\n"
        '  graph [layout="neato", inputscale="72", splines="true", outputorder="edgesfirst"];\n'
        '  node [shape="box", style="rounded,filled", fontsize="12", fontname="Helvetica"];\n'
        '  edge [arrowhead="normal"];\n'
    )


def _node(premise: Premise, x: float, y: float) -> str:
    attrs = dict(NODE_STYLES.get(premise.type, {}))
    attrs["label"] = f"{premise.display_title}\n{premise.type.capitalize()}"
    attrs["tooltip"] = premise.text
    attrs["width"] = f"{NODE_WIDTH / 72:.2f}"
    # node positions are top-left corners with y growing downwards
    attrs["pos"] = f"{x + NODE_WIDTH / 2:.1f},{-y:.1f}!"
    if premise.is_conclusion:
        attrs["penwidth"] = "2"
        attrs["fontname"] = "Helvetica-Bold"
    return f"  {_quote(premise.id)} [{_attrs(attrs)}];"


def _edge(connection: Connection, highlighted: bool) -> str:
    attrs = dict(EDGE_STYLES.get(connection.strength, EDGE_STYLES["moderate"]))
    if highlighted:
        attrs["color"] = HIGHLIGHT_COLOR
        attrs["penwidth"] = "4"
    attrs["id"] = connection.id
    return f"  {_quote(connection.source)} -> {_quote(connection.target)} [{_attrs(attrs)}];"


def build_argument_dot(argument_map: ArgumentMap, highlighted: Collection[str] = ()) -> str:
    """Return a DOT string with every node pinned at its computed position.

    ``highlighted`` holds connection ids to emphasise.
    """
    lines: List[str] = []
    for premise in argument_map.result.premises:
        position = argument_map.layout.get(premise.id)
        if position is None:
            continue
        lines.append(_node(premise, position.x, position.y))
    for connection in argument_map.result.connections:
        lines.append(_edge(connection, connection.id in highlighted))
    return _dot_header() + "\n".join(lines) + ("\n" if lines else "") + "}\n"
