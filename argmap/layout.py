"""Layered layout: discrete levels plus deterministic 2-D coordinates."""

from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Set, Tuple

from .schemas import Connection, NodePosition, Premise

COLUMN_WIDTH = 250
MAX_COLUMNS = 4
CENTER_X = 500
ROW_HEIGHT = 150
TOP_MARGIN = 50
NODE_WIDTH = 220


def _outgoing(connections: Sequence[Connection]) -> Dict[str, List[str]]:
    targets: Dict[str, List[str]] = {}
    for connection in connections:
        targets.setdefault(connection.source, []).append(connection.target)
    return targets


def compute_levels(
    premises: Sequence[Premise], connections: Sequence[Connection]
) -> Dict[str, int]:
    """Longest-path levels from root premises, before the conclusion override.

    Nodes on the current traversal path are skipped, so cycles terminate
    (their levels are then only approximate). A node is re-expanded only when
    reached at a deeper level than before.
    """
    levels: Dict[str, int] = {premise.id: 0 for premise in premises}
    outgoing = _outgoing(connections)
    has_incoming = {connection.target for connection in connections}
    roots = [premise.id for premise in premises if premise.id not in has_incoming]

    expanded: Set[str] = set()
    for root in roots:
        on_path: Set[str] = {root}
        expanded.add(root)
        stack: List[Tuple[str, int, Iterator[str]]] = [(root, 0, iter(outgoing.get(root, ())))]
        while stack:
            node, level, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                on_path.discard(node)
                continue
            if child not in levels or child in on_path:
                continue
            child_level = level + 1
            if child in expanded and child_level <= levels[child]:
                continue
            if child_level > levels[child]:
                levels[child] = child_level
            expanded.add(child)
            on_path.add(child)
            stack.append((child, child_level, iter(outgoing.get(child, ()))))
    return levels


def compute_layout(
    premises: Sequence[Premise], connections: Sequence[Connection]
) -> Dict[str, NodePosition]:
    """Assign every premise a level and an (x, y) position.

    Conclusion premises are forced one level below the deepest natural level
    and centred; other premises are laid out per level in premise order, in
    rows of at most ``MAX_COLUMNS`` centred on ``CENTER_X``.
    """
    natural = compute_levels(premises, connections)
    max_level = max(natural.values(), default=0)

    rows: Dict[int, List[str]] = {}
    for premise in premises:
        if not premise.is_conclusion:
            rows.setdefault(natural[premise.id], []).append(premise.id)

    positions: Dict[str, NodePosition] = {}
    for premise in premises:
        if premise.is_conclusion:
            level = max_level + 1
            x = CENTER_X - NODE_WIDTH / 2
        else:
            level = natural[premise.id]
            row = rows[level]
            level_width = min(len(row), MAX_COLUMNS) * COLUMN_WIDTH
            level_start = CENTER_X - level_width / 2
            x = level_start + (row.index(premise.id) % MAX_COLUMNS) * COLUMN_WIDTH
        y = level * ROW_HEIGHT + TOP_MARGIN
        positions[premise.id] = NodePosition(level=level, x=float(x), y=float(y))
    return positions
