"""
Concrete topology for the DVR simulator.

Nodes are the dense ids 0..node_count-1. Links are undirected and stored as
two directed edges with matching cost. The module-level functions are pure:
they take an edge sequence and return a LinkResult holding a new edge tuple.
``Topology`` wraps them, swaps in the new edges on success and tracks a dirty
flag for the simulation controller.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from errors import DuplicateLinkError, LinkResult, NotFoundError, ValidationError
from graph import Edge
from routing import INF

logger = logging.getLogger(__name__)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_ids(node_count: int, *ids: object) -> Optional[ValidationError]:
    for node in ids:
        if not _is_int(node):
            return ValidationError(f"Invalid node ID {node!r}.")
    for node in ids:
        if not 0 <= node < node_count:  # type: ignore[operator]
            return ValidationError(f"Node ID {node} out of bounds (0..{node_count - 1}).")
    return None


def _check_link(node_count: int, a: object, b: object, cost: object) -> Optional[ValidationError]:
    if not _is_int(cost):
        return ValidationError(f"Invalid cost {cost!r}.")
    err = _check_ids(node_count, a, b)
    if err is not None:
        return err
    if a == b:
        return ValidationError("Nodes must be different.")
    if cost <= 0:  # type: ignore[operator]
        return ValidationError("Cost must be positive.")
    if cost >= INF:  # type: ignore[operator]
        return ValidationError("Cost must be below INF.")
    return None


def _links(edge: Edge, a: int, b: int) -> bool:
    return (edge.src == a and edge.dest == b) or (edge.src == b and edge.dest == a)


def add_link(edges: Sequence[Edge], node_count: int, a: int, b: int, cost: int) -> LinkResult:
    current = tuple(edges)
    err = _check_link(node_count, a, b, cost)
    if err is not None:
        return LinkResult(current, err, changed=False)
    if any(_links(e, a, b) for e in current):
        return LinkResult(current, DuplicateLinkError(f"Link {a} <-> {b} already exists."), changed=False)

    new_edges = current + (Edge(a, b, cost), Edge(b, a, cost))
    return LinkResult(new_edges, message=f"Link added: {a} <-> {b} (Cost: {cost})")


def remove_link(edges: Sequence[Edge], node_count: int, a: int, b: int) -> LinkResult:
    current = tuple(edges)
    err = _check_ids(node_count, a, b)
    if err is not None:
        return LinkResult(current, err, changed=False)

    kept = tuple(e for e in current if not _links(e, a, b))
    if len(kept) == len(current):
        return LinkResult(current, NotFoundError(f"Link {a} <-> {b} not found."), changed=False)
    return LinkResult(kept, message=f"Link removed: {a} <-> {b}")


def update_cost(edges: Sequence[Edge], node_count: int, a: int, b: int, new_cost: int) -> LinkResult:
    """
    Rewrite both directions of an existing link with ``new_cost``.

    The rewritten edges keep their positions in the list. Setting the cost the
    link already has is accepted but reported with ``changed=False``.
    """
    current = tuple(edges)
    err = _check_link(node_count, a, b, new_cost)
    if err is not None:
        return LinkResult(current, err, changed=False)

    forward = next((i for i, e in enumerate(current) if e.src == a and e.dest == b), None)
    backward = next((i for i, e in enumerate(current) if e.src == b and e.dest == a), None)
    if forward is None or backward is None:
        return LinkResult(current, NotFoundError(f"Link {a} <-> {b} not found."), changed=False)

    if current[forward].cost == new_cost and current[backward].cost == new_cost:
        return LinkResult(current, changed=False, message=f"Cost is already {new_cost}.")

    updated = list(current)
    updated[forward] = Edge(a, b, new_cost)
    updated[backward] = Edge(b, a, new_cost)
    return LinkResult(
        tuple(updated),
        message=f"Link cost updated: {a} <-> {b} (New Cost: {new_cost})",
    )


def validate_edges(edges: Iterable[Edge], node_count: int) -> List[str]:
    """
    Problems found in a raw edge list; empty when the list is well formed.
    """
    problems: List[str] = []
    seen = set()
    for edge in edges:
        if not (0 <= edge.src < node_count and 0 <= edge.dest < node_count):
            problems.append(f"edge {edge.src}->{edge.dest} references an unknown node")
        if edge.src == edge.dest:
            problems.append(f"edge {edge.src}->{edge.dest} is a self loop")
        if edge.cost <= 0:
            problems.append(f"edge {edge.src}->{edge.dest} has non-positive cost {edge.cost}")
        elif edge.cost >= INF:
            problems.append(f"edge {edge.src}->{edge.dest} has cost {edge.cost} at or above INF")
        if (edge.src, edge.dest) in seen:
            problems.append(f"edge {edge.src}->{edge.dest} is duplicated")
        seen.add((edge.src, edge.dest))
    return problems


def bidirectional(links: Iterable[Tuple[int, int, int]]) -> Tuple[Edge, ...]:
    """Expand (a, b, cost) links into directed edge pairs."""
    edges: List[Edge] = []
    for a, b, cost in links:
        edges.append(Edge(a, b, cost))
        edges.append(Edge(b, a, cost))
    return tuple(edges)


class Topology:
    """
    Node count plus an immutable edge tuple, replaced wholesale on each edit.
    """

    def __init__(self, node_count: int, edges: Iterable[Edge] = ()) -> None:
        if node_count < 0:
            raise ValueError("node_count must be non-negative")
        self._node_count = node_count
        self._edges: Tuple[Edge, ...] = tuple(edges)
        self._dirty = False

    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def dirty(self) -> bool:
        return self._dirty

    def clear_dirty(self) -> bool:
        """Return the dirty flag and reset it."""
        was_dirty = self._dirty
        self._dirty = False
        return was_dirty

    def validate(self) -> List[str]:
        return validate_edges(self._edges, self._node_count)

    # --- Mutation API --------------------------------------------------------

    def add_link(self, a: int, b: int, cost: int) -> LinkResult:
        return self._apply(add_link(self._edges, self._node_count, a, b, cost))

    def remove_link(self, a: int, b: int) -> LinkResult:
        return self._apply(remove_link(self._edges, self._node_count, a, b))

    def update_cost(self, a: int, b: int, new_cost: int) -> LinkResult:
        return self._apply(update_cost(self._edges, self._node_count, a, b, new_cost))

    def replace_edges(self, edges: Iterable[Edge]) -> None:
        self._edges = tuple(edges)
        self._dirty = True

    def _apply(self, result: LinkResult) -> LinkResult:
        if result.ok and result.changed:
            self._edges = result.edges
            self._dirty = True
            logger.info(result.message)
        elif result.ok:
            logger.debug(result.message)
        else:
            logger.debug("rejected link edit: %s", result.error)
        return result

    # --- Queries ------------------------------------------------------------

    def nodes(self) -> Iterable[int]:
        return range(self._node_count)

    def outgoing(self, node: int) -> Mapping[int, int]:
        # First edge per destination wins, matching table initialisation.
        out: Dict[int, int] = {}
        for edge in self._edges:
            if edge.src == node and edge.dest not in out:
                out[edge.dest] = edge.cost
        return out
