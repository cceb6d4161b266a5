"""
Synchronous Bellman–Ford-style distance-vector engine.

Each round rebuilds every node's table purely from the previous round's
snapshot of all tables, which models simultaneous vector exchange between
neighbours.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Sequence
import logging

from algorithms import DistanceVectorEngine, StepResult
from graph import Edge
from routing import (
    INF,
    NO_HOP,
    RouteEntry,
    RoutingTable,
    TableState,
    self_entry,
    snapshot,
    unreachable_entry,
)

logger = logging.getLogger(__name__)


class TieBreakPolicy(Enum):
    """
    How a node picks between neighbours offering the same total cost.

    STABLE: keep last round's next hop if it is among the tying neighbours,
        otherwise the first tying neighbour in edge order.
    LOWEST_ID: always the tying neighbour with the lowest id.
    """

    STABLE = "stable"
    LOWEST_ID = "lowest_id"


def outgoing_edges(nodes: Sequence[int], edges: Sequence[Edge]) -> Dict[int, List[Edge]]:
    """
    Group edges by source, in edge-list order, dropping edges whose endpoints
    fall outside the node range.
    """
    n = len(nodes)
    grouped: Dict[int, List[Edge]] = {node: [] for node in range(n)}
    for edge in edges:
        if not (0 <= edge.src < n and 0 <= edge.dest < n):
            logger.warning("ignoring edge %s->%s: unknown node id", edge.src, edge.dest)
            continue
        grouped[edge.src].append(edge)
    return grouped


def _advertised_cost(previous: TableState, neighbor: int, dest: int) -> int:
    if not 0 <= neighbor < len(previous):
        return INF
    entry = previous[neighbor].get(dest)
    return entry.cost if entry is not None else INF


class SynchronousDistanceVectorEngine(DistanceVectorEngine):
    """
    Round-based DVR over a directed edge list.

    Only sums two finite costs, so the INF sentinel never takes part in a
    candidate path.
    """

    def __init__(self, tie_break: TieBreakPolicy = TieBreakPolicy.STABLE) -> None:
        self._tie_break = tie_break

    @property
    def tie_break(self) -> TieBreakPolicy:
        return self._tie_break

    def initialize(self, nodes: Sequence[int], edges: Sequence[Edge]) -> TableState:
        """
        Round-0 tables. With several edges from X to the same Y the first one
        in edge order is used.
        """
        grouped = outgoing_edges(nodes, edges)
        tables: List[RoutingTable] = []
        for node in range(len(nodes)):
            table: Dict[int, RouteEntry] = {node: self_entry(node)}
            for edge in grouped[node]:
                if edge.dest not in table:
                    table[edge.dest] = RouteEntry(edge.dest, edge.dest, edge.cost)
            for dest in range(len(nodes)):
                if dest not in table:
                    table[dest] = unreachable_entry(dest)
            tables.append(table)
        return tuple(tables)

    def step(
        self,
        tables: TableState,
        nodes: Sequence[int],
        edges: Sequence[Edge],
    ) -> StepResult:
        previous = snapshot(tables)
        grouped = outgoing_edges(nodes, edges)
        n = len(nodes)

        new_tables: List[RoutingTable] = []
        changed_nodes: List[int] = []
        for node in range(n):
            table: Dict[int, RouteEntry] = {node: self_entry(node)}
            for dest in range(n):
                if dest == node:
                    continue
                table[dest] = self._best_entry(node, dest, grouped[node], previous)

            new_tables.append(table)
            if node >= len(previous) or previous[node] != table:
                changed_nodes.append(node)

        logger.debug("DV round rebuilt %d tables, %d changed", n, len(changed_nodes))
        return StepResult(tables=tuple(new_tables), changed=bool(changed_nodes))

    # --- Internal helpers ---------------------------------------------------

    def _best_entry(
        self,
        node: int,
        dest: int,
        neighbours: Sequence[Edge],
        previous: TableState,
    ) -> RouteEntry:
        best_cost = INF
        tied: List[int] = []

        for edge in neighbours:
            via_cost = _advertised_cost(previous, edge.dest, dest)
            if edge.cost >= INF or via_cost >= INF:
                continue
            candidate = edge.cost + via_cost
            if candidate < best_cost:
                best_cost = candidate
                tied = [edge.dest]
            elif candidate == best_cost:
                tied.append(edge.dest)

        if best_cost >= INF:
            return unreachable_entry(dest)
        return RouteEntry(dest, self._pick(node, dest, tied, previous), best_cost)

    def _pick(self, node: int, dest: int, tied: List[int], previous: TableState) -> int:
        if self._tie_break is TieBreakPolicy.LOWEST_ID:
            return min(tied)

        prior: Optional[RouteEntry] = None
        if node < len(previous):
            prior = previous[node].get(dest)
        if prior is not None and prior.next_hop != NO_HOP and prior.next_hop in tied:
            return prior.next_hop
        return tied[0]
