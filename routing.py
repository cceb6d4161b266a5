"""
Routing table abstractions for the DVR simulator.

Defines the route entry value type, the sentinels used for unreachable
destinations, and helpers for comparing, diffing and rendering tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

# Finite "infinity" with headroom: INF + INF still fits in a signed 32-bit int.
INF: int = (2**31 - 1) // 2

# Next hop for unreachable destinations.
NO_HOP: int = -1


@dataclass(frozen=True)
class RouteEntry:
    """
    Single forwarding entry in a node's routing table.
    """
    destination: int
    next_hop: int  # NO_HOP if unreachable
    cost: int      # INF if unreachable, 0 for the owning node

    @property
    def reachable(self) -> bool:
        return self.cost < INF

    def __str__(self) -> str:
        return format_entry(self)


RoutingTable = Mapping[int, RouteEntry]

# Indexed by node id; one table per node.
TableState = Tuple[RoutingTable, ...]


def self_entry(node: int) -> RouteEntry:
    return RouteEntry(node, node, 0)


def unreachable_entry(dest: int) -> RouteEntry:
    return RouteEntry(dest, NO_HOP, INF)


def format_entry(entry: RouteEntry) -> str:
    """Render an entry the way the routing table view shows it."""
    hop = "-" if entry.next_hop == NO_HOP and entry.cost != 0 else str(entry.next_hop)
    if entry.cost == 0:
        cost = "0"
    elif entry.cost >= INF:
        cost = "INF"
    else:
        cost = str(entry.cost)
    return f"Dest: {entry.destination}, NextHop: {hop}, Cost: {cost}"


def format_table(node: int, table: RoutingTable) -> str:
    lines = [f"Router {node}"]
    for dest in sorted(table):
        lines.append(f"  {format_entry(table[dest])}")
    return "\n".join(lines)


def snapshot(tables: Sequence[RoutingTable]) -> TableState:
    """Detached, read-only-by-convention copy of a table collection."""
    return tuple(dict(table) for table in tables)


def tables_equal(a: Sequence[RoutingTable], b: Sequence[RoutingTable]) -> bool:
    """Structural equality over every node's table."""
    if len(a) != len(b):
        return False
    return all(dict(x) == dict(y) for x, y in zip(a, b))


def changed_entries(previous: RoutingTable, current: RoutingTable) -> Dict[int, RouteEntry]:
    """
    Entries of ``current`` whose value differs from ``previous``.

    Destinations absent from ``previous`` count as changed.
    """
    return {
        dest: entry
        for dest, entry in current.items()
        if previous.get(dest) != entry
    }


def cost_matrix(tables: Sequence[RoutingTable]) -> np.ndarray:
    """
    n x n integer matrix of costs, row = owning node, column = destination.

    Missing entries are filled with INF.
    """
    n = len(tables)
    matrix = np.full((n, n), INF, dtype=np.int64)
    for src, table in enumerate(tables):
        for dest, entry in table.items():
            if 0 <= dest < n:
                matrix[src, dest] = entry.cost
    return matrix


def next_hop_matrix(tables: Sequence[RoutingTable]) -> np.ndarray:
    n = len(tables)
    matrix = np.full((n, n), NO_HOP, dtype=np.int64)
    for src, table in enumerate(tables):
        for dest, entry in table.items():
            if 0 <= dest < n:
                matrix[src, dest] = entry.next_hop
    return matrix


def reachable_counts(tables: Sequence[RoutingTable]) -> List[int]:
    """Number of finite-cost destinations per node (self included)."""
    return [sum(1 for e in table.values() if e.reachable) for table in tables]
