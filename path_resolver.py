"""
Greedy next-hop walk over the current routing tables.
"""

from typing import List, Sequence, Set

from errors import (
    NoRouteError,
    PathResult,
    RoutingAnomalyError,
    RoutingLoopError,
    ValidationError,
)
from routing import INF, NO_HOP, RoutingTable


def resolve_path(tables: Sequence[RoutingTable], source: int, destination: int) -> PathResult:
    """
    Follow next hops from ``source`` until ``destination`` is reached.

    Fails with NoRouteError when a table has no finite route, with
    RoutingAnomalyError when a node names itself as next hop, and with
    RoutingLoopError when the walk revisits a node (possible while tables are
    still converging). Terminates because every iteration visits a new node.
    """
    n = len(tables)
    for node in (source, destination):
        if not isinstance(node, int) or isinstance(node, bool) or not 0 <= node < n:
            return PathResult(error=ValidationError(f"ID {node!r} out of bounds."))

    if source == destination:
        return PathResult(path=(source,))

    path: List[int] = []
    visited: Set[int] = set()
    current = source
    while True:
        if current == destination:
            path.append(current)
            return PathResult(path=tuple(path))

        path.append(current)
        visited.add(current)

        entry = tables[current].get(destination) if 0 <= current < n else None
        if entry is None or entry.cost >= INF or entry.next_hop == NO_HOP:
            return PathResult(
                error=NoRouteError(f"No path from {current} to {destination} in current tables.")
            )
        if entry.next_hop == current:
            return PathResult(
                error=RoutingAnomalyError(f"Routing error/no next hop at {current} for {destination}.")
            )

        current = entry.next_hop
        if current in visited:
            return PathResult(error=RoutingLoopError("Routing loop detected."))
