"""
Batch Bellman–Ford engine used as the ground-truth oracle.

Computes final shortest-path costs and first hops per source directly, without
the round-by-round exchange. At full convergence the distance-vector engine
must agree with it on every cost.
"""

from typing import List, Sequence, Tuple

from algorithms import ShortestPathEngine
from graph import Edge
from routing import INF, NO_HOP, RouteEntry, RoutingTable, TableState


class BellmanFordEngine(ShortestPathEngine):
    """
    Single-source Bellman–Ford with first-hop tracking.

    Complexity:
        O(V * E) per source. Costs are positive so no negative-cycle pass.
    """

    def shortest_paths(
        self, nodes: Sequence[int], edges: Sequence[Edge], source: int
    ) -> Tuple[List[int], List[int]]:
        """
        Relax every edge n - 1 times from ``source``.

        Direct neighbours are seeded with themselves as first hop. Whenever an
        edge (u, v) improves v, v inherits u's first hop, or becomes its own
        first hop when u is the source. The source keeps NO_HOP in the raw
        output; ``all_pairs`` turns that into the usual self entry.
        """
        n = len(nodes)
        dist = [INF] * n
        next_hop = [NO_HOP] * n
        if not 0 <= source < n:
            return dist, next_hop

        usable = [e for e in edges if 0 <= e.src < n and 0 <= e.dest < n]

        dist[source] = 0
        for edge in usable:
            if edge.src == source:
                next_hop[edge.dest] = edge.dest

        for _ in range(n - 1):
            for edge in usable:
                if dist[edge.src] < INF and dist[edge.src] + edge.cost < dist[edge.dest]:
                    dist[edge.dest] = dist[edge.src] + edge.cost
                    if edge.src == source:
                        next_hop[edge.dest] = edge.dest
                    else:
                        next_hop[edge.dest] = next_hop[edge.src]

        return dist, next_hop

    def all_pairs(self, nodes: Sequence[int], edges: Sequence[Edge]) -> TableState:
        tables: List[RoutingTable] = []
        for source in range(len(nodes)):
            dist, next_hop = self.shortest_paths(nodes, edges, source)
            table = {}
            for dest in range(len(nodes)):
                if dest == source:
                    table[dest] = RouteEntry(dest, source, 0)
                elif dist[dest] >= INF:
                    table[dest] = RouteEntry(dest, NO_HOP, INF)
                else:
                    table[dest] = RouteEntry(dest, next_hop[dest], dist[dest])
            tables.append(table)
        return tuple(tables)


def all_pairs_shortest_paths(nodes: Sequence[int], edges: Sequence[Edge]) -> TableState:
    """Convenience wrapper over ``BellmanFordEngine.all_pairs``."""
    return BellmanFordEngine().all_pairs(nodes, edges)
