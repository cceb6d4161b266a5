"""
Breadth-first broadcast variant of distance-vector propagation.

Floods vectors outward from a single source instead of running synchronous
rounds. Not a replacement for the round-based engine; it is kept as an
independent cross-check of the costs towards the broadcast source.
"""

from collections import deque
from typing import Deque, Dict, Iterable, Tuple

from graph import Edge

# node -> dest -> (next_hop, cost)
BroadcastTables = Dict[int, Dict[int, Tuple[int, int]]]


def broadcast_distance_vector(source: int, edges: Iterable[Edge]) -> BroadcastTables:
    """
    Flood distance vectors from ``source`` over every link touching a node.

    Links are treated as usable in both directions. A receiver adopts any
    strictly cheaper cost, records the sender as next hop and is queued to
    forward its own vector, never back to the node it just heard from.
    Only nodes that appear in ``edges`` (plus the source) get a table.
    """
    edge_list = list(edges)
    nodes = {e.src for e in edge_list} | {e.dest for e in edge_list} | {source}
    tables: BroadcastTables = {node: {node: (node, 0)} for node in nodes}

    incident: Dict[int, list] = {node: [] for node in nodes}
    for edge in edge_list:
        incident[edge.src].append((edge.dest, edge.cost))
        incident[edge.dest].append((edge.src, edge.cost))

    queue: Deque[Tuple[int, int]] = deque([(source, -1)])  # (node, sender)
    while queue:
        current, sender = queue.popleft()
        for neighbor, cost in incident[current]:
            if neighbor == sender:
                continue
            current_table = tables[current]
            neighbor_table = tables[neighbor]

            updated = False
            for dest, (_, dest_cost) in list(current_table.items()):
                new_cost = dest_cost + cost
                if dest not in neighbor_table or new_cost < neighbor_table[dest][1]:
                    neighbor_table[dest] = (current, new_cost)
                    updated = True

            if updated:
                queue.append((neighbor, current))

    return tables
