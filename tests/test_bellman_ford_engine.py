"""
Unit tests for the Bellman–Ford oracle.
"""

from bellman_ford_engine import BellmanFordEngine, all_pairs_shortest_paths
from graph import Edge
from routing import INF, NO_HOP, RouteEntry
from topology import bidirectional


def test_bellman_ford_basic_paths():
    # 0 -> 1 (5), 0 -> 2 (1), 2 -> 1 (1)
    edges = [Edge(0, 1, 5), Edge(0, 2, 1), Edge(2, 1, 1)]

    dist, next_hop = BellmanFordEngine().shortest_paths([0, 1, 2], edges, 0)

    assert dist == [0, 2, 1]
    # The seeded direct hop to 1 is replaced by the cheaper path through 2.
    assert next_hop == [NO_HOP, 2, 2]


def test_first_hop_is_inherited_along_path():
    edges = bidirectional([(0, 1, 1), (1, 2, 1), (2, 3, 1)])

    dist, next_hop = BellmanFordEngine().shortest_paths([0, 1, 2, 3], edges, 0)

    assert dist == [0, 1, 2, 3]
    assert next_hop[1:] == [1, 1, 1]


def test_unreachable_node_keeps_inf():
    edges = [Edge(0, 1, 2)]

    dist, next_hop = BellmanFordEngine().shortest_paths([0, 1, 2], edges, 0)

    assert dist[2] == INF
    assert next_hop[2] == NO_HOP


def test_out_of_range_source_and_edges_are_ignored():
    engine = BellmanFordEngine()

    dist, next_hop = engine.shortest_paths([0, 1], [Edge(0, 1, 1)], 5)
    assert dist == [INF, INF]
    assert next_hop == [NO_HOP, NO_HOP]

    dist, _ = engine.shortest_paths([0, 1], [Edge(0, 9, 1), Edge(0, 1, 3)], 0)
    assert dist == [0, 3]


def test_all_pairs_tables_cover_every_node():
    edges = bidirectional([(0, 1, 1), (1, 2, 1), (2, 3, 2), (0, 3, 7)])
    nodes = [0, 1, 2, 3]

    tables = all_pairs_shortest_paths(nodes, edges)

    assert len(tables) == 4
    assert all(set(t) == set(nodes) for t in tables)
    assert tables[2][2] == RouteEntry(2, 2, 0)
    assert tables[0][2] == RouteEntry(2, 1, 2)
    assert tables[0][3] == RouteEntry(3, 1, 4)


def test_all_pairs_marks_isolated_node_unreachable():
    edges = bidirectional([(0, 1, 1)])

    tables = BellmanFordEngine().all_pairs([0, 1, 2], edges)

    assert tables[0][2] == RouteEntry(2, NO_HOP, INF)
    assert tables[2][0] == RouteEntry(0, NO_HOP, INF)
