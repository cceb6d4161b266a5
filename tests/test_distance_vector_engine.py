from algorithms import StepResult
from distance_vector_engine import (
    SynchronousDistanceVectorEngine,
    TieBreakPolicy,
    outgoing_edges,
)
from graph import Edge
from routing import INF, NO_HOP, RouteEntry
from topology import bidirectional


RING = bidirectional([(0, 1, 1), (1, 2, 1), (2, 3, 2), (0, 3, 7)])
NODES = [0, 1, 2, 3]


def _run_to_convergence(engine, nodes, edges, max_rounds=50):
    tables = engine.initialize(nodes, edges)
    for rounds in range(1, max_rounds + 1):
        result = engine.step(tables, nodes, edges)
        tables = result.tables
        if not result.changed:
            return tables, rounds
    raise AssertionError("did not converge")


def test_initialize_knows_only_self_and_neighbours():
    """Round 0: self at cost 0, direct links at their cost, the rest INF."""
    dv = SynchronousDistanceVectorEngine()
    tables = dv.initialize(NODES, RING)

    assert tables[0][0] == RouteEntry(0, 0, 0)
    assert tables[0][1] == RouteEntry(1, 1, 1)
    assert tables[0][3] == RouteEntry(3, 3, 7)
    assert tables[0][2] == RouteEntry(2, NO_HOP, INF)
    assert all(len(t) == 4 for t in tables)


def test_initialize_uses_first_of_duplicate_edges():
    dv = SynchronousDistanceVectorEngine()
    edges = [Edge(0, 1, 9), Edge(0, 1, 2), Edge(1, 0, 2)]

    tables = dv.initialize([0, 1], edges)

    assert tables[0][1] == RouteEntry(1, 1, 9)


def test_initialize_ignores_edges_to_unknown_nodes():
    dv = SynchronousDistanceVectorEngine()
    edges = [Edge(0, 1, 1), Edge(1, 0, 1), Edge(0, 7, 1), Edge(-1, 0, 1)]

    tables = dv.initialize([0, 1], edges)

    assert set(tables[0]) == {0, 1}
    assert 7 not in outgoing_edges([0, 1], edges)


def test_first_step_uses_only_previous_round():
    """Round 1 must not chain updates made earlier in the same round."""
    dv = SynchronousDistanceVectorEngine()
    # Line 0 - 1 - 2 - 3: after one round 0 can see 2 but not yet 3.
    edges = bidirectional([(0, 1, 1), (1, 2, 1), (2, 3, 1)])
    tables = dv.initialize(NODES, edges)

    result = dv.step(tables, NODES, edges)

    assert isinstance(result, StepResult)
    assert result.changed
    assert result.tables[0][2] == RouteEntry(2, 1, 2)
    assert result.tables[0][3] == RouteEntry(3, NO_HOP, INF)


def test_step_does_not_mutate_input_tables():
    dv = SynchronousDistanceVectorEngine()
    tables = dv.initialize(NODES, RING)
    before = [dict(t) for t in tables]

    dv.step(tables, NODES, RING)

    assert [dict(t) for t in tables] == before


def test_ring_converges_via_cheaper_two_hop_path():
    """0 -> 2 goes 0-1-2 at cost 2, never directly via 3 at cost 7 + 2."""
    dv = SynchronousDistanceVectorEngine()
    tables, rounds = _run_to_convergence(dv, NODES, RING)

    assert tables[0][2] == RouteEntry(2, 1, 2)
    # 0 -> 3 is cheaper around the ring (1 + 1 + 2) than the direct link (7)
    assert tables[0][3] == RouteEntry(3, 1, 4)
    assert tables[3][0] == RouteEntry(0, 2, 4)
    # Two rounds of changes, then one quiet round.
    assert rounds == 3


def test_step_is_idempotent_once_converged():
    dv = SynchronousDistanceVectorEngine()
    tables, _ = _run_to_convergence(dv, NODES, RING)

    again = dv.step(tables, NODES, RING)

    assert not again.changed
    assert [dict(t) for t in again.tables] == [dict(t) for t in tables]


def test_isolated_node_stays_unreachable_every_round():
    dv = SynchronousDistanceVectorEngine()
    edges = bidirectional([(0, 1, 1), (1, 2, 1), (0, 2, 5)])
    tables = dv.initialize(NODES, edges)

    for _ in range(5):
        for node in (0, 1, 2):
            assert tables[node][3] == RouteEntry(3, NO_HOP, INF)
        for dest in (0, 1, 2):
            assert tables[3][dest] == RouteEntry(dest, NO_HOP, INF)
        assert tables[3][3] == RouteEntry(3, 3, 0)
        tables = dv.step(tables, NODES, edges).tables


def test_link_removal_changes_both_endpoints_and_reconverges():
    dv = SynchronousDistanceVectorEngine()
    tables, _ = _run_to_convergence(dv, NODES, RING)

    without = bidirectional([(0, 1, 1), (2, 3, 2), (0, 3, 7)])
    result = dv.step(tables, NODES, without)

    assert result.changed
    assert result.tables[1][2] != tables[1][2]
    assert result.tables[2][1] != tables[2][1]

    final = result.tables
    for _ in range(50):
        step = dv.step(final, NODES, without)
        final = step.tables
        if not step.changed:
            break
    else:
        raise AssertionError("did not reconverge")

    # Only route left from 0 to 2 is the long way round via 3.
    assert final[0][2] == RouteEntry(2, 3, 9)
    assert final[1][2] == RouteEntry(2, 0, 10)


def test_partition_makes_destinations_unreachable():
    dv = SynchronousDistanceVectorEngine()
    edges = bidirectional([(0, 1, 1)])
    tables, _ = _run_to_convergence(dv, [0, 1], edges)

    tables = dv.step(tables, [0, 1], ()).tables

    assert tables[0][1] == RouteEntry(1, NO_HOP, INF)
    assert tables[1][0] == RouteEntry(0, NO_HOP, INF)


def test_tie_break_stable_takes_first_neighbour_in_edge_order():
    """With no previous route, the first tying neighbour in edge order wins."""
    # Square: 0 reaches 3 at cost 2 via either 1 or 2; 0's edge to 2 comes first.
    edges = bidirectional([(0, 2, 1), (0, 1, 1), (1, 3, 1), (2, 3, 1)])
    stable = SynchronousDistanceVectorEngine(TieBreakPolicy.STABLE)
    lowest = SynchronousDistanceVectorEngine(TieBreakPolicy.LOWEST_ID)

    stable_tables, _ = _run_to_convergence(stable, NODES, edges)
    lowest_tables, _ = _run_to_convergence(lowest, NODES, edges)

    assert stable_tables[0][3] == RouteEntry(3, 2, 2)
    assert lowest_tables[0][3] == RouteEntry(3, 1, 2)


def test_tie_break_stable_keeps_previous_next_hop():
    """A tying neighbour that already carries the route keeps it."""
    edges = bidirectional([(0, 2, 1), (0, 1, 1), (1, 3, 1), (2, 3, 1)])
    lowest = SynchronousDistanceVectorEngine(TieBreakPolicy.LOWEST_ID)
    tables, _ = _run_to_convergence(lowest, NODES, edges)
    assert tables[0][3].next_hop == 1

    stable = SynchronousDistanceVectorEngine(TieBreakPolicy.STABLE)
    result = stable.step(tables, NODES, edges)

    # Edge order would pick 2, but 1 is last round's hop and ties.
    assert result.tables[0][3] == RouteEntry(3, 1, 2)
    assert not result.changed


def test_cost_increase_is_picked_up_next_round():
    dv = SynchronousDistanceVectorEngine()
    tables, _ = _run_to_convergence(dv, NODES, RING)

    dearer = bidirectional([(0, 1, 10), (1, 2, 1), (2, 3, 2), (0, 3, 7)])
    result = dv.step(tables, NODES, dearer)

    assert result.changed
    # Direct (10 + 0) now ties with 7 + 3 via node 3; the existing hop stays.
    assert result.tables[0][1] == RouteEntry(1, 1, 10)
    # Node 2 still advertises its stale cost-2 route to 0 (via 1).
    assert result.tables[1][0] == RouteEntry(0, 2, 3)
