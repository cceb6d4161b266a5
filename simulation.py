"""
Simulation controller for round-based DV exchange.

Owns the topology, the committed table state, the step counter and the
convergence status. Presentation layers drive it one step at a time and read
its state between steps; nothing here knows about timers or animation.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging
import threading

from algorithms import DistanceVectorEngine, StepResult
from distance_vector_engine import SynchronousDistanceVectorEngine
from errors import LinkResult, PathResult
from graph import Edge
from path_resolver import resolve_path
from routing import RouteEntry, TableState, changed_entries
from topology import Topology

logger = logging.getLogger(__name__)


class SimulationStatus(Enum):
    """
    ACTIVE: no step run yet, the last step changed something, or the topology
        was edited since.
    CONVERGED: the last step changed nothing.
    """

    ACTIVE = "active"
    CONVERGED = "converged"


def run_dv_round(
    engine: DistanceVectorEngine,
    tables: TableState,
    nodes: Sequence[int],
    edges: Sequence[Edge],
) -> StepResult:
    """
    Perform one synchronous DV round across all nodes.
    """
    return engine.step(tables, nodes, edges)


def run_until_converged(
    engine: DistanceVectorEngine,
    tables: TableState,
    nodes: Sequence[int],
    edges: Sequence[Edge],
    max_rounds: int,
) -> Tuple[TableState, int, bool]:
    """
    Step until a round changes nothing or ``max_rounds`` rounds have run.

    Returns (tables, rounds_run, converged). The final no-change round counts.
    """
    rounds = 0
    for _ in range(max_rounds):
        result = run_dv_round(engine, tables, nodes, edges)
        tables = result.tables
        rounds += 1
        if not result.changed:
            return tables, rounds, True
    return tables, rounds, False


class DVRSimulation:
    """
    Stateful wrapper around a DistanceVectorEngine and a Topology.

    Every public method holds one re-entrant lock, so a step always reads the
    edge list and the tables as a matched pair and never observes a
    half-applied link edit.
    """

    def __init__(
        self,
        node_count: int,
        edges: Iterable[Edge] = (),
        engine: Optional[DistanceVectorEngine] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._engine = engine or SynchronousDistanceVectorEngine()
        self._initial_edges: Tuple[Edge, ...] = tuple(edges)
        self._topology = Topology(node_count, self._initial_edges)
        for problem in self._topology.validate():
            logger.warning("initial topology: %s", problem)
        self._nodes = list(range(node_count))
        self._tables: TableState = self._engine.initialize(self._nodes, self._topology.edges)
        self._previous: Optional[TableState] = None
        self._step_count = 0
        self._status = SimulationStatus.ACTIVE

    # --- Read-only state ------------------------------------------------------

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def nodes(self) -> Sequence[int]:
        return tuple(self._nodes)

    @property
    def tables(self) -> TableState:
        with self._lock:
            return self._tables

    @property
    def previous_tables(self) -> Optional[TableState]:
        with self._lock:
            return self._previous

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def status(self) -> SimulationStatus:
        return self._status

    @property
    def converged(self) -> bool:
        return self._status is SimulationStatus.CONVERGED

    # --- Stepping -------------------------------------------------------------

    def step(self) -> StepResult:
        """
        Run and commit one round. A no-op returning changed=False once
        converged, until the topology changes again.
        """
        with self._lock:
            self._consume_dirty()
            if self.converged:
                return StepResult(self._tables, False)

            result = run_dv_round(self._engine, self._tables, self._nodes, self._topology.edges)
            self._previous = self._tables
            self._tables = result.tables
            self._step_count += 1
            if result.changed:
                self._status = SimulationStatus.ACTIVE
                logger.debug("step %d completed", self._step_count - 1)
            else:
                self._status = SimulationStatus.CONVERGED
                logger.info("DVR converged after %d steps", self._step_count)
            return result

    def run_until_converged(self, max_rounds: int = 100) -> int:
        """Step until converged or out of budget; returns the rounds run."""
        with self._lock:
            self._consume_dirty()
            rounds = 0
            while not self.converged and rounds < max_rounds:
                self.step()
                rounds += 1
            return rounds

    # --- Topology edits -------------------------------------------------------

    def add_link(self, a: int, b: int, cost: int) -> LinkResult:
        with self._lock:
            return self._after_edit(self._topology.add_link(a, b, cost))

    def remove_link(self, a: int, b: int) -> LinkResult:
        with self._lock:
            return self._after_edit(self._topology.remove_link(a, b))

    def update_cost(self, a: int, b: int, new_cost: int) -> LinkResult:
        with self._lock:
            return self._after_edit(self._topology.update_cost(a, b, new_cost))

    def reset(self) -> None:
        """Restore the initial links and round-0 tables."""
        with self._lock:
            self._topology.replace_edges(self._initial_edges)
            self._topology.clear_dirty()
            self._tables = self._engine.initialize(self._nodes, self._topology.edges)
            self._previous = None
            self._step_count = 0
            self._status = SimulationStatus.ACTIVE
            logger.info("simulation reset")

    # --- Queries --------------------------------------------------------------

    def changed_entries(self, node: int) -> Dict[int, RouteEntry]:
        """Entries of ``node`` that differ from the previous round."""
        with self._lock:
            if self._previous is None or not 0 <= node < len(self._tables):
                return {}
            return changed_entries(self._previous[node], self._tables[node])

    def resolve_path(self, source: int, destination: int) -> PathResult:
        with self._lock:
            return resolve_path(self._tables, source, destination)

    def _consume_dirty(self) -> None:
        if self._topology.clear_dirty():
            self._status = SimulationStatus.ACTIVE

    def _after_edit(self, result: LinkResult) -> LinkResult:
        if result.ok and result.changed:
            self._status = SimulationStatus.ACTIVE
            # Highlighting restarts from the tables in force at the edit.
            self._previous = self._tables
        return result
