"""
Algorithm interfaces for routing.

Keeps the routing algorithms separate from the simulation controller and the
command-line runner.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from graph import Edge
from routing import TableState


@dataclass(frozen=True)
class StepResult:
    """Tables computed by one synchronous round plus the convergence signal."""
    tables: TableState
    changed: bool


class DistanceVectorEngine(ABC):
    """
    Interface for a round-based distance-vector simulation.
    """

    @abstractmethod
    def initialize(self, nodes: Sequence[int], edges: Sequence[Edge]) -> TableState:
        """
        Build the round-0 tables: each node knows itself and its direct
        neighbours, every other destination is unreachable.
        """
        raise NotImplementedError

    @abstractmethod
    def step(
        self,
        tables: TableState,
        nodes: Sequence[int],
        edges: Sequence[Edge],
    ) -> StepResult:
        """
        Perform one synchronous round for every node.

        Args:
            tables: the last committed table state, read as a snapshot.
            nodes: node ids 0..n-1.
            edges: currently active directed edges.

        Returns:
            StepResult with fully rebuilt tables and whether any table changed.
        """
        raise NotImplementedError


class ShortestPathEngine(ABC):
    """
    Interface for single-source shortest-path computation with first hops.
    """

    @abstractmethod
    def shortest_paths(
        self, nodes: Sequence[int], edges: Sequence[Edge], source: int
    ) -> Tuple[List[int], List[int]]:
        """
        Compute shortest-path costs and the first hop from source to every node.

        Returns:
            (dist, next_hop) lists indexed by destination id.
        """
        raise NotImplementedError

    @abstractmethod
    def all_pairs(self, nodes: Sequence[int], edges: Sequence[Edge]) -> TableState:
        """Run shortest_paths from every node and return the resulting tables."""
        raise NotImplementedError
