"""
Edge value type for the DVR simulator.

Nodes are dense integer ids 0..n-1.
Edges are directed: src -> dest with a positive integer cost.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Edge:
    """One directed edge. An undirected link is a pair of these."""

    src: int
    dest: int
    cost: int
