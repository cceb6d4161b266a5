"""
YAML topology configuration and the built-in sample topology.

Config layout:

    nodes: 4
    tie_break: STABLE        # optional, STABLE or LOWEST_ID
    max_rounds: 50           # optional
    links:
      - {a: 0, b: 1, cost: 1}
      - {a: 1, b: 2, cost: 1}
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, Tuple

import yaml

from distance_vector_engine import TieBreakPolicy
from graph import Edge
from topology import bidirectional, validate_edges


@dataclass(frozen=True)
class LinkConfig:
    a: int
    b: int
    cost: int


@dataclass(frozen=True)
class TopologyConfig:
    nodes: int
    links: Sequence[LinkConfig]
    tie_break: TieBreakPolicy = TieBreakPolicy.STABLE
    max_rounds: int = 100

    def edges(self) -> Tuple[Edge, ...]:
        return bidirectional((link.a, link.b, link.cost) for link in self.links)


# Rectangle 0-3, centre node 4 linked to all four corners, node 5 off to the right.
DEFAULT_TOPOLOGY = TopologyConfig(
    nodes=6,
    links=(
        LinkConfig(0, 1, 1),
        LinkConfig(0, 3, 7),
        LinkConfig(1, 2, 1),
        LinkConfig(2, 3, 2),
        LinkConfig(0, 4, 2),
        LinkConfig(1, 4, 2),
        LinkConfig(2, 4, 2),
        LinkConfig(3, 4, 2),
        LinkConfig(1, 5, 4),
        LinkConfig(2, 5, 3),
    ),
)


def _require_int(data: Mapping[str, Any], key: str, where: str) -> int:
    if key not in data:
        raise ValueError(f"{where}: missing '{key}'")
    value = data[key]
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{where}: '{key}' must be an integer, got {value!r}")
    return value


def parse_topology(data: Mapping[str, Any]) -> TopologyConfig:
    if not isinstance(data, Mapping):
        raise ValueError("topology config must be a mapping")

    node_count = _require_int(data, "nodes", "topology")
    if node_count <= 0:
        raise ValueError("topology: 'nodes' must be positive")

    links = []
    for i, raw in enumerate(data.get("links") or []):
        where = f"links[{i}]"
        if not isinstance(raw, Mapping):
            raise ValueError(f"{where}: expected a mapping with a, b, cost")
        links.append(
            LinkConfig(
                a=_require_int(raw, "a", where),
                b=_require_int(raw, "b", where),
                cost=_require_int(raw, "cost", where),
            )
        )

    tie_name = str(data.get("tie_break", TieBreakPolicy.STABLE.name)).upper()
    try:
        tie_break = TieBreakPolicy[tie_name]
    except KeyError:
        raise ValueError(f"topology: unknown tie_break {tie_name!r}") from None

    max_rounds = int(data.get("max_rounds", 100))

    cfg = TopologyConfig(nodes=node_count, links=tuple(links), tie_break=tie_break, max_rounds=max_rounds)
    problems = validate_edges(cfg.edges(), node_count)
    if problems:
        raise ValueError("topology: " + "; ".join(problems))
    return cfg


def load_topology(path: Path) -> TopologyConfig:
    data = yaml.safe_load(path.read_text())
    return parse_topology(data)
