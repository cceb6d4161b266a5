"""
Error taxonomy and result values for the DVR core.

Core operations never raise on type-valid input. They return a result value
that carries either the payload or one of the errors below; callers that
prefer exceptions can call ``unwrap()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from graph import Edge


class RoutingError(Exception):
    """Base class for every recoverable error reported by the core."""


class ValidationError(RoutingError):
    """Invalid node id, equal endpoints, non-positive cost or malformed number."""


class DuplicateLinkError(RoutingError):
    """A link between the two nodes already exists."""


class NotFoundError(RoutingError):
    """The requested link does not exist."""


class PathError(RoutingError):
    """Base class for path resolution failures."""


class NoRouteError(PathError):
    pass


class RoutingLoopError(PathError):
    pass


class RoutingAnomalyError(PathError):
    """A node names itself as next hop towards another destination."""


@dataclass(frozen=True)
class LinkResult:
    """
    Outcome of a link edit.

    ``edges`` is the resulting edge list; on failure it is the unchanged input.
    ``changed`` is False both on failure and on an accepted no-op (for example
    updating a link to the cost it already has).
    """
    edges: Tuple[Edge, ...]
    error: Optional[RoutingError] = None
    changed: bool = True
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Tuple[Edge, ...]:
        if self.error is not None:
            raise self.error
        return self.edges


@dataclass(frozen=True)
class PathResult:
    """Outcome of a path lookup; ``path`` is empty on failure."""
    path: Tuple[int, ...] = ()
    error: Optional[PathError | ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Tuple[int, ...]:
        if self.error is not None:
            raise self.error
        return self.path
