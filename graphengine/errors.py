"""Exception hierarchy for graphengine.

Every failure raised by an algorithm derives from :class:`GraphError`. Each
subclass also derives from the builtin exception callers would expect
(``KeyError`` for a missing node, ``ValueError`` for bad input), so code that
already catches builtins keeps working.
"""

from __future__ import annotations

from typing import Any, Hashable, List, Optional, Sequence


class GraphError(Exception):
    """Base exception for all graph algorithm errors."""


class NodeNotFound(GraphError, KeyError):
    """Raised when a referenced source or target node is absent from the graph."""

    def __init__(self, node: Hashable, message: Optional[str] = None) -> None:
        self.node = node
        super().__init__(message or f"Node '{node}' is not in the graph.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return str(self.args[0])


class NegativeWeight(GraphError, ValueError):
    """Raised when an algorithm that needs non-negative weights sees a negative edge."""

    def __init__(self, edge: Any, message: Optional[str] = None) -> None:
        self.edge = edge
        super().__init__(message or f"Negative edge weight on {edge}.")


class NegativeCycle(GraphError, ValueError):
    """Raised when a negative-weight cycle makes shortest distances undefined."""

    def __init__(
        self, cycle: Optional[Sequence[Hashable]] = None, message: Optional[str] = None
    ) -> None:
        self.cycle: List[Hashable] = list(cycle or [])
        if message is None:
            message = "Graph contains a negative-weight cycle"
            if self.cycle:
                message += f": {' -> '.join(map(str, self.cycle))}"
        super().__init__(message)


class CyclicGraph(GraphError, ValueError):
    """Raised when an operation defined only on DAGs meets a cycle."""

    def __init__(
        self, cycle: Optional[Sequence[Hashable]] = None, message: Optional[str] = None
    ) -> None:
        self.cycle: List[Hashable] = list(cycle or [])
        if message is None:
            message = "Graph contains a cycle"
            if self.cycle:
                message += f": {' -> '.join(map(str, self.cycle))}"
        super().__init__(message)


class Disconnected(GraphError, ValueError):
    """Raised when an algorithm requires a connected graph."""


class InvalidInput(GraphError, ValueError):
    """Raised for malformed adjacency data or unsupported graph kinds."""
