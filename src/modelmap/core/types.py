"""
Type definitions for the model graph.

Nodes, edges and graph snapshots are frozen dataclasses; the ``GraphStore``
replaces records rather than mutating them, so a snapshot handed out earlier
never changes underneath its reader.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Union

from modelmap.core.ports import Direction, PortRef, PortSet

# ---------------------------------------------------------------------------
# Rank results
# ---------------------------------------------------------------------------


class UnorderableReason(str, Enum):
    """Why a node has no execution rank."""

    DEGRADED_INPUT = "degraded_input"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class Ranked:
    """Execution layer of a node; 0 runs first."""

    rank: int

    def __post_init__(self) -> None:
        if self.rank < 0:
            raise ValueError(f"rank must be non-negative, got {self.rank}")


@dataclass(frozen=True)
class Unorderable:
    """Node cannot be scheduled: it is behind an error or on/behind a cycle."""

    reason: UnorderableReason


RankResult = Union[Ranked, Unorderable]


# ---------------------------------------------------------------------------
# Validation failures
# ---------------------------------------------------------------------------


class ValidationFailure(str, Enum):
    """Reason a proposed edge was rejected. Returned, never raised."""

    WRONG_DIRECTION = "wrong_direction"
    UNKNOWN_NODE = "unknown_node"
    SELF_LOOP = "self_loop"
    PORT_NOT_FOUND = "port_not_found"


# ---------------------------------------------------------------------------
# Graph records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Node:
    """One loaded (or placeholder) model."""

    id: str
    label: str = ""
    ports: PortSet = field(default_factory=PortSet)
    load_error: str | None = None
    rank: RankResult | None = None

    @property
    def inputs(self) -> tuple[str, ...]:
        return self.ports.inputs

    @property
    def outputs(self) -> tuple[str, ...]:
        return self.ports.outputs

    @property
    def degraded(self) -> bool:
        return self.load_error is not None

    def has_port(self, ref: PortRef) -> bool:
        return self.ports.has(ref.direction, ref.name, ref.occurrence)


@dataclass(frozen=True)
class Edge:
    """Directed wire from an output port to another node's input port."""

    id: str
    source: PortRef
    target: PortRef

    def touches(self, node_id: str) -> bool:
        return self.source.node_id == node_id or self.target.node_id == node_id


@dataclass(frozen=True)
class Graph:
    """Read-only snapshot of all nodes and edges, in insertion order."""

    nodes: Mapping[str, Node] = field(default_factory=dict)
    edges: Mapping[str, Edge] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Detach from the caller's dicts so later store mutations are invisible
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "edges", MappingProxyType(dict(self.edges)))

    def successors(self) -> dict[str, list[str]]:
        """node_id -> target node ids of its outgoing edges (one entry per edge)."""
        result: dict[str, list[str]] = {node_id: [] for node_id in self.nodes}
        for edge in self.edges.values():
            if edge.source.node_id in result and edge.target.node_id in self.nodes:
                result[edge.source.node_id].append(edge.target.node_id)
        return result

    def edge_into(self, target: PortRef) -> Edge | None:
        """The edge currently connected to an input port, if any."""
        for edge in self.edges.values():
            if edge.target == target:
                return edge
        return None


__all__ = [
    "Direction",
    "Edge",
    "Graph",
    "Node",
    "PortRef",
    "PortSet",
    "RankResult",
    "Ranked",
    "Unorderable",
    "UnorderableReason",
    "ValidationFailure",
]
