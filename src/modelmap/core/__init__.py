"""
Core graph engine: ports, nodes and edges, validation, ordering, store.
"""

from modelmap.core.ordering import compute_ranks, find_cycles, layers, visualize_layers
from modelmap.core.ports import Direction, PortRef, PortSet
from modelmap.core.store import GraphStore
from modelmap.core.types import (
    Edge,
    Graph,
    Node,
    Ranked,
    RankResult,
    Unorderable,
    UnorderableReason,
    ValidationFailure,
)
from modelmap.core.validator import suggest_connections, validate

__all__ = [
    "Direction",
    "Edge",
    "Graph",
    "GraphStore",
    "Node",
    "PortRef",
    "PortSet",
    "RankResult",
    "Ranked",
    "Unorderable",
    "UnorderableReason",
    "ValidationFailure",
    "compute_ranks",
    "find_cycles",
    "layers",
    "suggest_connections",
    "validate",
    "visualize_layers",
]
