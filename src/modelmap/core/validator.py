"""
Connection validation.

Decides whether an edge between two ports is admissible. Variable names on the
two ends do not have to match: names across independently authored workbooks
are a convention, so matching is left to ``suggest_connections``.
"""

from __future__ import annotations

from modelmap.core.ports import Direction, PortRef
from modelmap.core.types import Graph, ValidationFailure


def validate(graph: Graph, source: PortRef, target: PortRef) -> ValidationFailure | None:
    """
    Check a proposed edge against a graph snapshot.

    Checks run in a fixed order and the first failing one is reported:
    direction, node existence, self-loop, port existence.

    Args:
        graph: Snapshot to validate against
        source: Output port the edge starts from
        target: Input port the edge ends at

    Returns:
        None when the edge is admissible, otherwise the failure kind
    """
    if source.direction is not Direction.OUTPUT or target.direction is not Direction.INPUT:
        return ValidationFailure.WRONG_DIRECTION

    source_node = graph.nodes.get(source.node_id)
    target_node = graph.nodes.get(target.node_id)
    if source_node is None or target_node is None:
        return ValidationFailure.UNKNOWN_NODE

    if source.node_id == target.node_id:
        return ValidationFailure.SELF_LOOP

    if not source_node.has_port(source) or not target_node.has_port(target):
        return ValidationFailure.PORT_NOT_FOUND

    return None


def suggest_connections(graph: Graph) -> list[tuple[PortRef, PortRef]]:
    """
    Propose same-name wires for inputs that are not connected yet.

    For every free input port on a non-degraded node, each output port with the
    same variable name on another non-degraded node is offered. The result is
    advisory; nothing is added to the graph.

    Returns:
        (source, target) pairs in node insertion order
    """
    connected = {edge.target for edge in graph.edges.values()}
    live = [node for node in graph.nodes.values() if not node.degraded]

    suggestions: list[tuple[PortRef, PortRef]] = []
    for target_node in live:
        for target in target_node.ports.refs(target_node.id, Direction.INPUT):
            if target in connected:
                continue
            for source_node in live:
                if source_node.id == target_node.id:
                    continue
                for source in source_node.ports.refs(source_node.id, Direction.OUTPUT):
                    if source.name == target.name:
                        suggestions.append((source, target))
    return suggestions
