"""
Graph store: owner of all nodes and edges.

Every mutation keeps the graph structurally valid and finishes by recomputing
ranks, so ranks read after any call returns are current. The store is a
single-writer structure; callers embedding it in threaded code must serialize
mutations themselves.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import replace

from modelmap.core.ordering import compute_ranks
from modelmap.core.ports import PortRef, PortSet
from modelmap.core.types import Edge, Graph, Node, ValidationFailure
from modelmap.core.validator import validate
from modelmap.utils.logging import get_logger

logger = get_logger("modelmap.store")


class GraphStore:
    """Mutable model graph with counter-based node and edge ids."""

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Edge] = {}
        self._node_ids = itertools.count(1)
        self._edge_ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # --- Reads ---------------------------------------------------------------

    def snapshot(self) -> Graph:
        """Immutable view of the current nodes and edges."""
        return Graph(nodes=self._nodes, edges=self._edges)

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Edge | None:
        return self._edges.get(edge_id)

    def edges_for(self, node_id: str) -> list[Edge]:
        """Edges that start or end at ``node_id``."""
        return [edge for edge in self._edges.values() if edge.touches(node_id)]

    # --- Node mutations ------------------------------------------------------

    def add_node(
        self,
        label: str = "",
        inputs: Iterable[str] = (),
        outputs: Iterable[str] = (),
        load_error: str | None = None,
    ) -> str:
        """
        Create a node. Always succeeds.

        With ``load_error`` set the node starts out degraded; with no ports and
        no error it is an empty placeholder.

        Returns:
            The new node id
        """
        node_id = f"node-{next(self._node_ids)}"
        self._nodes[node_id] = Node(
            id=node_id,
            label=label,
            ports=PortSet.of(inputs, outputs),
            load_error=load_error,
        )
        logger.debug(f"Added node {node_id} ({label or 'placeholder'})")
        self._recompute()
        return node_id

    def update_node_data(
        self,
        node_id: str,
        inputs: Iterable[str],
        outputs: Iterable[str],
        load_error: str | None,
        label: str | None = None,
    ) -> None:
        """
        Replace a node's ports and error in one step.

        Edges whose port on this node no longer exists are removed. Unknown
        node ids are ignored, so a late ingestion result for a removed node is
        harmless.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug(f"Ignoring update for unknown node {node_id}")
            return

        updated = replace(
            node,
            ports=PortSet.of(inputs, outputs),
            load_error=load_error,
            label=node.label if label is None else label,
        )
        self._nodes[node_id] = updated

        stale = [
            edge_id
            for edge_id, edge in self._edges.items()
            if (edge.source.node_id == node_id and not updated.has_port(edge.source))
            or (edge.target.node_id == node_id and not updated.has_port(edge.target))
        ]
        for edge_id in stale:
            del self._edges[edge_id]
        if stale:
            logger.debug(f"Pruned {len(stale)} stale edge(s) after reloading {node_id}: {stale}")

        self._recompute()

    def clear_error(self, node_id: str) -> None:
        """Drop a node's load error, keeping its ports."""
        node = self._nodes.get(node_id)
        if node is None or node.load_error is None:
            return
        self._nodes[node_id] = replace(node, load_error=None)
        logger.debug(f"Cleared error on {node_id}")
        self._recompute()

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it."""
        if node_id not in self._nodes:
            return
        del self._nodes[node_id]
        for edge in self.edges_for(node_id):
            del self._edges[edge.id]
        logger.debug(f"Removed node {node_id}")
        self._recompute()

    # --- Edge mutations ------------------------------------------------------

    def add_edge(self, source: PortRef, target: PortRef) -> str | ValidationFailure:
        """
        Connect an output port to an input port.

        An edge already attached to ``target`` is replaced.

        Returns:
            The new edge id, or the ``ValidationFailure`` that rejected it
            (in which case nothing changed)
        """
        failure = validate(self.snapshot(), source, target)
        if failure is not None:
            logger.debug(f"Rejected edge {source} -> {target}: {failure.value}")
            return failure

        for edge_id, edge in list(self._edges.items()):
            if edge.target == target:
                del self._edges[edge_id]
                logger.debug(f"Replaced edge {edge_id} into {target}")

        edge_id = f"edge-{next(self._edge_ids)}"
        self._edges[edge_id] = Edge(id=edge_id, source=source, target=target)
        logger.debug(f"Added edge {edge_id}: {source} -> {target}")
        self._recompute()
        return edge_id

    def remove_edge(self, edge_id: str) -> None:
        if self._edges.pop(edge_id, None) is None:
            return
        logger.debug(f"Removed edge {edge_id}")
        self._recompute()

    # --- Ranks ---------------------------------------------------------------

    def _recompute(self) -> None:
        ranks = compute_ranks(self.snapshot())
        for node_id, result in ranks.items():
            node = self._nodes[node_id]
            if node.rank != result:
                self._nodes[node_id] = replace(node, rank=result)
