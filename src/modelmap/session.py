"""
Interactive editing session.

Translates user gestures (drop a workbook, drag a wire, dismiss an error) into
``GraphStore`` calls and tracks which nodes are currently loading.
"""

from __future__ import annotations

from pathlib import Path

from modelmap.config.loader import Config
from modelmap.config.singleton import get_config
from modelmap.core.ordering import visualize_layers
from modelmap.core.ports import PortRef
from modelmap.core.store import GraphStore
from modelmap.core.types import ValidationFailure
from modelmap.core.validator import suggest_connections
from modelmap.ingestion.excel import (
    IngestionResult,
    is_accepted_file,
    parse_workbook_async,
    rejected_file_message,
)
from modelmap.utils.async_utils import dual
from modelmap.utils.logging import get_logger
from modelmap.views import NodeView

logger = get_logger("modelmap.session")


class ModelSession:
    """One user's graph plus the ingestion plumbing around it."""

    def __init__(self, store: GraphStore | None = None, config: Config | None = None):
        self.store = store if store is not None else GraphStore()
        self.config = config or get_config() or Config({})
        self._loading: dict[str, int] = {}

    @property
    def accepted_extensions(self) -> tuple[str, ...]:
        return self.config.accepted_extensions

    def is_loading(self, node_id: str) -> bool:
        return self._loading.get(node_id, 0) > 0

    def add_placeholder(self, label: str = "") -> str:
        """Add an empty node that waits for a workbook to be dropped on it."""
        return self.store.add_node(label=label)

    @dual
    async def load_file(self, node_id: str, path: str | Path) -> IngestionResult | None:
        """
        Load a workbook into an existing node.

        A file with an unaccepted extension only sets the node's error. A
        failed ingestion keeps the node's current ports and label. When the
        node is removed while the workbook is being read, the result is
        dropped.

        Returns:
            The ingestion result, or None when nothing was ingested
        """
        if node_id not in self.store:
            return None

        path = Path(path)
        if not is_accepted_file(path.name, self.accepted_extensions):
            node = self.store.get_node(node_id)
            message = rejected_file_message(self.accepted_extensions)
            logger.warning(f"Rejected '{path.name}' for {node_id}: {message}")
            self.store.update_node_data(node_id, node.inputs, node.outputs, message)
            return None

        self._loading[node_id] = self._loading.get(node_id, 0) + 1
        try:
            result = await parse_workbook_async(path)
        finally:
            self._loading[node_id] -= 1
            if not self._loading[node_id]:
                del self._loading[node_id]

        node = self.store.get_node(node_id)
        if node is None:
            logger.debug(f"Discarding result for '{result.filename}': node {node_id} was removed")
            return result

        if result.ok:
            self.store.update_node_data(node_id, result.inputs, result.outputs, None, label=result.filename)
        else:
            self.store.update_node_data(node_id, node.inputs, node.outputs, result.error)
        return result

    @dual
    async def add_model(self, path: str | Path) -> str:
        """Create a node for a workbook dropped on the empty canvas and load it."""
        node_id = self.add_placeholder(Path(path).name)
        await self.load_file(node_id, path)
        return node_id

    def remove_node(self, node_id: str) -> None:
        self.store.remove_node(node_id)

    def dismiss_error(self, node_id: str) -> None:
        self.store.clear_error(node_id)

    def connect(self, source: PortRef, target: PortRef) -> str | ValidationFailure:
        result = self.store.add_edge(source, target)
        if isinstance(result, ValidationFailure):
            logger.info(f"Connection {source} -> {target} rejected: {result.value}")
        return result

    def disconnect(self, edge_id: str) -> None:
        self.store.remove_edge(edge_id)

    def suggestions(self) -> list[tuple[PortRef, PortRef]]:
        """Same-name wires that could be added right now."""
        return suggest_connections(self.store.snapshot())

    def accept_suggestions(self) -> list[str]:
        """
        Add suggested wires, taking the first candidate for each free input.

        Returns:
            Ids of the edges added
        """
        added = []
        wired = set()
        for source, target in self.suggestions():
            if target in wired:
                continue
            result = self.store.add_edge(source, target)
            if not isinstance(result, ValidationFailure):
                wired.add(target)
                added.append(result)
        return added

    def views(self) -> list[NodeView]:
        """Presentation records for every node, in creation order."""
        return [
            NodeView.from_node(node, loading=self.is_loading(node.id))
            for node in self.store.snapshot().nodes.values()
        ]

    def describe_order(self) -> str:
        """Text rendering of the current execution layers."""
        graph = self.store.snapshot()
        ranks = {node_id: node.rank for node_id, node in graph.nodes.items() if node.rank is not None}
        return visualize_layers(graph, ranks)
