"""
Execution ordering for the model graph.

Ranks are computed with a layered Kahn's algorithm over a graph snapshot.
Every call starts from scratch; nothing is cached between calls.
"""

from collections import defaultdict, deque
from typing import Dict, List, Set

from modelmap.core.types import Graph, Ranked, RankResult, Unorderable, UnorderableReason


def _degraded_closure(graph: Graph, successors: Dict[str, List[str]]) -> Set[str]:
    """Degraded nodes plus every node reachable from one of them."""
    queue = deque(node_id for node_id, node in graph.nodes.items() if node.degraded)
    reached: Set[str] = set(queue)

    while queue:
        node_id = queue.popleft()
        for dependent in successors[node_id]:
            if dependent not in reached:
                reached.add(dependent)
                queue.append(dependent)

    return reached


def compute_ranks(graph: Graph) -> Dict[str, RankResult]:
    """
    Assign an execution rank to every node in the graph.

    Nodes with a load error, and everything downstream of them, are
    ``Unorderable(DEGRADED_INPUT)``. The rest are peeled layer by layer: nodes
    with no remaining incoming edges form the next layer. Whatever is left when
    no new layer forms sits on or behind a cycle and is ``Unorderable(CYCLIC)``.

    Nodes sharing a rank have no dependency between them.

    Args:
        graph: Graph snapshot

    Returns:
        Dictionary mapping node_id -> RankResult, covering every node
    """
    successors = graph.successors()
    ranks: Dict[str, RankResult] = {}

    degraded = _degraded_closure(graph, successors)
    for node_id in degraded:
        ranks[node_id] = Unorderable(UnorderableReason.DEGRADED_INPUT)

    remaining = [node_id for node_id in graph.nodes if node_id not in degraded]

    # One count per edge, so parallel wires between two nodes peel together
    in_degree: Dict[str, int] = {node_id: 0 for node_id in remaining}
    for node_id in remaining:
        for dependent in successors[node_id]:
            if dependent in in_degree:
                in_degree[dependent] += 1

    layer = [node_id for node_id in remaining if in_degree[node_id] == 0]
    level = 0

    while layer:
        next_layer = []
        for node_id in layer:
            ranks[node_id] = Ranked(level)
            for dependent in successors[node_id]:
                if dependent in degraded:
                    continue
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    next_layer.append(dependent)
        layer = next_layer
        level += 1

    for node_id in remaining:
        if node_id not in ranks:
            ranks[node_id] = Unorderable(UnorderableReason.CYCLIC)

    return {node_id: ranks[node_id] for node_id in graph.nodes}


def layers(ranks: Dict[str, RankResult]) -> List[List[str]]:
    """
    Group ranked nodes by layer.

    Unorderable nodes are left out. Within a layer, node ids keep the order
    they have in ``ranks``.
    """
    grouped: Dict[int, List[str]] = defaultdict(list)
    for node_id, result in ranks.items():
        if isinstance(result, Ranked):
            grouped[result.rank].append(node_id)
    return [grouped[level] for level in sorted(grouped)]


def find_cycles(graph: Graph) -> List[List[str]]:
    """
    List dependency cycles for diagnostics.

    Each cycle is reported as a node path that starts and ends on the same
    node. Degraded nodes are ignored, matching ``compute_ranks``.
    """
    successors = graph.successors()
    visited: Set[str] = set()
    rec_stack: Set[str] = set()
    path: List[str] = []
    cycles: List[List[str]] = []

    def dfs(node_id: str) -> None:
        visited.add(node_id)
        rec_stack.add(node_id)
        path.append(node_id)

        for neighbor in dict.fromkeys(successors[node_id]):
            if graph.nodes[neighbor].degraded:
                continue
            if neighbor not in visited:
                dfs(neighbor)
            elif neighbor in rec_stack:
                cycle_start = path.index(neighbor)
                cycles.append(path[cycle_start:] + [neighbor])

        rec_stack.remove(node_id)
        path.pop()

    for node_id, node in graph.nodes.items():
        if node_id not in visited and not node.degraded:
            dfs(node_id)

    return cycles


def visualize_layers(graph: Graph, ranks: Dict[str, RankResult]) -> str:
    """
    Render layers as text, one line per layer, using node labels.

    Unorderable nodes are listed after the layers with their reason.
    """
    lines = []
    for level, node_ids in enumerate(layers(ranks)):
        labels = sorted(graph.nodes[node_id].label or node_id for node_id in node_ids)
        lines.append(f"Layer {level}: {' ── '.join(labels)}")

    for node_id, result in ranks.items():
        if isinstance(result, Unorderable):
            label = graph.nodes[node_id].label or node_id
            lines.append(f"Unorderable ({result.reason.value}): {label}")

    return "\n".join(lines)
