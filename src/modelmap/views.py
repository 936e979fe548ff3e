"""
Presentation records for nodes.

A ``NodeView`` carries exactly what a renderer needs to draw one node: the
core-owned fields plus the session's loading flag.
"""

from __future__ import annotations

from dataclasses import dataclass

from modelmap.core.types import Node, Ranked, RankResult, UnorderableReason

UNORDERABLE_BADGES = {
    UnorderableReason.DEGRADED_INPUT: "!",
    UnorderableReason.CYCLIC: "∞",
}


def rank_badge(rank: RankResult | None) -> str:
    """Short text for a node's order badge; empty when no rank is known."""
    if rank is None:
        return ""
    if isinstance(rank, Ranked):
        return str(rank.rank)
    return UNORDERABLE_BADGES[rank.reason]


@dataclass(frozen=True)
class NodeView:
    id: str
    label: str
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]
    error: str | None
    rank: RankResult | None
    loading: bool = False

    @classmethod
    def from_node(cls, node: Node, loading: bool = False) -> NodeView:
        return cls(
            id=node.id,
            label=node.label,
            inputs=node.inputs,
            outputs=node.outputs,
            error=node.load_error,
            rank=node.rank,
            loading=loading,
        )

    @property
    def badge(self) -> str:
        return rank_badge(self.rank)

    @property
    def show_drop_hint(self) -> bool:
        """Empty node waiting for a workbook."""
        return not self.inputs and not self.outputs and self.error is None and not self.loading
