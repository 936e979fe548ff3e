"""
Port registry for a single node.

A node's ports are the ordered input and output variable names read from its
workbook. Names may repeat; each repetition is its own connectable point and is
addressed by its occurrence index among same-named ports.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Which side of a node a port sits on."""

    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class PortRef:
    """Address of one port occurrence on one node."""

    node_id: str
    direction: Direction
    name: str
    occurrence: int = 0

    def __str__(self) -> str:
        suffix = f"#{self.occurrence}" if self.occurrence else ""
        return f"{self.node_id}.{self.direction.value}.{self.name}{suffix}"


@dataclass(frozen=True)
class PortSet:
    """Immutable input/output name lists of a node.

    Never mutated in place; a reload builds a new ``PortSet``.
    """

    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @classmethod
    def of(cls, inputs: Iterable[str] = (), outputs: Iterable[str] = ()) -> PortSet:
        return cls(inputs=tuple(inputs), outputs=tuple(outputs))

    def names(self, direction: Direction) -> tuple[str, ...]:
        return self.inputs if direction is Direction.INPUT else self.outputs

    def count(self, direction: Direction, name: str) -> int:
        """Number of occurrences of ``name`` on the given side."""
        return self.names(direction).count(name)

    def has(self, direction: Direction, name: str, occurrence: int = 0) -> bool:
        """True when the ``occurrence``-th port called ``name`` exists."""
        if occurrence < 0:
            return False
        return self.count(direction, name) > occurrence

    def refs(self, node_id: str, direction: Direction) -> Iterator[PortRef]:
        """Yield a ``PortRef`` for every port on one side, in declaration order."""
        seen: dict[str, int] = {}
        for name in self.names(direction):
            occurrence = seen.get(name, 0)
            seen[name] = occurrence + 1
            yield PortRef(node_id, direction, name, occurrence)

    @property
    def empty(self) -> bool:
        return not self.inputs and not self.outputs
