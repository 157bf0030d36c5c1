"""Pre-order flat view of a node tree."""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from rsxtree.nodes.model import Node, node_children


@dataclass(frozen=True, slots=True)
class FlatNode:
    """One node of the flat view; `parent` is the index of the parent entry, None at top level."""

    node: Node
    depth: int
    parent: int | None


def flatten(nodes: Sequence[Node]) -> tuple[FlatNode, ...]:
    flat: list[FlatNode] = []

    def visit(node: Node, depth: int, parent: int | None) -> None:
        index = len(flat)
        flat.append(FlatNode(node=node, depth=depth, parent=parent))
        for child in node_children(node):
            visit(child, depth + 1, index)

    for node in nodes:
        visit(node, 0, None)
    return tuple(flat)


def walk(nodes: Sequence[Node]) -> Iterator[Node]:
    """Pre-order iteration over every node, children after their parent."""
    for entry in flatten(nodes):
        yield entry.node
