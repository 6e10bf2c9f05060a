"""
Curriculum Tree Builder

Turns the flat list of curriculum nodes returned by the database into a
nested forest for rendering and traversal.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from wattleos.core.models.curriculum import CurriculumLevel, CurriculumNode

# Level a child node gets when added under a node of the given level
_CHILD_LEVEL: dict[CurriculumLevel, CurriculumLevel | None] = {
    CurriculumLevel.AREA: CurriculumLevel.STRAND,
    CurriculumLevel.STRAND: CurriculumLevel.OUTCOME,
    CurriculumLevel.OUTCOME: CurriculumLevel.ACTIVITY,
    CurriculumLevel.ACTIVITY: None,
}


@dataclass
class TreeNode:
    """A curriculum node with its children nested."""

    node: CurriculumNode
    children: list[TreeNode] = field(default_factory=list)

    @property
    def id(self):  # type: ignore[no-untyped-def]
        return self.node.id

    @property
    def sequence_order(self) -> int:
        return self.node.sequence_order


def build_tree(nodes: Iterable[CurriculumNode], include_hidden: bool = False) -> list[TreeNode]:
    """Build a sorted forest from a flat, unordered list of nodes.

    Hidden nodes are left out unless ``include_hidden`` is set. A node whose
    parent is not in the (filtered) input becomes a root, so orphaned
    subtrees never disappear. Siblings and roots are sorted by
    ``sequence_order``; ties keep input order.

    Args:
        nodes: Curriculum nodes for one instance, in any order
        include_hidden: Keep hidden nodes (curriculum editor view)

    Returns:
        Root tree nodes, each with ``children`` populated recursively
    """
    visible = [n for n in nodes if include_hidden or not n.is_hidden]

    # First pass: wrap every node. Duplicate IDs: last one wins.
    lookup: dict[object, TreeNode] = {}
    for node in visible:
        lookup[node.id] = TreeNode(node=node)

    # Second pass: attach to parents
    roots: list[TreeNode] = []
    attached: set[int] = set()
    for node in visible:
        tree_node = lookup[node.id]
        if id(tree_node) in attached:
            continue
        attached.add(id(tree_node))

        parent = lookup.get(node.parent_id) if node.parent_id is not None else None
        if parent is not None and parent is not tree_node:
            parent.children.append(tree_node)
        else:
            roots.append(tree_node)

    _sort_siblings(roots)
    return roots


def _sort_siblings(siblings: list[TreeNode]) -> None:
    # Iterative to stay clear of the recursion limit on deep imports
    stack = [siblings]
    while stack:
        level = stack.pop()
        level.sort(key=lambda t: t.sequence_order)
        for tree_node in level:
            if tree_node.children:
                stack.append(tree_node.children)


def count_nodes(roots: Sequence[TreeNode]) -> int:
    """Count every node in a forest."""
    return len(flatten_tree(roots))


def flatten_tree(roots: Sequence[TreeNode]) -> list[CurriculumNode]:
    """Flatten a forest back into a list using pre-order traversal."""
    result: list[CurriculumNode] = []
    stack = list(reversed(roots))
    while stack:
        tree_node = stack.pop()
        result.append(tree_node.node)
        stack.extend(reversed(tree_node.children))
    return result


def child_level(level: CurriculumLevel | str) -> CurriculumLevel | None:
    """Level for a new child of ``level``; None when the level is a leaf."""
    return _CHILD_LEVEL[CurriculumLevel(level)]
