"""Read-only tree traversal and structural statistics of trained models."""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from typing import Literal, NamedTuple

from dtree.models import DecisionTreeModel, ModelStats, TreeNode

type Branch = Literal["yes", "no"]


class TreeVisit(NamedTuple):
    """One node reached by `walk_tree`.

    Attributes:
        node_id (int): Pre-order position of the node, starting at 1.
        parent_id (int | None): `node_id` of the parent; `None` for the root.
        branch (Branch | None): `"yes"` for a match child, `"no"` for a
            no-match child, `None` for the root.
        depth (int): Distance from the root (root is 0).
        node (TreeNode): The node itself.
    """

    node_id: int
    parent_id: int | None
    branch: Branch | None
    depth: int
    node: TreeNode


def walk_tree(root: TreeNode | None) -> Iterator[TreeVisit]:
    """Traverse a tree depth-first in pre-order, match branch before no-match.

    Args:
        root (TreeNode | None): The root to start from. `None` yields nothing.

    Yields:
        TreeVisit: Every node with its position in the tree.

    Examples:
        >>> leaf = TreeNode(category="yes", class_counts={"yes": 1})
        >>> [(v.node_id, v.depth) for v in walk_tree(leaf)]
        [(1, 0)]
    """
    counter = itertools.count(1)
    stack: list[tuple[TreeNode, int | None, Branch | None, int]] = []
    if root is not None:
        stack.append((root, None, None, 0))
    while stack:
        node, parent_id, branch, depth = stack.pop()
        node_id = next(counter)
        yield TreeVisit(node_id=node_id, parent_id=parent_id, branch=branch, depth=depth, node=node)
        # Pushed in reverse so that match is visited first.
        if node.no_match is not None:
            stack.append((node.no_match, node_id, "no", depth + 1))
        if node.match is not None:
            stack.append((node.match, node_id, "yes", depth + 1))


def compute_stats(model: DecisionTreeModel | None) -> ModelStats:
    """Compute structural statistics of a model's tree.

    Args:
        model (DecisionTreeModel | None): The model to inspect.

    Returns:
        ModelStats: Node counts, depth, and the sorted distinct non-empty
            leaf categories. All zero for a missing model or root.
    """
    if model is None or model.root is None:
        return ModelStats()

    tree_depth = total_nodes = leaf_nodes = 0
    classes: set[str] = set()
    for visit in walk_tree(model.root):
        total_nodes += 1
        tree_depth = max(tree_depth, visit.depth)
        if visit.node.is_leaf:
            leaf_nodes += 1
            if visit.node.category:
                classes.add(visit.node.category)

    return ModelStats(
        tree_depth=tree_depth,
        total_nodes=total_nodes,
        leaf_nodes=leaf_nodes,
        internal_nodes=total_nodes - leaf_nodes,
        classes=sorted(classes),
    )


def format_stats(stats: ModelStats) -> str:
    """Render statistics as the indented text block printed by the command line."""
    return "\n".join([
        "Model statistics:",
        f"  Tree depth: {stats.tree_depth}",
        f"  Total nodes: {stats.total_nodes}",
        f"  Leaf nodes: {stats.leaf_nodes}",
        f"  Internal nodes: {stats.internal_nodes}",
        f"  Classes: {len(stats.classes)}",
    ])
