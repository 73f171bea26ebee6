"""Structural validation of trained and loaded decision tree models."""

from __future__ import annotations

from dtree.exceptions import InvalidModelError
from dtree.models import DecisionTreeModel, TreeConfig, TreeNode

_VALID_PREDICATES: frozenset[str] = frozenset({"==", ">="})


def validate_model(model: DecisionTreeModel | None) -> None:
    """Check that a model is structurally sound and ready for prediction.

    The configuration is checked first, then the tree depth-first with the
    match branch before the no-match branch. The first violation found is
    raised.

    Args:
        model (DecisionTreeModel | None): The model to check.

    Raises:
        InvalidModelError: If the model is `None`, has no root, carries an
            invalid configuration, or any node violates a structural
            invariant.

    Examples:
        >>> from dtree.models import TreeNode
        >>> leaf = TreeNode(category="yes", class_counts={"yes": 2})
        >>> validate_model(DecisionTreeModel(root=leaf, config=TreeConfig(target="Play")))
    """
    if model is None:
        raise InvalidModelError("model is None")
    if model.root is None:
        raise InvalidModelError("model has no root node")
    _validate_config(model.config)
    _validate_node(model.root)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _validate_config(config: TreeConfig) -> None:
    """Raise `InvalidModelError` if the stored configuration is unusable.

    Args:
        config (TreeConfig): The configuration stored with the model.

    Raises:
        InvalidModelError: If the target is empty or a limit is negative.
    """
    if not config.target:
        raise InvalidModelError("model config missing categoryAttr")
    if config.max_depth < 0:
        raise InvalidModelError("model config has negative maxDepth")
    if config.min_samples < 0:
        raise InvalidModelError("model config has negative minSamples")


def _validate_node(node: TreeNode) -> None:
    """Recursively check one node and its subtree.

    Args:
        node (TreeNode): The node to check.

    Raises:
        InvalidModelError: On the first invariant violation in the subtree.
    """
    if node.is_leaf:
        # Category may be the empty string; only the counts are required.
        if node.class_counts is None:
            raise InvalidModelError("leaf node missing classCounts")
        return

    if node.match is None or node.no_match is None:
        raise InvalidModelError("internal node missing one or both children")
    if not node.attribute:
        raise InvalidModelError("internal node missing attribute")
    if not node.predicate_name:
        raise InvalidModelError("internal node missing predicateName")
    if node.predicate_name not in _VALID_PREDICATES:
        raise InvalidModelError(f"internal node has invalid predicateName {node.predicate_name!r} (must be == or >=)")
    if node.class_counts is None:
        raise InvalidModelError("internal node missing classCounts")

    _validate_node(node.match)
    _validate_node(node.no_match)
