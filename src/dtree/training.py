"""Decision tree training: input validation, stopping rules, and recursive tree construction."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from loguru import logger

from dtree.exceptions import InvalidInputError
from dtree.impurity import class_counts, entropy, most_frequent
from dtree.models import DEFAULT_CRITERION, DecisionTreeModel, TreeConfig, TreeNode
from dtree.splitting import find_best_split
from dtree.stats import compute_stats
from dtree.values import Record, format_value

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

PURITY_TOLERANCE: Final[float] = 1e-5  # Subsets with target entropy at or below this are treated as pure.
_SUPPORTED_CRITERIA: Final[frozenset[str]] = frozenset({DEFAULT_CRITERION})


# ---------------------------------------------------------------------------
# Public interface -- Training
# ---------------------------------------------------------------------------


def train(records: Sequence[Record], config: TreeConfig) -> DecisionTreeModel:
    """Train a decision tree by greedy top-down induction on information gain.

    Every node either becomes a leaf (pure subset, depth limit, sample
    limit, or no split with positive gain) or splits on the candidate with
    the greatest gain among every observed (attribute, value) pair. There is
    no pruning pass.

    Args:
        records (Sequence[Record]): Labeled training records. Records need
            not share a schema. Their order, and each record's key order,
            decides ties between equally good splits.
        config (TreeConfig): Training configuration.

    Returns:
        DecisionTreeModel: The trained model. An empty `criterion` is stored
            as `"entropy"`.

    Raises:
        InvalidInputError: If `records` is empty, the target is empty or
            appears in no record, a limit is negative, or the criterion is
            not supported.

    Examples:
        >>> rows = [{"outlook": "sunny", "play": "no"}, {"outlook": "rain", "play": "yes"}]
        >>> model = train(rows, TreeConfig(target="play"))
        >>> model.root.attribute
        'outlook'
    """
    config = _validate_training_inputs(records, config)
    logger.info(
        "Training decision tree",
        records=len(records),
        target=config.target,
        max_depth=config.max_depth,
        min_samples=config.min_samples,
    )
    root = _build_node(records, config, depth=0)
    model = DecisionTreeModel(root=root, config=config)
    stats = compute_stats(model)
    logger.info(
        "Decision tree trained",
        target=config.target,
        tree_depth=stats.tree_depth,
        total_nodes=stats.total_nodes,
        leaf_nodes=stats.leaf_nodes,
    )
    return model


# ---------------------------------------------------------------------------
# Private helpers -- Validation
# ---------------------------------------------------------------------------


def _validate_training_inputs(records: Sequence[Record], config: TreeConfig) -> TreeConfig:
    """Validate training data and configuration.

    Args:
        records (Sequence[Record]): The training records.
        config (TreeConfig): The requested configuration.

    Returns:
        TreeConfig: `config`, with an empty criterion replaced by the default.

    Raises:
        InvalidInputError: On the first invalid input found.
    """
    if not records:
        raise InvalidInputError("training set cannot be empty")
    if not config.target:
        raise InvalidInputError("config target attribute is required")
    if config.max_depth < 0:
        raise InvalidInputError(f"config max_depth cannot be negative, got {config.max_depth}")
    if config.min_samples < 0:
        raise InvalidInputError(f"config min_samples cannot be negative, got {config.min_samples}")
    if not any(config.target in record for record in records):
        raise InvalidInputError(f"target attribute '{config.target}' not found in any training record")

    if not config.criterion:
        config = config.model_copy(update={"criterion": DEFAULT_CRITERION})
    if config.criterion not in _SUPPORTED_CRITERIA:
        raise InvalidInputError(
            f"unsupported split criterion '{config.criterion}', expected one of {sorted(_SUPPORTED_CRITERIA)}"
        )
    return config


# ---------------------------------------------------------------------------
# Private helpers -- Tree construction
# ---------------------------------------------------------------------------


def _build_node(records: Sequence[Record], config: TreeConfig, *, depth: int) -> TreeNode:
    """Recursively build the subtree for one record subset.

    Args:
        records (Sequence[Record]): The subset reaching this node.
        config (TreeConfig): Validated training configuration.
        depth (int): Depth of this node; the root is 0.

    Returns:
        TreeNode: A leaf, or an internal node with both children built.
    """
    if not records:
        # Unreachable through a positive-gain split; kept as a terminal case.
        return TreeNode(category="")

    if _should_stop(records, config, depth=depth):
        return _make_leaf(records, config.target, depth=depth)

    best = find_best_split(records, config.target, config.ignored_attributes)
    if best is None:
        return _make_leaf(records, config.target, depth=depth)

    candidate, partition = best.candidate, best.partition
    logger.debug(
        "Split chosen",
        depth=depth,
        attribute=candidate.attribute,
        predicate=candidate.predicate_name,
        pivot=format_value(candidate.pivot),
        gain=round(best.gain, 6),
        matched=len(partition.match),
        no_matched=len(partition.no_match),
    )
    return TreeNode(
        match=_build_node(partition.match, config, depth=depth + 1),
        no_match=_build_node(partition.no_match, config, depth=depth + 1),
        class_counts=class_counts(records, config.target),
        matched_count=len(partition.match),
        no_matched_count=len(partition.no_match),
        attribute=candidate.attribute,
        predicate_name=candidate.predicate_name,
        pivot=candidate.pivot,
    )


def _should_stop(records: Sequence[Record], config: TreeConfig, *, depth: int) -> bool:
    """Return True when a node must become a leaf before any split search.

    Args:
        records (Sequence[Record]): The non-empty subset reaching the node.
        config (TreeConfig): Validated training configuration.
        depth (int): Depth of the node.

    Returns:
        bool: True if the subset is pure or a positive depth or sample
            limit has been reached.
    """
    if entropy(records, config.target) <= PURITY_TOLERANCE:
        return True
    if config.max_depth > 0 and depth >= config.max_depth:
        return True
    return config.min_samples > 0 and len(records) < config.min_samples


def _make_leaf(records: Sequence[Record], target: str, *, depth: int) -> TreeNode:
    """Build a leaf predicting the majority label of `records`.

    Args:
        records (Sequence[Record]): The subset reaching the leaf.
        target (str): The label attribute.
        depth (int): Depth of the leaf, for logging.

    Returns:
        TreeNode: Leaf with its category and full class counts.
    """
    counts = class_counts(records, target)
    category = most_frequent(counts)
    logger.debug("Leaf created", depth=depth, category=category, samples=len(records))
    return TreeNode(category=category, class_counts=counts)
