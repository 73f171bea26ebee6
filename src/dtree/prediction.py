"""Prediction by tree traversal: hard labels, class probabilities, and batch helpers."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import NamedTuple

from loguru import logger

from dtree.exceptions import DecisionTreeError, InvalidInputError, InvalidModelError
from dtree.impurity import most_frequent, normalize_counts
from dtree.models import DecisionTreeModel, TreeNode
from dtree.values import Record, greater_or_equal, values_equal

# ---------------------------------------------------------------------------
# Public types
# ---------------------------------------------------------------------------


class BatchPredictions[T](NamedTuple):
    """Outcome of a batch prediction.

    Batch prediction stops at the first record that fails. `results` then
    holds the predictions computed before that record and `error` the
    failure; on success `error` is `None`.

    Attributes:
        results (list[T]): Predictions in input order.
        error (DecisionTreeError | None): The failure that stopped the batch.
    """

    results: list[T]
    error: DecisionTreeError | None = None


# ---------------------------------------------------------------------------
# Public interface -- Single record
# ---------------------------------------------------------------------------


def predict(model: DecisionTreeModel | None, record: Record | None) -> str:
    """Predict the class label of a record.

    Args:
        model (DecisionTreeModel | None): A trained model.
        record (Record | None): The record to classify.

    Returns:
        str: The category of the reached leaf, or the majority label of the
            node where routing dead-ended.

    Raises:
        InvalidModelError: If `model` or its root is `None`.
        InvalidInputError: If `record` is `None`.
    """
    node, dead_end = _descend(model, record)
    return most_frequent(node.class_counts) if dead_end else node.category


def predict_proba(model: DecisionTreeModel | None, record: Record | None) -> dict[str, float]:
    """Predict the class probability distribution of a record.

    Args:
        model (DecisionTreeModel | None): A trained model.
        record (Record | None): The record to classify.

    Returns:
        dict[str, float]: Normalized class counts of the reached leaf (or of
            the node where routing dead-ended); empty when the counts total
            zero.

    Raises:
        InvalidModelError: If `model` or its root is `None`.
        InvalidInputError: If `record` is `None`.
    """
    node, _ = _descend(model, record)
    return normalize_counts(node.class_counts)


# ---------------------------------------------------------------------------
# Public interface -- Batches
# ---------------------------------------------------------------------------


def predict_batch(model: DecisionTreeModel | None, records: Sequence[Record | None]) -> BatchPredictions[str]:
    """Predict class labels for a sequence of records, stopping at the first failure.

    Args:
        model (DecisionTreeModel | None): A trained model.
        records (Sequence[Record | None]): Records to classify.

    Returns:
        BatchPredictions[str]: Labels for the successfully classified prefix
            and the error that stopped the batch, if any.
    """
    return _run_batch(predict, model, records)


def predict_proba_batch(
    model: DecisionTreeModel | None,
    records: Sequence[Record | None],
) -> BatchPredictions[dict[str, float]]:
    """Predict class distributions for a sequence of records, stopping at the first failure.

    Args:
        model (DecisionTreeModel | None): A trained model.
        records (Sequence[Record | None]): Records to classify.

    Returns:
        BatchPredictions[dict[str, float]]: Distributions for the
            successfully classified prefix and the error that stopped the
            batch, if any.
    """
    return _run_batch(predict_proba, model, records)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _run_batch[T](
    predict_one: Callable[[DecisionTreeModel | None, Record | None], T],
    model: DecisionTreeModel | None,
    records: Sequence[Record | None],
) -> BatchPredictions[T]:
    """Apply a single-record predictor across records until one fails.

    Args:
        predict_one (Callable): `predict` or `predict_proba`.
        model (DecisionTreeModel | None): A trained model.
        records (Sequence[Record | None]): Records to classify.

    Returns:
        BatchPredictions[T]: The computed prefix and the stopping error, if any.
    """
    results: list[T] = []
    for index, record in enumerate(records):
        try:
            results.append(predict_one(model, record))
        except DecisionTreeError as error:
            logger.warning("Batch prediction stopped", index=index, kind=error.kind, detail=error.detail)
            return BatchPredictions(results=results, error=error)
    return BatchPredictions(results=results)


def _descend(model: DecisionTreeModel | None, record: Record | None) -> tuple[TreeNode, bool]:
    """Walk from the root to the node that answers for `record`.

    Args:
        model (DecisionTreeModel | None): A trained model.
        record (Record | None): The record to route.

    Returns:
        tuple[TreeNode, bool]: The answering node and whether traversal
            stopped at an internal node because the chosen child was missing.

    Raises:
        InvalidModelError: If `model` or its root is `None`.
        InvalidInputError: If `record` is `None`.
    """
    if model is None:
        raise InvalidModelError("model is None")
    if model.root is None:
        raise InvalidModelError("model has no root node")
    if record is None:
        raise InvalidInputError("record is None")

    node = model.root
    while not node.is_leaf:
        next_node = _choose_child(node, record)
        if next_node is None:
            return node, True
        node = next_node
    return node, False


def _choose_child(node: TreeNode, record: Record) -> TreeNode | None:
    """Select the branch an internal node sends a record down.

    An absent attribute, or a null value under `">="`, follows the branch
    that received more training records (ties go to match). Equality is
    evaluated even for null values, so a null can match a null pivot.

    Args:
        node (TreeNode): An internal node.
        record (Record): The record being routed.

    Returns:
        TreeNode | None: The chosen child, which may be missing in a
            malformed tree.
    """
    if node.attribute not in record:
        return _majority_child(node)

    value = record[node.attribute]
    if node.predicate_name == ">=":
        if value is None:
            return _majority_child(node)
        return node.match if greater_or_equal(value, node.pivot) else node.no_match
    return node.match if values_equal(value, node.pivot) else node.no_match


def _majority_child(node: TreeNode) -> TreeNode | None:
    """Return the child that received more training records, preferring match on ties."""
    return node.match if node.matched_count >= node.no_matched_count else node.no_match
