"""Evaluation metrics for trained decision trees."""

from __future__ import annotations

from collections.abc import Sequence

from sklearn.metrics import accuracy_score

from dtree.exceptions import InvalidInputError
from dtree.models import DecisionTreeModel
from dtree.prediction import predict_batch
from dtree.values import Record, label_of


def compute_metrics(model: DecisionTreeModel, records: Sequence[Record]) -> dict[str, float]:
    """Compute classification metrics of a model on labeled records.

    The true label of each record is `label_of(record[target])`, the same
    labelling used for the class counts stored in the tree, so numeric and
    boolean targets compare against the tree's categories correctly.

    Args:
        model (DecisionTreeModel): A trained model.
        records (Sequence[Record]): Labeled records to evaluate on.

    Returns:
        dict[str, float]: `{"accuracy": <float>}`.

    Raises:
        InvalidInputError: If `records` is empty.
        DecisionTreeError: If any record cannot be classified.
    """
    if not records:
        raise InvalidInputError("cannot compute metrics on an empty record set")

    predictions, error = predict_batch(model, records)
    if error is not None:
        raise error

    target = model.config.target
    true_labels = [label_of(record.get(target)) for record in records]
    return {"accuracy": float(accuracy_score(true_labels, predictions))}
