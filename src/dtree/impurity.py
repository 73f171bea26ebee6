"""Class counting and Shannon entropy over record subsets."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

import numpy as np

from dtree.values import Record, group_key, label_of


def class_counts(records: Sequence[Record], attribute: str) -> dict[str, int]:
    """Count records per label of `attribute`.

    Keys appear in order of first occurrence, which fixes the tie-break of
    `most_frequent`. Null and absent values are counted under
    `dtree.values.MISSING_LABEL`.

    Args:
        records (Sequence[Record]): The subset to count.
        attribute (str): The attribute whose values are counted.

    Returns:
        dict[str, int]: Mapping of label to record count.

    Examples:
        >>> class_counts([{"p": "yes"}, {"p": "no"}, {"p": "yes"}], "p")
        {'yes': 2, 'no': 1}
    """
    return dict(Counter(label_of(record.get(attribute)) for record in records))


def entropy(records: Sequence[Record], attribute: str) -> float:
    """Compute the Shannon entropy (natural log) of the values of `attribute`.

    Values are grouped with `dtree.values.group_key`: strings by exact text,
    numbers by canonical form, and null or absent values into a single
    bucket of their own.

    Args:
        records (Sequence[Record]): The subset to measure.
        attribute (str): The attribute whose value distribution is measured.

    Returns:
        float: Entropy `>= 0`; `0.0` for an empty subset or a single value.

    Examples:
        >>> entropy([{"p": "yes"}, {"p": "yes"}], "p")
        0.0
        >>> round(entropy([{"p": "yes"}, {"p": "no"}], "p"), 6)
        0.693147
    """
    if not records:
        return 0.0
    counts = Counter(group_key(record.get(attribute)) for record in records)
    probabilities = np.fromiter(counts.values(), dtype=np.float64) / len(records)
    # abs() clears the -0.0 a pure subset produces
    return abs(float(np.sum(probabilities * np.log(probabilities))))


def most_frequent(counts: Mapping[str, int] | None) -> str:
    """Return the label with the strictly greatest count.

    Ties keep the label encountered first.

    Args:
        counts (Mapping[str, int] | None): Label counts, possibly empty or `None`.

    Returns:
        str: The majority label, or `""` when there are no positive counts.
    """
    best_label = ""
    best_count = 0
    for label, count in (counts or {}).items():
        if count > best_count:
            best_label, best_count = label, count
    return best_label


def normalize_counts(counts: Mapping[str, int] | None) -> dict[str, float]:
    """Convert label counts into a probability distribution.

    Args:
        counts (Mapping[str, int] | None): Label counts, possibly empty or `None`.

    Returns:
        dict[str, float]: Label probabilities summing to 1.0, or an empty
            dict when the total count is zero.
    """
    total = sum((counts or {}).values())
    if total == 0:
        return {}
    return {label: count / total for label, count in counts.items()}  # type: ignore[union-attr]
