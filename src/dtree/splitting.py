"""Binary partitioning of record subsets, information gain, and best-split search."""

from __future__ import annotations

from collections.abc import Collection, Iterator, Sequence
from typing import NamedTuple

from dtree.impurity import entropy
from dtree.values import PredicateName, Record, Value, ValueKind, evaluate_predicate, is_numeric, to_float, value_kind

# ---------------------------------------------------------------------------
# Public types
# ---------------------------------------------------------------------------


class SplitCandidate(NamedTuple):
    """A predicate that could split a node.

    Attributes:
        attribute (str): The attribute tested by the predicate.
        predicate_name (PredicateName): `">="` for numeric pivots, `"=="`
            for everything else.
        pivot (Value): The comparison value; numeric pivots are floats.
    """

    attribute: str
    predicate_name: PredicateName
    pivot: Value


class Partition(NamedTuple):
    """The two halves produced by splitting a subset.

    Attributes:
        match (list[Record]): Records satisfying the predicate, in input order.
        no_match (list[Record]): All other records, in input order.
    """

    match: list[Record]
    no_match: list[Record]


class BestSplit(NamedTuple):
    """The winning candidate of a split search with its partition and gain.

    Attributes:
        candidate (SplitCandidate): The chosen predicate.
        partition (Partition): The records on each side of it.
        gain (float): Information gain of the split; always `> 0`.
    """

    candidate: SplitCandidate
    partition: Partition
    gain: float


# ---------------------------------------------------------------------------
# Public interface -- Partitioning and gain
# ---------------------------------------------------------------------------


def split(
    records: Sequence[Record],
    attribute: str,
    predicate_name: PredicateName,
    pivot: Value,
) -> Partition:
    """Partition records by evaluating a predicate on one attribute.

    An absent key is read as null, so during training it matches only a
    null equality pivot and never satisfies `">="`.

    Args:
        records (Sequence[Record]): The subset to partition.
        attribute (str): The attribute to test.
        predicate_name (PredicateName): `"=="` or `">="`.
        pivot (Value): The comparison value.

    Returns:
        Partition: `(match, no_match)`; together they hold every input record
            exactly once, each half in input order.

    Examples:
        >>> rows = [{"age": 20.0}, {"age": 30.0}, {"age": 1.0}]
        >>> [len(half) for half in split(rows, "age", ">=", 20.0)]
        [2, 1]
    """
    partition = Partition(match=[], no_match=[])
    for record in records:
        if evaluate_predicate(predicate_name, record.get(attribute), pivot):
            partition.match.append(record)
        else:
            partition.no_match.append(record)
    return partition


def information_gain(records: Sequence[Record], partition: Partition, target: str) -> float:
    """Compute the reduction in target entropy achieved by a partition.

    Args:
        records (Sequence[Record]): The subset before splitting.
        partition (Partition): The split of `records`.
        target (str): The label attribute.

    Returns:
        float: `entropy(records) - weighted mean of the branch entropies`,
            weighted by branch size.
    """
    total = len(records)
    if total == 0:
        return 0.0
    weighted_entropy = (
        entropy(partition.match, target) * len(partition.match)
        + entropy(partition.no_match, target) * len(partition.no_match)
    ) / total
    return entropy(records, target) - weighted_entropy


# ---------------------------------------------------------------------------
# Public interface -- Candidate enumeration and search
# ---------------------------------------------------------------------------


def iter_candidates(
    records: Sequence[Record],
    target: str,
    ignored_attributes: Collection[str] = (),
) -> Iterator[SplitCandidate]:
    """Yield one candidate per observed (record, attribute, value) occurrence.

    Records are visited in sequence order and each record's attributes in
    insertion order; this order defines the tie-break of `find_best_split`.
    Repeated pivots are yielded every time they occur.

    Args:
        records (Sequence[Record]): The subset to search.
        target (str): The label attribute, never used as a split.
        ignored_attributes (Collection[str]): Attributes excluded from the search.

    Yields:
        SplitCandidate: `">="` with a float pivot for numeric values, `"=="`
            with the raw value otherwise.
    """
    for record in records:
        for attribute, value in record.items():
            if attribute == target or attribute in ignored_attributes:
                continue
            if is_numeric(value):
                yield SplitCandidate(attribute, ">=", to_float(value))  # type: ignore[arg-type]
            else:
                yield SplitCandidate(attribute, "==", value)


def find_best_split(
    records: Sequence[Record],
    target: str,
    ignored_attributes: Collection[str] = (),
) -> BestSplit | None:
    """Search every candidate split for the one with the greatest information gain.

    Only a strictly greater gain replaces the current best, so ties keep the
    first candidate in `iter_candidates` order. A candidate equal to one
    already evaluated produces the same partition and gain and therefore
    cannot replace the best; it is skipped without re-evaluation.

    Args:
        records (Sequence[Record]): The subset to split.
        target (str): The label attribute.
        ignored_attributes (Collection[str]): Attributes excluded from the search.

    Returns:
        BestSplit | None: The winning split, or `None` if no candidate has a
            positive gain.
    """
    ignored = frozenset(ignored_attributes)
    best: BestSplit | None = None
    evaluated: set[tuple[str, PredicateName, ValueKind, Value]] = set()

    for candidate in iter_candidates(records, target, ignored):
        candidate_key = (candidate.attribute, candidate.predicate_name, value_kind(candidate.pivot), candidate.pivot)
        if candidate_key in evaluated:
            continue
        evaluated.add(candidate_key)

        partition = split(records, candidate.attribute, candidate.predicate_name, candidate.pivot)
        gain = information_gain(records, partition, target)
        if gain > (best.gain if best is not None else 0.0):
            best = BestSplit(candidate=candidate, partition=partition, gain=gain)

    return best
