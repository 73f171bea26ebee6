"""Attribute value kinds, normalization, and the predicates used to route records."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from typing import Final, Literal

# ---------------------------------------------------------------------------
# Public type aliases
# ---------------------------------------------------------------------------

type Value = str | float | bool | None

type Record = Mapping[str, Value]

type ValueKind = Literal["string", "number", "boolean", "null"]

type PredicateName = Literal["==", ">="]

MISSING_LABEL: Final[str] = "<nil>"  # Class label for null or absent target values.

_KEY_DECIMAL_PLACES: Final[int] = 6  # Decimal places kept when formatting non-integral numbers.

# ---------------------------------------------------------------------------
# Public interface -- Kind detection and normalization
# ---------------------------------------------------------------------------


def value_kind(value: object) -> ValueKind:
    """Classify a value into one of the four supported kinds.

    `bool` is checked before numbers because Python's `bool` subclasses
    `int`; a boolean is never numeric. Anything that is not a string,
    number, or boolean is reported as `"null"`.

    Args:
        value (object): The value to classify.

    Returns:
        ValueKind: `"string"`, `"number"`, `"boolean"`, or `"null"`.

    Examples:
        >>> value_kind(4)
        'number'
        >>> value_kind(True)
        'boolean'
        >>> value_kind(None)
        'null'
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, numbers.Real):
        return "number"
    if isinstance(value, str):
        return "string"
    return "null"


def is_numeric(value: object) -> bool:
    """Return True for int or float values, excluding booleans."""
    return value_kind(value) == "number"


def to_float(value: float) -> float:
    """Normalize a numeric value to `float` so that `4` and `4.0` are interchangeable.

    Args:
        value (float): An int or float value.

    Returns:
        float: The value as a Python float.
    """
    return float(value)


# ---------------------------------------------------------------------------
# Public interface -- Predicates
# ---------------------------------------------------------------------------


def values_equal(value: object, pivot: object) -> bool:
    """Evaluate the equality predicate between a record value and a pivot.

    Two numbers compare by float equality. Any other pair must share the
    same kind and compare equal, so `True` never equals `1.0` and `None`
    only equals `None`.

    Args:
        value (object): The record's value.
        pivot (object): The stored pivot.

    Returns:
        bool: `True` if the record value matches the pivot.

    Examples:
        >>> values_equal(4, 4.0)
        True
        >>> values_equal(True, 1.0)
        False
        >>> values_equal(None, None)
        True
    """
    kind = value_kind(value)
    if kind != value_kind(pivot):
        return False
    if kind == "number":
        return to_float(value) == to_float(pivot)  # type: ignore[arg-type]
    return value == pivot


def greater_or_equal(value: object, pivot: object) -> bool:
    """Evaluate the greater-or-equal predicate between a record value and a pivot.

    Only meaningful between two numbers; a string, boolean, or null operand
    yields `False` rather than raising.

    Args:
        value (object): The record's value.
        pivot (object): The stored numeric threshold.

    Returns:
        bool: `True` if both operands are numeric and `value >= pivot`.

    Examples:
        >>> greater_or_equal(85, 80.0)
        True
        >>> greater_or_equal("not a number", 10.0)
        False
    """
    if not (is_numeric(value) and is_numeric(pivot)):
        return False
    return to_float(value) >= to_float(pivot)  # type: ignore[arg-type]


def evaluate_predicate(predicate_name: PredicateName | None, value: object, pivot: object) -> bool:
    """Dispatch to the predicate named by a split.

    Args:
        predicate_name (PredicateName | None): `"=="` or `">="`.
        value (object): The record's value.
        pivot (object): The stored pivot.

    Returns:
        bool: The predicate's result.

    Raises:
        ValueError: If `predicate_name` is not a recognized predicate.
    """
    if predicate_name == ">=":
        return greater_or_equal(value, pivot)
    if predicate_name == "==":
        return values_equal(value, pivot)
    raise ValueError(f"Unexpected predicate: {predicate_name!r}")


# ---------------------------------------------------------------------------
# Public interface -- Canonical keys and labels
# ---------------------------------------------------------------------------


def format_number(number: float) -> str:
    """Format a number as a stable canonical key.

    Integral values print without a fractional part; other values are rounded
    to six decimal places with trailing zeros trimmed, so floating-point noise
    does not fragment otherwise identical values.

    Args:
        number (float): The number to format.

    Returns:
        str: The canonical text form.

    Examples:
        >>> format_number(4.0)
        '4'
        >>> format_number(0.1 + 0.2)
        '0.3'
        >>> format_number(-2.5)
        '-2.5'
    """
    number = to_float(number)
    if not math.isfinite(number):
        return str(number)
    rounded = round(number, _KEY_DECIMAL_PLACES)
    if rounded == math.trunc(rounded):
        return str(int(rounded))
    text = f"{rounded:.{_KEY_DECIMAL_PLACES}f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def group_key(value: object) -> tuple[ValueKind, str]:
    """Return the bucket a value falls into when counting distinct values.

    The null bucket is keyed by kind, so it never collides with a real value
    such as the string `"<nil>"`.

    Args:
        value (object): The value to bucket.

    Returns:
        tuple[ValueKind, str]: `(kind, canonical_text)`.
    """
    kind = value_kind(value)
    if kind == "number":
        return kind, format_number(value)  # type: ignore[arg-type]
    if kind == "boolean":
        return kind, "true" if value else "false"
    if kind == "string":
        return kind, value  # type: ignore[return-value]
    return kind, ""


def label_of(value: object) -> str:
    """Return the class label used for a target value in class counts.

    Args:
        value (object): A target attribute value.

    Returns:
        str: Strings as-is, numbers in canonical form, booleans as
            `"true"`/`"false"`, null or absent as `MISSING_LABEL`.

    Examples:
        >>> label_of("yes")
        'yes'
        >>> label_of(1)
        '1'
        >>> label_of(None)
        '<nil>'
    """
    kind, text = group_key(value)
    return MISSING_LABEL if kind == "null" else text


def format_value(value: object) -> str:
    """Return a display form of a pivot for rendering and log messages."""
    kind, text = group_key(value)
    return "null" if kind == "null" else text
