"""Custom exceptions for decision tree training, prediction, and loading.

Core exceptions (subclass DecisionTreeError and ValueError):
- InvalidInputError: Raised when training data, configuration, or a record
  passed to prediction is unusable.
- InvalidModelError: Raised when a model is missing or structurally invalid.

Loader exceptions (subclass ValueError):
- DataLoadError: Raised when a CSV or JSONL input file cannot be turned into
  records.
"""

from __future__ import annotations

from typing import Literal

type ErrorKind = Literal["InvalidInput", "InvalidModel"]


class DecisionTreeError(Exception):
    """Base exception for all core decision tree errors.

    Catching this exception will catch every error raised by training,
    prediction, and model validation.

    Attributes:
        kind (ErrorKind): Error category, either `"InvalidInput"` or
            `"InvalidModel"`.
        detail (str): Human-readable description of the failure.
    """

    kind: ErrorKind
    detail: str

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        """Initialize DecisionTreeError.

        Args:
            kind (ErrorKind): Error category.
            detail (str): Description of the failure.
        """
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including kind and detail.
        """
        return f"{self.__class__.__name__}(kind={self.kind!r}, detail={self.detail!r})"


class InvalidInputError(DecisionTreeError, ValueError):
    """Raised when training data, configuration, or a prediction record is invalid.

    Examples:
        >>> err = InvalidInputError("training set cannot be empty")
        >>> err.kind
        'InvalidInput'
        >>> str(err)
        'training set cannot be empty'
    """

    def __init__(self, detail: str) -> None:
        """Initialize InvalidInputError.

        Args:
            detail (str): Description of the invalid input.
        """
        super().__init__("InvalidInput", detail)


class InvalidModelError(DecisionTreeError, ValueError):
    """Raised when a model is missing or violates a structural invariant.

    Examples:
        >>> err = InvalidModelError("model has no root node")
        >>> err.kind
        'InvalidModel'
    """

    def __init__(self, detail: str) -> None:
        """Initialize InvalidModelError.

        Args:
            detail (str): Description of the violation.
        """
        super().__init__("InvalidModel", detail)


class DataLoadError(ValueError):
    """Raised when an input file cannot be read into records.

    Attributes:
        path (str | None): The file that failed to load, when known.
        line (int | None): 1-based line or row number of the failure, when
            the failure is tied to one.
    """

    path: str | None
    line: int | None

    def __init__(self, message: str, *, path: str | None = None, line: int | None = None) -> None:
        """Initialize DataLoadError.

        Args:
            message (str): Description of the failure.
            path (str | None): The file that failed to load.
            line (int | None): 1-based line or row number of the failure.
        """
        super().__init__(message)
        self.path = path
        self.line = line
