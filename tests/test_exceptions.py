"""Tests for the exception hierarchy in `dtree.exceptions`."""

from __future__ import annotations

import pytest
from pytest_check import check

from dtree.exceptions import DataLoadError, DecisionTreeError, InvalidInputError, InvalidModelError


class TestDecisionTreeErrors:
    """Tests for `DecisionTreeError` and its subclasses."""

    @pytest.mark.parametrize(
        ("error_class", "kind"),
        [(InvalidInputError, "InvalidInput"), (InvalidModelError, "InvalidModel")],
    )
    def test_kind_and_detail(self, error_class: type[DecisionTreeError], kind: str) -> None:
        """Each subclass fixes its kind and keeps the detail as its message."""
        # Act
        error = error_class("something is wrong")  # type: ignore[call-arg]

        # Assert
        with check:
            assert error.kind == kind
        with check:
            assert error.detail == "something is wrong"
        with check:
            assert str(error) == "something is wrong"

    def test_catchable_as_base_and_value_error(self) -> None:
        """Core errors can be caught generically or as ValueError."""
        # Act / Assert
        with check:
            assert isinstance(InvalidInputError("x"), DecisionTreeError)
        with check:
            assert isinstance(InvalidModelError("x"), ValueError)

    def test_repr_includes_kind_and_detail(self) -> None:
        """The debugging representation names both fields."""
        # Act
        text = repr(InvalidModelError("model is None"))

        # Assert
        assert text == "InvalidModelError(kind='InvalidModel', detail='model is None')"


class TestDataLoadError:
    """Tests for `DataLoadError`."""

    def test_carries_location(self) -> None:
        """Path and line are optional context on top of the message."""
        # Act
        error = DataLoadError("invalid JSON on line 3", path="rows.jsonl", line=3)

        # Assert
        with check:
            assert str(error) == "invalid JSON on line 3"
        with check:
            assert (error.path, error.line) == ("rows.jsonl", 3)
        with check:
            assert not isinstance(error, DecisionTreeError)

    def test_location_defaults_to_none(self) -> None:
        """Without context both fields are None."""
        # Act
        error = DataLoadError("unknown format")

        # Assert
        assert (error.path, error.line) == (None, None)
