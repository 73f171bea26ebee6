"""Tests for JSON persistence of models in `dtree.persistence`."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pytest_check import check

from dtree.exceptions import InvalidModelError
from dtree.models import DecisionTreeModel, TreeConfig, TreeNode
from dtree.persistence import dump_model, load_model, load_model_json, save_model
from dtree.prediction import predict
from dtree.training import train
from dtree.values import Value


class TestDumpModel:
    """Tests for the JSON layout written by `dump_model`."""

    def test_uses_camel_case_keys(self) -> None:
        """Node and config fields are written under their external names."""
        # Arrange
        model = train(_make_weather_records(), TreeConfig(target="Play", ignored_attributes=["Temperature"]))

        # Act
        document = json.loads(dump_model(model))

        # Assert
        root = document["root"]
        with check:
            assert document["config"] == {
                "categoryAttr": "Play",
                "ignoredAttributes": ["Temperature"],
                "criterion": "entropy",
                "maxDepth": 0,
                "minSamples": 0,
            }
        with check:
            assert {"match", "noMatch", "classCounts", "matchedCount", "noMatchedCount", "predicateName"} <= set(root)
        with check:
            assert root["attribute"] == "Outlook"

    def test_leaves_omit_children_and_predicate(self) -> None:
        """Absent fields are left out rather than written as null."""
        # Arrange
        model = DecisionTreeModel(
            root=TreeNode(category="yes", class_counts={"yes": 2}),
            config=TreeConfig(target="Play"),
        )

        # Act
        root = json.loads(dump_model(model))["root"]

        # Assert
        with check:
            assert "match" not in root
        with check:
            assert "predicateName" not in root
        with check:
            assert root["category"] == "yes"


class TestRoundTrip:
    """Tests for saving and loading models."""

    def test_file_round_trip_preserves_model_and_predictions(self, tmp_path: Path) -> None:
        """A model reloaded from disk is equal to the saved one and predicts the same."""
        # Arrange
        records = _make_weather_records()
        model = train(records, TreeConfig(target="Play"))
        path = tmp_path / "model.json"

        # Act
        save_model(model, path)
        loaded = load_model(path)

        # Assert
        with check:
            assert loaded == model
        with check:
            assert [predict(loaded, record) for record in records] == [predict(model, record) for record in records]

    def test_pivot_kinds_survive_round_trip(self) -> None:
        """Boolean, numeric, string, and null pivots keep their kinds."""
        # Arrange
        for pivot in (False, 90.0, "sunny", None):
            model = DecisionTreeModel(
                root=TreeNode(
                    match=TreeNode(category="a", class_counts={"a": 1}),
                    no_match=TreeNode(category="b", class_counts={"b": 1}),
                    class_counts={"a": 1, "b": 1},
                    matched_count=1,
                    no_matched_count=1,
                    attribute="x",
                    predicate_name="==",
                    pivot=pivot,
                ),
                config=TreeConfig(target="y"),
            )

            # Act
            loaded = load_model_json(dump_model(model))

            # Assert
            assert loaded.root is not None
            with check:
                assert loaded.root.pivot == pivot
            with check:
                assert type(loaded.root.pivot) is type(pivot)


class TestLoadErrors:
    """Tests for rejected model documents."""

    def test_malformed_json_raises_invalid_model(self) -> None:
        """Text that is not JSON is not a model."""
        # Act / Assert
        with pytest.raises(InvalidModelError, match="model schema"):
            load_model_json("{not json")

    def test_structurally_invalid_tree_raises(self) -> None:
        """Decoded models are validated before being returned."""
        # Arrange
        document = json.dumps({
            "root": {"category": "yes"},
            "config": {"categoryAttr": "Play"},
        })

        # Act / Assert
        with pytest.raises(InvalidModelError, match="leaf node missing classCounts"):
            load_model_json(document)

    def test_invalid_predicate_is_rejected(self) -> None:
        """Unknown predicate names never reach prediction."""
        # Arrange
        document = json.dumps({
            "root": {
                "match": {"category": "a", "classCounts": {"a": 1}},
                "noMatch": {"category": "b", "classCounts": {"b": 1}},
                "classCounts": {"a": 1, "b": 1},
                "attribute": "x",
                "predicateName": "<",
                "pivot": 1,
            },
            "config": {"categoryAttr": "y"},
        })

        # Act / Assert
        with pytest.raises(InvalidModelError):
            load_model_json(document)

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        """IO failures propagate unchanged."""
        # Act / Assert
        with pytest.raises(OSError):
            load_model(tmp_path / "absent.json")


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _make_weather_records() -> list[dict[str, Value]]:
    """Build the seven-row weather-vs-play data set."""
    return [
        {"Outlook": "sunny", "Temperature": 85.0, "Humidity": 85.0, "Wind": False, "Play": "no"},
        {"Outlook": "sunny", "Temperature": 80.0, "Humidity": 90.0, "Wind": True, "Play": "no"},
        {"Outlook": "overcast", "Temperature": 83.0, "Humidity": 86.0, "Wind": False, "Play": "yes"},
        {"Outlook": "rain", "Temperature": 70.0, "Humidity": 96.0, "Wind": False, "Play": "yes"},
        {"Outlook": "rain", "Temperature": 68.0, "Humidity": 80.0, "Wind": False, "Play": "yes"},
        {"Outlook": "rain", "Temperature": 65.0, "Humidity": 70.0, "Wind": True, "Play": "no"},
        {"Outlook": "overcast", "Temperature": 64.0, "Humidity": 65.0, "Wind": True, "Play": "yes"},
    ]
