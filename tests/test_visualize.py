"""Tests for HTML and DOT rendering in `dtree.visualize`."""

from __future__ import annotations

from pathlib import Path

from pytest_check import check

from dtree.models import DecisionTreeModel, TreeConfig, TreeNode
from dtree.training import train
from dtree.values import Value
from dtree.visualize import node_label, to_dot, to_html, write_html


class TestNodeLabel:
    """Tests for `node_label`."""

    def test_labels(self) -> None:
        """Leaves show their category and internal nodes show their split."""
        # Arrange
        internal = TreeNode(
            match=_leaf("a"),
            no_match=_leaf("b"),
            attribute="Wind",
            predicate_name="==",
            pivot=False,
        )

        # Act / Assert
        with check:
            assert node_label(_leaf("yes")) == "yes"
        with check:
            assert node_label(_leaf("")) == '""'
        with check:
            assert node_label(internal) == "Wind == false"


class TestToDot:
    """Tests for `to_dot`."""

    def test_weather_tree(self) -> None:
        """Nodes are emitted in pre-order, then edges labelled yes and no."""
        # Arrange
        model = train(_make_weather_records(), TreeConfig(target="Play"))

        # Act
        dot = to_dot(model)

        # Assert
        assert dot == "\n".join([
            "digraph dtree {",
            "  node [shape=box];",
            '  n1 [label="Outlook == sunny"];',
            '  n2 [label="no", shape=oval];',
            '  n3 [label="Wind == false"];',
            '  n4 [label="yes", shape=oval];',
            '  n5 [label="Outlook == rain"];',
            '  n6 [label="no", shape=oval];',
            '  n7 [label="yes", shape=oval];',
            '  n1 -> n2 [label="yes"];',
            '  n1 -> n3 [label="no"];',
            '  n3 -> n4 [label="yes"];',
            '  n3 -> n5 [label="no"];',
            '  n5 -> n6 [label="yes"];',
            '  n5 -> n7 [label="no"];',
            "}",
            "",
        ])

    def test_quotes_are_escaped(self) -> None:
        """Quotes in labels cannot break the DOT string literal."""
        # Arrange
        model = _make_model(_leaf('say "hi"'))

        # Act
        dot = to_dot(model)

        # Assert
        assert '  n1 [label="say \\"hi\\"", shape=oval];' in dot


class TestToHtml:
    """Tests for `to_html` and `write_html`."""

    def test_nested_lists_with_branch_labels(self) -> None:
        """Each internal node renders its yes and no branches."""
        # Arrange
        model = train(_make_weather_records(), TreeConfig(target="Play"))

        # Act
        page = to_html(model)

        # Assert
        with check:
            assert page.startswith("<html>")
        with check:
            assert '<div class="tree"><ul><li><a href="#"><b>Outlook == sunny</b></a>' in page
        with check:
            assert page.count('<a href="#">yes</a>') == 3
        with check:
            assert page.count('<a href="#">no</a>') == 3

    def test_labels_are_escaped(self) -> None:
        """Markup in categories is rendered as text."""
        # Arrange
        model = _make_model(_leaf("<b>&"))

        # Act
        page = to_html(model)

        # Assert
        assert "<b>&lt;b&gt;&amp;</b>" in page

    def test_write_html(self, tmp_path: Path) -> None:
        """The rendered page is written to the given path."""
        # Arrange
        model = _make_model(_leaf("yes"))
        path = tmp_path / "tree.html"

        # Act
        write_html(model, path)

        # Assert
        assert path.read_text(encoding="utf-8") == to_html(model)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _leaf(category: str) -> TreeNode:
    """Build a leaf with a single training record."""
    return TreeNode(category=category, class_counts={category: 1})


def _make_model(root: TreeNode) -> DecisionTreeModel:
    """Wrap a root node in a model."""
    return DecisionTreeModel(root=root, config=TreeConfig(target="Play"))


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
