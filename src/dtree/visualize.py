"""HTML and Graphviz DOT rendering of trained decision trees."""

from __future__ import annotations

import html
from pathlib import Path
from string import Template
from typing import Final

from loguru import logger

from dtree.models import DecisionTreeModel, TreeNode
from dtree.stats import walk_tree
from dtree.values import format_value

_HTML_TEMPLATE: Final[Template] = Template("""<html>
<head>
<style type="text/css">
  * { margin: 0; padding: 0; }
  .tree ul { padding-top: 20px; position: relative; }
  .tree li { white-space: nowrap; float: left; text-align: center; list-style-type: none; position: relative;
             padding: 20px 5px 0 5px; }
  .tree li::before, .tree li::after { content: ''; position: absolute; top: 0; right: 50%;
                                      border-top: 1px solid #ccc; width: 50%; height: 20px; }
  .tree li::after { right: auto; left: 50%; border-left: 1px solid #ccc; }
  .tree li:only-child::after, .tree li:only-child::before { display: none; }
  .tree li:only-child { padding-top: 0; }
  .tree li:first-child::before, .tree li:last-child::after { border: 0 none; }
  .tree li:last-child::before { border-right: 1px solid #ccc; border-radius: 0 5px 0 0; }
  .tree li:first-child::after { border-radius: 5px 0 0 0; }
  .tree ul ul::before { content: ''; position: absolute; top: 0; left: 50%; border-left: 1px solid #ccc;
                        width: 0; height: 20px; }
  .tree li a { border: 1px solid #ccc; padding: 5px 10px; text-decoration: none; color: #666;
               font-family: arial, verdana, tahoma; font-size: 11px; display: inline-block; border-radius: 5px; }
</style>
</head>
<body>
<div class="tree">$tree</div>
</body>
</html>
""")


def node_label(node: TreeNode) -> str:
    """Return the display label of a node.

    Args:
        node (TreeNode): The node to label.

    Returns:
        str: The category for a leaf (`'""'` when empty), otherwise
            `"<attribute> <predicate> <pivot>"`.

    Examples:
        >>> node_label(TreeNode(category="yes", class_counts={"yes": 3}))
        'yes'
        >>> node_label(TreeNode(
        ...     match=TreeNode(category="a"), no_match=TreeNode(category="b"),
        ...     attribute="Humidity", predicate_name=">=", pivot=90.0,
        ... ))
        'Humidity >= 90'
    """
    if node.is_leaf:
        return node.category or '""'
    return f"{node.attribute} {node.predicate_name} {format_value(node.pivot)}"


def to_html(model: DecisionTreeModel) -> str:
    """Render a model as a standalone HTML page with the tree drawn as nested lists.

    Args:
        model (DecisionTreeModel): The model to render.

    Returns:
        str: The HTML document. Labels are HTML-escaped.
    """
    return _HTML_TEMPLATE.substitute(tree=_node_to_html(model.root))


def write_html(model: DecisionTreeModel, path: str | Path) -> None:
    """Write the HTML rendering of a model to a file.

    Args:
        model (DecisionTreeModel): The model to render.
        path (str | Path): Destination file; overwritten if it exists.
    """
    Path(path).write_text(to_html(model), encoding="utf-8")
    logger.info("HTML visualization written", path=str(path))


def to_dot(model: DecisionTreeModel) -> str:
    """Render a model as a Graphviz DOT digraph.

    Nodes are numbered in depth-first pre-order; leaves are drawn as ovals
    and edges are labelled `yes` (match) and `no` (no-match).

    Args:
        model (DecisionTreeModel): The model to render.

    Returns:
        str: The DOT source.
    """
    node_lines: list[str] = []
    edge_lines: list[str] = []
    for visit in walk_tree(model.root):
        label = _dot_escape(node_label(visit.node))
        shape = ", shape=oval" if visit.node.is_leaf else ""
        node_lines.append(f'  n{visit.node_id} [label="{label}"{shape}];')
        if visit.parent_id is not None:
            edge_lines.append(f'  n{visit.parent_id} -> n{visit.node_id} [label="{visit.branch}"];')
    return "\n".join(["digraph dtree {", "  node [shape=box];", *node_lines, *edge_lines, "}"]) + "\n"


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _node_to_html(node: TreeNode | None) -> str:
    """Recursively render a subtree as nested `<ul>` elements."""
    if node is None:
        return ""
    label = html.escape(node_label(node))
    if node.is_leaf:
        return f'<ul><li><a href="#"><b>{label}</b></a></li></ul>'
    return (
        f'<ul><li><a href="#"><b>{label}</b></a><ul>'
        f'<li><a href="#">yes</a>{_node_to_html(node.match)}</li>'
        f'<li><a href="#">no</a>{_node_to_html(node.no_match)}</li>'
        "</ul></li></ul>"
    )


def _dot_escape(text: str) -> str:
    """Escape backslashes and double quotes for a DOT string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')
