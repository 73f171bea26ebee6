"""Pydantic models for the training configuration, tree nodes, trained model, and model statistics."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dtree.values import PredicateName, Value

type SplitCriterion = Literal["entropy"]

DEFAULT_CRITERION: SplitCriterion = "entropy"

_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class TreeConfig(BaseModel):
    """Training configuration for a decision tree.

    Negative limits are accepted here so that a persisted model with a
    corrupt configuration can still be loaded and then rejected by
    `dtree.validation.validate_model`; `dtree.training.train` rejects them
    before building anything.

    Attributes:
        target (str): The label attribute to predict. Serialized as
            `categoryAttr`.
        ignored_attributes (list[str]): Attributes excluded from the split
            search.
        criterion (str): Split criterion. Only `"entropy"` is supported.
        max_depth (int): Maximum depth of the tree; 0 means unlimited.
        min_samples (int): Nodes with fewer records than this become leaves;
            0 means no limit.

    Examples:
        >>> config = TreeConfig(target="Play", max_depth=3)
        >>> config.model_dump(by_alias=True)["categoryAttr"]
        'Play'
    """

    model_config = _MODEL_CONFIG

    target: str = Field(
        alias="categoryAttr",
        description="The label attribute to predict.",
    )
    ignored_attributes: list[str] = Field(
        default_factory=list,
        description="Attributes excluded when searching for splits.",
    )
    criterion: str = Field(
        default=DEFAULT_CRITERION,
        description='Split criterion. Only "entropy" is supported.',
    )
    max_depth: int = Field(
        default=0,
        description="Maximum tree depth; 0 means unlimited.",
    )
    min_samples: int = Field(
        default=0,
        description="Minimum number of records required to split a node; 0 means no limit.",
    )


class TreeNode(BaseModel):
    """A node in a binary decision tree.

    A node with neither child is a leaf, regardless of its `category`; a
    leaf's category may legitimately be the empty string. Internal nodes
    carry the split (`attribute`, `predicate_name`, `pivot`), the number of
    training records routed to each branch, and the class counts of the
    records that reached them, used as a fallback when routing dead-ends.

    Attributes:
        match (TreeNode | None): Child for records satisfying the predicate.
        no_match (TreeNode | None): Child for the remaining records.
        category (str): Most frequent label at a leaf.
        class_counts (dict[str, int] | None): Per-label record counts of the
            training subset that reached this node.
        matched_count (int): Training records routed to `match`.
        no_matched_count (int): Training records routed to `no_match`.
        attribute (str): Splitting attribute of an internal node.
        predicate_name (PredicateName | None): `"=="` or `">="` on internal
            nodes.
        pivot (Value): Comparison value of the split.
    """

    model_config = _MODEL_CONFIG

    match: TreeNode | None = None
    no_match: TreeNode | None = None
    category: str = ""
    class_counts: dict[str, int] | None = None
    matched_count: int = 0
    no_matched_count: int = 0
    attribute: str = ""
    predicate_name: PredicateName | None = None
    pivot: Value = None

    @property
    def is_leaf(self) -> bool:
        """Whether this node has no children."""
        return self.match is None and self.no_match is None


class DecisionTreeModel(BaseModel):
    """A trained decision tree paired with the configuration it was trained with.

    Instances are immutable; prediction, statistics, rendering, and
    persistence only read them, so a model may be shared between threads.

    Attributes:
        root (TreeNode | None): Root node of the tree.
        config (TreeConfig): Training configuration.
    """

    model_config = _MODEL_CONFIG

    root: TreeNode | None = Field(description="Root node of the tree.")
    config: TreeConfig = Field(description="Configuration the tree was trained with.")


class ModelStats(BaseModel):
    """Structural statistics of a trained tree.

    Attributes:
        tree_depth (int): Distance from the root (depth 0) to the deepest node.
        total_nodes (int): Internal plus leaf nodes.
        leaf_nodes (int): Nodes without children.
        internal_nodes (int): Decision nodes.
        classes (list[str]): Sorted distinct non-empty leaf categories.
    """

    tree_depth: int = Field(default=0, ge=0, description="Maximum depth of the tree; the root is depth 0.")
    total_nodes: int = Field(default=0, ge=0, description="Total number of nodes.")
    leaf_nodes: int = Field(default=0, ge=0, description="Number of leaf nodes.")
    internal_nodes: int = Field(default=0, ge=0, description="Number of internal nodes.")
    classes: list[str] = Field(default_factory=list, description="Distinct class labels found at leaves.")
