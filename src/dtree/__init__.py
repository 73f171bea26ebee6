"""dtree: Binary decision tree classification over mixed categorical and numeric records."""

from loguru import logger

from dtree.exceptions import DataLoadError, DecisionTreeError, InvalidInputError, InvalidModelError
from dtree.logging import PACKAGE_NAME, enable_logging
from dtree.models import DecisionTreeModel, ModelStats, TreeConfig, TreeNode
from dtree.persistence import dump_model, load_model, load_model_json, save_model
from dtree.prediction import BatchPredictions, predict, predict_batch, predict_proba, predict_proba_batch
from dtree.stats import compute_stats, walk_tree
from dtree.training import train
from dtree.validation import validate_model

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the dtree package by default

__all__ = [
    "BatchPredictions",
    "DataLoadError",
    "DecisionTreeError",
    "DecisionTreeModel",
    "InvalidInputError",
    "InvalidModelError",
    "ModelStats",
    "TreeConfig",
    "TreeNode",
    "compute_stats",
    "dump_model",
    "enable_logging",
    "load_model",
    "load_model_json",
    "predict",
    "predict_batch",
    "predict_proba",
    "predict_proba_batch",
    "save_model",
    "train",
    "validate_model",
    "walk_tree",
]
