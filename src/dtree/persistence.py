"""JSON persistence of trained decision tree models.

Models are written as nested JSON objects mirroring the node structure
(`attribute`, `predicateName`, `pivot`, `match`, `noMatch`, `category`,
`classCounts`, `matchedCount`, `noMatchedCount`) alongside the training
configuration (`categoryAttr`, `ignoredAttributes`, `criterion`,
`maxDepth`, `minSamples`).

Every load path validates the decoded model with
`dtree.validation.validate_model`, so a corrupt file is rejected before it
can produce predictions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

from loguru import logger
from pydantic import ValidationError

from dtree.exceptions import InvalidModelError
from dtree.models import DecisionTreeModel
from dtree.validation import validate_model

__all__ = ["JSON_INDENT", "dump_model", "load_model", "load_model_json", "save_model"]

JSON_INDENT: Final[int] = 2


def dump_model(model: DecisionTreeModel) -> str:
    """Serialize a model to indented JSON.

    `None` fields (absent children, leaf predicate names) are omitted. A
    `null` pivot is omitted too and restored as `None` on load, so round
    trips are lossless.

    Args:
        model (DecisionTreeModel): The model to serialize.

    Returns:
        str: The JSON document.
    """
    return model.model_dump_json(by_alias=True, exclude_none=True, indent=JSON_INDENT)


def load_model_json(text: str | bytes) -> DecisionTreeModel:
    """Decode and validate a model from a JSON document.

    Args:
        text (str | bytes): A document produced by `dump_model`.

    Returns:
        DecisionTreeModel: The decoded, validated model.

    Raises:
        InvalidModelError: If the document is not valid JSON, does not match
            the model schema, or describes a structurally invalid tree.
    """
    try:
        model = DecisionTreeModel.model_validate_json(text)
    except ValidationError as e:
        msg = f"model JSON does not match the model schema: {e}"
        raise InvalidModelError(msg) from e

    try:
        validate_model(model)
    except InvalidModelError as e:
        logger.warning("Loaded model failed validation", detail=e.detail)
        raise
    return model


def save_model(model: DecisionTreeModel, path: str | Path) -> None:
    """Write a model to a JSON file.

    Args:
        model (DecisionTreeModel): The model to write.
        path (str | Path): Destination file; overwritten if it exists.
    """
    Path(path).write_text(dump_model(model) + "\n", encoding="utf-8")
    logger.info("Model saved", path=str(path))


def load_model(path: str | Path) -> DecisionTreeModel:
    """Read and validate a model from a JSON file.

    Args:
        path (str | Path): File written by `save_model`.

    Returns:
        DecisionTreeModel: The decoded, validated model.

    Raises:
        OSError: If the file cannot be read.
        InvalidModelError: If the file content is not a valid model.
    """
    model = load_model_json(Path(path).read_bytes())
    logger.info("Model loaded", path=str(path))
    return model
