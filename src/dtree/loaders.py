"""Reading training and prediction records from CSV and JSONL files."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Literal, NamedTuple

import polars as pl
from loguru import logger

from dtree.exceptions import DataLoadError
from dtree.values import Record, Value, value_kind

type InputFormat = Literal["csv", "jsonl"]

_BOOLEAN_CELLS: dict[str, bool] = {"true": True, "false": False}


class LoadedRecords(NamedTuple):
    """Records read from a file together with their column order.

    Attributes:
        records (list[dict[str, Value]]): One mapping per row, keys in file order.
        columns (list[str]): Column names in file order. For JSONL, the union
            of keys in order of first appearance.
    """

    records: list[dict[str, Value]]
    columns: list[str]


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


def parse_cell(cell: str | None) -> Value:
    """Coerce a CSV cell to a typed value.

    Args:
        cell (str | None): Raw cell text; `None` for a missing cell.

    Returns:
        Value: `None` for empty cells, a float when the text parses as one,
            `True`/`False` for `"true"`/`"false"`, otherwise the text.

    Examples:
        >>> parse_cell("85")
        85.0
        >>> parse_cell("false")
        False
        >>> parse_cell("sunny")
        'sunny'
        >>> parse_cell("") is None
        True
    """
    if cell is None:
        return None
    text = cell.lstrip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        pass
    return _BOOLEAN_CELLS.get(text, text)


def read_csv_records(path: str | Path) -> LoadedRecords:
    """Read a CSV file with a header row into records.

    Every column is read as text and each cell is coerced independently by
    `parse_cell`, so one column may mix numbers and strings.

    Args:
        path (str | Path): The CSV file.

    Returns:
        LoadedRecords: The rows and the header order.

    Raises:
        DataLoadError: If the file cannot be read or parsed, or has no data rows.
    """
    try:
        df = pl.read_csv(path, infer_schema=False)
    except (OSError, pl.exceptions.PolarsError) as e:
        msg = f"cannot read CSV file '{path}': {e}"
        raise DataLoadError(msg, path=str(path)) from e

    if df.height == 0:
        raise DataLoadError(f"CSV file '{path}' is empty (no data rows)", path=str(path))

    records = [{column: parse_cell(cell) for column, cell in row.items()} for row in df.iter_rows(named=True)]
    logger.debug("CSV records read", path=str(path), rows=len(records), columns=df.width)
    return LoadedRecords(records=records, columns=df.columns)


def read_jsonl_records(path: str | Path) -> LoadedRecords:
    """Read a JSON Lines file into records.

    Each non-blank line must be a JSON object whose values are strings,
    numbers, booleans, or null. Keys absent from a line stay absent in its
    record.

    Args:
        path (str | Path): The JSONL file.

    Returns:
        LoadedRecords: The rows and the union of their keys in order of first
            appearance.

    Raises:
        DataLoadError: If the file cannot be read, a line is not a flat JSON
            object, or the file holds no records.
    """
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        msg = f"cannot read JSONL file '{path}': {e}"
        raise DataLoadError(msg, path=str(path)) from e

    records: list[dict[str, Value]] = []
    columns: dict[str, None] = {}
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        record = _parse_jsonl_line(line, path=str(path), line_number=line_number)
        columns.update(dict.fromkeys(record))
        records.append(record)

    if not records:
        raise DataLoadError(f"JSONL file '{path}' is empty", path=str(path))
    logger.debug("JSONL records read", path=str(path), rows=len(records), columns=len(columns))
    return LoadedRecords(records=records, columns=list(columns))


def read_records(path: str | Path, fmt: str) -> LoadedRecords:
    """Read records from a file in the given format.

    Args:
        path (str | Path): The input file.
        fmt (str): `"csv"` or `"jsonl"`, case-insensitive.

    Returns:
        LoadedRecords: The rows and their column order.

    Raises:
        DataLoadError: If the format is unknown or the file cannot be loaded.
    """
    normalized = fmt.lower()
    if normalized == "csv":
        return read_csv_records(path)
    if normalized == "jsonl":
        return read_jsonl_records(path)
    raise DataLoadError(f"unknown format: {fmt} (must be 'csv' or 'jsonl')", path=str(path))


def require_target(records: Sequence[Record], target: str) -> None:
    """Check that every record carries the label attribute.

    Args:
        records (Sequence[Record]): Training records.
        target (str): The label attribute.

    Raises:
        DataLoadError: Naming the first row (1-based) without the label.
    """
    for row_number, record in enumerate(records, start=1):
        if target not in record:
            raise DataLoadError(f"missing label '{target}' in row {row_number}", line=row_number)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _parse_jsonl_line(line: str, *, path: str, line_number: int) -> dict[str, Value]:
    """Decode one JSONL line into a record.

    Args:
        line (str): The raw line.
        path (str): Source file, for error messages.
        line_number (int): 1-based line number, for error messages.

    Returns:
        dict[str, Value]: The decoded record.

    Raises:
        DataLoadError: If the line is not a JSON object of scalar values.
    """
    try:
        decoded = json.loads(line)
    except json.JSONDecodeError as e:
        msg = f"invalid JSON on line {line_number}: {e}"
        raise DataLoadError(msg, path=path, line=line_number) from e

    if not isinstance(decoded, dict):
        msg = f"line {line_number} is not a JSON object"
        raise DataLoadError(msg, path=path, line=line_number)

    nested = [key for key, value in decoded.items() if value is not None and value_kind(value) == "null"]
    if nested:
        msg = f"line {line_number} has non-scalar values for keys {nested}"
        raise DataLoadError(msg, path=path, line=line_number)
    return decoded
