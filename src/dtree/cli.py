"""Command-line interface: train, predict, visualize, and stats subcommands.

Usage:
  dtree train --in examples/playtennis.csv --label Play --out model.json
  dtree predict --in examples/playtennis.csv --model model.json --csv --proba --out preds.csv
  dtree visualize --model model.json --out tree.html --dot tree.dot
  dtree stats --model model.json
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import polars as pl

from dtree.exceptions import DataLoadError, DecisionTreeError
from dtree.loaders import read_records, require_target
from dtree.logging import enable_logging
from dtree.metrics import compute_metrics
from dtree.models import DecisionTreeModel, TreeConfig
from dtree.persistence import load_model, save_model
from dtree.prediction import predict, predict_proba
from dtree.stats import compute_stats, format_stats
from dtree.training import train
from dtree.values import Value, format_value
from dtree.visualize import to_dot, write_html

_EXIT_OK = 0
_EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command.

    Returns:
        argparse.ArgumentParser: The configured parser.
    """
    parser = argparse.ArgumentParser(prog="dtree", description="Train and apply binary decision trees")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", action="store_true", help="Log training and IO details to stderr")

    train_parser = subparsers.add_parser("train", parents=[common], help="Train a model from CSV or JSONL")
    train_parser.add_argument("--in", dest="input", required=True, help="Input file (csv or jsonl)")
    train_parser.add_argument("--out", default="model.json", help="Output model JSON file (default: model.json)")
    train_parser.add_argument("--format", default="csv", help="Input format: csv|jsonl (default: csv)")
    train_parser.add_argument("--label", default="label", help="Label column name (default: label)")
    train_parser.add_argument("--max-depth", type=int, default=0, help="Maximum tree depth (0 = unlimited)")
    train_parser.add_argument("--min-samples", type=int, default=0, help="Minimum samples to split (0 = none)")
    train_parser.add_argument(
        "--ignore", action="append", default=[], metavar="ATTR", help="Attribute to exclude from splits (repeatable)"
    )
    train_parser.set_defaults(handler=_train_command)

    predict_parser = subparsers.add_parser("predict", parents=[common], help="Predict with a trained model")
    predict_parser.add_argument("--in", dest="input", required=True, help="Input file (csv or jsonl)")
    predict_parser.add_argument("--model", required=True, help="Model JSON file")
    predict_parser.add_argument("--out", help="Output file (default: stdout)")
    predict_parser.add_argument("--format", default="csv", help="Input format: csv|jsonl (default: csv)")
    predict_parser.add_argument("--csv", action="store_true", help="Output CSV mirroring the input columns")
    predict_parser.add_argument("--proba", action="store_true", help="Include class probabilities")
    predict_parser.set_defaults(handler=_predict_command)

    visualize_parser = subparsers.add_parser("visualize", parents=[common], help="Render a model as HTML or DOT")
    visualize_parser.add_argument("--model", required=True, help="Model JSON file")
    visualize_parser.add_argument("--out", default="tree.html", help="Output HTML file (default: tree.html)")
    visualize_parser.add_argument("--dot", help="Optional Graphviz DOT output file")
    visualize_parser.set_defaults(handler=_visualize_command)

    stats_parser = subparsers.add_parser("stats", parents=[common], help="Print model statistics")
    stats_parser.add_argument("--model", required=True, help="Model JSON file")
    stats_parser.set_defaults(handler=_stats_command)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line.

    Args:
        argv (Sequence[str] | None): Arguments without the program name;
            defaults to `sys.argv[1:]`.

    Returns:
        int: Process exit code; 0 on success, 1 on failure.
    """
    args = build_parser().parse_args(argv)
    handle = enable_logging(level="DEBUG") if args.verbose else None
    try:
        return args.handler(args)
    except (DataLoadError, DecisionTreeError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return _EXIT_FAILURE
    finally:
        if handle is not None:
            handle.disable()


# ---------------------------------------------------------------------------
# Private helpers -- Commands
# ---------------------------------------------------------------------------


def _train_command(args: argparse.Namespace) -> int:
    """Train a model, save it, and print its statistics and training accuracy."""
    loaded = read_records(args.input, args.format)
    require_target(loaded.records, args.label)
    config = TreeConfig(
        target=args.label,
        ignored_attributes=args.ignore,
        max_depth=args.max_depth,
        min_samples=args.min_samples,
    )
    model = train(loaded.records, config)
    save_model(model, args.out)

    print(f"Model trained successfully and saved to {args.out}")
    print(format_stats(compute_stats(model)))
    metrics = compute_metrics(model, loaded.records)
    print(f"  Training accuracy: {metrics['accuracy']:.4f}")
    return _EXIT_OK


def _predict_command(args: argparse.Namespace) -> int:
    """Predict every input row and write JSONL or CSV output."""
    model = load_model(args.model)
    loaded = read_records(args.input, args.format)

    if not args.out:
        ok = _write_predictions(model, loaded.records, loaded.columns, args, sys.stdout)
        return _EXIT_OK if ok else _EXIT_FAILURE

    with Path(args.out).open("w", encoding="utf-8", newline="") as stream:
        ok = _write_predictions(model, loaded.records, loaded.columns, args, stream)
    if not ok:
        return _EXIT_FAILURE
    print(f"Predictions written to {args.out}")
    return _EXIT_OK


def _visualize_command(args: argparse.Namespace) -> int:
    """Write the HTML rendering and, optionally, the DOT source of a model."""
    model = load_model(args.model)
    write_html(model, args.out)
    print(f"HTML visualization written to {args.out}")
    if args.dot:
        Path(args.dot).write_text(to_dot(model), encoding="utf-8")
        print(f"DOT file written to {args.dot}")
    return _EXIT_OK


def _stats_command(args: argparse.Namespace) -> int:
    """Print the statistics of a saved model."""
    stats = compute_stats(load_model(args.model))
    print(format_stats(stats))
    print(f"  Class labels: {', '.join(stats.classes)}")
    return _EXIT_OK


# ---------------------------------------------------------------------------
# Private helpers -- Output
# ---------------------------------------------------------------------------


def _write_predictions(
    model: DecisionTreeModel,
    records: list[dict[str, Value]],
    columns: list[str],
    args: argparse.Namespace,
    stream: TextIO,
) -> bool:
    """Predict each record and write the results to `stream`.

    Args:
        model (DecisionTreeModel): The trained model.
        records (list[dict[str, Value]]): Input rows.
        columns (list[str]): Input column order, mirrored in CSV output.
        args (argparse.Namespace): Parsed `predict` arguments.
        stream (TextIO): Destination.

    Returns:
        bool: False if a row could not be classified. JSONL lines written
            before the failing row are kept; CSV output is not written.
    """
    rows: list[dict[str, str]] = []
    for row_number, record in enumerate(records, start=1):
        try:
            prediction = predict(model, record)
            proba = predict_proba(model, record) if args.proba else None
        except DecisionTreeError as e:
            print(f"error: prediction failed on row {row_number}: {e.detail}", file=sys.stderr)
            return False

        if not args.csv:
            output: dict[str, object] = {"input": record, "prediction": prediction}
            if proba is not None:
                output["proba"] = proba
            stream.write(json.dumps(output) + "\n")
            continue

        row = {column: _csv_cell(record.get(column)) for column in columns}
        row["prediction"] = prediction
        if proba is not None:
            row["proba"] = json.dumps(proba)
        rows.append(row)

    if args.csv:
        schema = [*columns, "prediction", *(["proba"] if args.proba else [])]
        stream.write(pl.DataFrame(rows, schema=dict.fromkeys(schema, pl.String)).write_csv())
    return True


def _csv_cell(value: Value) -> str:
    """Render a record value for CSV output; null and absent values become empty cells."""
    return "" if value is None else format_value(value)


if __name__ == "__main__":
    raise SystemExit(main())
