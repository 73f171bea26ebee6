"""Demonstrates how to enable and configure logging in dtree.

dtree logging is disabled by default. Users opt in by calling ``enable_logging()``,
which returns a ``LoggingHandle``. The handle can be used as a context manager
(``with enable_logging(): ...``) or disabled manually via ``handle.disable()``.
When the last active handle is disabled, dtree logging is automatically turned off.

Key concepts shown here:

- ``level``: ``"INFO"`` reports training start and end and saved or loaded
  files; ``"DEBUG"`` adds every chosen split and leaf.
- ``log_format``: ``"short"`` shows ``timestamp | level | function - message``;
  ``"full"`` adds the module and line number.
- Batch errors: a batch that hits an invalid record logs a warning and returns
  the predictions made so far together with the error.
- Automatic cleanup: logging is re-disabled when the context manager exits.
"""

from pathlib import Path

from dtree import TreeConfig, enable_logging, predict_batch, save_model, train
from dtree.loaders import read_csv_records

DATA_PATH = Path(__file__).with_name("playtennis.csv")

with enable_logging(level="DEBUG", log_format="full"):
    loaded = read_csv_records(DATA_PATH)
    model = train(loaded.records, TreeConfig(target="Play"))
    save_model(model, "playtennis_model.json")

    # The third record is None, so the batch stops there
    batch = predict_batch(model, [loaded.records[0], loaded.records[2], None, loaded.records[3]])
    print(f"\nPredictions: {batch.results}, error: {batch.error!r}\n")

# Logging automatically disabled here
