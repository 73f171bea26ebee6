"""Logging utilities for dtree.

dtree logs through loguru and is silent by default. ``enable_logging()``
turns it on and returns a handle that turns it off again, either explicitly
or as a context manager.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) to
    prevent duplicate output when ``enable_logging()`` adds its own handler.
    If your application configures loguru handlers *before* importing dtree,
    handler 0 may no longer be the default; in that case the removal is a
    no-op (the ``ValueError`` is suppressed). Configure loguru handlers
    *after* importing dtree, or re-add a stderr handler explicitly if needed.
"""

from __future__ import annotations

import contextlib
import sys
import threading
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

# Handler 0 is loguru's default stderr handler; it may already be gone.
with contextlib.suppress(ValueError):
    logger.remove(0)

type LogLevel = Literal[
    "TRACE",
    "DEBUG",
    "INFO",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

type LogFormat = Literal["short", "full"]

_SHORT_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
    "<cyan>{function}</cyan> - "
    "<level>{message}</level> {extra}"
)

_FULL_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> {extra}"
)


class LoggingHandle:
    """Handle for managing the lifecycle of one dtree logging handler.

    Stores the handler ID from logger.add() and provides cleanup via disable()
    or automatically through the context manager protocol.

    Examples:
        >>> with enable_logging(level="DEBUG"):  # doctest: +SKIP
        ...     train(records, TreeConfig(target="Play"))

        >>> handle = enable_logging()  # doctest: +SKIP
        >>> handle.disable()  # doctest: +SKIP
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        """Initialize the logging handle.

        Args:
            handler_id (int): The loguru handler ID from logger.add().
        """
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        """Remove the handler associated with this handle.

        When this is the last active handle, ``logger.disable("dtree")`` is
        called so dtree goes quiet again. Calling this more than once is a
        no-op.
        """
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Enter context manager.

        Returns:
            LoggingHandle: This handle instance.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit context manager and disable logging."""
        self.disable()

    @classmethod
    def get_active_handle_count(cls) -> int:
        """Return the number of handles that have not been disabled."""
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel = "INFO",
    log_format: LogFormat = "short",
) -> LoggingHandle:
    """Enable dtree logging to stderr.

    At ``"INFO"`` training reports its start and end and persistence reports
    saved and loaded files. ``"DEBUG"`` adds every chosen split and leaf,
    which is verbose on large data.

    Args:
        level (LogLevel): Minimum log level to display. Defaults to "INFO".
        log_format (LogFormat): "short" (default) shows only the function
            name; "full" shows module:function:line.

    Returns:
        LoggingHandle: Independent handle for removing the handler.

    Examples:
        >>> with enable_logging():  # doctest: +SKIP
        ...     model = load_model("model.json")
    """
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sys.stderr,
        level=level,
        filter=_is_dtree_record,
        format=_SHORT_FORMAT if log_format == "short" else _FULL_FORMAT,
    )
    return LoggingHandle(handler_id)


def _is_dtree_record(record: Record) -> bool:
    """Pass only records emitted from within the dtree package.

    Args:
        record (Record): The loguru record to filter.

    Returns:
        bool: True if the record's module belongs to dtree.
    """
    name = record["name"]
    return name is not None and (name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}."))
