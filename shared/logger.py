"""
Elfview Logging
================

:class:`ElfviewLogger` is a :class:`logging.LoggerAdapter` bound to one
elfview component (``"parser"``, ``"sections"``, ...).  It tags every
record with the component and the current decoding stage, and collects
free-form keyword arguments (``log.warning(..., section=4)``) into a
``fields`` mapping on the record.

Handlers:

- stderr: a Rich handler, so diagnostics never mix with a report or JSON
  document printed on stdout;
- file (optional): rotating, one line per record, either plain text or
  a JSON object.

References:
    - Python logging cookbook, "Using LoggerAdapters to impart
      contextual information".
      https://docs.python.org/3/howto/logging-cookbook.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, MutableMapping

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_STDERR_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s [%(operation)s] | %(message)s"

# Keyword arguments that belong to Logger.log() itself
_LOG_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


class JSONLinesFormatter(logging.Formatter):
    """One JSON object per record.

    ::

        {"timestamp": "...", "level": "WARNING", "logger": "elfview.parser",
         "message": "...", "component": "parser", "operation": "sections",
         "extra": {"section": 4}}
    """

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "component": getattr(record, "component", None),
            "operation": getattr(record, "operation", None),
        }
        fields = getattr(record, "fields", None)
        if fields:
            line["extra"] = fields
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str, ensure_ascii=False)


def _stderr_handler() -> logging.Handler:
    return RichHandler(
        console=Console(theme=_STDERR_THEME, stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )


def _file_handler(
    path: str | Path,
    json_lines: bool,
    max_bytes: int,
    backup_count: int,
) -> logging.Handler:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        file_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    if json_lines:
        handler.setFormatter(JSONLinesFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    return handler


class ElfviewLogger(logging.LoggerAdapter):
    """Logger for one elfview component.

    Usage::

        log = ElfviewLogger("parser", log_file="elfview.log", json_logs=True)
        with log.timed("load main.o"), log.operation("sections"):
            log.warning("Bad name offset", section=4)

    Args:
        component:       Component name; records go to ``elfview.<component>``.
        log_level:       Minimum level name (``"DEBUG"`` ... ``"CRITICAL"``).
        log_file:        Rotating log file, or ``None`` for stderr only.
        json_logs:       Write the log file as JSON lines.
        max_bytes:       Size at which the log file rotates.
        backup_count:    Rotated files kept.
        console_output:  Attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

        logger = logging.getLogger(f"elfview.{component}")
        logger.setLevel(level)
        logger.propagate = False
        # A second logger for the same component replaces the handlers
        logger.handlers.clear()

        handlers: list[logging.Handler] = []
        if console_output:
            handlers.append(_stderr_handler())
        if log_file is not None:
            handlers.append(_file_handler(log_file, json_logs, max_bytes, backup_count))
        for handler in handlers:
            handler.setLevel(level)
            logger.addHandler(handler)

        super().__init__(logger, {})
        self._component = component
        self._operation: str | None = None

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in _LOG_KWARGS}
        extra = dict(kwargs.get("extra") or {})
        extra["component"] = self._component
        extra["operation"] = self._operation or "-"
        extra["fields"] = fields
        kwargs["extra"] = extra
        return msg, kwargs

    @contextmanager
    def operation(self, name: str) -> Iterator[ElfviewLogger]:
        """Tag records logged inside the block with decoding stage *name*."""
        previous, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log the wall time of the block at DEBUG."""
        start = time.perf_counter()
        self.debug("Started: %s", label)
        try:
            yield
        finally:
            self.debug("Completed: %s (%.3f sec)", label, time.perf_counter() - start)
