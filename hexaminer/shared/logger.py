"""
Hexaminer Structured Logger
============================

Provides :class:`HexLogger`, a logging facade that writes Rich-coloured
records to stderr and, optionally, plain-text or JSON-lines records to a
rotating log file.

Each record carries the ``component`` that emitted it (``engine``,
``cli``, ...) and, while an :meth:`HexLogger.operation` block is active,
the name of the current ``operation``.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "INFO",
          "logger": "hexaminer.engine",
          "message": "...",
          "component": "engine",
          "operation": "analyze_data",
          "extra": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("component", "operation"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        extra = getattr(record, "hex_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` bound to a themed stderr console."""

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== HexLogger ======================================


class HexLogger:
    """Structured, context-aware logger for Hexaminer components.

    Usage::

        log = HexLogger("engine", log_file="hexaminer.log", json_logs=True)
        log.info("Analysis started", size=len(data))
        with log.operation("signature_scan"):
            log.debug("Checking %d signatures", count)

    Keyword arguments other than ``exc_info``, ``stack_info`` and
    ``stacklevel`` are collected into the record's ``extra`` payload.

    Args:
        component:       Component name; the stdlib logger is
                         ``hexaminer.<component>``.
        log_level:       Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:        Path to the rotating log file. ``None`` disables file logging.
        json_logs:       If ``True`` the file handler emits JSON lines.
        max_bytes:       Maximum log-file size before rotation (default 10 MiB).
        backup_count:    Number of rotated backup files to keep.
        console_output:  If ``True`` attach a colour Rich console handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: str | None = None

        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger = logging.getLogger(f"hexaminer.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Re-instantiation must not stack handlers or leak open log files
        for handler in list(self._logger.handlers):
            handler.close()
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(_ColorConsoleHandler(level=level))

        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt=(
                            "%(asctime)s | %(levelname)-8s | "
                            "%(name)s | %(message)s"
                        ),
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            self._logger.addHandler(fh)

    # ------------------------------------------------------------------ #
    #  Operation scope
    # ------------------------------------------------------------------ #

    class _OperationContext:
        """Context manager that temporarily binds an operation name."""

        def __init__(self, parent: HexLogger, operation: str) -> None:
            self._parent = parent
            self._operation = operation
            self._prev: str | None = None

        def __enter__(self) -> HexLogger:
            self._prev = self._parent._operation
            self._parent._operation = self._operation
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation = self._prev

    def operation(self, name: str) -> _OperationContext:
        """Return a context manager that sets the *operation* field."""
        return self._OperationContext(self, name)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = kwargs.pop("extra", {}) or {}

        payload: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                payload[key] = kwargs.pop(key)

        extra["component"] = self._component
        extra["operation"] = self._operation
        if payload:
            extra["hex_extra"] = payload

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Context manager for measuring and logging elapsed time."""

        def __init__(self, logger_inst: HexLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> HexLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.debug(
                "Completed: %s (%.3f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            """Seconds elapsed since entering the context."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start / finish and elapsed time.

        Usage::

            with log.timed("engine pass"):
                results = engine.analyze_data(data)
        """
        return self._TimingContext(self, label)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        return self._component

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger
