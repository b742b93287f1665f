"""Logging setup for the converter entrypoints.

Every module logs through ``logging.getLogger(__name__)``; this module
only configures the root logger once per process:
    - Console handler on stderr (optionally colored)
    - Optional file handler, size-rotated
    - Human or JSON line format
    - Contextual fields (e.g. ``svg=drawing.svg``) via contextvars

Public API:
    setup_logging(log_level="INFO", log_file=None, json=False)
    get_logger(name)
    push_context(svg="drawing.svg")
    pop_context(keys=["svg"])

Format examples:
    Human: 2026-03-02T09:14:05.120Z | WARNING  | svg=logo.svg | Skipping <rect id='r1'>: ...
    JSON: {"t":"2026-03-02T09:14:05.120+00:00","lvl":"WARNING","svg":"logo.svg","msg":"..."}

Idempotent: repeated setup_logging() calls replace handlers, never duplicate.
"""

import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


_context_var: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    "svg_motion_logging_context", default={}
)

_configured = False

_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ContextFormatter(logging.Formatter):
    """Formatter adding the fields set with :func:`push_context`.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``.
    use_color : bool
        ANSI level colors; only honoured when stderr is a TTY.
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        context = _context_var.get()
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self, record: logging.LogRecord, ts: datetime, context: Dict[str, Any],
    ) -> str:
        entry: Dict[str, Any] = {
            "t": ts.isoformat(timespec="milliseconds"),
            "lvl": record.levelname,
            "name": record.name,
        }
        entry.update(context)
        entry["msg"] = record.getMessage()
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    def _format_human(
        self, record: logging.LogRecord, ts: datetime, context: Dict[str, Any],
    ) -> str:
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_COLORS.get(record.levelname, '')}{level}{_RESET}"

        parts = [ts_str, level]
        if context:
            parts.append(" ".join(f"{k}={v}" for k, v in context.items()))
        parts.append(record.getMessage())
        line = " | ".join(parts)

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    max_bytes: int = 10_000_000,
    backup_count: int = 3,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger.

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
    log_file : str, optional
        Also log to this file (rotated at *max_bytes*).
    json : bool
        JSON lines instead of the human format, for both handlers.
    color : bool
        ANSI colors on the console handler.
    max_bytes, backup_count : int
        File rotation settings.
    context : dict, optional
        Initial contextual fields.

    Returns
    -------
    list[logging.Handler]
        The handlers installed on the root logger.

    Raises
    ------
    ValueError
        If *log_level* is not a logging level name.
    """
    global _configured

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = logging.getLogger()
    if _configured:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

    fmt_mode = "json" if json else "human"
    handlers: List[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ContextFormatter(fmt_mode, use_color=color))
    handlers.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
        )
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        handlers.append(file_handler)

    for handler in handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)

    logging.captureWarnings(True)
    _configured = True
    return handlers


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically ``__name__``)."""
    return logging.getLogger(name)


def push_context(**kwargs: Any) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(svg="logo.svg")
    >>> logger.info("Converted")  # -> "... | INFO     | svg=logo.svg | Converted"
    """
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get())
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    """Copy of the current contextual fields."""
    return dict(_context_var.get())
