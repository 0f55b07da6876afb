"""Logging bootstrap utilities with optional structured output."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import structlog

APP_LOGGER_PREFIX = "ai_suite"


def _private_file(path: Path) -> None:
    if os.name != "posix":
        return
    try:
        path.chmod(0o600)
    except OSError:
        logging.getLogger(__name__).warning("Could not restrict log file %s to 0600", path)


def app_only_filter(record: logging.LogRecord) -> bool:
    """Keep third-party chatter off the terminal."""
    return record.name.startswith(APP_LOGGER_PREFIX)


def build_formatter(structured: bool) -> logging.Formatter:
    """Return a JSON-lines formatter backed by structlog, or a plain one."""
    if not structured:
        return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # Lets structlog.get_logger() and logging.getLogger() share one JSON output.
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(
            ensure_ascii=False, separators=(",", ":")
        ),
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
    )


def configure_logging(logging_config: dict[str, Any]) -> None:
    """Install root handlers from the ``[logging]`` config section.

    The terminal only ever sees warnings from our own loggers; the optional
    log file receives everything at the configured level.
    """
    level = getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO)
    formatter = build_formatter(bool(logging_config.get("structured", True)))

    handlers: list[logging.Handler] = []
    terminal = logging.StreamHandler()
    terminal.setLevel(max(level, logging.WARNING))
    terminal.addFilter(app_only_filter)
    handlers.append(terminal)

    if logging_config.get("log_to_file", False):
        log_path = Path(
            str(logging_config.get("log_file_path", "~/.local/state/ai-suite/app.log"))
        ).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_file = logging.FileHandler(log_path, encoding="utf-8")
        log_file.setLevel(level)
        handlers.append(log_file)
        _private_file(log_path)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # httpx logs every request line at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
