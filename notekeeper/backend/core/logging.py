"""
Logging.

structlog on top of the stdlib root logger, configured from
config/settings/logging.yaml (validated as LoggingSchema). The server,
the CLI and the local workspace all log through here.

Records carry timestamp, level, logger, event, func_name and lineno.
Inside a request the middleware also binds request_id, frontend, method
and path. Outside a request, pass `source` explicitly with log_with_source.

Usage:
    from notekeeper.backend.core.logging import get_logger, log_with_source, setup_logging

    setup_logging()                      # levels and handlers from logging.yaml
    setup_logging(level="DEBUG")         # CLI --debug

    logger = get_logger(__name__)
    logger.info("Folder created", extra={"folder_id": 4})
    log_with_source(logger, "workspace", "warning", "Operation rejected", operation="move_note")

The optional file handler writes JSON lines (default logs/system.jsonl).
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from notekeeper.backend.core.config import find_project_root, get_app_config
from notekeeper.backend.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "workspace",
    "internal",
    "unknown",
})
"""Values accepted for the `source` field. Callers set it; it is never derived from logger names."""

# Third-party loggers kept at WARNING whatever the configured level
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def _load_logging_config() -> LoggingSchema:
    """The validated logging section of the application config."""
    return get_app_config().logging


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve the log file path relative to project root."""
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(file_config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(file_config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None take their value from logging.yaml. Calling
    this again replaces the handlers installed by the previous call.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' (console output only; the file is always JSON)
        enable_console: Write to stderr
        enable_file_logging: Write JSON lines to the configured file
    """
    config = _load_logging_config()
    level = level if level is not None else config.level
    format_type = format_type if format_type is not None else config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = config.handlers.file.enabled

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        if format_type == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        root_logger.addHandler(_file_handler(config.handlers.file, json_formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Structlog logger for `name` (normally __name__)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log `message` at `level` with an explicit `source` field.

    Raises:
        AttributeError: If level is not a logger method name

    Example:
        log_with_source(logger, "cli", "info", "Note moved", note_id=3)
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
