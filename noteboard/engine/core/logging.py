"""
Centralized Logging Configuration.

All modules log through structlog loggers from get_logger(). Settings come
from config/settings/logging.yaml, validated as LoggingSchema.

JSON records carry timestamp, level, logger, event, func_name and lineno,
plus a `source` field naming where the record came from (cli, tasks,
storage, ...). Source is always set explicitly: bound once by the CLI, or
passed per call through log_with_source().

Usage:
    setup_logging()                                     # from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note moved", extra={"note_id": note.id})
    log_with_source(logger, "tasks", "info", "Autosave tick", notes=3)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from noteboard.engine.core.config import find_project_root, get_app_config
from noteboard.engine.core.config_schema import FileHandlerSchema, LoggingSchema


def _logging_settings() -> LoggingSchema:
    return get_app_config().logging


def _file_handler(file_config: FileHandlerSchema, formatter: logging.Formatter) -> RotatingFileHandler:
    """Rotating JSONL handler; the path is relative to the project root."""
    log_path = find_project_root() / file_config.path
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
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the process.

    Args:
        level: Log level name. Overrides logging.yaml.
        format_type: 'json' or 'console'. Overrides logging.yaml.
        enable_file_logging: Write the JSONL file. Overrides logging.yaml.
    """
    config = _logging_settings()
    handlers = config.handlers

    effective_format = format_type or config.format
    file_enabled = handlers.file.enabled if enable_file_logging is None else enable_file_logging

    shared_processors: list[Processor] = [
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

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or config.level).upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps stdout free for CLI output
    if handlers.console.enabled:
        console_handler = logging.StreamHandler(sys.stderr)
        if effective_format == "console":
            console_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(
                    processor=structlog.dev.ConsoleRenderer(colors=True),
                    foreign_pre_chain=shared_processors,
                )
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        root_logger.addHandler(_file_handler(handlers.file, json_formatter))

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Used where the record originates outside the board's event handlers
    (autosave ticks, storage I/O).

    Raises:
        AttributeError: If level is not a valid log level
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
