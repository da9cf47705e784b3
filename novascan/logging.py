"""Structured logging for NovaScan.

Events are rendered by structlog and written through the stdlib root
logger to stderr, so JSON written to stdout by the CLI stays parseable.
Importing the package installs a default configuration from Settings;
the CLI replaces it on every invocation with its own level and format.
"""

import logging
import sys
import time
from typing import Any, TextIO

import orjson
import structlog

from .config import get_settings

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _orjson_dumps(event_dict: dict, **kwargs: Any) -> str:
    # stdlib handlers want text, orjson returns bytes
    return orjson.dumps(event_dict, default=kwargs.get("default")).decode()


def setup_logging(
    log_level: str | None = None,
    json_logging: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure logging, replacing any earlier configuration.

    Args:
        log_level: One of LOG_LEVELS (defaults to the LOG_LEVEL setting)
        json_logging: JSON lines instead of console output
        stream: Destination stream (defaults to the current sys.stderr)
    """
    settings = get_settings()
    level_name = (log_level or settings.log_level).upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level_name}")
    if json_logging is None:
        json_logging = settings.json_logging

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, level_name),
        force=True,
    )

    if json_logging:
        renderer = structlog.processors.JSONRenderer(serializer=_orjson_dumps)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # module-level loggers must pick up a renderer swapped in by the CLI
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_processing_stage(stage: str, input_count: int, output_count: int,
                         **kwargs: Any) -> dict[str, Any]:
    """Event fields for one pipeline stage.

    Use as ``logger.info(**log_processing_stage("dedupe", 10, 8))``.
    """
    return {
        "event": "processing_stage",
        "stage": stage,
        "input_count": input_count,
        "output_count": output_count,
        **kwargs,
    }


def log_error(error: BaseException, context: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """Event fields for a handled failure."""
    fields = {
        "event": "error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }
    if context:
        fields["context"] = context
    return fields


class PerformanceLogger:
    """Times a block and logs its outcome.

    Failures are logged and re-raised.
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.started = 0.0

    def __enter__(self) -> "PerformanceLogger":
        self.started = time.perf_counter()
        self.logger.debug("operation_started", operation=self.operation)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = round(time.perf_counter() - self.started, 4)
        if exc_type is None:
            self.logger.info("operation_completed", operation=self.operation, duration=duration)
        else:
            self.logger.error(
                "operation_failed",
                operation=self.operation,
                duration=duration,
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            )


setup_logging()
