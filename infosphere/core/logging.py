"""
ⒸAngelaMos | 2026
logging.py
"""
import logging
import sys

import orjson
import structlog


def configure_logging(
    json_mode: bool | None = None,
    debug: bool = False,
) -> None:
    """
    Configure structlog for analysis runs
    Logs go to stderr so report output on stdout stays clean
    Auto-detects JSON mode based on TTY if not specified
    """
    if json_mode is None:
        json_mode = not sys.stderr.isatty()

    log_level = logging.DEBUG if debug else logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt = "iso",
                                         utc = True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_mode:
        processors = [
            *shared_processors,
            structlog.processors.JSONRenderer(serializer = _json_serializer),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors = sys.stderr.isatty()),
        ]

    structlog.configure(
        processors = processors,
        wrapper_class = structlog.make_filtering_bound_logger(log_level),
        context_class = dict,
        logger_factory = structlog.PrintLoggerFactory(file = sys.stderr),
        cache_logger_on_first_use = False,
    )


def _json_serializer(obj: dict, **kwargs) -> str:
    """
    Serialize log entries to JSON using orjson for speed
    """
    return orjson.dumps(obj, default = str).decode("utf-8")


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a lazily bound logger instance
    Module level loggers pick up configuration applied later
    """
    if name:
        return structlog.get_logger(component = name)
    return structlog.get_logger()
