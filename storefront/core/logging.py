import logging
import os
from collections import OrderedDict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog


def default_formatter(fmt: Optional[str] = None) -> logging.Formatter:
    """Returns a logging formatter with a default format if none is specified."""
    default_fmt = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"
    return logging.Formatter(fmt or default_fmt)


def setup_logger(
    name: str = "storefront",
    *,
    log_dir: Optional[str] = None,
    logger_level: int | str = logging.INFO,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    use_structlog: bool = True,
    structlog_json: bool = True,
    structlog_bind: Optional[dict] = None,
) -> logging.Logger | structlog.stdlib.BoundLogger:
    """Configure and initialize logging for Storefront components.

    Sets up a console handler on the given logger and, when ``log_dir`` is given, a rotating
    file handler writing to ``{log_dir}/{name}.log``.

    Args:
        name: Logger name, defaults to "storefront".
        log_dir: Directory for the log file. No file handler is added when omitted.
        logger_level: Overall logger level.
        propagate: Whether the logger should propagate messages to ancestor loggers.
        max_bytes: Maximum size in bytes before rotating log file.
        backup_count: Number of backup files to retain.
        use_structlog: If True, configure and return a structlog BoundLogger.
        structlog_json: If True, render JSON; otherwise use the console/dev renderer.
        structlog_bind: Fields bound to every event of the returned logger.

    Returns:
        logging.Logger | structlog.stdlib.BoundLogger: Configured logger instance.
    """
    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers.clear()
    stdlib_logger.setLevel(logger_level)
    stdlib_logger.propagate = propagate

    if not use_structlog:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(default_formatter())
        stdlib_logger.addHandler(stream_handler)
        if log_dir:
            stdlib_logger.addHandler(_file_handler(name, log_dir, max_bytes, backup_count, default_formatter()))
        return stdlib_logger

    renderer = structlog.processors.JSONRenderer() if structlog_json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _enforce_key_order_processor(
                [
                    "timestamp",
                    "event",
                    "service",
                    "duration_ms",
                    "level",
                    "logger",
                ]
            ),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Structlog renders the full line, handlers only pass it through
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(stream_handler)
    if log_dir:
        stdlib_logger.addHandler(
            _file_handler(name, log_dir, max_bytes, backup_count, logging.Formatter("%(message)s"))
        )

    bound_logger = structlog.get_logger(name)
    if structlog_bind:
        bound_logger = bound_logger.bind(**structlog_bind)
    return bound_logger


def _file_handler(
    name: str, log_dir: str, max_bytes: int, backup_count: int, formatter: logging.Formatter
) -> RotatingFileHandler:
    log_file_path = os.path.join(log_dir, f"{name}.log")
    os.makedirs(Path(log_file_path).parent, exist_ok=True)
    handler = RotatingFileHandler(filename=log_file_path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(formatter)
    return handler


def _enforce_key_order_processor(key_order: list[str]):
    def _processor(_logger, _method_name, event_dict):
        ordered = OrderedDict()
        for key in key_order:
            if key in event_dict:
                ordered[key] = event_dict.pop(key)
        for k in sorted(event_dict.keys()):
            ordered[k] = event_dict[k]
        return ordered

    return _processor


def get_logger(name: str | None = "storefront", settings=None, **kwargs):
    """Create or retrieve a named Storefront logger.

    Names are placed under the ``storefront`` namespace, so ``get_logger("auth")`` yields the
    ``storefront.auth`` logger. When ``settings`` is given, its LOG_LEVEL, LOG_DIR and
    LOG_JSON values are used unless overridden through ``kwargs``.

    Example:
        .. code-block:: python

            from storefront.core.logging import get_logger

            logger = get_logger("catalog", structlog_bind={"service": "storefront"})
            logger.info("Product created", slug="iphone-13")
    """
    if not name:
        name = "storefront"
    full_name = name if name.startswith("storefront") else f"storefront.{name}"

    if settings is not None:
        kwargs.setdefault("logger_level", settings.LOG_LEVEL)
        kwargs.setdefault("log_dir", settings.LOG_DIR)
        kwargs.setdefault("structlog_json", settings.LOG_JSON)
    kwargs.setdefault("propagate", True)
    return setup_logger(full_name, **kwargs)
