"""Logging setup: stdlib handlers with structlog rendering on top.

ENV (or ENVIRONMENT) picks the defaults: JSON lines in production and staging,
a console renderer elsewhere. LOG_LEVEL overrides the level and LOG_DIR adds a
rotating log file.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Mapping
from pathlib import Path

import structlog

_LEVELS = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}
_JSON_ENVIRONMENTS = ("production", "staging")

# Third-party loggers that flood DEBUG output
_QUIET_LOGGERS = ("kafka", "paho", "asyncio")


def environment_name(environ: Mapping[str, str] = os.environ) -> str:
    return (environ.get("ENV") or environ.get("ENVIRONMENT") or "development").lower()


def log_level(environ: Mapping[str, str] = os.environ) -> str:
    return environ.get("LOG_LEVEL", _LEVELS.get(environment_name(environ), "INFO")).upper()


def _handlers(level: str, log_dir: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path / "customer-service.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _renderer(env: str):
    if env in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
    )


def configure_logging(environ: Mapping[str, str] = os.environ) -> None:
    """Configure stdlib logging and structlog for the whole process."""
    level = log_level(environ)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = _handlers(level, environ.get("LOG_DIR"))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(environment_name(environ)),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
