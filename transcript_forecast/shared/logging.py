"""
Logging Configuration - Shared Layer

The engine logs through structlog with dotted event names. Nothing is
configured on import: embedding applications either own logging themselves
or call :func:`configure_logging` (directly, or through
``create_engine(setup_logging=True)``).
"""

import logging
import os
import sys
from typing import TYPE_CHECKING, List, Optional

import structlog
from structlog.types import Processor

from transcript_forecast.shared.consts import EnumEnvironment

if TYPE_CHECKING:
    from transcript_forecast.main.config import AppSettings


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(environment: str) -> Processor:
    if environment.lower() == EnumEnvironment.PRODUCTION.value:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    level: Optional[str] = None,
    file_path: Optional[str] = None,
    environment: str = EnumEnvironment.DEVELOPMENT.value,
) -> None:
    """
    Route structlog and stdlib records through one set of root handlers.

    Args:
        level: Log level name; falls back to ``LOG_LEVEL`` and then INFO.
        file_path: Optional log file; falls back to ``LOG_FILE_PATH``.
        environment: ``production`` renders JSON, anything else the console
            renderer.
    """
    log_level = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    log_file = file_path or os.environ.get("LOG_FILE_PATH")

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(environment),
        ],
        foreign_pre_chain=_shared_processors(),
    )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).debug(
        "logging.configured", level=log_level, file_path=log_file
    )


def update_logging_from_settings(settings: "AppSettings") -> None:
    """Apply ``settings.logging`` and the settings' environment."""
    configure_logging(
        level=settings.logging.level.value,
        file_path=settings.logging.file_path,
        environment=settings.environment.value,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger configured for the project."""
    return structlog.get_logger(name)
