"""Structlog configuration for the notification service.

Every event is a snake_case name plus keyword fields. Development renders
to the console, production to one JSON object per line. Provider SDK and
database driver loggers are held at WARNING so a notification fan-out does
not drown in transport chatter.

Usage:
    from infrastructure.logging import configure_logging, get_module_logger

    configure_logging()

    logger = get_module_logger()
    logger.info("notification_created", notification_id="...")
"""

import inspect
import logging
import sys
from types import ModuleType
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import settings
from infrastructure.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)

# Loggers that log every request/statement at INFO
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
    "aiosqlite",
    "urllib3",
    "google.auth",
)

SILENT = logging.CRITICAL + 1


def _running_under_pytest() -> bool:
    return "pytest" in sys.modules


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
        add_app_info(settings.APP_NAME, settings.GIT_SHA),
        mask_sensitive_data(),
        truncate_large_values(max_length=1000),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name overriding settings.LOG_LEVEL.
        is_production: Overrides settings.is_production; selects JSON output.

    Returns:
        The root structlog logger.
    """
    if _running_under_pytest():
        # Keep tests quiet; processors stay minimal and nothing is emitted
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=SILENT, force=True)
        logging.root.setLevel(SILENT)
        return structlog.stdlib.get_logger()

    production = settings.is_production if is_production is None else is_production
    renderer = (
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level_name = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def _calling_module(depth: int = 2) -> Optional[ModuleType]:
    frame = inspect.currentframe()
    for _ in range(depth):
        if frame is None:
            return None
        frame = frame.f_back
    return inspect.getmodule(frame) if frame is not None else None


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    Example:
        # In infrastructure/notifications/dispatcher.py
        logger = get_module_logger()
        # binds component="dispatcher",
        #       module_path="infrastructure.notifications.dispatcher"
    """
    module = _calling_module()
    if module is None:
        return logger.bind(component="unknown")

    module_path = module.__name__
    return logger.bind(component=module_path.rsplit(".", 1)[-1], module_path=module_path)
