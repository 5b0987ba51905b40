import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from src.infrastructure.config import settings

APP_NAME = "quizbox"
LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(message)s'


def get_logger(name: str = APP_NAME, log_level: Optional[str] = None):
    """
    JSON logger on stdout.

    The level comes from ``settings.LOG_LEVEL`` unless one is given. Every
    record carries the app name, and the storage root once
    ``configure_logging`` has run.
    """
    logger = logging.getLogger(name)
    logger.setLevel((log_level or settings.LOG_LEVEL).upper())
    logger.propagate = False

    if not logger.handlers:
        formatter = jsonlogger.JsonFormatter(LOG_FORMAT, static_fields={"app": APP_NAME})
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(log_level: str, storage_root: str, name: str = APP_NAME):
    """Apply an app's LOG_LEVEL and tag its records with the storage root it serves."""
    configured = get_logger(name, log_level)
    for handler in configured.handlers:
        formatter = handler.formatter
        if isinstance(formatter, jsonlogger.JsonFormatter):
            formatter.static_fields["storage_root"] = storage_root
    return configured


logger = get_logger()
