"""Logging configuration."""

import logging
import sys
from config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Driver and server loggers that flood INFO with connection chatter
NOISY_LOGGERS = ("pymongo", "motor", "uvicorn.access")


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def setup_logger(name: str = __name__) -> logging.Logger:
    """Return a stdout logger for a module, configured once per name."""
    level = _resolve_level(settings.log_level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def quiet_noisy_loggers(level: int = logging.WARNING) -> None:
    """Raise the threshold of third-party loggers unless debugging."""
    if settings.debug and _resolve_level(settings.log_level) <= logging.DEBUG:
        return
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)
