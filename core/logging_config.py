# core/logging_config.py

"""
Logging for the permission manager.

Everything logs through one named logger so saves, load failures and
the startup config report can be followed in one stream:

  INFO     editor opened, permissions replaced for a role
  WARNING  config problems, incomplete inheritance entries, 4xx/5xx responses
  ERROR    gateway failures, reload-after-save failures, unhandled errors
"""

import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "permission_manager"


def setup_logger(level: str = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    # Avoid duplicate handlers in dev reload
    if logger.handlers:
        return logger

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger


logger = setup_logger()
