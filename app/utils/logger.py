# app/utils/logger.py
"""
Logging setup shared by the API, the services and the scripts.
Console always; a rotating campus_gate.log under LOG_DIR unless LOG_TO_FILE is off.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from app.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE = "campus_gate.log"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 10

# third-party loggers that stay at WARNING even when LOG_LEVEL is DEBUG
QUIET_LOGGERS = ("sqlalchemy.engine", "multipart", "websockets", "PIL")

_configured = False


def log_dir() -> str:
    return settings.LOG_DIR or os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")


def configure_logging(level: Optional[str] = None) -> None:
    """Attach the console (and file) handlers to the root logger once."""
    global _configured
    if _configured:
        return
    _configured = True

    level = (level or settings.LOG_LEVEL).upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_TO_FILE:
        directory = log_dir()
        os.makedirs(directory, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=os.path.join(directory, LOG_FILE),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        ))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    configure_logging()
    return logging.getLogger(name)
