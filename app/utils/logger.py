# app/utils/logger.py
"""
Logging setup shared by every module.
Console always; a rotating smartqueue.log under LOG_DIR unless LOG_TO_FILE is off.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
)

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
}

_configured = False


def _build_handlers(fmt: logging.Formatter) -> list:
    handlers = [logging.StreamHandler()]
    if settings.LOG_TO_FILE:
        os.makedirs(LOG_DIR, exist_ok=True)
        # 10 files x 5MB
        handlers.append(RotatingFileHandler(
            filename=os.path.join(LOG_DIR, "smartqueue.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        ))
    for handler in handlers:
        handler.setLevel(LOG_LEVEL)
        handler.setFormatter(fmt)
    return handlers


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    for handler in _build_handlers(fmt):
        root.addHandler(handler)

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Named logger; the first call wires up the root handlers."""
    _configure_root_logger()
    return logging.getLogger(name)
