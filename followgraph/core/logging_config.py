# followgraph/core/logging_config.py
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    global _configured
    if _configured:
        return

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    _configured = True


def setup_api_logger(log_path: Optional[str] = None) -> logging.Logger:
    """Setup and return a logger for API failures.

    Creates a rotating file handler at `log_path` when one is given, otherwise
    the logger just propagates to the root handlers.
    """
    logger = logging.getLogger("followgraph.api")
    logger.setLevel(logging.INFO)

    # avoid adding multiple handlers if called multiple times
    if log_path and not logger.handlers:
        logs_dir = os.path.dirname(os.path.abspath(log_path))
        os.makedirs(logs_dir, exist_ok=True)
        handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
