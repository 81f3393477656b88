# productstore/log.py
import logging
from typing import Optional, Union

from rich.logging import RichHandler

LOGGER_NAME = "productstore"


def configure_logging(level: Union[str, int, None] = None, force: bool = False) -> logging.Logger:
    """
    Install a RichHandler on the service logger and return it.

    Calling again is a no-op unless force=True.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), logging.INFO)
    logger.setLevel(level or logging.INFO)

    has_rich = any(isinstance(h, RichHandler) for h in logger.handlers)
    if has_rich and not force:
        return logger
    for h in list(logger.handlers):
        if isinstance(h, RichHandler):
            logger.removeHandler(h)

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
