"""
Logging setup for the pendulum app.

Streamlit executes the app script again on every interaction, so
``setup_logging`` is idempotent: handlers it attached earlier are found by a
marker attribute and only get their level refreshed.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "pendel3d"
FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_MARKER = "_pendel3d_handler"


def _owned_handlers(logger: logging.Logger):
    return [h for h in logger.handlers if getattr(h, _MARKER, None)]


def _attach(logger: logging.Logger, handler: logging.Handler, kind: str, level: int) -> None:
    setattr(handler, _MARKER, kind)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'pendel3d' logger and returns it.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path; lines are appended so a rerun keeps history.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    owned = _owned_handlers(logger)
    kinds = {getattr(h, _MARKER) for h in owned}
    for handler in owned:
        handler.setLevel(level)

    if "console" not in kinds:
        _attach(logger, logging.StreamHandler(sys.stdout), "console", level)
    if log_file and "file" not in kinds:
        _attach(logger, logging.FileHandler(log_file, mode='a', encoding='utf-8'), "file", level)

    if not owned:
        logger.debug("Logging initialized.")
    return logger
