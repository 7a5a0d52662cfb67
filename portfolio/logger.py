import logging
import sys

from portfolio import settings


def get_logger(name: str) -> logging.Logger:
    """
    Returns a named logger with consistent formatting for the portfolio server.
    Logs go to stdout so uvicorn / container runtimes capture them.
    """
    logger = logging.getLogger(name)

    # Avoid adding duplicate handlers if get_logger is called multiple times
    if logger.handlers:
        return logger

    logger.setLevel(settings.LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Handled here; don't double-print through the root logger
    logger.propagate = False
    return logger
