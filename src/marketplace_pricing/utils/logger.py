"""
Shared logger utility for the pricing package.

Engine diagnostics go to the "marketplace_pricing" logger hierarchy at DEBUG
level; configure_logging() sets the level or silences it entirely.
"""
import logging

LOG_NAME = "marketplace_pricing"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns a child of the package logger.

    Handlers live on the package logger only, so child loggers propagate.
    """
    if not name:
        return logging.getLogger(LOG_NAME)
    if name == LOG_NAME or name.startswith(LOG_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAME}.{name}")


def configure_logging(level: str = "INFO", enabled: bool = True) -> logging.Logger:
    """Attach a stream handler to the package logger and apply the level."""
    logger = logging.getLogger(LOG_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    logger.setLevel(str(level).upper())
    logger.disabled = not enabled
    return logger
