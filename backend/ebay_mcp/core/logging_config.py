import logging

from rich.logging import RichHandler

from ebay_mcp.core.config import settings

ROOT_LOGGER = "ebay_mcp"


def configure_logging(level: str = "") -> logging.Logger:
    """Attach a Rich handler to the package logger (once)."""
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger

    log_level = (level or settings.LOG_LEVEL or "INFO").upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
