# core/logging_config.py
import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "makao"


def setup_logger(level: str = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Reloads import this module again; keep a single handler
    if logger.handlers:
        return logger

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """Child logger (makao.<component>) sharing the root handler."""
    return logger.getChild(component)


logger = setup_logger()
