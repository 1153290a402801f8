"""
Logging configuration for the assignment engine.
"""
import logging
import sys


def setup_logger(
    name: str = "assignment_engine", level: int = logging.INFO
) -> logging.Logger:
    """Set up and configure a logger."""
    logger = logging.getLogger(name)

    # Re-running only adjusts the level; handlers are attached once
    logger.setLevel(level)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


# Default logger for the application
logger = setup_logger()
