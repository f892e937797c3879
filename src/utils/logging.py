"""
Logging utilities.

Library modules obtain loggers through `get_logger(__name__)` and never attach
handlers themselves; applications call `setup_logging` once.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Mapping, Any

DEFAULT_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def setup_logging(
    log_file: Optional[str] = None,
    level: int = logging.INFO,
    format_string: str = None,
    name: str = 'src',
    console_level: int = logging.WARNING
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        log_file: Path to log file (if None, only console output)
        level: Logging level
        format_string: Custom format string
        name: Logger name (defaults to the package root)
        console_level: Minimum level echoed to stdout

    Returns:
        Configured logger
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    formatter = logging.Formatter(format_string, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger by name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_config(logger: logging.Logger, config: Mapping[str, Any], title: str = "CONFIGURATION"):
    """Log a configuration mapping at DEBUG level, one key per line."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(title)
    for key, value in config.items():
        if isinstance(value, float):
            logger.debug(f"  {key}: {value:.4f}")
        else:
            logger.debug(f"  {key}: {value}")
