"""
Logging helpers. The library itself only calls ``logging.getLogger(__name__)``;
callers opt into handlers through ``setup_logger``.
"""

import logging
import os
from typing import Optional


FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str = "tsp_evo", log_file: Optional[str] = None,
                 level: int = logging.INFO) -> logging.Logger:
    """
    Setup logger with a console handler and an optional file handler.

    Args:
        name: Logger name (``"tsp_evo"`` covers the whole package)
        log_file: Optional log file path
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger("tsp_evo", level=logging.DEBUG)
        >>> logger.debug("generation 3: best=812.40")
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logger initialized. Log file: {log_file}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get an existing logger, creating a console one if it has no handlers."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger
