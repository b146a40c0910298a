import logging
import sys
from pathlib import Path
from typing import Optional

import config


def get_logger() -> logging.Logger:
    return logging.getLogger(config.LOGGER_NAME)


def setup_logger(level: str = config.LOG_LEVEL, log_file: Optional[str] = None) -> logging.Logger:
    # Configure logger
    logger = get_logger()
    logger.setLevel(logging.DEBUG)

    # Drop handlers from a previous call so lines are not duplicated
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # Create formatters
    file_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )

    # Console handler (for basic logging)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler (for detailed logging)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger
