"""
Logging Configuration
Sets up the package logger for the application and the command-line tool.
"""
import logging
import sys
from typing import Optional

# Libraries that log heavily at DEBUG (font discovery, HDF5 driver chatter)
QUIET_LOGGERS: tuple[str, ...] = ("matplotlib", "h5py")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'ekmagrid' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    logger = logging.getLogger("ekmagrid")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs on repeated setup
    if logger.hasHandlers():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    # 1. Console Handler (stderr keeps stdout free for command output)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Keep third-party chatter out of a DEBUG session on the grid engine
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    target = f", writing to {log_file}" if log_file else ""
    logger.debug(f"Logging initialized at {logging.getLevelName(level)}{target}.")
