import logging
import sys
from pathlib import Path

import config


class StructuredMessage:
    def __init__(self, message, **kwargs):
        self.message = message
        self.kwargs = kwargs

    def __str__(self):
        if not self.kwargs:
            return self.message
        fields = " ".join(f"{key}={value}" for key, value in self.kwargs.items())
        return f"{self.message} | {fields}"


def structured_log(message, **kwargs):
    """Attach key=value context to a log message."""
    return StructuredMessage(message, **kwargs)


def setup_logger():
    logger = logging.getLogger("file_manager")

    # Handlers are attached once per process
    if logger.handlers:
        return logger

    # Create logs directory if it doesn't exist
    logs_dir = Path(config.LOG_DIR)
    logs_dir.mkdir(exist_ok=True, parents=True)

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Create formatters
    file_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )

    # File handler (for detailed logging)
    file_handler = logging.FileHandler(logs_dir / "file_manager.log")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)

    # Console handler (for basic logging)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    console_handler.setFormatter(console_formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
