"""
logging_config.py – console and optional file logging for the CLI.

Handlers are attached to the ``railnet`` logger, not the root logger.
Calling `configure` again replaces the handlers of the previous call.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure(
    level: str = "INFO", log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    logger = logging.getLogger("railnet")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [
        RichHandler(rich_tracebacks=True, show_time=False, show_path=False, markup=False)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        handlers.append(file_handler)

    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
