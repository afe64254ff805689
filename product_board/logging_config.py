"""Per-run logging configuration for product_board.

Each launch writes a timestamped file under ``logs/`` and mirrors
warnings and errors to stderr. All ``product_board.*`` loggers route
through these handlers.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import server_config

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGS_DIR = Path("logs")


def setup_logging(logs_dir: Optional[Path] = None, console_level: Optional[str] = None) -> Path:
    """Initialise the ``product_board`` logger for the current run.

    Returns:
        Path of this run's log file (the existing one on repeated calls).
    """
    root_logger = logging.getLogger("product_board")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, reloads) keep the first run's file
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    logs_dir = Path(logs_dir or LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel((console_level or server_config.log_level).upper())
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
