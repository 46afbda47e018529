# src/config/logging_config.py

"""Per-run timestamped logging configuration for watch_signal.

Every CLI invocation writes a dedicated log file inside ``logs/``, named
with the launch timestamp (e.g. ``logs/run_20260214_153045.log``).  All
``watch_signal.*`` loggers (extraction engine, changedetection client,
report service, CLI) propagate into that file.

The console handler writes to stderr so JSON emitted on stdout stays
machine-readable.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "watch_signal"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    verbose: bool = False,
    logs_dir: Path | None = None,
) -> Path:
    """Initialise the root ``watch_signal`` logger for the current run.

    Args:
        verbose: Lower the console threshold from WARNING to INFO.
        logs_dir: Directory for the run log (defaults to
            ``Settings.LOGS_DIR``).

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    target_dir = logs_dir if logs_dir is not None else Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, re-entrant CLI use) keep the first handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
