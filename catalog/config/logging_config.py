# catalog/config/logging_config.py

"""Per-run logging for the catalog client.

Each launch writes ``logs/run_<YYYYmmdd_HHMMSS>.log`` at DEBUG.  The
console gets ``Settings.LOG_CONSOLE_LEVEL`` and above on stderr, so
stdout stays clean for the JSON product listing.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from catalog.config.settings import Settings

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_CONSOLE_FORMAT = "%(levelname)s: %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level(name: str) -> int:
    """Map a level name to its number; unknown names mean WARNING."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-file and console handlers to the ``catalog`` logger.

    Returns the path of this run's log file.  Calling it again keeps the
    handlers from the first call.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    root_logger = logging.getLogger("catalog")
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level(Settings.LOG_CONSOLE_LEVEL))
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.debug("Run log: %s", log_file)

    return log_file
