"""
Logging setup for the student records service.

Record stores report how many rows they loaded, which rows they had
to skip and every rewrite of a backing file.  ``setup_logging`` routes
those messages (and uvicorn's own) through one formatter on the
console and, when ``LOG_FILE`` is set, into a log file.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "student_records_api"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once and set the package log level.

    Parameters
    ----------
    level : str
        Logging level name such as ``"DEBUG"`` or ``"warning"``.
        Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Extra destination for log records.  Parent directories are
        created when missing.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    # The package level is applied even when handlers already exist so a
    # second create_app() with another LOG_LEVEL still takes effect.
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
