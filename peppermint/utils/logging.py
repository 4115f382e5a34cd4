"""Logging configuration."""

import logging
import sys
from pathlib import Path
from typing import Optional

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format(surface: Optional[str]) -> str:
    # Surface processes share a terminal or log file; tag their lines.
    if surface:
        return f"%(asctime)s [%(levelname)s] <{surface}> %(name)s: %(message)s"
    return "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    surface: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Enable DEBUG level logging.
        log_file: Optional file path for logging.
        surface: Surface name added to every line.
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(_format(surface), DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        log_file = Path(log_file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Quiet noisy loggers
    for name in ("watchdog", "twilio", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)
