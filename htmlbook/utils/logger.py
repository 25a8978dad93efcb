"""
Handles configuration of logging for the command-line process.
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Log files are only written when HTMLDOC_DEBUG is set
LOG_DIR = Path("./logs")
MAX_LOG_FILES = 20
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"
FILE_LOG_FORMAT = (
    "%(asctime)s [%(process)d] %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
)


def verbosity_to_level(verbosity: int) -> int:
    """Maps --quiet (-1), default (0) and each --verbose step to a level."""
    if verbosity < 0:
        return logging.ERROR
    if verbosity == 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_main_logger(console_level=logging.WARNING, debug: str | None = None):
    """
    Configures the "htmlbook" logger.

    Console output goes to stderr at `console_level`, so that stdout stays free
    for generated documents. When `debug` (the HTMLDOC_DEBUG value) is set,
    everything is also written to a new file in LOG_DIR, keeping the newest
    MAX_LOG_FILES files.
    """
    logger = logging.getLogger("htmlbook")
    logger.setLevel(logging.DEBUG)

    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
    logger.addHandler(console_handler)

    if not debug:
        return logger

    try:
        LOG_DIR.mkdir(exist_ok=True)

        # Remove the oldest logs so that the new one keeps us at the limit
        logs = sorted(
            [p for p in LOG_DIR.glob("htmlbook_*.log") if p.is_file()],
            key=os.path.getmtime,
        )
        files_to_remove = len(logs) - (MAX_LOG_FILES - 1)
        if files_to_remove > 0:
            for log_file in logs[:files_to_remove]:
                try:
                    log_file.unlink()
                except OSError:
                    pass  # locked by another run

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        new_log_path = LOG_DIR / f"htmlbook_{timestamp}.log"

        file_handler = logging.FileHandler(new_log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

        logger.debug(
            "Logger initialized. Console level: %s, File level: DEBUG. Logging to: %s",
            logging.getLevelName(console_level),
            new_log_path,
        )
    except OSError:
        logger.error("Failed to set up file logging.", exc_info=True)

    return logger


def set_console_level(verbosity: int):
    """Re-applies the console level once --quiet/--verbose have been parsed."""
    logger = logging.getLogger("htmlbook")
    for handler in logger.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(verbosity_to_level(verbosity))
