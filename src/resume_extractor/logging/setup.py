"""Dual-handler logging setup: JSON rotating file + human-readable console.

Two handlers are installed on the root logger:
    1. RotatingFileHandler -- JSON records, DEBUG level, size-based rotation.
       Every record carries ``service: resume-extractor`` so extraction logs
       can be told apart when shipped alongside other services.
    2. StreamHandler on stderr -- text format, INFO level. Extracted text is
       written to stdout by the CLI, so log output never mixes with it.

Pillow logs every PNG chunk it parses at DEBUG; the OCR tier opens one image
per page, so the ``PIL`` logger is capped at INFO.

Call setup_logging() once at startup, before any other code runs. Module
code uses logging.getLogger(__name__).
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

_SERVICE_NAME = "resume-extractor"
_NOISY_LOGGERS = ("PIL",)


def setup_logging(
    log_dir: str = "logs",
    log_file: str = "extraction.log",
    log_level_file: int = logging.DEBUG,
    log_level_console: int = logging.INFO,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 5,
) -> Path:
    """Configure JSON file + text console logging.

    Creates the log directory if needed and replaces any handlers already on
    the root logger, so calling it twice does not duplicate output.

    Args:
        log_dir: Directory for log files.
        log_file: File name inside *log_dir*.
        log_level_file: Level for the JSON file handler.
        log_level_console: Level for the stderr handler.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.

    Returns:
        Path of the active log file.
    """
    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers filter
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(log_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level_file)
    file_handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
            },
            static_fields={"service": _SERVICE_NAME},
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level_console)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    return log_path
