"""Logger setup shared by the pipeline scripts."""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logger(
    name: Optional[str] = None,
    log_dir: str = "logs",
    log_file: str = "snsseq.log",
    level: int = logging.INFO,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    output: str = "console",
) -> logging.Logger:
    """Configure and return a logger.

    Args:
        name: Logger name. None configures the root logger, which the
            library modules propagate to.
        log_dir: Directory for the rotating log file.
        log_file: Log file name.
        level: Logging level.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files to keep.
        output: "file", "console" or "both".

    Returns:
        The configured logger.
    """
    if output not in {"file", "console", "both"}:
        raise ValueError(f"output must be 'file', 'console' or 'both', got {output!r}")

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers when scripts call this more than once
    if logger.handlers:
        return logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if output in {"file", "both"}:
        try:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, log_file),
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to create log file in {log_dir}: {e}") from e
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if output in {"console", "both"}:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
