"""Logging configuration."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    verbose: bool = False,
    retention_days: int = 14,
) -> logging.Logger:
    """Configure stderr logging and an optional daily log file.

    Args:
        level: Console level name
        log_dir: Directory for log files, no file logging if None
        verbose: Force DEBUG on the console
        retention_days: Number of rotated log files to keep
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers when called twice
    root_logger.handlers.clear()

    console_handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    console_handler.setLevel(logging.DEBUG if verbose else level.upper())
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_dir / "uutisvahti.log",
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root_logger
