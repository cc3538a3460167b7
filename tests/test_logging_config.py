"""Tests for logging setup."""

import logging
import logging.handlers

from rich.logging import RichHandler

from uutisvahti.logging_config import setup_logging


def test_console_only():
    root = setup_logging(level="WARNING")

    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], RichHandler)
    assert root.handlers[0].level == logging.WARNING


def test_file_handler_and_verbose(tmp_path):
    root = setup_logging(log_dir=tmp_path / "logs", verbose=True)

    file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)]
    assert len(file_handlers) == 1
    assert (tmp_path / "logs").is_dir()
    assert root.handlers[0].level == logging.DEBUG

    for handler in file_handlers:
        handler.close()
