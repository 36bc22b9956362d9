"""Tests for klippy.log logging initialization."""

import logging
from contextlib import contextmanager

import pytest
from rich.logging import RichHandler

from klippy.log import default_theme, init_logging, stderr_console, stdout_console


@contextmanager
def isolated_root_logger():
    """Isolate root logger state for testing basicConfig-based initialization."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level
    root_logger.handlers.clear()
    try:
        yield root_logger
    finally:
        for handler in root_logger.handlers:
            if handler not in original_handlers:
                handler.close()
        root_logger.handlers = original_handlers
        root_logger.setLevel(original_level)


pytestmark = [pytest.mark.unit]


class TestLogging:
    def test_default_theme_colors(self):
        for style in ("info", "error", "success", "quiet"):
            assert style in default_theme.styles

    def test_consoles(self):
        assert stdout_console.stderr is False
        assert stderr_console.stderr is True

    def test_init_logging_default(self):
        with isolated_root_logger() as root_logger:
            init_logging()
            assert root_logger.level == logging.INFO
            assert isinstance(root_logger.handlers[0], RichHandler)

    def test_init_logging_debug(self):
        with isolated_root_logger() as root_logger:
            init_logging(logging.DEBUG)
            assert root_logger.level == logging.DEBUG
            handler = root_logger.handlers[0]
            assert handler.console is stderr_console
            assert handler.tracebacks_show_locals is True
