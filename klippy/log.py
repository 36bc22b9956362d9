# log.py
# Logging setup for klippy: records go to stderr through rich so stdout
# stays clean for tags, tables and overviews

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

default_theme = Theme(
    {
        "info": "bright_blue",
        "error": "bright_red",
        "success": "green3",
        "quiet": "bright_black",
    }
)

stdout_console = Console(theme=default_theme)
stderr_console = Console(stderr=True, theme=default_theme)

# Index is the --log-level flag value (0=panic .. 5=debug)
LOG_LEVELS = [
    logging.CRITICAL,
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]


def level_from_flag(flag: int) -> int:
    """Map a 0-5 verbosity flag onto a logging level, clamping out-of-range values."""
    flag = max(0, min(flag, len(LOG_LEVELS) - 1))
    return LOG_LEVELS[flag]


def init_logging(log_level: str | int = logging.INFO) -> None:
    """Route log records to the stderr console at the given level.

    :param log_level: Python logging level, usually from level_from_flag()
    """
    tb_frames = 0
    if log_level == logging.DEBUG:
        tb_frames = 20

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=stderr_console,
                markup=False,
                rich_tracebacks=True,
                tracebacks_max_frames=tb_frames,
                tracebacks_show_locals=True if log_level == logging.DEBUG else False,
            ),
        ],
    )
