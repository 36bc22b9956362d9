from .formatters import (
    GREEN,
    RED,
    RESET,
    WHITE,
    colorize,
    format_history_date,
)
