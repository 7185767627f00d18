import logging
from functools import cache

from rich.console import Console
from rich.logging import RichHandler

from utils.config import DEBUG, LOG_FILE


class CenteredFormatter(logging.Formatter):
    """Pads logger names to the longest one seen so messages line up."""

    longest_name_length = 14

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )
        record.name = record.name.center(CenteredFormatter.longest_name_length)
        return super().format(record)


@cache
def _console() -> Console:
    # one console shared by every module logger
    if LOG_FILE:
        return Console(file=open(LOG_FILE, "a", encoding="utf-8"), width=140)
    return Console(stderr=True)


def get_logger(name=None) -> logging.Logger:
    """
    Logger for one module of the dashboard, printed through rich.

    Set DEBUG=1 in the environment to see request level logs, and
    SHOPADMIN_LOG_FILE to send them to a file while the UI is running.
    """
    logger = logging.getLogger(name or "shopadmin")
    log_level = logging.DEBUG if DEBUG else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            console=_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        # textual owns the terminal, keep our records away from the root logger
        logger.propagate = False
        logger.debug(f"Logger for '{logger.name}' ready.")

    return logger
