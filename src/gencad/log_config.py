# --- src/gencad/log_config.py ---
import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"
HANDLER_NAME = "gencad-console"


def setup_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None):
    """
    Configures the root logger with one console handler for the gencad package.

    Calling it again (as `load_config` does) swaps the handler installed by an
    earlier call and changes the level; handlers installed by anyone else stay.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    logging.debug(f"Logging configured at level {logging.getLevelName(level)}.")
