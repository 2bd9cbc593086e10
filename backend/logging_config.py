"""
Logging setup shared by the CLI, the API and the Streamlit app.
Each entry point calls setup_logging() once; library modules only create
module loggers with logging.getLogger(__name__).
"""

import logging
import sys
from typing import Optional
from config import config

# Libraries that log every page, request or multipart chunk at INFO/DEBUG.
QUIET_LOGGERS = ('PIL', 'urllib3', 'multipart', 'python_multipart', 'httpx')


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=config.LOG_FORMAT, datefmt=config.LOG_DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    console_output: bool = True
) -> logging.Logger:
    """
    Route application logs to stdout and, optionally, a file in LOG_DIR.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: Level name; unknown names fall back to INFO.
            Defaults to config.LOG_LEVEL.
        log_file: File name inside LOG_DIR, e.g. "statement_extractor.log"
        console_output: Also echo records to stdout

    Returns:
        The root logger
    """
    level_name = (log_level or config.LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    if console_output:
        root.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))

    if log_file:
        path = config.get_log_path(log_file)
        root.addHandler(_make_handler(logging.FileHandler(path, mode='a', encoding='utf-8'), level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(f"Logging configured at {logging.getLevelName(level)}")
    return root
