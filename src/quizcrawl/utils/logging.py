"""Per-run log files for the fetchers' stdlib logging records."""

import logging
from datetime import datetime
from pathlib import Path

from quizcrawl.utils.files import get_logs_path

LOG_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


class RunLogHandler(logging.FileHandler):
    """File handler for one CLI run, so a later run can find and replace it."""


def resolve_level(level: str) -> int:
    """Map a level name to a logging level. 'ALL' logs everything; unknown names mean INFO."""
    name = level.strip().upper()
    if name == 'ALL':
        return logging.NOTSET
    numeric_level = logging.getLevelName(name)
    return numeric_level if isinstance(numeric_level, int) else logging.INFO


def setup_local_logging(level: str = 'INFO') -> Path:
    """Route log records to ``.quizcrawl/logs/run_<timestamp>.log``.

    The page and image fetchers report through stdlib logging while the
    CLI talks to the user through rich, so only a file handler is attached.
    A handler left by an earlier call is closed and replaced.

    Args:
        level: Level name such as 'DEBUG' or 'INFO', or 'ALL'. Defaults to 'INFO'.

    Returns:
        Path to the log file of this run.

    """
    logs_dir = get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f'run_{datetime.now():%Y%m%d_%H%M%S}.log'
    numeric_level = resolve_level(level)

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if isinstance(h, RunLogHandler)]:
        root_logger.removeHandler(handler)
        handler.close()

    handler = RunLogHandler(log_file, encoding='utf-8')
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    return log_file
