"""
Logging configuration for the groups tool
"""
import logging
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Library loggers and the minimum level we let through from them
QUIET_LOGGERS = {
    'googleapiclient.discovery_cache': logging.ERROR,
    'googleapiclient.discovery': logging.WARNING,
    'google.auth': logging.WARNING,
    'urllib3': logging.WARNING,
}


def setup_logging(log_level='INFO', log_file=None):
    """
    Route log records to stderr and, optionally, a file

    stdout is left to the tool's own output (identity, token, group names).
    The file handler records everything from DEBUG up regardless of log_level.
    """
    level = getattr(logging, log_level.upper())
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    handlers = [stderr_handler]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if log_file else level)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    root.debug(f"Logging initialized - Level: {log_level}")
    if log_file:
        root.info(f"Log file: {log_file}")
