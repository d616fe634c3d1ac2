# src/webforge/core/utils/configure_logging.py
import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

Level = Union[str, int]

# Console-friendly format for normal runs, source locations for debugging
SHORT_FORMAT = "%(levelname)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """
    Logging handler that writes through `tqdm.write()`, so warnings emitted
    while the parse progress bar is on screen do not tear it apart.
    """

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


def to_level(level: Optional[Level], default: int) -> int:
    """Accepts 'info', 'INFO', 20 or None."""
    if isinstance(level, str):
        return getattr(logging, level.upper(), default)
    return level if level is not None else default


def configure_logger(
        general_level: Optional[Level] = 'WARNING',
        module_specific_levels: Optional[Dict[str, Level]] = None,
        silenced_loggers: Optional[Dict[str, Level]] = None
) -> LogWithTqdm:
    """
    Installs a single tqdm-aware handler on the root logger and applies the
    level overrides. Returns the installed handler.
    """
    root_level = to_level(general_level, logging.WARNING)

    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT if root_level <= logging.DEBUG else SHORT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(to_level(level, logging.CRITICAL))

    return handler
