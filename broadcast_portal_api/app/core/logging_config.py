"""
Logging setup for the request portal.

Records go to stderr and, when ``LOG_FILE`` names a path, to that file
as well (UTF-8, since student names and rejection messages are Korean).
Driver loggers listed in ``QUIET_LOGGERS`` never log below INFO, even
when ``LOG_LEVEL=DEBUG``: pymongo's DEBUG output logs every command
and heartbeat.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .config import settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
QUIET_LOGGERS = ("pymongo", "aiosmtplib")


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        path = Path(logfile).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(level: Optional[str] = None, logfile: Optional[str] = None) -> int:
    """Configure portal logging and return the effective root level.

    ``level`` and ``logfile`` default to ``LOG_LEVEL`` and ``LOG_FILE``.
    Root handlers are attached only on the first call, or not at all if
    the server (uvicorn) or the test runner installed some already.
    The driver loggers are capped on every call.
    """
    numeric_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        for handler in _handlers(logfile if logfile is not None else settings.log_file):
            handler.setFormatter(formatter)
            root.addHandler(handler)
        root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))
    return root.level
