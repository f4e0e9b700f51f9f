"""
Logging setup for the BookClub API.

``setup_logging`` is called once by the application module. It installs a
console handler on the root logger, an optional ``logs/bookclub.log`` file
handler, and quietens chatty third-party loggers. Everything else in the
package just calls ``get_logger(__name__)``.

Environment:
- ``BOOKCLUB_LOG_LEVEL`` (through settings): console level
- ``LOG_FORMAT``: ``simple``, ``detailed`` (default) or ``json``
- ``ENABLE_FILE_LOGGING`` / ``LOG_FILE_DIR``: file handler switch and location
"""

import logging
import os
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _default_level() -> str:
    # Settings may fail validation; fall back to the raw variable
    try:
        from bookclub.server.core.config import settings

        return settings.log_level.upper()
    except Exception:
        return os.getenv("BOOKCLUB_LOG_LEVEL", "INFO").upper()


LOG_LEVEL = _default_level()
LOG_FORMAT = os.getenv("LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("LOG_FILE_DIR", "logs")
LOG_FILE_NAME = "bookclub.log"
ENABLE_FILE_LOGGING = _env_flag("ENABLE_FILE_LOGGING")
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

# Levels applied on top of the root logger
MODULE_LOG_LEVELS = {
    "bookclub.core": "INFO",
    "bookclub.core.database": "INFO",
    "bookclub.core.security": "INFO",
    "bookclub.server": "INFO",
    "bookclub.server.api": "DEBUG",
    "bookclub.server.services": "DEBUG",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _file_handler(formatter: logging.Formatter) -> logging.Handler:
    log_dir = Path(LOG_FILE_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger.

    Calling it again replaces the previously installed handlers.

    Args:
        log_level: Console level; defaults to ``BOOKCLUB_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to ``detailed``
        enable_file: Allow the file handler (it still needs ``ENABLE_FILE_LOGGING``)
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    formatter = logging.Formatter(FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    to_file = enable_file and ENABLE_FILE_LOGGING
    if to_file:
        root_logger.addHandler(_file_handler(formatter))

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={to_file}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (usually ``__name__``)."""
    return logging.getLogger(name)
