"""
Logging setup for hshmm.

All package loggers live under the ``hshmm`` logger, whose level, format and
handlers come from the ``logging`` section of the configuration. Call
``configure_logging`` again after loading a new configuration to apply it.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import get_config

ROOT_LOGGER_NAME = 'hshmm'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level: {name!r}")
    return level


def _file_handler(log_file: str, level: int, formatter: logging.Formatter) -> logging.FileHandler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(settings: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    (Re)build the ``hshmm`` logger from a logging config section.

    Existing handlers are closed and replaced, so repeated calls never
    duplicate output.

    Args:
        settings: Mapping with ``level``, ``format``, ``file_logging`` and
            ``log_file`` keys (default: current config ``logging`` section)

    Returns:
        The configured ``hshmm`` logger
    """
    if settings is None:
        settings = get_config('logging')

    level = _level(settings.get('level') or 'INFO')
    formatter = logging.Formatter(settings.get('format') or DEFAULT_FORMAT)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    # Console output
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.get('file_logging'):
        root_logger.addHandler(
            _file_handler(settings.get('log_file') or 'hshmm.log', level, formatter)
        )

    # Keep package records out of the application's root logger
    root_logger.propagate = False
    return root_logger


def get_logger(name: str = 'main') -> logging.Logger:
    """Logger for a module or component, namespaced under ``hshmm``."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def set_log_level(level: str) -> None:
    """Set the level of the ``hshmm`` logger and all of its handlers."""
    log_level = _level(level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers:
        handler.setLevel(log_level)


def enable_file_logging(log_file: Optional[str] = None) -> None:
    """Add a file handler unless one is already attached."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if any(isinstance(h, logging.FileHandler) for h in root_logger.handlers):
        return

    if log_file is None:
        log_file = get_config('logging', 'log_file') or 'hshmm.log'
    formatter = logging.Formatter(get_config('logging', 'format') or DEFAULT_FORMAT)

    root_logger.addHandler(_file_handler(log_file, root_logger.level, formatter))


def disable_file_logging() -> None:
    """Detach and close every file handler."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]:
        root_logger.removeHandler(handler)
        handler.close()


def get_hmm_logger() -> logging.Logger:
    """Get logger for HMM components."""
    return get_logger('hmm')


def get_sampling_logger() -> logging.Logger:
    """Get logger for simulation components."""
    return get_logger('simulate')


configure_logging()
