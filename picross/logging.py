"""Logging helpers for picross.

Every module gets its logger through get_logger(), which hangs it under the
package-wide 'picross' logger so a single handler controls all output.

Usage:
    from picross.logging import get_logger

    log = get_logger('bundle')
    log.info("Wrote %d levels", count)

Environment variables:
    PICROSS_LOG_LEVEL: Default level name (DEBUG, INFO, WARNING, ...)
"""
import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = 'picross'
LOG_FORMAT = '%(levelname)s [%(name)s] %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Return the 'picross.<name>' logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.environ.get('PICROSS_LOG_LEVEL', 'INFO')
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Install a stream handler on the root picross logger.

    Calling this more than once only updates the level.

    Args:
        level: Level number or name; defaults to PICROSS_LOG_LEVEL or INFO

    Returns:
        The root picross logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_resolve_level(level))

    if not any(getattr(h, '_picross_handler', False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._picross_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
