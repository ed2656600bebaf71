"""Package-wide logging for graphengine.

Every module obtains its logger through `get_logger(__name__)`; those loggers
carry no handlers and defer to the package logger named ``graphengine``. The
package logger is configured once, on import, with a stdout handler. Its
initial level comes from the ``GRAPHENGINE_LOG_LEVEL`` environment variable
when set, INFO otherwise.

Algorithms only emit DEBUG records, so the default configuration is silent
during normal use. Call `enable_debug_logging()` to trace them.
"""

import logging
import os
import sys
from typing import Optional, Union

PACKAGE_LOGGER_NAME = "graphengine"
LOG_LEVEL_ENV = "GRAPHENGINE_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def _resolve_level(level: Union[int, str]) -> int:
    """Map a level name such as ``"debug"`` to its numeric value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _env_level() -> int:
    env_level = os.getenv(LOG_LEVEL_ENV)
    if not env_level:
        return logging.INFO
    try:
        return _resolve_level(env_level)
    except ValueError:
        return logging.INFO


def setup_root_logger(
    level: Optional[Union[int, str]] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single package handler. Later calls are no-ops.

    Args:
        level: Initial level. Defaults to ``GRAPHENGINE_LOG_LEVEL`` or INFO.
        format_string: Record format; defaults to a timestamped layout.
        handler: Handler to install; defaults to a stdout StreamHandler.
    """
    global _configured

    if _configured:
        return

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(_env_level() if level is None else _resolve_level(level))
    package_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    # pytest's caplog listens on the Python root logger.
    package_logger.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for module ``name`` under the package logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger with level NOTSET, so the package level decides what is emitted.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Set the level of the package logger and of its handlers.

    Args:
        level: Numeric level or a level name (``"DEBUG"``, ``"warning"``...).
    """
    setup_root_logger()

    value = _resolve_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(value)
    for handler in package_logger.handlers:
        handler.setLevel(value)


def enable_debug_logging() -> None:
    """Emit algorithm trace records (DEBUG)."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler so the next call reconfigures from scratch."""
    global _configured
    _configured = False

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
