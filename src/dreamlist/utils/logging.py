"""Call tracing for the persistence entry points."""

from __future__ import annotations

import logging
import reprlib
from functools import wraps
from typing import Any, Callable

# Snapshots of long dream lists would otherwise flood the debug log.
_short = reprlib.Repr()
_short.maxstring = 60
_short.maxother = 120
_short.maxtuple = 4
_short.maxlist = 4


def short_repr(value: Any) -> str:
    return _short.repr(value)


def log_calls(
    logger_name: str | None = None, *, level: int = logging.DEBUG
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Trace calls of the decorated function.

    Arguments and results are logged at `level` with long reprs cut short.
    Exceptions are logged with traceback and re-raised unchanged.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            if logger.isEnabledFor(level):
                logger.log(level, "%s(%s)", func.__qualname__, _format_args(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.exception("%s failed: %s", func.__qualname__, e)
                raise
            if logger.isEnabledFor(level):
                logger.log(level, "%s -> %s", func.__qualname__, short_repr(result))
            return result

        return _wrapper

    return _decorator


def _format_args(args: tuple, kwargs: dict) -> str:
    parts = [short_repr(arg) for arg in args]
    parts.extend(f"{name}={short_repr(value)}" for name, value in kwargs.items())
    return ", ".join(parts)
