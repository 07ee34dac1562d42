from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable

from .logging_config import LOGGER_NAME

_logger = logging.getLogger(LOGGER_NAME)

# Arguments worth recording; anything else (keys, sessions) stays out of logs
_LOGGED_ARGS = ("base_currency", "from_currency", "to_currency", "amount")


def log_action(action: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log rate-service operations at INFO level.

    Logs action, the currency codes and amount passed in, elapsed time and
    result (OK/ERROR). Does not swallow exceptions.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                bound = signature.bind(*args, **kwargs)
                fields = " ".join(
                    f"{name}={bound.arguments[name]!s}"
                    for name in _LOGGED_ARGS
                    if name in bound.arguments
                )
            except TypeError:
                # Let the real call raise the argument error
                fields = ""
            t0 = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _logger.info(
                    "%s %s result=ERROR error_type=%s error_message='%s' ms=%d",
                    action,
                    fields,
                    type(exc).__name__,
                    str(exc).replace("'", "\\'"),
                    int((time.perf_counter() - t0) * 1000),
                )
                raise
            _logger.info(
                "%s %s result=OK ms=%d",
                action,
                fields,
                int((time.perf_counter() - t0) * 1000),
            )
            return result

        return wrapper

    return decorator
