"""Utility functions and decorators for branchsync core."""

import functools
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def safe_slot(func: F) -> F:
    """Decorator to safely handle exceptions in Qt signal slots.

    Exceptions raised inside a slot are logged instead of propagating into
    Qt's event loop, and the slot returns None.

    Usage:
        @safe_slot
        def _on_finished(self, success: bool, message: str) -> None:
            ...
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(f"Exception in slot {func.__qualname__}")
            return None
    return wrapper  # type: ignore[return-value]
