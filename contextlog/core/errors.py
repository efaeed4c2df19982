"""
Errors produced by the logger's error helpers

``log_error`` and ``log_errorf`` hand an exception back to the caller so
that logging an error and returning it is a single step.
"""

from __future__ import annotations
from typing import Optional, Type, Union


class LoggedError(Exception):
    """Error created from a log message when no error was supplied."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class WrappedError(Exception):
    """
    Error whose text combines a message with an inner error.

    The inner error stays reachable through ``unwrap()`` and
    ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def unwrap(self) -> Optional[BaseException]:
        """Return the wrapped error."""
        return self.cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"WrappedError({self.message!r}, cause={self.cause!r})"


def unwrap(err: BaseException) -> Optional[BaseException]:
    """Next error in the chain, or None."""
    method = getattr(err, "unwrap", None)
    if callable(method):
        return method()
    return err.__cause__


def is_error(
    err: Optional[BaseException],
    target: Union[BaseException, Type[BaseException]],
) -> bool:
    """
    Report whether target appears anywhere in err's unwrap chain.

    Args:
        err: Error to inspect
        target: Exception instance (matched by identity) or exception type

    Returns:
        True if any link matches
    """
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(target, type):
            if isinstance(err, target):
                return True
        elif err is target:
            return True
        err = unwrap(err)
    return False


def error_text(err: BaseException) -> str:
    """Text rendered for an error; falls back to the class name."""
    text = str(err)
    return text if text else type(err).__name__
