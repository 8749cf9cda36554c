"""
Custom exceptions for the ff-query package.
"""

from typing import Any, Optional, Sequence


class FFQueryError(Exception):
    """Base exception for all ff-query errors."""

    pass


class InvalidArgumentError(FFQueryError, ValueError):
    """Raised when a builder or operator call receives a malformed argument."""

    pass


class IllegalStateError(FFQueryError, RuntimeError):
    """Raised when an operation is not allowed in the builder's current state."""

    pass


class ConfigurationError(FFQueryError, ValueError):
    """Raised when connection details cannot be turned into a valid configuration."""

    pass


class ExecutionError(FFQueryError):
    """Raised (or carried by a failed result) when the database rejects a statement."""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        params: Optional[Sequence[Any]] = None,
    ):
        self.query = query
        self.params = tuple(params) if params is not None else ()

        if query:
            message = f"{message} (query: {query})"

        super().__init__(message)
