"""Streaming-specific exception types for the project."""

from __future__ import annotations


class StreamingError(Exception):
    """Base exception for streaming pipeline errors."""


class InvalidArgumentError(StreamingError, ValueError):
    """Raised when a component is constructed with invalid parameters."""


class IllegalStateError(StreamingError, RuntimeError):
    """Raised when an operation is not allowed in the current state.

    Starting an already-started extractor or stopping an idle one leaves the
    extractor untouched.
    """


def ensure(condition: bool, message: str) -> None:
    """Raise InvalidArgumentError with message unless condition holds.

    Args:
        condition: Validation outcome.
        message: Error message to use if the condition is false.

    Raises:
        InvalidArgumentError: If condition is false.
    """
    if not condition:
        raise InvalidArgumentError(message)
