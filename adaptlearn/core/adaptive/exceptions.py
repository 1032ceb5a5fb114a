# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by the adaptive learning engine and its adapters.

- DataUnavailableError: an optional input could not be fetched. Absorbed
  into defaults by the engine and never surfaced to callers.
- RepositoryError: a required input (the session history) could not be
  fetched. Propagated to callers.
- PersistenceError: a pattern cache write failed. Always logged and
  swallowed by the engine.
"""


class AdaptiveEngineError(Exception):
    """Base exception for adaptive engine operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the engine error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class DataUnavailableError(AdaptiveEngineError):
    """An optional history input is missing or could not be fetched."""


class RepositoryError(AdaptiveEngineError):
    """A history repository read failed."""


class PersistenceError(AdaptiveEngineError):
    """A pattern store write or read failed."""
