"""Exception hierarchy for recipe_explorer.

All exceptions inherit from :class:`RecipeExplorerError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`recipe_explorer.exit_codes`. The top-level handler in
:func:`recipe_explorer.app.main` catches ``RecipeExplorerError`` and exits
with the matching code; the interactive menu reports it and carries on.

Subclass hierarchy::

    RecipeExplorerError      (exit 1)
    +-- InvalidUsageError    (exit 2)
    |   +-- InvalidRecordError
    +-- ConfigError          (exit 1)
    +-- CorruptStoreError    (exit 8)
    +-- StoreWriteError      (exit 9)
    +-- ProducerError        (exit 5)
        +-- NotFoundError       (exit 4)
        +-- ServerError         (exit 5)
        +-- ResponseParseError  (exit 5)
        +-- ConnectionError_    (exit 6)
        +-- ApiTimeoutError     (exit 6)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from recipe_explorer.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_CORRUPT_STORE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_STORE_WRITE_ERROR,
)


class RecipeExplorerError(Exception):
    """Base exception for all recipe_explorer errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RecipeExplorerError):
    """Raised for invalid CLI arguments or unusable input."""

    exit_code = EXIT_INVALID_USAGE


class InvalidRecordError(InvalidUsageError):
    """Raised when a favourite record carries no recipe id."""


class ConfigError(RecipeExplorerError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class CorruptStoreError(RecipeExplorerError):
    """Raised when a persisted JSON file exists but cannot be read or parsed.

    The caller decides whether to reset the store to empty or abort.

    Args:
        message: Human-readable description.
        path: The offending file.
    """

    exit_code = EXIT_CORRUPT_STORE

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class StoreWriteError(RecipeExplorerError):
    """Raised when a persisted JSON file cannot be written."""

    exit_code = EXIT_STORE_WRITE_ERROR


class ProducerError(RecipeExplorerError):
    """Base class for failures of a remote fetch.

    The cache never swallows these; they always reach the caller.
    """

    exit_code = EXIT_SERVER_ERROR


class NotFoundError(ProducerError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ProducerError):
    """Raised when the API returns an HTTP error status."""

    exit_code = EXIT_SERVER_ERROR


class ResponseParseError(ProducerError):
    """Raised when the API response body is not the JSON we expect."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(ProducerError):
    """Raised on network-level failures (DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ApiTimeoutError(ProducerError):
    """Raised when a bounded remote lookup does not finish in time."""

    exit_code = EXIT_CONNECTION_ERROR
