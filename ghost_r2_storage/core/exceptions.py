"""Storage adapter exceptions.

Object-store client errors (``botocore.exceptions.ClientError``) are not
wrapped; they reach the host unchanged.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for storage adapter operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StorageConfigurationError(StorageError):
    """Raised when a required configuration value is missing."""


class StorageNotSupportedError(StorageError):
    """Raised for host operations the adapter deliberately does not provide."""


class StorageValidationError(StorageError):
    """Raised when input cannot be processed (invalid resize width, bad image)."""
