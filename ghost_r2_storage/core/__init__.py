"""Core configuration, enums and exceptions."""

from .config import Settings, configure_logging, load_settings
from .enums import AssetClass
from .exceptions import (
    StorageConfigurationError,
    StorageError,
    StorageNotSupportedError,
    StorageValidationError,
)

__all__ = [
    "AssetClass",
    "Settings",
    "StorageConfigurationError",
    "StorageError",
    "StorageNotSupportedError",
    "StorageValidationError",
    "configure_logging",
    "load_settings",
]
