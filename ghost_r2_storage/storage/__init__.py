"""Storage adapter module.

Persists host uploads to Cloudflare R2 with optional responsive image variants.
"""

from ghost_r2_storage.core.exceptions import (
    StorageConfigurationError,
    StorageError,
    StorageNotSupportedError,
    StorageValidationError,
)

from .adapter import R2StorageAdapter
from .base import StorageAdapter
from .r2 import DEFAULT_CACHE_MAX_AGE, R2ObjectStore
from .schemas import ReadOptions, UploadRequest
from .variants import PROCESSED_MARKER, VariantGenerator

__all__ = [
    # Protocol
    "StorageAdapter",
    # Implementation
    "R2ObjectStore",
    "R2StorageAdapter",
    "VariantGenerator",
    # Schemas
    "ReadOptions",
    "UploadRequest",
    # Constants
    "DEFAULT_CACHE_MAX_AGE",
    "PROCESSED_MARKER",
    # Exceptions
    "StorageConfigurationError",
    "StorageError",
    "StorageNotSupportedError",
    "StorageValidationError",
]
