"""Cloudflare R2 storage adapter for Ghost-style content platforms."""

from ghost_r2_storage.storage import R2StorageAdapter

__all__ = ["R2StorageAdapter"]

__version__ = "0.1.0"
