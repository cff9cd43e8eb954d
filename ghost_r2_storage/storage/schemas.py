"""Storage adapter DTOs using msgspec."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from typing import Any

import msgspec


class UploadRequest(msgspec.Struct, kw_only=True):
    """A file accepted by the host for persistence."""

    path: str  # Local temporary file written by the host
    name: str  # Original file name as uploaded
    type: str  # MIME type
    ext: str | None = None  # Extension including the dot, derived from name if absent
    target_dir: str | None = None

    @property
    def extension(self) -> str:
        """File extension including the leading dot."""
        if self.ext:
            return self.ext if self.ext.startswith(".") else f".{self.ext}"
        return posixpath.splitext(self.name)[1]

    @classmethod
    def from_file_info(cls, info: Mapping[str, Any]) -> UploadRequest:
        """Build a request from the host's file info mapping.

        Accepts both ``name`` and the multipart-style ``originalname`` keys.
        """
        name = info.get("name") or info.get("originalname")
        if not name:
            raise ValueError("File info requires a name")
        return cls(
            path=info["path"],
            name=name,
            type=info.get("type") or info.get("mimetype") or "application/octet-stream",
            ext=info.get("ext"),
            target_dir=info.get("target_dir"),
        )


class ReadOptions(msgspec.Struct, kw_only=True):
    """Options passed by the host to ``read``."""

    path: str | None = None
