"""Object key helpers and the host's default unique-name algorithm."""

from __future__ import annotations

import posixpath
import re
from collections.abc import Awaitable, Callable
from datetime import datetime

_UNSAFE_CHARS = re.compile(r"[^\w@.]", re.ASCII)


def strip_leading_slash(key: str) -> str:
    """Remove leading slashes so the result is a valid object key."""
    return key.lstrip("/")


def strip_ending_slash(value: str) -> str:
    return value.rstrip("/")


def join_key(*parts: str | None) -> str:
    """Join path segments with ``/`` and normalize the result."""
    segments = [part for part in parts if part]
    if not segments:
        return ""
    first, *rest = segments
    joined = posixpath.normpath(posixpath.join(first, *(part.strip("/") for part in rest)))
    return "" if joined == "." else joined


def get_target_dir(base_dir: str, now: datetime | None = None) -> str:
    """Directory for new uploads: ``<base_dir>/YYYY/MM`` in local time."""
    now = now or datetime.now()
    return join_key(base_dir, f"{now.year:04d}", f"{now.month:02d}")


def sanitize_file_name(name: str) -> str:
    """Replace characters outside ``[A-Za-z0-9_@.]`` with ``-``."""
    return _UNSAFE_CHARS.sub("-", name)


async def generate_unique(
    directory: str,
    name: str,
    ext: str,
    exists: Callable[[str, str], Awaitable[bool]],
) -> str:
    """Return the first free ``name[-N]ext`` path in ``directory``.

    Args:
        directory: Target directory.
        name: Sanitized base name without extension.
        ext: Extension including the dot.
        exists: Existence check taking ``(file_name, directory)``.

    Returns:
        Joined path of the first candidate that does not exist yet.
    """
    attempt = 0
    while True:
        file_name = f"{name}-{attempt}{ext}" if attempt else f"{name}{ext}"
        if not await exists(file_name, directory):
            return join_key(directory, file_name)
        attempt += 1
