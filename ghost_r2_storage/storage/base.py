"""Storage adapter protocol definition."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from litestar.types import ASGIApp

    from .schemas import ReadOptions, UploadRequest


@runtime_checkable
class StorageAdapter(Protocol):
    """Contract the host platform expects from a storage adapter.

    The host creates one adapter per asset class and calls these methods
    for every upload, existence check and serve setup.
    """

    @property
    def supports_responsive_images(self) -> bool:
        """Whether the host may render ``srcset`` attributes for stored images."""
        ...

    async def save(
        self,
        file: UploadRequest,
        target_dir: str | None = None,
    ) -> str:
        """Persist an uploaded file.

        Args:
            file: File accepted by the host.
            target_dir: Directory override; defaults to the asset class prefix
                plus ``YYYY/MM``.

        Returns:
            Public URL of the stored object.
        """
        ...

    async def exists(
        self,
        file_name: str,
        target_dir: str | None = None,
    ) -> bool:
        """Check whether an object is stored.

        Returns:
            True if present, False if the store reports it missing.
        """
        ...

    async def delete(
        self,
        file_name: str,
        target_dir: str | None = None,
    ) -> bool:
        """Delete a stored object.

        Returns:
            True if the object was removed.
        """
        ...

    async def read(
        self,
        options: ReadOptions | None = None,
    ) -> bytes:
        """Read a stored object's bytes."""
        ...

    async def get_unique_file_name(
        self,
        file: UploadRequest,
        target_dir: str,
    ) -> str:
        """Build a path for ``file`` in ``target_dir`` that is not taken yet."""
        ...

    def serve(self) -> Callable[[ASGIApp], ASGIApp]:
        """Middleware the host mounts in front of its content routes."""
        ...
