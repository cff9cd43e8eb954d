"""Cloudflare R2 storage adapter for the host platform."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import posixpath
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import aiofiles

from ghost_r2_storage.core.config import Settings, configure_logging, load_settings
from ghost_r2_storage.core.enums import AssetClass
from ghost_r2_storage.core.exceptions import StorageNotSupportedError

from .naming import (
    generate_unique,
    get_target_dir,
    join_key,
    sanitize_file_name,
    strip_ending_slash,
    strip_leading_slash,
)
from .r2 import R2ObjectStore
from .schemas import ReadOptions, UploadRequest
from .variants import VariantGenerator, is_processed

if TYPE_CHECKING:
    from litestar.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

READ_NOT_SUPPORTED = (
    "Cloudflare R2 Storage Adapter: read() is not supported. "
    "Images should be fetched from CDN URL. Use redirects instead."
)


async def read_file(path: str) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


class R2StorageAdapter:
    """Stores host uploads in Cloudflare R2 and serves them from its domain.

    Configuration is resolved once at construction. Pass ``settings``
    explicitly to skip the environment lookup.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        settings: Settings | None = None,
        store: R2ObjectStore | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            config: Host adapter config with ``storage_type_*`` flags.
            settings: Resolved settings; read from the environment if omitted.
            store: Object-store gateway; built from settings if omitted.

        Raises:
            StorageConfigurationError: If a required setting is missing.
        """
        logger.debug("Initialising Cloudflare R2 storage adapter")

        self._settings = settings or load_settings()
        configure_logging(self._settings.log_level)

        self._asset_class = AssetClass.from_config(config)
        self._path_prefix = {
            AssetClass.IMAGES: self._settings.images_url_prefix,
            AssetClass.MEDIA: self._settings.media_url_prefix,
            AssetClass.FILES: self._settings.files_url_prefix,
        }[self._asset_class]
        self._domain = strip_ending_slash(self._settings.domain)
        self._store = store or R2ObjectStore(self._settings)
        self._variants = VariantGenerator(
            store=self._store,
            build_key=self.get_unique_file_name,
            prefix=self._path_prefix,
            widths=self._settings.parsed_resize_widths,
        )

        logger.debug(
            f"Initialisation done: asset_class={self._asset_class.value}, "
            f"prefix={self._path_prefix}, bucket={self._settings.bucket}"
        )

    @property
    def asset_class(self) -> AssetClass:
        return self._asset_class

    @property
    def path_prefix(self) -> str:
        return self._path_prefix

    @property
    def supports_responsive_images(self) -> bool:
        """Explicit capability flag replacing the host's ``saveRaw`` presence check."""
        return self._asset_class == AssetClass.IMAGES and self._settings.responsive_images

    def public_url(self, key: str) -> str:
        return f"{self._domain}/{strip_leading_slash(key)}"

    def get_target_dir(self, base_dir: str | None = None, now: datetime | None = None) -> str:
        """Default upload directory: ``<base_dir>/YYYY/MM``."""
        return get_target_dir(base_dir if base_dir is not None else self._path_prefix, now)

    async def get_unique_file_name(self, file: UploadRequest, target_dir: str) -> str:
        """Build the object path for ``file`` inside ``target_dir``.

        Images and media get a random UUID name when unique naming is on.
        Files always keep their sanitized name with a numeric suffix on
        collision.
        """
        if self._asset_class != AssetClass.FILES and self._settings.uuid_name:
            return join_key(target_dir, f"{uuid4()}{file.extension}")

        ext = file.extension
        base = posixpath.basename(file.name)
        if ext and base.endswith(ext):
            base = base[: -len(ext)]
        return await generate_unique(target_dir, sanitize_file_name(base), ext, self.exists)

    async def save(self, file: UploadRequest, target_dir: str | None = None) -> str:
        """Upload a file and, for processed images, its responsive variants.

        Returns:
            Public URL of the primary object.

        Raises:
            ClientError: If an upload or existence check fails.
            StorageValidationError: If a variant cannot be produced.
        """
        logger.debug(f"save(): file={file.name}, path={file.path}, target_dir={target_dir}")

        directory = target_dir or file.target_dir or self.get_target_dir()

        file_path, data = await asyncio.gather(
            self.get_unique_file_name(file, directory),
            read_file(file.path),
        )
        key = strip_leading_slash(file_path)

        logger.debug(f"save(): saving {key}")
        await self._store.put(key, data, file.type)

        if self.supports_responsive_images and is_processed(file.path):
            # UUID names cannot be rebuilt per width, so variants reuse the primary name
            file_name = posixpath.basename(key) if self._settings.uuid_name else None
            await self._variants.generate(file, data, file_name=file_name)

        return self.public_url(key)

    async def save_raw(self, buffer: bytes, target_path: str) -> str:
        """Upload an already rendered buffer to ``target_path``.

        Raises:
            StorageNotSupportedError: If responsive images are disabled.
        """
        if not self.supports_responsive_images:
            raise StorageNotSupportedError(
                "Cloudflare R2 Storage Adapter: save_raw() requires responsive images"
            )

        key = strip_leading_slash(target_path)
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        await self._store.put(key, buffer, content_type)
        return self.public_url(key)

    async def exists(self, file_name: str, target_dir: str | None = None) -> bool:
        logger.debug(f"exists(): file_name={file_name}, target_dir={target_dir}")

        key = strip_leading_slash(join_key(target_dir, file_name))
        return await self._store.head_exists(key)

    async def delete(self, file_name: str, target_dir: str | None = None) -> bool:
        """Always returns False; manage object lifecycle on the bucket directly."""
        logger.error(
            f"Cloudflare R2 Storage Adapter: delete() is not supported "
            f"(file_name={file_name}, target_dir={target_dir})"
        )
        return False

    async def read(self, options: ReadOptions | None = None) -> bytes:
        """Always raises; content is served from the public domain."""
        logger.debug(f"read(): options={options}")

        if options is None:
            raise StorageNotSupportedError(
                'Cloudflare R2 Storage Adapter: read(): argument "options" is undefined'
            )
        if options.path is None:
            raise StorageNotSupportedError(
                'Cloudflare R2 Storage Adapter: read(): argument "options.path" is undefined'
            )
        raise StorageNotSupportedError(READ_NOT_SUPPORTED)

    def serve(self) -> Callable[[ASGIApp], ASGIApp]:
        """Middleware that forwards every request untouched."""
        logger.warning("Cloudflare R2 Storage Adapter: serve() has been called")

        def middleware(app: ASGIApp) -> ASGIApp:
            async def passthrough(scope: Scope, receive: Receive, send: Send) -> None:
                await app(scope, receive, send)

            return passthrough

        return middleware
