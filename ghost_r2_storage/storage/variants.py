"""Responsive image variant generation."""

from __future__ import annotations

import asyncio
import io
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from ghost_r2_storage.core.exceptions import StorageValidationError

from .naming import get_target_dir, join_key, strip_leading_slash

if TYPE_CHECKING:
    from .r2 import R2ObjectStore
    from .schemas import UploadRequest

logger = logging.getLogger(__name__)

# Suffix the host appends to temp files that went through its image pipeline
PROCESSED_MARKER = "_processed"

KeyBuilder = Callable[["UploadRequest", str], Awaitable[str]]


def is_processed(path: str) -> bool:
    return path.endswith(PROCESSED_MARKER)


def variant_dir(prefix: str, width: int, now: datetime | None = None) -> str:
    """Directory for a width variant: ``<prefix>/size/w<width>/YYYY/MM``."""
    return get_target_dir(join_key(prefix, "size", f"w{width}"), now)


def resize_image(data: bytes, width: int) -> bytes:
    """Resize an encoded image to ``width`` keeping its aspect ratio.

    The output is encoded in the source format.

    Raises:
        StorageValidationError: If the width is invalid or the data is not an image.
    """
    if width <= 0:
        raise StorageValidationError(f"Invalid resize width: {width}")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format or "PNG"
            src_width, src_height = image.size
            height = max(1, round(src_height * width / src_width))
            resized = image.resize((width, height), Image.Resampling.LANCZOS)
    except UnidentifiedImageError as e:
        raise StorageValidationError(f"Cannot resize non-image data: {e}", cause=e) from e

    buffer = io.BytesIO()
    resized.save(buffer, format=image_format)
    return buffer.getvalue()


class VariantGenerator:
    """Uploads resized copies of an image, one per configured width."""

    def __init__(
        self,
        *,
        store: R2ObjectStore,
        build_key: KeyBuilder,
        prefix: str,
        widths: Sequence[int],
    ) -> None:
        self._store = store
        self._build_key = build_key
        self._prefix = prefix
        self._widths = tuple(widths)

    @property
    def widths(self) -> tuple[int, ...]:
        return self._widths

    async def _upload_variant(
        self,
        request: UploadRequest,
        data: bytes,
        width: int,
        now: datetime | None,
        file_name: str | None,
    ) -> str:
        directory = variant_dir(self._prefix, width, now)
        if file_name:
            key = strip_leading_slash(join_key(directory, file_name))
        else:
            key = strip_leading_slash(await self._build_key(request, directory))
        resized = await asyncio.to_thread(resize_image, data, width)
        await self._store.put(key, resized, request.type)
        logger.debug(f"Uploaded w{width} variant: {key}")
        return key

    async def generate(
        self,
        request: UploadRequest,
        data: bytes,
        now: datetime | None = None,
        file_name: str | None = None,
    ) -> bool:
        """Resize and upload every width concurrently.

        With ``file_name`` every variant is stored under that exact name,
        otherwise each width gets its own key from the key builder.

        The first failure is raised. Variants already uploaded stay in the
        bucket and running uploads are not cancelled.

        Returns:
            True once every variant is stored.
        """
        await asyncio.gather(
            *(
                self._upload_variant(request, data, width, now, file_name)
                for width in self._widths
            )
        )
        logger.info(f"Uploaded {len(self._widths)} responsive variants for {request.name}")
        return True
