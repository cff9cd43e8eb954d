"""Cloudflare R2 object-store gateway."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from ghost_r2_storage.core.exceptions import StorageError

if TYPE_CHECKING:
    from types_aiobotocore_s3 import S3Client

    from ghost_r2_storage.core.config import Settings

logger = logging.getLogger(__name__)

# 30 days
DEFAULT_CACHE_MAX_AGE = 30 * 24 * 60 * 60

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


def _status_code(error: ClientError) -> int | None:
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def is_not_found(error: ClientError) -> bool:
    """Whether a client error represents a missing object."""
    if _status_code(error) == 404:
        return True
    return error.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class R2ObjectStore:
    """Thin async wrapper over the S3 operations the adapter needs.

    One aioboto3 session is shared; each operation opens its own client
    context. Retries are disabled so failures reach the caller as-is.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the gateway.

        Args:
            settings: Resolved adapter settings.
        """
        self._settings = settings
        self._session = aioboto3.Session()
        self._client_config = Config(
            signature_version="s3v4",
            retries={"max_attempts": 1, "mode": "standard"},
            connect_timeout=10,
            read_timeout=30,
        )

    @property
    def bucket(self) -> str:
        return self._settings.bucket

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[S3Client]:
        """Get S3 client with context management.

        Yields:
            Configured S3 client.
        """
        async with self._session.client(  # type: ignore[reportGeneralTypeIssues]
            "s3",
            region_name="auto",
            endpoint_url=self._settings.endpoint_url,
            aws_access_key_id=self._settings.access_key_id,
            aws_secret_access_key=self._settings.secret_access_key,
            config=self._client_config,
        ) as client:
            yield client

    async def head_exists(self, key: str) -> bool:
        """Check object existence with a HEAD request.

        Returns:
            True on HTTP 200, False on HTTP 404.

        Raises:
            ClientError: For any other client failure, unchanged.
            StorageError: If the response carries an unexpected status.
        """
        try:
            async with self._get_client() as client:
                response = await client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if is_not_found(e):
                logger.debug(f"R2 object not found: {key}")
                return False
            logger.error(f"R2 exists check failed for {key}: {e}")
            raise

        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status == 200:
            return True
        raise StorageError(f"Unexpected status {status} checking existence of {key}")

    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        cache_control_max_age: int = DEFAULT_CACHE_MAX_AGE,
    ) -> None:
        """Upload an object, overwriting any existing one.

        Raises:
            ClientError: If the upload fails, unchanged.
        """
        try:
            async with self._get_client() as client:
                await client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl=f"max-age={cache_control_max_age}",
                )
        except ClientError as e:
            logger.error(f"R2 upload failed for {key}: {e}")
            raise

        logger.info(f"Uploaded file to R2: {key} ({len(body)} bytes)")
