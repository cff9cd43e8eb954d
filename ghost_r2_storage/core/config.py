"""Adapter configuration using pydantic-settings."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, ValidationError, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghost_r2_storage.core.exceptions import StorageConfigurationError

ENV_PREFIX = "GHOST_STORAGE_ADAPTER_R2_"

# Placeholder for resize widths that could not be parsed
INVALID_WIDTH = 0

PACKAGE_LOGGER = "ghost_r2_storage"


class Settings(BaseSettings):
    """Adapter settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Required R2 settings, declared in the order they are checked
    domain: str = Field(min_length=1, description="Public domain serving the bucket")
    bucket: str = Field(min_length=1, description="R2 bucket name")
    account_id: str = Field(min_length=1, description="Cloudflare account ID")
    access_key_id: str = Field(min_length=1, description="R2 access key ID")
    secret_access_key: str = Field(min_length=1, description="R2 secret access key")

    # Path prefixes per asset class
    images_url_prefix: str = Field(
        default="/content/images/",
        description="Key prefix for images",
    )
    media_url_prefix: str = Field(
        default="/content/media/",
        description="Key prefix for media",
    )
    files_url_prefix: str = Field(
        default="/content/files/",
        description="Key prefix for files",
    )

    # Responsive images
    responsive_images: bool = Field(
        default=False,
        description="Upload resized variants of processed images",
    )
    resize_widths: str = Field(
        default="600,1000,1600,2400",
        description="Comma-separated widths for responsive variants",
    )

    uuid_name: bool = Field(
        default=False,
        description="Name images and media with a random UUID",
    )
    log_level: str = Field(default="info", description="Adapter log level")

    @field_validator("responsive_images", "uuid_name", mode="before")
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        """Only the literal string "true" enables a flag."""
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"

    @computed_field
    @property
    def endpoint_url(self) -> str:
        """Construct R2 endpoint URL."""
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    @property
    def parsed_resize_widths(self) -> tuple[int, ...]:
        """Resize widths as integers.

        Entries that are not positive integers map to ``INVALID_WIDTH`` so
        the variant generator can reject them when they are used.
        """
        widths: list[int] = []
        for raw in self.resize_widths.split(","):
            token = raw.strip()
            if not token:
                continue
            try:
                width = int(token)
            except ValueError:
                width = INVALID_WIDTH
            widths.append(width if width > 0 else INVALID_WIDTH)
        return tuple(widths)


def load_settings(**overrides: Any) -> Settings:
    """Resolve settings, failing fast on the first missing required variable.

    Raises:
        StorageConfigurationError: If a required variable is missing or empty.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        for error in e.errors():
            if error["type"] in ("missing", "string_too_short"):
                field = str(error["loc"][0])
                name = f"{ENV_PREFIX}{field.upper()}"
                raise StorageConfigurationError(
                    f"Environment variable {name} is not defined",
                    cause=e,
                ) from e
        raise StorageConfigurationError(f"Invalid adapter configuration: {e}", cause=e) from e


def configure_logging(level: str) -> None:
    """Apply the configured log level to the adapter's loggers."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(resolved)

