from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class AssetClass(str, Enum):
    """Kind of content an adapter instance stores."""

    IMAGES = "images"
    MEDIA = "media"
    FILES = "files"

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> AssetClass:
        """Select the asset class from the host's storage type flags.

        Exactly one enabled flag selects its class. No flag, or more than
        one, falls back to images.
        """
        config = config or {}
        selected = [
            asset_class
            for asset_class in cls
            if bool(config.get(f"storage_type_{asset_class.value}", False))
        ]
        if len(selected) == 1:
            return selected[0]
        return cls.IMAGES
