"""Browse service configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from catalog_sdk import ClientConfig


@dataclass(frozen=True)
class BrowseSettings:
    catalog: ClientConfig = field(default_factory=ClientConfig)
    review_page_size: int = 50
    max_review_page_size: int = 200

    @classmethod
    def from_env(cls) -> "BrowseSettings":
        page_size = int(os.environ.get("BROWSE_REVIEW_PAGE_SIZE", "50"))
        max_page_size = int(os.environ.get("BROWSE_MAX_REVIEW_PAGE_SIZE", "200"))
        return cls(
            catalog=ClientConfig.from_env(),
            review_page_size=max(1, min(page_size, max_page_size)),
            max_review_page_size=max_page_size,
        )


settings = BrowseSettings.from_env()

__all__ = ["BrowseSettings", "settings"]
