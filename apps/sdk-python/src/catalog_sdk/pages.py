"""Screen-level loaders: independent requests, tolerant of partial failure."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Optional, Union

from .client import CatalogClient, JSONResult
from .models import ErrorEnvelope


@dataclass
class PageSection:
    name: str
    data: Any = None
    error: Optional[ErrorEnvelope] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_result(cls, name: str, result: JSONResult) -> "PageSection":
        if isinstance(result, ErrorEnvelope):
            return cls(name=name, error=result)
        return cls(name=name, data=result)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "data": self.data,
            "error": self.error.model_dump(by_alias=True) if self.error else None,
        }


async def _load_sections(requests: Dict[str, Awaitable[JSONResult]]) -> Dict[str, PageSection]:
    results = await asyncio.gather(*requests.values())
    return {name: PageSection.from_result(name, result) for name, result in zip(requests, results)}


async def load_home_page(client: CatalogClient, *, cancel: Optional[asyncio.Event] = None) -> Dict[str, PageSection]:
    return await _load_sections({"movies": client.get_all_movies(cancel=cancel)})


async def load_movie_page(
    client: CatalogClient,
    movie_id: Union[int, str],
    *,
    review_page: int = 0,
    review_size: int = 50,
    cancel: Optional[asyncio.Event] = None,
) -> Dict[str, PageSection]:
    """Fetch the movie detail screen; each section resolves on its own."""
    return await _load_sections(
        {
            "movie": client.get_movie(movie_id, cancel=cancel),
            "actors": client.get_movie_actors(movie_id, cancel=cancel),
            "directors": client.get_movie_directors(movie_id, cancel=cancel),
            "reviews": client.get_movie_reviews(movie_id, review_page, review_size, cancel=cancel),
        }
    )


__all__ = ["PageSection", "load_home_page", "load_movie_page"]
