"""Pydantic models for the browse service."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from catalog_sdk import ErrorEnvelope, PageSection


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "browse"


class SectionModel(BaseModel):
    name: str
    data: Any = None
    error: Optional[ErrorEnvelope] = None

    @classmethod
    def from_section(cls, section: PageSection) -> "SectionModel":
        return cls(name=section.name, data=section.data, error=section.error)


class HomePageResponse(BaseModel):
    sections: Dict[str, SectionModel]


class MoviePageResponse(BaseModel):
    movie_id: str
    review_page: int
    review_size: int
    sections: Dict[str, SectionModel]


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
