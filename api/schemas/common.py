"""
Common schemas shared across API endpoints.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MovieSortBy(str, Enum):
    """Movie sort options; a leading "-" sorts descending."""

    id = "id"
    title = "title"
    year = "year"
    runtime = "runtime"
    id_desc = "-id"
    title_desc = "-title"
    year_desc = "-year"
    runtime_desc = "-runtime"


MOVIE_SORT_SAFELIST = tuple(option.value for option in MovieSortBy)


class PaginationMeta(BaseModel):
    """Pagination metadata; every field is absent for an empty listing."""

    current_page: Optional[int] = Field(None, ge=1, description="Current page number")
    page_size: Optional[int] = Field(None, ge=1, description="Items per page")
    first_page: Optional[int] = Field(None, ge=1, description="Always 1")
    last_page: Optional[int] = Field(None, ge=1, description="Last page number")
    total_records: Optional[int] = Field(None, ge=0, description="Total matching records")


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class HealthResponse(BaseModel):
    """Healthcheck response."""

    status: str
    environment: str
    version: str
