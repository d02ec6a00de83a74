"""Pydantic schemas for API request and response validation."""

from api.schemas.common import (
    MOVIE_SORT_SAFELIST,
    HealthResponse,
    MessageResponse,
    MovieSortBy,
    PaginationMeta,
)
from api.schemas.movie import (
    MovieCreate,
    MovieEnvelope,
    MovieListResponse,
    MovieResource,
    MovieUpdate,
)

__all__ = [
    "MOVIE_SORT_SAFELIST",
    "HealthResponse",
    "MessageResponse",
    "MovieSortBy",
    "PaginationMeta",
    "MovieCreate",
    "MovieEnvelope",
    "MovieListResponse",
    "MovieResource",
    "MovieUpdate",
]
