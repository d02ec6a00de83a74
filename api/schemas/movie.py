"""
Movie-related Pydantic schemas.

Request bodies are strict and reject unknown keys; they are decoded with
greenlight.decode_json so clients get specific error messages.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from api.schemas.common import PaginationMeta
from greenlight.models import Movie
from greenlight.runtime import Runtime


class MovieCreate(BaseModel):
    """Body of POST /v1/movies. Missing fields are caught by validate_movie."""

    model_config = ConfigDict(extra="forbid", strict=True)

    title: str = ""
    year: int = 0
    runtime: Runtime = Runtime(0)
    genres: Optional[List[str]] = None

    def to_movie(self) -> Movie:
        return Movie(
            title=self.title,
            year=self.year,
            runtime=self.runtime,
            genres=self.genres,
        )


class MovieUpdate(BaseModel):
    """
    Body of PATCH /v1/movies/{id}.

    A field is applied only when the client sent it with a non-null value;
    absent fields leave the stored value untouched.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[int] = None
    runtime: Optional[Runtime] = None
    genres: Optional[List[str]] = None

    def present_fields(self) -> dict:
        """Fields the client supplied, with their values."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }

    def apply(self, movie: Movie) -> Movie:
        """Copy the present fields onto a previously fetched movie."""
        for name, value in self.present_fields().items():
            setattr(movie, name, value)
        return movie


class MovieResource(BaseModel):
    """Movie as returned by the API."""

    id: int
    title: str
    year: int
    run_time: str = Field(..., alias="runTime", description='Runtime as "<N> mins"')
    genres: List[str]
    version: int


class MovieEnvelope(BaseModel):
    """Single movie response."""

    movie: MovieResource


class MovieListResponse(BaseModel):
    """Paginated movie listing."""

    movies: List[MovieResource]
    metadata: PaginationMeta
