"""
Data models for the Greenlight core.

Provides the Movie dataclass and its business-rule validation.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from .runtime import Runtime
from .validator import Validator, unique

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5


@dataclass
class Movie:
    """
    A movie record.

    id, created_at and version are owned by the repository; callers only set
    title, year, runtime and genres.
    """

    id: int = 0
    created_at: Optional[datetime] = None
    title: str = ""
    year: int = 0
    runtime: Runtime = Runtime(0)
    genres: Optional[List[str]] = None
    version: int = 0

    def to_dict(self) -> dict:
        """Wire shape of the movie. created_at is never exposed."""
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "runTime": str(self.runtime),
            "genres": list(self.genres) if self.genres is not None else None,
            "version": self.version,
        }

    def to_params(self) -> dict:
        """Bind parameters for the mutable columns."""
        return {
            "title": self.title,
            "year": self.year,
            "runtime": int(self.runtime),
            "genres": json.dumps(self.genres or []),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Movie":
        """Create a Movie from a movies table row mapping."""
        genres = row["genres"]
        if isinstance(genres, (str, bytes)):
            genres = json.loads(genres)
        return cls(
            id=row["id"],
            created_at=row["created_at"],
            title=row["title"],
            year=row["year"],
            runtime=Runtime(row["runtime"]),
            genres=list(genres or []),
            version=row["version"],
        )


def validate_movie(v: Validator, movie: Movie) -> None:
    """Record any movie business-rule errors in the validator."""
    v.check(movie.title != "", "title", "must be provided")
    v.check(
        len(movie.title.encode("utf-8")) <= MAX_TITLE_BYTES,
        "title",
        "must not be more than 500 bytes long",
    )

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(movie.year <= date.today().year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    v.check(movie.genres is not None, "genres", "must be provided")
    genres = movie.genres or []
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")
