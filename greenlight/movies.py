"""
Movie repository.

All persistence for the movies table goes through MovieRepository. Each
method opens its own connection, so every call is bounded independently by
the driver timeouts configured on the engine.
"""

import json
import logging
import re
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import EditConflict, RecordNotFound, StorageFault
from .filters import Filters, Metadata, calculate_metadata
from .models import Movie

# Characters with a meaning in MySQL boolean-mode full-text queries
_BOOLEAN_OPERATORS = re.compile(r'[+\-<>()~*"@]+')


def title_search_terms(title: str) -> str:
    """
    Build a boolean-mode full-text query requiring every word of title.

    "black panther" becomes "+black +panther". Operator characters in the
    input are treated as word separators; an empty result means nothing
    searchable was given.
    """
    words = _BOOLEAN_OPERATORS.sub(" ", title).split()
    return " ".join(f"+{word}" for word in words)


class MovieRepository:
    """Create, read, update, delete and list movies."""

    COLUMNS = "id, created_at, title, year, runtime, genres, version"

    def __init__(self, engine: Engine, logger: Optional[logging.Logger] = None):
        self.engine = engine
        self.logger = logger or logging.getLogger("greenlight.movies")

    def _fault(self, operation: str, error: Exception) -> StorageFault:
        self.logger.error(f"Error {operation}: {error}")
        return StorageFault(operation)

    def get(self, movie_id: int) -> Movie:
        """
        Fetch a movie by id.

        Raises:
            RecordNotFound: If id < 1 or no such movie exists.
            StorageFault: On any store failure.
        """
        if movie_id < 1:
            raise RecordNotFound("movie", movie_id)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {self.COLUMNS} FROM movies WHERE id = :id"),
                    {"id": movie_id},
                ).mappings().fetchone()
        except SQLAlchemyError as e:
            raise self._fault(f"fetching movie {movie_id}", e) from e

        if row is None:
            raise RecordNotFound("movie", movie_id)
        return Movie.from_row(row)

    def insert(self, movie: Movie) -> None:
        """
        Insert a validated movie.

        The generated id, created_at and version are written back onto the
        passed movie.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    text(
                        "INSERT INTO movies (title, year, runtime, genres) "
                        "VALUES (:title, :year, :runtime, :genres)"
                    ),
                    movie.to_params(),
                )
                movie_id = result.lastrowid
                row = conn.execute(
                    text("SELECT created_at, version FROM movies WHERE id = :id"),
                    {"id": movie_id},
                ).fetchone()
                conn.commit()
        except SQLAlchemyError as e:
            raise self._fault(f"inserting movie {movie.title!r}", e) from e

        movie.id = movie_id
        movie.created_at = row[0]
        movie.version = row[1]

    def update(self, movie: Movie) -> None:
        """
        Write the mutable fields of a movie and bump its version.

        The write only applies while the stored version still equals
        movie.version. On success movie.version holds the new version.

        Raises:
            EditConflict: If the row was changed or deleted since it was read.
            StorageFault: On any store failure.
        """
        params = movie.to_params()
        params["id"] = movie.id
        params["version"] = movie.version

        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    text(
                        """
                        UPDATE movies
                        SET title = :title, year = :year, runtime = :runtime,
                            genres = :genres, version = version + 1
                        WHERE id = :id AND version = :version
                        """
                    ),
                    params,
                )
                if result.rowcount == 0:
                    conn.rollback()
                    conflict = True
                else:
                    new_version = conn.execute(
                        text("SELECT version FROM movies WHERE id = :id"),
                        {"id": movie.id},
                    ).scalar_one()
                    conn.commit()
                    conflict = False
        except SQLAlchemyError as e:
            raise self._fault(f"updating movie {movie.id}", e) from e

        if conflict:
            self.logger.warning(
                f"Edit conflict on movie {movie.id} at version {movie.version}"
            )
            raise EditConflict(movie.id, movie.version)
        movie.version = new_version

    def delete(self, movie_id: int) -> None:
        """
        Delete a movie by id.

        Raises:
            RecordNotFound: If id < 1 or no row was deleted.
            StorageFault: On any store failure.
        """
        if movie_id < 1:
            raise RecordNotFound("movie", movie_id)

        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    text("DELETE FROM movies WHERE id = :id"),
                    {"id": movie_id},
                )
                conn.commit()
        except SQLAlchemyError as e:
            raise self._fault(f"deleting movie {movie_id}", e) from e

        if result.rowcount == 0:
            raise RecordNotFound("movie", movie_id)

    def get_all(
        self,
        title: str,
        genres: Sequence[str],
        filters: Filters,
    ) -> Tuple[List[Movie], Metadata]:
        """
        List movies matching title and genres, one page at a time.

        An empty title or genres list disables that filter. The total match
        count comes from the same query as the page, so metadata always
        agrees with the rows returned.
        """
        # Resolve ordering first: an unsafe sort must fail before any SQL runs
        order_sql = f"{filters.sort_column()} {filters.sort_direction()}, id ASC"

        where_clauses = []
        params = {"limit": filters.limit(), "offset": filters.offset()}

        if title:
            terms = title_search_terms(title)
            if terms:
                where_clauses.append("MATCH(title) AGAINST(:title IN BOOLEAN MODE)")
                params["title"] = terms
            else:
                where_clauses.append("1=0")

        if genres:
            where_clauses.append("JSON_CONTAINS(genres, :genres)")
            params["genres"] = json.dumps(list(genres))

        where_sql = " AND ".join(where_clauses) if where_clauses else "1=1"

        query = f"""
            SELECT COUNT(*) OVER() AS total_records, {self.COLUMNS}
            FROM movies
            WHERE {where_sql}
            ORDER BY {order_sql}
            LIMIT :limit OFFSET :offset
        """

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(text(query), params).mappings().fetchall()
        except SQLAlchemyError as e:
            raise self._fault("listing movies", e) from e

        total_records = rows[0]["total_records"] if rows else 0
        movies = [Movie.from_row(row) for row in rows]

        return movies, calculate_metadata(total_records, filters.page, filters.page_size)
