"""
Shared fixtures for Greenlight tests.

Provides an in-memory movie repository, a mocked SQLAlchemy engine,
sample data and a FastAPI test client.
"""

import pytest
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from greenlight.config import Config
from greenlight.errors import EditConflict, RecordNotFound
from greenlight.filters import Filters, Metadata, calculate_metadata
from greenlight.models import Movie
from greenlight.runtime import Runtime


# =============================================================================
# SAMPLE DATA
# =============================================================================

def create_sample_movie(
    movie_id: int,
    title: str,
    year: int = 2010,
    runtime: int = 120,
    genres: Optional[List[str]] = None,
    version: int = 1,
) -> Movie:
    """Create a sample Movie for testing."""
    return Movie(
        id=movie_id,
        created_at=datetime(2024, 1, 1, 12, 0, 0),
        title=title,
        year=year,
        runtime=Runtime(runtime),
        genres=genres or ["drama"],
        version=version,
    )


SAMPLE_MOVIES = [
    create_sample_movie(1, "Moana", 2016, 107, ["animation", "adventure"]),
    create_sample_movie(2, "Black Panther", 2018, 134, ["action", "adventure"]),
    create_sample_movie(3, "Deadpool", 2016, 108, ["action", "comedy"]),
    create_sample_movie(4, "The Breakfast Club", 1985, 96, ["drama"]),
    create_sample_movie(5, "Casablanca", 1942, 102, ["drama", "romance"]),
]


# =============================================================================
# MOCK DATABASE
# =============================================================================

class MockMovieRepository:
    """In-memory stand-in for MovieRepository with the same contract."""

    def __init__(self):
        self.movies: Dict[int, Movie] = {}
        self.next_id = 1

    def reset(self):
        """Reset all data."""
        self.movies.clear()
        self.next_id = 1

    def _copy(self, movie: Movie) -> Movie:
        return Movie(
            id=movie.id,
            created_at=movie.created_at,
            title=movie.title,
            year=movie.year,
            runtime=movie.runtime,
            genres=list(movie.genres or []),
            version=movie.version,
        )

    def add(self, movie: Movie) -> None:
        self.movies[movie.id] = self._copy(movie)
        self.next_id = max(self.next_id, movie.id + 1)

    def get(self, movie_id: int) -> Movie:
        if movie_id < 1 or movie_id not in self.movies:
            raise RecordNotFound("movie", movie_id)
        return self._copy(self.movies[movie_id])

    def insert(self, movie: Movie) -> None:
        movie.id = self.next_id
        movie.created_at = datetime(2024, 1, 1, 12, 0, 0)
        movie.version = 1
        self.next_id += 1
        self.movies[movie.id] = self._copy(movie)

    def update(self, movie: Movie) -> None:
        stored = self.movies.get(movie.id)
        if stored is None or stored.version != movie.version:
            raise EditConflict(movie.id, movie.version)
        movie.version += 1
        self.movies[movie.id] = self._copy(movie)

    def delete(self, movie_id: int) -> None:
        if movie_id < 1 or movie_id not in self.movies:
            raise RecordNotFound("movie", movie_id)
        del self.movies[movie_id]

    def get_all(
        self,
        title: str,
        genres: Sequence[str],
        filters: Filters,
    ) -> Tuple[List[Movie], Metadata]:
        column = filters.sort_column()
        movies = list(self.movies.values())
        if title:
            words = title.lower().split()
            movies = [m for m in movies if all(w in m.title.lower().split() for w in words)]
        if genres:
            movies = [m for m in movies if set(genres) <= set(m.genres)]

        movies.sort(key=lambda m: m.id)
        movies.sort(
            key=lambda m: getattr(m, column),
            reverse=filters.sort_direction() == "DESC",
        )
        total = len(movies)
        page = movies[filters.offset():filters.offset() + filters.limit()]
        if not page:
            total = 0
        return [self._copy(m) for m in page], calculate_metadata(total, filters.page, filters.page_size)


class MockDatabaseManager:
    """Mock DatabaseManager exposing an in-memory movies repository."""

    def __init__(self):
        self.movies = MockMovieRepository()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def mock_db():
    """Provide a fresh mock database for each test."""
    return MockDatabaseManager()


@pytest.fixture
def mock_db_with_data(mock_db):
    """Mock database pre-populated with sample movies."""
    for movie in SAMPLE_MOVIES:
        mock_db.movies.add(movie)
    return mock_db


@pytest.fixture
def test_config():
    """Configuration that never touches a real database."""
    return Config(db_user="test", db_name="greenlight_test", env="development", max_body_bytes=4096)


@pytest.fixture
def mock_engine():
    """Create a mock SQLAlchemy engine with connection context."""
    mock_conn = MagicMock()
    mock_result = MagicMock()
    mock_conn.execute.return_value = mock_result
    mock_conn.__enter__ = MagicMock(return_value=mock_conn)
    mock_conn.__exit__ = MagicMock(return_value=False)

    mock_engine = MagicMock()
    mock_engine.connect.return_value = mock_conn

    return mock_engine, mock_conn, mock_result


@pytest.fixture
def api_client(mock_db_with_data, test_config):
    """Provide FastAPI test client with mocked dependencies."""
    from api.main import app
    from api import dependencies

    # Clear any cached config/db from previous runs
    dependencies.get_config.cache_clear()
    dependencies.get_db.cache_clear()

    app.dependency_overrides[dependencies.get_db] = lambda: mock_db_with_data
    app.dependency_overrides[dependencies.get_config] = lambda: test_config

    with TestClient(app) as client:
        yield client

    # Clean up overrides
    app.dependency_overrides.clear()
