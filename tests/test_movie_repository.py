"""
MovieRepository tests.

The repository issues raw SQL, so we mock the database engine and assert on
the statements and parameters it sends.
"""

import pytest
from datetime import datetime
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from conftest import create_sample_movie
from greenlight.errors import ContractViolation, EditConflict, RecordNotFound, StorageFault
from greenlight.filters import Filters
from greenlight.models import Movie
from greenlight.movies import MovieRepository, title_search_terms
from greenlight.runtime import Runtime

SAFELIST = ("id", "title", "year", "runtime", "-id", "-title", "-year", "-runtime")


@pytest.fixture
def repo(mock_engine):
    engine, _, _ = mock_engine
    return MovieRepository(engine, MagicMock())


def sql_of(call) -> str:
    return str(call.args[0])


def row(movie_id=1, title="Moana", genres='["animation"]', version=1, total=None):
    data = {
        "id": movie_id,
        "created_at": datetime(2024, 1, 1),
        "title": title,
        "year": 2016,
        "runtime": 107,
        "genres": genres,
        "version": version,
    }
    if total is not None:
        data["total_records"] = total
    return data


class TestGet:
    def test_non_positive_id_skips_the_store(self, repo, mock_engine):
        engine, _, _ = mock_engine

        with pytest.raises(RecordNotFound):
            repo.get(0)

        engine.connect.assert_not_called()

    def test_returns_movie(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.mappings.return_value.fetchone.return_value = row(movie_id=1)

        movie = repo.get(1)

        assert movie.title == "Moana"
        assert movie.runtime == Runtime(107)
        assert conn.execute.call_args.args[1] == {"id": 1}

    def test_missing_row(self, repo, mock_engine):
        _, _, result = mock_engine
        result.mappings.return_value.fetchone.return_value = None

        with pytest.raises(RecordNotFound):
            repo.get(42)

    def test_store_failure_is_opaque(self, repo, mock_engine):
        _, conn, _ = mock_engine
        conn.execute.side_effect = OperationalError("SELECT", {}, Exception("timeout"))

        with pytest.raises(StorageFault) as excinfo:
            repo.get(1)

        assert "timeout" not in excinfo.value.message
        repo.logger.error.assert_called_once()


class TestInsert:
    def test_writes_generated_fields_back(self, repo, mock_engine):
        _, conn, result = mock_engine
        created = datetime(2024, 5, 1, 9, 30)
        result.lastrowid = 11
        result.fetchone.return_value = (created, 1)
        movie = Movie(title="Moana", year=2016, runtime=Runtime(107), genres=["animation"])

        repo.insert(movie)

        assert movie.id == 11
        assert movie.created_at == created
        assert movie.version == 1
        insert_call = conn.execute.call_args_list[0]
        assert "INSERT INTO movies" in sql_of(insert_call)
        assert insert_call.args[1] == {
            "title": "Moana",
            "year": 2016,
            "runtime": 107,
            "genres": '["animation"]',
        }
        conn.commit.assert_called_once()


class TestUpdate:
    def test_success_bumps_version(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.rowcount = 1
        result.scalar_one.return_value = 4
        movie = create_sample_movie(1, "Moana", version=3)

        repo.update(movie)

        assert movie.version == 4
        update_call = conn.execute.call_args_list[0]
        assert "version = version + 1" in sql_of(update_call)
        assert "WHERE id = :id AND version = :version" in sql_of(update_call)
        assert update_call.args[1]["version"] == 3
        conn.commit.assert_called_once()

    def test_stale_version_is_an_edit_conflict(self, repo, mock_engine):
        """A writer holding version 3 loses after someone else wrote version 4."""
        _, conn, result = mock_engine
        result.rowcount = 0
        movie = create_sample_movie(1, "Moana", version=3)

        with pytest.raises(EditConflict) as excinfo:
            repo.update(movie)

        assert excinfo.value.movie_id == 1
        assert excinfo.value.version == 3
        assert movie.version == 3
        conn.commit.assert_not_called()
        conn.rollback.assert_called_once()

    def test_store_failure_is_not_a_conflict(self, repo, mock_engine):
        _, conn, _ = mock_engine
        conn.execute.side_effect = OperationalError("UPDATE", {}, Exception("lost connection"))

        with pytest.raises(StorageFault):
            repo.update(create_sample_movie(1, "Moana"))


class TestDelete:
    def test_non_positive_id_skips_the_store(self, repo, mock_engine):
        engine, _, _ = mock_engine

        with pytest.raises(RecordNotFound):
            repo.delete(0)

        engine.connect.assert_not_called()

    def test_no_rows_affected(self, repo, mock_engine):
        _, _, result = mock_engine
        result.rowcount = 0

        with pytest.raises(RecordNotFound):
            repo.delete(99)

    def test_deletes(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.rowcount = 1

        repo.delete(5)

        assert conn.execute.call_args.args[1] == {"id": 5}
        conn.commit.assert_called_once()


class TestGetAll:
    def test_no_filters(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.mappings.return_value.fetchall.return_value = [
            row(1, total=2),
            row(2, title="Deadpool", total=2),
        ]
        filters = Filters(page=1, page_size=20, sort="id", sort_safelist=SAFELIST)

        movies, metadata = repo.get_all("", [], filters)

        assert [m.id for m in movies] == [1, 2]
        assert metadata.total_records == 2
        assert metadata.last_page == 1
        sql = sql_of(conn.execute.call_args)
        assert "COUNT(*) OVER()" in sql
        assert "WHERE 1=1" in sql
        assert "MATCH" not in sql
        assert "JSON_CONTAINS" not in sql

    def test_title_and_genre_filters(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.mappings.return_value.fetchall.return_value = []
        filters = Filters(page=2, page_size=5, sort="-year", sort_safelist=SAFELIST)

        repo.get_all("black panther", ["action", "adventure"], filters)

        sql = sql_of(conn.execute.call_args)
        params = conn.execute.call_args.args[1]
        assert "MATCH(title) AGAINST(:title IN BOOLEAN MODE)" in sql
        assert "JSON_CONTAINS(genres, :genres)" in sql
        assert params["title"] == "+black +panther"
        assert params["genres"] == '["action", "adventure"]'
        assert params["limit"] == 5
        assert params["offset"] == 5

    def test_title_without_searchable_words_matches_nothing(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.mappings.return_value.fetchall.return_value = []

        movies, metadata = repo.get_all(' +-"* ', [], Filters(sort_safelist=SAFELIST))

        sql = sql_of(conn.execute.call_args)
        assert "1=0" in sql
        assert "title" not in conn.execute.call_args.args[1]
        assert movies == []
        assert metadata.to_dict() == {}

    def test_order_has_id_tiebreak(self, repo, mock_engine):
        _, conn, result = mock_engine
        result.mappings.return_value.fetchall.return_value = []
        filters = Filters(sort="-runtime", sort_safelist=SAFELIST)

        repo.get_all("", [], filters)

        assert "ORDER BY runtime DESC, id ASC" in sql_of(conn.execute.call_args)

    def test_empty_page_has_empty_metadata(self, repo, mock_engine):
        _, _, result = mock_engine
        result.mappings.return_value.fetchall.return_value = []

        movies, metadata = repo.get_all("", [], Filters(sort="id", sort_safelist=SAFELIST))

        assert movies == []
        assert metadata.to_dict() == {}

    def test_unsafe_sort_fails_before_querying(self, repo, mock_engine):
        engine, _, _ = mock_engine
        filters = Filters(sort="created_at", sort_safelist=SAFELIST)

        with pytest.raises(ContractViolation):
            repo.get_all("", [], filters)

        engine.connect.assert_not_called()


class TestTitleSearchTerms:
    def test_every_word_is_required(self):
        assert title_search_terms("black panther") == "+black +panther"

    def test_short_words_are_kept(self):
        assert title_search_terms("Up") == "+Up"

    def test_operators_become_separators(self):
        assert title_search_terms('-pink "panther*"') == "+pink +panther"
        assert title_search_terms("  ") == ""
