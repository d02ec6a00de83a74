"""
Movie endpoints.
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response, status
from starlette.concurrency import run_in_threadpool

from api.dependencies import get_config, get_db, read_body, read_csv, read_id_param, read_int, read_string
from api.exceptions import EditConflictError
from api.schemas.common import MOVIE_SORT_SAFELIST, MessageResponse
from api.schemas.movie import MovieCreate, MovieEnvelope, MovieListResponse, MovieUpdate
from greenlight.config import Config
from greenlight.database import DatabaseManager
from greenlight.decoder import decode_json
from greenlight.errors import ValidationFailed
from greenlight.filters import Filters, validate_filters
from greenlight.models import validate_movie
from greenlight.validator import Validator

router = APIRouter()
logger = logging.getLogger("api.movies")

_DECIMAL_RX = re.compile(r"[0-9]+")


def _version_matches(expected: str, version: int) -> bool:
    """Compare an X-Expected-Version value with the stored version as decimals."""
    expected = expected.strip()
    if not _DECIMAL_RX.fullmatch(expected):
        return False
    return int(expected) == version


@router.get("/movies", response_model=MovieListResponse, response_model_exclude_none=True)
def list_movies(
    request: Request,
    db: DatabaseManager = Depends(get_db),
):
    """
    Browse movies with title search, genre filtering, sorting and pagination.
    """
    query = request.query_params
    v = Validator()

    title = read_string(query, "title", "")
    genres = read_csv(query, "genres", [])
    filters = Filters(
        page=read_int(query, "page", 1, v),
        page_size=read_int(query, "page_size", 20, v),
        sort=read_string(query, "sort", "id"),
        sort_safelist=MOVIE_SORT_SAFELIST,
    )

    validate_filters(v, filters)
    if not v.valid():
        raise ValidationFailed(v.errors)

    movies, metadata = db.movies.get_all(title, genres, filters)
    return {
        "movies": [movie.to_dict() for movie in movies],
        "metadata": metadata.to_dict(),
    }


@router.post("/movies", response_model=MovieEnvelope, status_code=status.HTTP_201_CREATED)
async def create_movie(
    request: Request,
    response: Response,
    db: DatabaseManager = Depends(get_db),
    config: Config = Depends(get_config),
):
    """
    Create a movie from the request body.
    """
    body = await read_body(request, config.max_body_bytes)
    movie = decode_json(body, MovieCreate, config.max_body_bytes).to_movie()

    v = Validator()
    validate_movie(v, movie)
    if not v.valid():
        raise ValidationFailed(v.errors)

    await run_in_threadpool(db.movies.insert, movie)
    logger.info(f"Movie created: id={movie.id}")

    response.headers["Location"] = f"/v1/movies/{movie.id}"
    return {"movie": movie.to_dict()}


@router.get("/movies/{movie_id}", response_model=MovieEnvelope)
def show_movie(
    movie_id: str,
    db: DatabaseManager = Depends(get_db),
):
    """
    Get a single movie.
    """
    movie = db.movies.get(read_id_param(movie_id))
    return {"movie": movie.to_dict()}


@router.patch("/movies/{movie_id}", response_model=MovieEnvelope)
async def update_movie(
    movie_id: str,
    request: Request,
    x_expected_version: Optional[str] = Header(None),
    db: DatabaseManager = Depends(get_db),
    config: Config = Depends(get_config),
):
    """
    Partially update a movie.

    Fields present in the body overwrite the stored values. When the
    X-Expected-Version header is sent it must equal the stored version;
    a value that is not an integer never does.
    """
    movie = await run_in_threadpool(db.movies.get, read_id_param(movie_id))

    if x_expected_version and not _version_matches(x_expected_version, movie.version):
        logger.warning(
            f"Expected version {x_expected_version} for movie {movie.id}, "
            f"found {movie.version}"
        )
        raise EditConflictError()

    body = await read_body(request, config.max_body_bytes)
    decode_json(body, MovieUpdate, config.max_body_bytes).apply(movie)

    v = Validator()
    validate_movie(v, movie)
    if not v.valid():
        raise ValidationFailed(v.errors)

    await run_in_threadpool(db.movies.update, movie)
    logger.info(f"Movie updated: id={movie.id} version={movie.version}")

    return {"movie": movie.to_dict()}


@router.delete("/movies/{movie_id}", response_model=MessageResponse)
def delete_movie(
    movie_id: str,
    db: DatabaseManager = Depends(get_db),
):
    """
    Delete a movie.
    """
    db.movies.delete(read_id_param(movie_id))
    return {"message": "movie successfully deleted"}
