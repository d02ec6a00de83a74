"""
Dependency injection and request helpers for the API.

Provides dependencies for database access and configuration, plus helpers
that read typed values out of the path, query string and body.
"""

from functools import lru_cache
from typing import List, Mapping

from fastapi import Request

from api.exceptions import NotFoundError
from greenlight.config import Config
from greenlight.database import DatabaseManager
from greenlight.errors import MalformedInput
from greenlight.validator import Validator


@lru_cache()
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()


@lru_cache()
def get_db() -> DatabaseManager:
    """Get cached DatabaseManager instance."""
    config = get_config()
    return DatabaseManager(config)


def read_id_param(raw_id: str) -> int:
    """
    Parse a movie id from the URL path.

    Raises:
        NotFoundError: If the id is not a positive integer.
    """
    try:
        movie_id = int(raw_id)
    except ValueError:
        raise NotFoundError() from None
    if movie_id < 1:
        raise NotFoundError()
    return movie_id


def read_string(query: Mapping[str, str], key: str, default: str) -> str:
    """Return the query value for key, or default when absent or empty."""
    return query.get(key) or default


def read_csv(query: Mapping[str, str], key: str, default: List[str]) -> List[str]:
    """Split a comma-separated query value, or return default when absent."""
    csv = query.get(key)
    if not csv:
        return default
    return csv.split(",")


def read_int(query: Mapping[str, str], key: str, default: int, v: Validator) -> int:
    """
    Read an integer query value.

    A value that is not an integer records "must be an integer value" under
    key in the validator and yields the default.
    """
    value = query.get(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        v.add_error(key, "must be an integer value")
        return default


async def read_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the request body, refusing to buffer more than max_bytes + 1 bytes.

    Raises:
        MalformedInput: If the body exceeds max_bytes.
    """
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise MalformedInput(f"body must not be larger than {max_bytes} bytes")
    return bytes(body)
