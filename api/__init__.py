"""
Greenlight REST API.

This module provides the FastAPI application exposing the movie resource
over JSON: listing with search, filters and pagination, plus create, read,
update and delete of single movies.
"""

from api.main import app

__all__ = ["app"]
