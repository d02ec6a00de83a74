"""
FastAPI application for the Greenlight movie API.

JSON API for creating, browsing, updating and deleting movies.
Schema administration is handled via the greenlight CLI.
"""

import os
import time
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.exceptions import (
    APIError,
    api_error_handler,
    greenlight_error_handler,
    http_exception_handler,
)
from api.logging_config import (
    logger,
    generate_request_id,
    set_request_id,
)
from api.routers import healthcheck, movies
from greenlight import __version__
from greenlight.errors import GreenlightError

# Create FastAPI app
app = FastAPI(
    title="Greenlight API",
    description="JSON API for managing a movie catalogue",
    version=__version__,
    docs_url="/v1/docs",
    redoc_url="/v1/redoc",
    openapi_url="/v1/openapi.json",
)

# Register exception handlers
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(GreenlightError, greenlight_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


def parse_allowed_origins(raw: str) -> List[str]:
    """Split a comma-separated ALLOWED_ORIGINS value; empty means any origin."""
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


# In production, configure ALLOWED_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=parse_allowed_origins(os.getenv("ALLOWED_ORIGINS", "")),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    request_id = generate_request_id()
    set_request_id(request_id)

    # Skip logging for health checks and docs
    skip_paths = {"/v1/healthcheck", "/v1/docs", "/v1/redoc", "/v1/openapi.json"}
    if request.url.path in skip_paths:
        return await call_next(request)

    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"

    logger.info(
        f"Request started: {request.method} {request.url.path} "
        f"from {client_ip}"
    )

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Request failed: {request.method} {request.url.path} "
            f"duration={duration_ms:.2f}ms error={e!r}"
        )
        raise

    duration_ms = (time.time() - start_time) * 1000
    log_msg = (
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration_ms:.2f}ms"
    )

    if response.status_code >= 500:
        logger.error(log_msg)
    elif response.status_code >= 400:
        logger.warning(log_msg)
    else:
        logger.info(log_msg)

    # Add request ID to response headers for debugging
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(healthcheck.router, prefix="/v1", tags=["Health"])
app.include_router(movies.router, prefix="/v1", tags=["Movies"])
