"""
Greenlight - data access and validation core for the movie API.

This package provides:
- The Movie entity and its validation rules
- A MySQL-backed repository with optimistic-concurrency updates
- Safelisted sorting, filtering and pagination metadata
- Request body decoding with client-presentable error triage
"""

from .config import Config
from .database import DatabaseManager
from .decoder import decode_json
from .errors import (
    ContractViolation,
    EditConflict,
    ErrorKind,
    GreenlightError,
    InvalidRuntimeFormat,
    MalformedInput,
    RecordNotFound,
    StorageFault,
    ValidationFailed,
)
from .filters import Filters, Metadata, calculate_metadata, validate_filters
from .models import Movie, validate_movie
from .movies import MovieRepository
from .runtime import Runtime
from .validator import Validator

__version__ = "1.0.0"
__all__ = [
    "Config",
    "DatabaseManager",
    "decode_json",
    "ContractViolation",
    "EditConflict",
    "ErrorKind",
    "GreenlightError",
    "InvalidRuntimeFormat",
    "MalformedInput",
    "RecordNotFound",
    "StorageFault",
    "ValidationFailed",
    "Filters",
    "Metadata",
    "calculate_metadata",
    "validate_filters",
    "Movie",
    "validate_movie",
    "MovieRepository",
    "Runtime",
    "Validator",
]
