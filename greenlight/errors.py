"""
Error taxonomy for the Greenlight core.

Recoverable failures share the GreenlightError base and carry an ErrorKind
plus structured context, so callers branch on ``exc.kind`` instead of on
exception identity. ContractViolation sits outside that hierarchy: it
signals a skipped upstream invariant and no error handler may catch it.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of recoverable error kinds."""

    validation_failed = "validation_failed"
    record_not_found = "record_not_found"
    edit_conflict = "edit_conflict"
    invalid_runtime_format = "invalid_runtime_format"
    malformed_input = "malformed_input"
    storage_fault = "storage_fault"


class GreenlightError(Exception):
    """Base class for recoverable core errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailed(GreenlightError):
    """One or more fields failed validation."""

    kind = ErrorKind.validation_failed

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("validation failed")


class RecordNotFound(GreenlightError):
    """No record exists for the requested identifier."""

    kind = ErrorKind.record_not_found

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with ID {identifier} not found")


class EditConflict(GreenlightError):
    """The row changed since it was read; the caller should re-fetch."""

    kind = ErrorKind.edit_conflict

    def __init__(self, movie_id: int, version: Optional[int]):
        self.movie_id = movie_id
        self.version = version
        super().__init__(
            f"edit conflict on movie {movie_id} (expected version {version})"
        )


class InvalidRuntimeFormat(GreenlightError):
    """A runtime value was not of the form "<N> mins"."""

    kind = ErrorKind.invalid_runtime_format

    def __init__(self):
        super().__init__("invalid runtime format")


class MalformedInput(GreenlightError):
    """A request body could not be decoded; message is client-presentable."""

    kind = ErrorKind.malformed_input


class StorageFault(GreenlightError):
    """The store failed or timed out. Detail is logged, never surfaced."""

    kind = ErrorKind.storage_fault

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"storage fault while {operation}")


class ContractViolation(RuntimeError):
    """A programming-contract violation. Fatal; not a GreenlightError."""
