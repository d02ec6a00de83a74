"""
Request body decoding with client-presentable error triage.

decode_json turns a raw body into a pydantic model instance. Every
user-caused failure becomes a MalformedInput whose message tells the client
what to fix.
"""

import json
from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ContractViolation, MalformedInput

MAX_BODY_BYTES = 1_048_576

M = TypeVar("M", bound=BaseModel)

_PARSING_ERRORS = {"int_parsing", "int_from_float", "float_parsing", "bool_parsing"}


def _is_type_error(error_type: str) -> bool:
    return error_type.endswith("_type") or error_type in _PARSING_ERRORS


def decode_json(body: bytes, target: Type[M], max_bytes: int = MAX_BODY_BYTES) -> M:
    """
    Decode a JSON body into an instance of target.

    Args:
        body: Raw request body
        target: Pydantic model class; should forbid extra fields
        max_bytes: Largest accepted body

    Returns:
        Validated model instance

    Raises:
        MalformedInput: The body is empty, too large, not a single JSON
            value, or does not fit the target shape.
        InvalidRuntimeFormat: A runtime field was malformed.
        ContractViolation: target is not a pydantic model class.
    """
    if not (isinstance(target, type) and issubclass(target, BaseModel)):
        raise ContractViolation(f"decode target must be a pydantic model class, got {target!r}")

    if len(body) > max_bytes:
        raise MalformedInput(f"body must not be larger than {max_bytes} bytes")

    try:
        document = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"body contains badly-formed JSON (at character {e.start})") from None

    start = len(document) - len(document.lstrip())
    if start == len(document):
        raise MalformedInput("body must not be empty")

    try:
        data, end = json.JSONDecoder().raw_decode(document, start)
    except json.JSONDecodeError as e:
        # An unterminated string is reported at its opening quote
        if e.msg.startswith("Unterminated string") or e.pos >= len(document.rstrip()):
            raise MalformedInput("body contains badly-formed JSON") from None
        raise MalformedInput(f"body contains badly-formed JSON (at character {e.pos})") from None

    if document[end:].strip():
        raise MalformedInput("body must only contain a single JSON value")

    try:
        return target.model_validate(data)
    except PydanticValidationError as e:
        raise _triage(e, start) from None


def _triage(error: PydanticValidationError, start: int) -> MalformedInput:
    errors = error.errors()

    for detail in errors:
        if detail["type"] == "extra_forbidden":
            return MalformedInput(f'body contains unknown key "{detail["loc"][0]}"')

    first = errors[0]
    if _is_type_error(first["type"]):
        loc = first["loc"]
        if loc and isinstance(loc[0], str):
            return MalformedInput(f'body contains incorrect JSON type for field "{loc[0]}"')
        return MalformedInput(f"body contains incorrect JSON type (at character {start})")

    return MalformedInput(first["msg"])
