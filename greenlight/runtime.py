"""
Movie runtime value type.

A Runtime is a number of minutes that travels over JSON as "<N> mins".
"""

import json
import re
from typing import Any, Union

from pydantic_core import core_schema

from .errors import InvalidRuntimeFormat

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER_RX = re.compile(r"[+-]?[0-9]+")


class Runtime(int):
    """Runtime in minutes, held as a signed 32-bit integer."""

    UNIT = "mins"

    def __repr__(self) -> str:
        return f"Runtime({int(self)})"

    def __str__(self) -> str:
        return f"{int(self)} {self.UNIT}"

    def marshal_json(self) -> str:
        """Encode as a quoted JSON string, e.g. '"102 mins"'."""
        return json.dumps(str(self))

    @classmethod
    def unmarshal_json(cls, raw: Union[str, bytes]) -> "Runtime":
        """
        Decode a raw JSON value of the form '"<N> mins"'.

        Raises:
            InvalidRuntimeFormat: For anything other than a quoted
                "<integer> mins" string.
        """
        try:
            value = json.loads(raw)
        except (ValueError, TypeError):
            raise InvalidRuntimeFormat() from None
        if not isinstance(value, str):
            raise InvalidRuntimeFormat()
        return cls.parse(value)

    @classmethod
    def parse(cls, text: str) -> "Runtime":
        """Parse the unquoted form "<N> mins"."""
        parts = text.split(" ")
        if len(parts) != 2 or parts[1] != cls.UNIT:
            raise InvalidRuntimeFormat()

        number = parts[0]
        if not _INTEGER_RX.fullmatch(number):
            raise InvalidRuntimeFormat()
        minutes = int(number)
        if minutes < INT32_MIN or minutes > INT32_MAX:
            raise InvalidRuntimeFormat()

        return cls(minutes)

    @classmethod
    def _validate(cls, value: Any) -> "Runtime":
        if isinstance(value, Runtime):
            return value
        if not isinstance(value, str):
            raise InvalidRuntimeFormat()
        return cls.parse(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any):
        # InvalidRuntimeFormat is not a ValueError, so pydantic lets it escape
        # validation unchanged.
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, schema: Any, handler: Any) -> dict:
        return {"type": "string", "pattern": r"^[+-]?[0-9]+ mins$", "examples": ["102 mins"]}
