"""Typed wrappers for loosely typed JSON input values."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JsonValueKind(str, Enum):
    """Kind of a JSON value as it arrived on the wire."""

    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"


class JsonElement(BaseModel):
    """
    A JSON value that has not been narrowed to a Python primitive yet.

    ``text`` holds the decoded string for string values, the literal as written
    for numbers, and the compact JSON rendering for everything else.
    """

    model_config = ConfigDict(frozen=True)

    kind: JsonValueKind = Field(description="JSON value kind")
    text: str = Field(description="Textual form of the value")

    def __str__(self) -> str:
        return self.text


class CoercedKind(str, Enum):
    """Primitive type an input value was narrowed to."""

    TEXT = "text"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    BOOL = "bool"
    NULL = "null"
    RAW = "raw"


class CoercedValue(BaseModel):
    """An input value narrowed to a primitive, tagged with its kind."""

    model_config = ConfigDict(frozen=True)

    kind: CoercedKind = Field(description="Primitive kind")
    value: Any = Field(default=None, description="Primitive value handed to the engine")
