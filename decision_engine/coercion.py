"""Narrowing of loosely typed JSON input values to primitives."""

from __future__ import annotations

import json
import math
import re
from typing import Any

from models.values import CoercedKind, CoercedValue, JsonElement, JsonValueKind


INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

_INTEGER_LITERAL = re.compile(r"-?\d+")


class _NumberLiteral(str):
    """A JSON number kept as the literal text it was written as."""


def classify_value(element: JsonElement) -> CoercedValue:
    """Narrow a JSON element to the primitive kind that fits it best."""
    kind = element.kind

    if kind is JsonValueKind.STRING:
        return CoercedValue(kind=CoercedKind.TEXT, value=element.text)
    if kind is JsonValueKind.NUMBER:
        return _classify_number(element.text)
    if kind is JsonValueKind.TRUE:
        return CoercedValue(kind=CoercedKind.BOOL, value=True)
    if kind is JsonValueKind.FALSE:
        return CoercedValue(kind=CoercedKind.BOOL, value=False)
    if kind is JsonValueKind.NULL:
        return CoercedValue(kind=CoercedKind.NULL, value=None)
    return CoercedValue(kind=CoercedKind.RAW, value=element.text)


def _classify_number(literal: str) -> CoercedValue:
    """
    Narrowest fit first.

    Rules:
    - integer literal within signed 32-bit range: INT32
    - integer literal within signed 64-bit range: INT64
    - integer literal beyond that: RAW literal text
    - fraction or exponent: FLOAT when finite, RAW otherwise
    """
    text = literal.strip()

    if _INTEGER_LITERAL.fullmatch(text):
        number = int(text)
        if INT32_MIN <= number <= INT32_MAX:
            return CoercedValue(kind=CoercedKind.INT32, value=number)
        if INT64_MIN <= number <= INT64_MAX:
            return CoercedValue(kind=CoercedKind.INT64, value=number)
        return CoercedValue(kind=CoercedKind.RAW, value=literal)

    try:
        number_f = float(text)
    except ValueError:
        return CoercedValue(kind=CoercedKind.RAW, value=literal)
    if not math.isfinite(number_f):
        return CoercedValue(kind=CoercedKind.RAW, value=literal)
    return CoercedValue(kind=CoercedKind.FLOAT, value=number_f)


def coerce_value(value: Any) -> Any:
    """
    Return the primitive for an input value.

    JSON elements are narrowed by :func:`classify_value`. Native lists and
    dicts (events already decoded by the Lambda runtime) become their compact
    JSON text like array and object elements do; primitives pass through
    unchanged.
    """
    if isinstance(value, JsonElement):
        return classify_value(value).value
    if isinstance(value, (list, dict)):
        return _render(value)
    return value


# =============================================================================
# Decoding
# =============================================================================


def _render(value: Any) -> str:
    """Compact JSON text for a decoded value, keeping number literals as written."""
    if isinstance(value, _NumberLiteral):
        return str.__str__(value)
    if isinstance(value, dict):
        members = ",".join(f"{json.dumps(k)}:{_render(v)}" for k, v in value.items())
        return "{" + members + "}"
    if isinstance(value, list):
        return "[" + ",".join(_render(v) for v in value) + "]"
    return json.dumps(value)


def to_element(value: Any) -> JsonElement:
    """Wrap a value decoded by :func:`decode_payload` in a JSON element."""
    if isinstance(value, _NumberLiteral):
        return JsonElement(kind=JsonValueKind.NUMBER, text=str.__str__(value))
    if isinstance(value, str):
        return JsonElement(kind=JsonValueKind.STRING, text=value)
    if value is True:
        return JsonElement(kind=JsonValueKind.TRUE, text="true")
    if value is False:
        return JsonElement(kind=JsonValueKind.FALSE, text="false")
    if value is None:
        return JsonElement(kind=JsonValueKind.NULL, text="null")
    if isinstance(value, list):
        return JsonElement(kind=JsonValueKind.ARRAY, text=_render(value))
    if isinstance(value, dict):
        return JsonElement(kind=JsonValueKind.OBJECT, text=_render(value))
    return JsonElement(kind=JsonValueKind.NUMBER, text=json.dumps(value))


def _loads(text: str) -> Any:
    return json.loads(text, parse_int=_NumberLiteral, parse_float=_NumberLiteral)


def decode_payload(text: str) -> Any:
    """
    Decode a JSON request body.

    Each value of ``inputs`` is wrapped in a :class:`JsonElement` so it can be
    narrowed later; the other fields are returned as plain Python values.

    Raises:
        json.JSONDecodeError: if the body is not valid JSON
    """
    payload = _loads(text)
    if not isinstance(payload, dict):
        return payload

    decoded: dict[str, Any] = {}
    for key, value in payload.items():
        if key in ("inputs", "Inputs") and isinstance(value, dict):
            decoded[key] = {name: to_element(v) for name, v in value.items()}
        elif isinstance(value, _NumberLiteral):
            decoded[key] = coerce_value(to_element(value))
        else:
            decoded[key] = value
    return decoded


def decode_inputs(text: str) -> dict[str, JsonElement]:
    """
    Decode a JSON object of input values, wrapping each value.

    Raises:
        ValueError: if the text is not valid JSON or not an object
    """
    inputs = _loads(text)
    if not isinstance(inputs, dict):
        raise ValueError("inputs must be a JSON object")
    return {name: to_element(value) for name, value in inputs.items()}


def decode_value(text: str) -> JsonElement:
    """Wrap a single value given on the command line; text that is not JSON stays a string."""
    try:
        return to_element(_loads(text))
    except json.JSONDecodeError:
        return JsonElement(kind=JsonValueKind.STRING, text=text)
