"""Decision engine module: request handling and input value coercion."""

from decision_engine.coercion import (
    classify_value,
    coerce_value,
    decode_inputs,
    decode_payload,
    decode_value,
)
from decision_engine.handler import RequestHandler, RequestValidationError

__all__ = [
    "RequestHandler",
    "RequestValidationError",
    "classify_value",
    "coerce_value",
    "decode_inputs",
    "decode_payload",
    "decode_value",
]
