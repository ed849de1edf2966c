"""Models module containing Pydantic schemas for all data structures."""

from models.schemas import (
    DecisionResult,
    DmnRequest,
    DmnResponse,
    OutputVariable,
)
from models.values import (
    CoercedKind,
    CoercedValue,
    JsonElement,
    JsonValueKind,
)

__all__ = [
    "DecisionResult",
    "DmnRequest",
    "DmnResponse",
    "OutputVariable",
    "CoercedKind",
    "CoercedValue",
    "JsonElement",
    "JsonValueKind",
]
