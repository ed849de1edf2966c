"""Pydantic schemas for DMN execution requests, results and responses."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_core import to_jsonable_python


# =============================================================================
# Request
# =============================================================================


class DmnRequest(BaseModel):
    """Request to execute one decision of a DMN document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    dmn_xml: str | None = Field(
        default=None,
        validation_alias=AliasChoices("dmnXml", "DmnXml", "dmn_xml", "decisionDocument"),
        description="DMN XML document text",
    )
    decision_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("decisionName", "DecisionName", "decision_name"),
        description="Name of the decision to execute",
    )
    inputs: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("inputs", "Inputs"),
        description="Input parameter values keyed by input name",
    )


# =============================================================================
# Engine Results
# =============================================================================


class OutputVariable(BaseModel):
    """A single output variable reported by the decision engine."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Output variable name")
    value: Any = Field(default=None, description="Output value as reported by the engine")


class DecisionResult(BaseModel):
    """Result of executing a decision: zero or more result sets."""

    decision_name: str = Field(description="Decision that was executed")
    result_sets: list[list[OutputVariable]] = Field(
        default_factory=list,
        description="Output variables per satisfied rule, in engine order",
    )

    @property
    def first_result_variables(self) -> list[OutputVariable]:
        """Output variables of the first result set, or an empty list."""
        return self.result_sets[0] if self.result_sets else []


# =============================================================================
# Response
# =============================================================================


class DmnResponse(BaseModel):
    """Binary response envelope: outputs on success, an error message otherwise."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(description="Whether the decision executed")
    outputs: dict[str, Any] | None = Field(default=None, description="Output values by name")
    error: str | None = Field(default=None, description="Error message on failure")

    @model_validator(mode="after")
    def _check_shape(self) -> DmnResponse:
        if self.success and (self.outputs is None or self.error is not None):
            raise ValueError("a successful response carries outputs and no error")
        if not self.success and (self.error is None or self.outputs is not None):
            raise ValueError("a failed response carries an error and no outputs")
        return self

    @classmethod
    def ok(cls, outputs: dict[str, Any]) -> DmnResponse:
        return cls(success=True, outputs=dict(outputs))

    @classmethod
    def failure(cls, message: str) -> DmnResponse:
        return cls(success=False, error=message)

    def to_payload(self) -> dict[str, Any]:
        """
        Wire representation with exactly two keys.

        Output values are rendered JSON-safe: dates, times and durations become
        ISO 8601 strings and other unknown types fall back to ``str()``.
        """
        if self.success:
            return {"success": True, "outputs": to_jsonable_python(dict(self.outputs or {}), fallback=str)}
        return {"success": False, "error": self.error}
