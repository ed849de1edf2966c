"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("DMN_ENGINE", "pydmnrules")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from config.settings import Settings  # noqa: E402
from engines.base import BaseEngine, EngineError, EnginePhase, ExecutionContext  # noqa: E402
from models.schemas import DecisionResult, OutputVariable  # noqa: E402
from models.values import JsonElement, JsonValueKind  # noqa: E402


MINIMAL_DMN_XML = """<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="https://www.omg.org/spec/DMN/20191111/MODEL/"
             id="eligibility" name="Eligibility" namespace="http://example.com/dmn/eligibility">
  <decision id="decide" name="Decide">
    <decisionTable id="decide_table" label="Eligibility Table" hitPolicy="UNIQUE">
      <input id="age_input" label="age">
        <inputExpression id="age_expr" typeRef="number">
          <text>age</text>
        </inputExpression>
      </input>
      <output id="eligible_output" name="eligible" typeRef="boolean"/>
      <rule id="adult">
        <inputEntry id="adult_age"><text>&gt;= 18</text></inputEntry>
        <outputEntry id="adult_eligible"><text>true</text></outputEntry>
      </rule>
      <rule id="minor">
        <inputEntry id="minor_age"><text>&lt; 18</text></inputEntry>
        <outputEntry id="minor_eligible"><text>false</text></outputEntry>
      </rule>
    </decisionTable>
  </decision>
  <decision id="summary" name="Summary"/>
</definitions>
"""

ADULTS_ONLY_DMN_XML = MINIMAL_DMN_XML.replace(
    """      <rule id="minor">
        <inputEntry id="minor_age"><text>&lt; 18</text></inputEntry>
        <outputEntry id="minor_eligible"><text>false</text></outputEntry>
      </rule>
""",
    "",
)


def make_result(decision_name: str, *result_sets: dict[str, Any]) -> DecisionResult:
    """Factory for creating DecisionResult test fixtures."""
    return DecisionResult(
        decision_name=decision_name,
        result_sets=[
            [OutputVariable(name=name, value=value) for name, value in result_set.items()]
            for result_set in result_sets
        ],
    )


def make_element(kind: JsonValueKind, text: str) -> JsonElement:
    """Factory for creating JsonElement test fixtures."""
    return JsonElement(kind=kind, text=text)


class FakeContext(ExecutionContext):
    """Execution context recording bindings for a FakeEngine."""

    def __init__(self, engine: FakeEngine) -> None:
        self.engine = engine
        self.inputs: dict[str, Any] = {}

    def bind_input(self, name: str, value: Any) -> None:
        self.engine.calls.append(("bind", name))
        self.inputs[name] = value

    def execute_decision(self, decision_name: str) -> DecisionResult:
        self.engine.calls.append(("execute", decision_name))
        self.engine.executed_inputs = dict(self.inputs)
        if self.engine.fail_on == "execute":
            raise self.engine.error
        if decision_name not in self.engine.results:
            raise EngineError(f"Decision '{decision_name}' not found.", EnginePhase.EXECUTE)
        return self.engine.results[decision_name]


class FakeEngine(BaseEngine):
    """In-memory engine that records every call made by the request handler."""

    def __init__(
        self,
        results: dict[str, DecisionResult] | None = None,
        fail_on: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.results = results or {}
        self.fail_on = fail_on
        self.error = error or RuntimeError("engine failure")
        self.calls: list[tuple[str, Any]] = []
        self.executed_inputs: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return "fake"

    def parse(self, document: str) -> str:
        self.calls.append(("parse", len(document)))
        if self.fail_on == "parse":
            raise self.error
        return document

    def compile_definition(self, model: str) -> str:
        self.calls.append(("compile", None))
        if self.fail_on == "compile":
            raise self.error
        return model

    def create_execution_context(self, definition: str) -> FakeContext:
        self.calls.append(("context", None))
        if self.fail_on == "context":
            raise self.error
        return FakeContext(self)


@pytest.fixture
def settings() -> Settings:
    """Settings with stack trace logging enabled."""
    return Settings(dmn_engine="pydmnrules", log_level="WARNING", log_stack_traces=True)


@pytest.fixture
def eligibility_engine() -> FakeEngine:
    """Engine answering the 'Decide' decision with eligible=true."""
    return FakeEngine(results={"Decide": make_result("Decide", {"eligible": True})})


@pytest.fixture
def dmn_xml() -> str:
    """Minimal DMN document with a 'Decide' decision table."""
    return MINIMAL_DMN_XML
