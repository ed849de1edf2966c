"""Decision engine backed by the pyDMNrules library."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

import pyDMNrules
from pydantic import BaseModel, ConfigDict, Field

from engines.base import BaseEngine, EngineError, EnginePhase, ExecutionContext
from models.schemas import DecisionResult, OutputVariable


class DecisionInfo(BaseModel):
    """A decision declared in a DMN document."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Decision element id")
    name: str = Field(description="Decision name (falls back to the id)")
    table_id: str | None = Field(default=None, description="Decision table id")
    table_label: str | None = Field(default=None, description="Decision table label")
    outputs: list[str] = Field(
        default_factory=list, description="Declared output names of the decision table, in order"
    )

    @property
    def has_table(self) -> bool:
        return self.table_id is not None or self.table_label is not None

    @property
    def aliases(self) -> set[str]:
        """Every identifier the engine may use to report this decision."""
        names = {self.id, self.name, self.table_id, self.table_label}
        return {n for n in names if n}


class DmnModel(BaseModel):
    """Parsed DMN document: the source text plus its decision catalog."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="DMN XML text")
    namespace: str | None = Field(default=None, description="DMN model namespace")
    decisions: list[DecisionInfo] = Field(default_factory=list, description="Declared decisions")

    def find_decision(self, name: str) -> DecisionInfo | None:
        """Look a decision up by name, then by id."""
        for decision in self.decisions:
            if decision.name == name:
                return decision
        for decision in self.decisions:
            if decision.id == name:
                return decision
        return None


class DmnDefinition(BaseModel):
    """A DMN model loaded into a pyDMNrules rule set."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    model: DmnModel
    rules: Any = Field(description="Loaded pyDMNrules.DMN instance")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _namespace(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _output_names(table: ET.Element) -> list[str]:
    names = []
    for child in table:
        if _local_name(child.tag) == "output":
            name = child.get("name") or child.get("label")
            if name:
                names.append(name)
    return names


def read_decision_catalog(document: str) -> DmnModel:
    """
    Read the decisions declared in a DMN document.

    Raises:
        EngineError: if the text is not XML or has no DMN definitions root
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise EngineError(f"Invalid DMN XML: {e}", EnginePhase.PARSE, cause=e) from e

    if _local_name(root.tag) != "definitions":
        raise EngineError(
            f"Invalid DMN XML: expected a 'definitions' root element, found '{_local_name(root.tag)}'",
            EnginePhase.PARSE,
        )

    decisions: list[DecisionInfo] = []
    for element in root.iter():
        if _local_name(element.tag) != "decision":
            continue
        decision_id = element.get("id", "")
        table = next(
            (child for child in element if _local_name(child.tag) == "decisionTable"),
            None,
        )
        decisions.append(
            DecisionInfo(
                id=decision_id,
                name=element.get("name") or decision_id,
                table_id=table.get("id") if table is not None else None,
                table_label=table.get("label") if table is not None else None,
                outputs=_output_names(table) if table is not None else [],
            )
        )

    return DmnModel(
        source=document,
        namespace=root.get("namespace") or _namespace(root.tag),
        decisions=decisions,
    )


def _status_errors(status: Any) -> list[str]:
    """Collect error messages from a pyDMNrules status (dict or list of dicts)."""
    statuses = status if isinstance(status, list) else [status]
    errors: list[str] = []
    for entry in statuses:
        if isinstance(entry, dict) and entry.get("errors"):
            errors.extend(str(e) for e in entry["errors"])
    return errors


def _refers_to(executed_rule: Any, aliases: set[str]) -> bool:
    """Check if an 'Executed Rule' entry names one of the aliases."""
    if not isinstance(executed_rule, (tuple, list)) or not executed_rule:
        return False
    if all(isinstance(part, (tuple, list)) for part in executed_rule):
        return any(_refers_to(part, aliases) for part in executed_rule)
    return any(str(part) in aliases for part in executed_rule[:2])


def _is_no_match(error: str, aliases: set[str]) -> bool:
    """Check if a status error reports that no rule of one of the aliased tables matched."""
    return error.startswith("No rules matched") and any(f"'{alias}'" in error for alias in aliases)


def _output_variables(result: dict[str, Any], outputs: list[str]) -> list[OutputVariable]:
    """
    Project a pyDMNrules result onto the declared outputs.

    The result holds every variable of the rule set, inputs included; only the
    declared outputs are kept, in declaration order.
    """
    if not outputs:
        return [OutputVariable(name=str(name), value=value) for name, value in result.items()]
    return [OutputVariable(name=name, value=result[name]) for name in outputs if name in result]


class PyDMNRulesContext(ExecutionContext):
    """Execution context collecting inputs for pyDMNrules ``decide``."""

    def __init__(self, definition: DmnDefinition) -> None:
        self.definition = definition
        self.inputs: dict[str, Any] = {}

    def bind_input(self, name: str, value: Any) -> None:
        self.inputs[name] = value

    def execute_decision(self, decision_name: str) -> DecisionResult:
        decision = self.definition.model.find_decision(decision_name)
        if decision is None:
            raise EngineError(f"Decision '{decision_name}' not found.", EnginePhase.EXECUTE)

        status, new_data = self.definition.rules.decide(dict(self.inputs))

        items = new_data if isinstance(new_data, list) else [new_data]
        result_sets: list[list[OutputVariable]] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            if not _refers_to(item.get("Executed Rule"), decision.aliases):
                continue
            result_sets.append(_output_variables(item.get("Result") or {}, decision.outputs))

        errors = _status_errors(status)
        no_match = any(_is_no_match(error, decision.aliases) for error in errors)
        if errors and not result_sets and not no_match:
            raise EngineError(
                f"Decision '{decision_name}' failed: {'; '.join(errors)}",
                EnginePhase.EXECUTE,
            )

        return DecisionResult(decision_name=decision_name, result_sets=result_sets)


class PyDMNRulesEngine(BaseEngine):
    """Engine wrapper around ``pyDMNrules.DMN``."""

    @property
    def name(self) -> str:
        return "pydmnrules"

    def parse(self, document: str) -> DmnModel:
        model = read_decision_catalog(document)
        if not model.decisions:
            raise EngineError("Invalid DMN XML: no decisions defined", EnginePhase.PARSE)
        return model

    def compile_definition(self, model: DmnModel) -> DmnDefinition:
        rules = pyDMNrules.DMN()
        status = rules.useXML(model.source)
        errors = _status_errors(status)
        if errors:
            raise EngineError(
                f"Failed to load DMN definition: {'; '.join(errors)}",
                EnginePhase.COMPILE,
            )
        return DmnDefinition(model=model, rules=rules)

    def create_execution_context(self, definition: DmnDefinition) -> PyDMNRulesContext:
        return PyDMNRulesContext(definition)
