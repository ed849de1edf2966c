"""Contract for the external decision engine and its error type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from models.schemas import DecisionResult


class EnginePhase(str, Enum):
    """Step of an evaluation at which the engine failed."""

    CREATE = "create"
    PARSE = "parse"
    COMPILE = "compile"
    CONTEXT = "context"
    BIND = "bind"
    EXECUTE = "execute"


class EngineError(Exception):
    """Base exception for decision engine errors."""

    def __init__(
        self,
        message: str,
        phase: EnginePhase,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.phase = phase
        self.cause = cause


class ExecutionContext(ABC):
    """Input bindings for one evaluation of a compiled definition."""

    @abstractmethod
    def bind_input(self, name: str, value: Any) -> None:
        """Bind an input parameter; binding the same name again replaces it."""
        ...

    @abstractmethod
    def execute_decision(self, decision_name: str) -> DecisionResult:
        """Execute the named decision against the bound inputs."""
        ...


class BaseEngine(ABC):
    """Abstract base class for decision engine backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name for logging and identification."""
        ...

    @abstractmethod
    def parse(self, document: str) -> Any:
        """Parse DMN XML text into a model."""
        ...

    @abstractmethod
    def compile_definition(self, model: Any) -> Any:
        """Compile a parsed model into an executable definition."""
        ...

    @abstractmethod
    def create_execution_context(self, definition: Any) -> ExecutionContext:
        """Create a fresh execution context for a definition."""
        ...
