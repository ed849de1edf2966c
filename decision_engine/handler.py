"""Request handler: validate, coerce inputs, delegate to the engine, shape the response."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from config.settings import Settings, get_settings
from decision_engine.coercion import coerce_value
from engines import BaseEngine, EngineError, EnginePhase, create_engine
from models.schemas import DmnRequest, DmnResponse


logger = logging.getLogger(__name__)

DMN_XML_REQUIRED = "DMN XML is required."
DECISION_NAME_REQUIRED = "Decision Name is required."


class RequestValidationError(ValueError):
    """A required request field is missing or blank."""


@contextmanager
def _phase(phase: EnginePhase) -> Iterator[None]:
    """Tag any exception escaping the block with the engine phase it came from."""
    try:
        yield
    except EngineError:
        raise
    except Exception as e:
        raise EngineError(str(e), phase, cause=e) from e


def _describe_validation_error(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "request"
        details.append(f"{location}: {item['msg']}")
    return "Invalid request payload: " + "; ".join(details)


class RequestHandler:
    """Executes one DMN decision per request and never raises."""

    def __init__(
        self,
        engine: BaseEngine | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._engine = engine

    @property
    def engine(self) -> BaseEngine:
        """Lazy initialization of the configured decision engine."""
        if self._engine is None:
            self._engine = create_engine(self.settings.dmn_engine)
        return self._engine

    def handle(self, request: DmnRequest | Mapping[str, Any]) -> DmnResponse:
        """
        Execute the requested decision.

        Args:
            request: a DmnRequest, or a mapping using the request's wire names

        Returns:
            DmnResponse with the first result set's outputs, or an error message
        """
        logger.info("Received DMN execution request.")

        try:
            req = request if isinstance(request, DmnRequest) else DmnRequest.model_validate(request)
        except ValidationError as e:
            message = _describe_validation_error(e)
            logger.error(message)
            return DmnResponse.failure(message)

        try:
            self.validate(req)
        except RequestValidationError as e:
            logger.error("Request rejected: %s", e)
            return DmnResponse.failure(str(e))

        try:
            outputs = self._execute(req)
        except Exception as e:
            phase = e.phase.value if isinstance(e, EngineError) else "unknown"
            logger.error("Error executing DMN (phase: %s): %s", phase, e)
            if self.settings.log_stack_traces:
                logger.error("Stack trace:", exc_info=e)
            return DmnResponse.failure(str(e))

        logger.info("Execution successful.")
        return DmnResponse.ok(outputs)

    @staticmethod
    def validate(request: DmnRequest) -> None:
        """
        Check the required fields before any engine call.

        Raises:
            RequestValidationError: on a missing or blank document or decision name
        """
        if request.dmn_xml is None or not request.dmn_xml.strip():
            raise RequestValidationError(DMN_XML_REQUIRED)
        if request.decision_name is None or not request.decision_name.strip():
            raise RequestValidationError(DECISION_NAME_REQUIRED)

    def _execute(self, request: DmnRequest) -> dict[str, Any]:
        dmn_xml = request.dmn_xml or ""
        decision_name = request.decision_name or ""

        with _phase(EnginePhase.CREATE):
            engine = self.engine

        logger.info("Parsing DMN XML (Length: %d)...", len(dmn_xml))
        with _phase(EnginePhase.PARSE):
            model = engine.parse(dmn_xml)

        logger.info("Creating DMN Definition...")
        with _phase(EnginePhase.COMPILE):
            definition = engine.compile_definition(model)

        logger.info("Creating Execution Context...")
        with _phase(EnginePhase.CONTEXT):
            context = engine.create_execution_context(definition)

        if request.inputs is not None:
            logger.info("Processing %d input parameters...", len(request.inputs))
            with _phase(EnginePhase.BIND):
                for name, raw_value in request.inputs.items():
                    context.bind_input(name, coerce_value(raw_value))

        logger.info("Executing Decision '%s'...", decision_name)
        with _phase(EnginePhase.EXECUTE):
            result = context.execute_decision(decision_name)

        return {variable.name: variable.value for variable in result.first_result_variables}
