"""Decision engine backends and the contract they implement."""

from engines.base import BaseEngine, EngineError, EnginePhase, ExecutionContext
from engines.pydmnrules_engine import PyDMNRulesEngine

ENGINES: dict[str, type[BaseEngine]] = {
    "pydmnrules": PyDMNRulesEngine,
}


def create_engine(name: str) -> BaseEngine:
    """Create the engine registered under ``name``."""
    try:
        engine_cls = ENGINES[name]
    except KeyError:
        raise EngineError(f"Unknown DMN engine: {name}", EnginePhase.CREATE) from None
    return engine_cls()


__all__ = [
    "BaseEngine",
    "ENGINES",
    "EngineError",
    "EnginePhase",
    "ExecutionContext",
    "PyDMNRulesEngine",
    "create_engine",
]
