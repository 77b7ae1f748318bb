from workflow_engine.config import EngineConfig
from workflow_engine.errors import (
    ConfigurationError,
    CycleError,
    EvaluationError,
    ExecutionInProgressError,
    ExternalCallError,
    GraphValidationError,
    InputValidationError,
    WorkflowError,
)
from workflow_engine.execution import (
    EventChannel,
    ExecutionEngine,
    ExecutionEventType,
    LogListener,
    RunStatus,
)
from workflow_engine.flow import ProcessorRegistry, create_registry, load_workflow, run_workflow, validate_graph
from workflow_engine.node_system import build_execution_order

__all__ = [
    "EngineConfig",
    "ExecutionEngine",
    "EventChannel",
    "ExecutionEventType",
    "LogListener",
    "RunStatus",
    "ProcessorRegistry",
    "create_registry",
    "run_workflow",
    "validate_graph",
    "load_workflow",
    "build_execution_order",
    "WorkflowError",
    "CycleError",
    "GraphValidationError",
    "ConfigurationError",
    "InputValidationError",
    "ExternalCallError",
    "EvaluationError",
    "ExecutionInProgressError",
]
