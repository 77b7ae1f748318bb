"""
Exception taxonomy for workflow execution.

Graph level errors (cycles, dangling edges) are detected before any node
runs. Processor level errors abort the remainder of the run and are
reported once through the ``executionError`` event.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple


class WorkflowError(Exception):
    """Base class for every error raised by the engine."""

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.node_id = node_id

    def to_dict(self) -> dict:
        return {
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "node_id": self.node_id,
        }


class CycleError(WorkflowError, ValueError):
    """The graph is not a DAG."""

    def __init__(self, message: str, cycle: Optional[List[Tuple[str, str]]] = None):
        super().__init__(message)
        self.cycle = cycle or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["cycle"] = [list(edge) for edge in self.cycle]
        return data


class GraphValidationError(WorkflowError, ValueError):
    """Structural problem in the node/edge lists."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []


class ConfigurationError(WorkflowError):
    """No processor for a node type, or an invalid node configuration."""


class InputValidationError(WorkflowError):
    """A required input is missing or null."""


class ExternalCallError(WorkflowError):
    """Network request failed or returned a body that could not be parsed."""


class EvaluationError(WorkflowError):
    """A user supplied expression failed to compile or evaluate."""

    def __init__(self, message: str, expression: Any = None, node_id: Optional[str] = None):
        super().__init__(message, node_id=node_id)
        self.expression = expression


class ExecutionInProgressError(WorkflowError, RuntimeError):
    """execute_workflow was called while a run is active on the same engine."""
