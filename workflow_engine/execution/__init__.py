"""
Sequential execution module for workflow graphs.

- ExecutionEngine: run controller (start/stop/pause/step/reset/speed)
- EventChannel: per-engine publish/subscribe for progress reporting
- RunDataStore / RunStatus: per-run outputs, history and lifecycle
"""

from workflow_engine.execution.event_channel import (
    EventChannel,
    ExecutionCompleteEvent,
    ExecutionErrorEvent,
    ExecutionEventType,
    LogListener,
    NodeExecutedEvent,
)
from workflow_engine.execution.run_state import RunDataStore, RunStatus
from workflow_engine.execution.engine import ExecutionEngine

__all__ = [
    "ExecutionEngine",
    "EventChannel",
    "ExecutionEventType",
    "NodeExecutedEvent",
    "ExecutionCompleteEvent",
    "ExecutionErrorEvent",
    "LogListener",
    "RunDataStore",
    "RunStatus",
]
