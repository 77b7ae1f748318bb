"""
EventChannel - publish/subscribe between one ExecutionEngine and its observers.

Each engine owns its own channel. Listeners are called in registration
order; a listener that raises is logged and skipped so the remaining
listeners of the same dispatch are still notified. Coroutine listeners
are awaited.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from workflow_engine.models.model_history_entry import HistoryEntry
from workflow_engine.util.const import (
    EVENT_EXECUTION_COMPLETE,
    EVENT_EXECUTION_ERROR,
    EVENT_NODE_EXECUTED,
)

logger = logging.getLogger(__name__)


class ExecutionEventType(str, Enum):
    NODE_EXECUTED = EVENT_NODE_EXECUTED
    EXECUTION_COMPLETE = EVENT_EXECUTION_COMPLETE
    EXECUTION_ERROR = EVENT_EXECUTION_ERROR


@dataclass
class NodeExecutedEvent:
    node_id: str
    data: Any = None


@dataclass
class ExecutionCompleteEvent:
    data: Dict[str, Any] = field(default_factory=dict)
    history: List[HistoryEntry] = field(default_factory=list)
    status: str = "completed"


@dataclass
class ExecutionErrorEvent:
    error: BaseException
    node_id: Optional[str] = None

    @property
    def error_message(self) -> str:
        return str(self.error)


EventName = Union[ExecutionEventType, str]
Listener = Callable[[Any], Any]


class EventChannel:
    """
    Registry from event name to subscriber callbacks.

    Example:
        channel = EventChannel()
        channel.add_listener('nodeExecuted', lambda event: print(event.node_id))
        await channel.emit('nodeExecuted', NodeExecutedEvent('a', 5))
    """

    def __init__(self):
        self._listeners: Dict[ExecutionEventType, List[Listener]] = {
            event_type: [] for event_type in ExecutionEventType
        }

    @staticmethod
    def _event_type(event: EventName) -> ExecutionEventType:
        try:
            return ExecutionEventType(event)
        except ValueError:
            raise ValueError(
                f"Unknown event '{event}'. Available: {[e.value for e in ExecutionEventType]}"
            ) from None

    def add_listener(self, event: EventName, callback: Listener) -> "EventChannel":
        """Subscribe ``callback``; adding the same callback twice has no effect."""
        listeners = self._listeners[self._event_type(event)]
        if callback not in listeners:
            listeners.append(callback)
        return self

    def remove_listener(self, event: EventName, callback: Listener) -> "EventChannel":
        listeners = self._listeners[self._event_type(event)]
        if callback in listeners:
            listeners.remove(callback)
        return self

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners[self._event_type(event)])

    def clear(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()

    async def emit(self, event: EventName, payload: Any) -> None:
        """Notify every listener of ``event``, isolating failures per listener."""
        event_type = self._event_type(event)
        # Copy so listeners may unsubscribe while being notified
        for callback in list(self._listeners[event_type]):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("Listener %r for %s failed: %s",
                               getattr(callback, '__qualname__', callback), event_type.value, e)


class LogListener:
    """
    Mirrors engine events into a logger.

    Example:
        LogListener().attach(engine.events)
    """

    def __init__(self, logger_name: str = "workflow_engine.events"):
        self._logger = logging.getLogger(logger_name)

    def attach(self, channel: EventChannel) -> "LogListener":
        channel.add_listener(ExecutionEventType.NODE_EXECUTED, self.on_node_executed)
        channel.add_listener(ExecutionEventType.EXECUTION_COMPLETE, self.on_execution_complete)
        channel.add_listener(ExecutionEventType.EXECUTION_ERROR, self.on_execution_error)
        return self

    def detach(self, channel: EventChannel) -> "LogListener":
        channel.remove_listener(ExecutionEventType.NODE_EXECUTED, self.on_node_executed)
        channel.remove_listener(ExecutionEventType.EXECUTION_COMPLETE, self.on_execution_complete)
        channel.remove_listener(ExecutionEventType.EXECUTION_ERROR, self.on_execution_error)
        return self

    def on_node_executed(self, event: NodeExecutedEvent) -> None:
        self._logger.info("[%s] node=%s", EVENT_NODE_EXECUTED, event.node_id)

    def on_execution_complete(self, event: ExecutionCompleteEvent) -> None:
        self._logger.info("[%s] status=%s nodes=%d", EVENT_EXECUTION_COMPLETE, event.status, len(event.data))

    def on_execution_error(self, event: ExecutionErrorEvent) -> None:
        self._logger.error("[%s] node=%s error=%s", EVENT_EXECUTION_ERROR, event.node_id, event.error)
