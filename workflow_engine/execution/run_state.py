"""Per-run state owned by one ExecutionEngine: data store and history log."""

from __future__ import annotations

import copy
import logging
from enum import Enum
from typing import Any, Dict, Iterator, List

from workflow_engine.errors import WorkflowError
from workflow_engine.models.model_history_entry import HistoryEntry

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Lifecycle of one run; the engine is idle in every state but RUNNING."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"
    FAILED = "failed"


class RunDataStore:
    """
    Node id -> latest output for the current run, plus the ordered history
    log. Entries are write-once per run.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._history: List[HistoryEntry] = []

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def get(self, node_id: str, default: Any = None) -> Any:
        return self._data.get(node_id, default)

    def set(self, node_id: str, value: Any) -> None:
        if node_id in self._data:
            raise WorkflowError(f"Node '{node_id}' already produced an output in this run", node_id=node_id)
        self._data[node_id] = value

    def record(self, node_id: str, inputs: Any, output: Any) -> HistoryEntry:
        entry = HistoryEntry(node_id=node_id, input=inputs, output=output)
        self._history.append(entry)
        return entry

    @property
    def history(self) -> List[HistoryEntry]:
        return [entry.model_copy(deep=True) for entry in self._history]

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the outputs; observers never see the live values."""
        return copy.deepcopy(self._data)

    def clear(self) -> None:
        self._data.clear()
        self._history.clear()
        logger.debug("Run data store cleared")
