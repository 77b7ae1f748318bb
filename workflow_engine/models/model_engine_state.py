from typing import Any, Dict, List

from pydantic import BaseModel, Field

from workflow_engine.models.model_history_entry import HistoryEntry


class EngineState(BaseModel):
    """Read-only snapshot of an ExecutionEngine for polling consumers."""
    running: bool = False
    status: str = "idle"
    current_data: Dict[str, Any] = Field(default_factory=dict)
    history: List[HistoryEntry] = Field(default_factory=list)
    speed: int = 0
