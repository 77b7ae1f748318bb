from datetime import datetime, UTC
from typing import Any

from pydantic import BaseModel, Field


class HistoryEntry(BaseModel):
    node_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    input: Any = None
    output: Any = None
