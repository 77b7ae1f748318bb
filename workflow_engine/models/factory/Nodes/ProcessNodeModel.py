from typing import Optional

from pydantic import Field

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class ProcessNodeModel(BaseNodeModel):
    """
    Generic process node. Unknown operations fall back to passthrough,
    so ``operation`` is a free string rather than a Literal.
    """
    operation: str = "passthrough"
    delayMs: Optional[float] = Field(default=None, ge=0)
    factor: int | float = 1
