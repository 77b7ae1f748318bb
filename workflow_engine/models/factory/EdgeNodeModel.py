from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from workflow_engine.util.const import HANDLE_DEFAULT


class EdgeNodeModel(BaseModel):
    """
    Directed data dependency between two nodes.

    ``handle`` names the input slot on the target node. Editor payloads
    carry it as targetHandle or sourceHandle; the first one present wins.
    """
    model_config = ConfigDict(extra='ignore')

    id: str = "edge"
    source: str
    target: str
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None
    handle: Optional[str] = None

    @model_validator(mode='after')
    def resolve_handle(self):
        if not self.handle:
            self.handle = self.targetHandle or self.sourceHandle or HANDLE_DEFAULT
        return self
