from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from workflow_engine.models.factory.EdgeNodeModel import EdgeNodeModel
from workflow_engine.models.factory.WorkflowNodeModel import WorkflowNodeModel


class WorkflowModel(BaseModel):
    """
    Model representing a workflow graph handed to the engine.

    Attributes:
        nodes: Nodes in caller order (this order is the tie-break of the
            execution order)
        edges: Edges in caller order (later edges win handle collisions)
        input_bindings: Seed values keyed by input node id
    """
    model_config = ConfigDict(extra='ignore')

    nodes: List[WorkflowNodeModel] = Field(default_factory=list)
    edges: List[EdgeNodeModel] = Field(default_factory=list)
    input_bindings: Dict[str, Any] = Field(default_factory=dict)

    def get_node(self, node_id: str) -> Optional[WorkflowNodeModel]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
