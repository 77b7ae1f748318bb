from workflow_engine.models.factory.EdgeNodeModel import EdgeNodeModel
from workflow_engine.models.factory.WorkflowNodeModel import WorkflowNodeModel
from workflow_engine.models.factory.WorkflowModel import WorkflowModel

__all__ = [
    "EdgeNodeModel",
    "WorkflowNodeModel",
    "WorkflowModel",
]
