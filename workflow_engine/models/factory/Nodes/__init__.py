from workflow_engine.models.factory.Nodes.BaseNodeModel import (
    BaseNodeModel,
    ModelWorkflowNodeType,
    ModelWorkflowNodeTypesModel,
)
from workflow_engine.models.factory.Nodes.InputNodeModel import InputNodeModel
from workflow_engine.models.factory.Nodes.OutputNodeModel import OutputNodeModel
from workflow_engine.models.factory.Nodes.ProcessNodeModel import ProcessNodeModel
from workflow_engine.models.factory.Nodes.TransformNodeModel import TransformNodeModel
from workflow_engine.models.factory.Nodes.FilterNodeModel import FilterNodeModel
from workflow_engine.models.factory.Nodes.AggregateNodeModel import AggregateNodeModel
from workflow_engine.models.factory.Nodes.ConditionNodeModel import ConditionNodeModel
from workflow_engine.models.factory.Nodes.ExternalCallNodeModel import ExternalCallNodeModel
from workflow_engine.models.factory.Nodes.DataStoreNodeModel import DataStoreNodeModel

__all__ = [
    "BaseNodeModel",
    "ModelWorkflowNodeType",
    "ModelWorkflowNodeTypesModel",
    "InputNodeModel",
    "OutputNodeModel",
    "ProcessNodeModel",
    "TransformNodeModel",
    "FilterNodeModel",
    "AggregateNodeModel",
    "ConditionNodeModel",
    "ExternalCallNodeModel",
    "DataStoreNodeModel",
]
