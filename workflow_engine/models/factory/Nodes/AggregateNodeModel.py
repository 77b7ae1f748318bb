from typing import Literal, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class AggregateNodeModel(BaseNodeModel):
    operation: Literal['count', 'sum', 'average', 'min', 'max', 'group_by'] = 'count'
    field: Optional[str] = None
