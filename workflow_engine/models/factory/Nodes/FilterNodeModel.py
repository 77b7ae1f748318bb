from typing import Any, Literal, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel

FilterOperator = Literal[
    'equals',
    'not_equals',
    'greater_than',
    'less_than',
    'contains',
    'exists',
]


class FilterNodeModel(BaseNodeModel):
    field: Optional[str] = None
    operator: FilterOperator = 'equals'
    value: Optional[Any] = None
    condition: Optional[str] = None
