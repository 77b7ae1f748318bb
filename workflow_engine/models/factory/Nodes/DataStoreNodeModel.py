from typing import Any, Literal, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class DataStoreNodeModel(BaseNodeModel):
    operation: Literal['select', 'insert', 'update', 'delete'] = 'select'
    table: str = 'default'
    query: Optional[dict[str, Any]] = None
