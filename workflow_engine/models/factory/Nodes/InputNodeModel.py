from typing import Any, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class InputNodeModel(BaseNodeModel):
    value: Optional[Any] = None
    defaultValue: Optional[Any] = None
