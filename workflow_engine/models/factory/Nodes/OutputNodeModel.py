from typing import Literal, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class OutputNodeModel(BaseNodeModel):
    format: Optional[Literal['json', 'string', 'number', 'raw']] = None
