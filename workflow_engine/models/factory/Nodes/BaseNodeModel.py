from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ModelWorkflowNodeType = Literal[
    'input',
    'output',
    'process',
    'transform',
    'filter',
    'aggregate',
    'condition',
    'external-call',
    'data-store',
]


class ModelWorkflowNodeTypesModel:
    INPUT = 'input'
    OUTPUT = 'output'
    PROCESS = 'process'
    TRANSFORM = 'transform'
    FILTER = 'filter'
    AGGREGATE = 'aggregate'
    CONDITION = 'condition'
    EXTERNAL_CALL = 'external-call'
    DATA_STORE = 'data-store'


class BaseNodeModel(BaseModel):
    """
    Base model for all node configurations.
    Configured to accept extra fields from the editor without raising errors.
    """
    model_config = ConfigDict(extra='allow')

    requiredInputs: Optional[list[str]] = Field(default=None)
