from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WorkflowNodeModel(BaseModel):
    """
    A node as supplied by the editor.

    The editor stores per-node settings under ``data``; ``config`` is the
    engine's name for the same mapping. Position, label and other
    presentation keys are ignored.
    """
    model_config = ConfigDict(extra='ignore', frozen=True)

    id: str
    type: str = "process"
    config: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def resolve_aliases(cls, values: Any) -> Any:
        if isinstance(values, dict) and 'config' not in values and isinstance(values.get('data'), dict):
            values = dict(values)
            values['config'] = values['data']
        return values
