from typing import Any, Optional

from pydantic import model_validator

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class TransformNodeModel(BaseNodeModel):
    """
    Transform node model - accepts various field names from the editor.
    """
    transformType: Optional[str] = None
    mapTransformType: Optional[str] = None  # alias for transformType
    transform: Optional[str] = None
    expression: Optional[str] = None  # alias for transform
    fieldPath: Optional[str] = None
    mergeStrategy: str = "combine"
    schema_: Optional[dict[str, str]] = None

    @model_validator(mode='before')
    @classmethod
    def resolve_schema_key(cls, values: Any) -> Any:
        # 'schema' shadows a BaseModel attribute, so it is stored as schema_
        if isinstance(values, dict) and 'schema' in values and 'schema_' not in values:
            values = dict(values)
            values['schema_'] = values.pop('schema')
        return values

    @model_validator(mode='after')
    def resolve_aliases(self):
        if self.transformType is None:
            self.transformType = self.mapTransformType or "map"
        if self.transform is None and self.expression is not None:
            self.transform = self.expression
        return self
