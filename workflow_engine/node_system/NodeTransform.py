import logging
from typing import Any, Dict, Optional

from workflow_engine.models.factory.Nodes import TransformNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.util.expression import evaluate
from workflow_engine.util.paths import get_path, to_number

logger = logging.getLogger(__name__)


class NodeTransform(Node):
    """Reshapes data flowing through the graph.

    Transform types
    ---------------
    map : applies the ``transform`` expression to every item of a list
        input, or to the whole value otherwise. The expression sees the
        current value as ``data`` (also ``item`` and ``value``).
    extract : returns the value at ``fieldPath`` (dot separated).
    merge : combines every input handle by ``mergeStrategy``:
        ``combine`` shallow-merges mappings, ``array`` collects the values
        in handle order, ``sum`` adds them numerically.
    restructure : builds a new mapping from ``schema`` (field -> source path).

    Expression errors propagate as EvaluationError and fail the run.
    """
    config_model = TransformNodeModel
    requires_input = True

    async def process(self, inputs, config: TransformNodeModel):
        value = self.primary_input(inputs)
        transform_type = config.transformType

        if transform_type == 'map':
            if isinstance(value, list):
                return [self.apply_transform(item, config.transform) for item in value]
            return self.apply_transform(value, config.transform)
        if transform_type == 'extract':
            return get_path(value, config.fieldPath)
        if transform_type == 'merge':
            return self.merge_data(inputs, config.mergeStrategy)
        if transform_type == 'restructure':
            return self.restructure_data(value, config.schema_)

        logger.warning("NodeTransform:%s unknown transform type '%s', passing input through",
                       self.node_id, transform_type)
        return value

    def apply_transform(self, data: Any, transform: Optional[str]) -> Any:
        if not transform:
            return data
        return evaluate(transform, data=data, item=data, value=data)

    @staticmethod
    def merge_data(inputs: Dict[str, Any], strategy: str = 'combine') -> Any:
        values = list(inputs.values())
        if strategy == 'combine':
            merged = {}
            for value in values:
                if isinstance(value, dict):
                    merged.update(value)
            return merged
        if strategy == 'array':
            return values
        if strategy == 'sum':
            return sum(to_number(value) for value in values)
        return values[0] if values else None

    @staticmethod
    def restructure_data(data: Any, schema: Optional[Dict[str, str]]) -> Any:
        if not schema:
            return data
        return {key: get_path(data, source_path) for key, source_path in schema.items()}
