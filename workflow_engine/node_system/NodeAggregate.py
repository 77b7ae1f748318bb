import logging
from typing import Any, Dict, List, Optional

from workflow_engine.models.factory.Nodes import AggregateNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.util.paths import get_path, to_number

logger = logging.getLogger(__name__)


class NodeAggregate(Node):
    """
    Aggregate node - reduces a list input. A non-list input is returned
    unchanged. Numeric operations treat non-numeric values as 0.
    """
    config_model = AggregateNodeModel
    requires_input = True

    async def process(self, inputs, config: AggregateNodeModel):
        items = self.primary_input(inputs)
        if not isinstance(items, list):
            return items

        operation = config.operation
        if operation == 'count':
            return len(items)
        if operation == 'group_by':
            return self.group_by(items, config.field)

        numbers = [to_number(get_path(item, config.field)) for item in items]
        if operation == 'sum':
            return sum(numbers)
        if operation == 'average':
            return sum(numbers) / len(numbers) if numbers else 0
        if operation == 'min':
            return min(numbers) if numbers else None
        if operation == 'max':
            return max(numbers) if numbers else None
        return items

    @staticmethod
    def group_by(items: List[Any], field: Optional[str]) -> Dict[Any, List[Any]]:
        groups: Dict[Any, List[Any]] = {}
        for item in items:
            key = get_path(item, field)
            try:
                hash(key)
            except TypeError:
                key = str(key)
            groups.setdefault(key, []).append(item)
        return groups
