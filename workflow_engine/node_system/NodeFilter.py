import logging
from typing import Any

from workflow_engine.models.factory.Nodes import FilterNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.util.expression import evaluate
from workflow_engine.util.paths import as_float, get_path

logger = logging.getLogger(__name__)


class NodeFilter(Node):
    """
    Filter node - keeps the items of a list input that satisfy the
    predicate, preserving their order. A scalar input is returned when it
    passes and replaced by None when it does not.

    The predicate is either ``condition`` (an expression over ``item``) or
    ``field`` + ``operator`` + ``value``. With neither, everything passes.
    """
    config_model = FilterNodeModel
    requires_input = True

    async def process(self, inputs, config: FilterNodeModel):
        value = self.primary_input(inputs)
        if isinstance(value, list):
            kept = [item for item in value if self.matches(item, config)]
            logger.debug("NodeFilter:%s kept %d of %d items", self.node_id, len(kept), len(value))
            return kept
        return value if self.matches(value, config) else None

    def matches(self, item: Any, config: FilterNodeModel) -> bool:
        if config.condition:
            return bool(evaluate(config.condition, item=item, value=item))
        if not config.field:
            return True

        item_value = get_path(item, config.field)
        operator = config.operator
        if operator == 'equals':
            return item_value == config.value
        if operator == 'not_equals':
            return item_value != config.value
        if operator == 'greater_than':
            return as_float(item_value) > as_float(config.value)
        if operator == 'less_than':
            return as_float(item_value) < as_float(config.value)
        if operator == 'contains':
            if isinstance(item_value, (list, tuple, set)):
                return config.value in item_value
            return str(config.value) in str(item_value)
        if operator == 'exists':
            return item_value is not None
        return True
