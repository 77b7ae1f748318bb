import logging

from workflow_engine.models.factory.Nodes import InputNodeModel
from workflow_engine.node_system.Node import Node

logger = logging.getLogger(__name__)


class NodeInput(Node):
    """
    Input node - source of seed data. Upstream values are ignored; the
    configured ``value`` wins over ``defaultValue``.
    """
    config_model = InputNodeModel

    async def process(self, inputs, config: InputNodeModel):
        value = config.value if config.value is not None else config.defaultValue
        logger.debug("NodeInput:%s yielding configured value (type=%s)", self.node_id, type(value).__name__)
        return value
