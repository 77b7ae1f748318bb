import json
import logging

from workflow_engine.models.factory.Nodes import OutputNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.util.paths import to_number

logger = logging.getLogger(__name__)


class NodeOutput(Node):
    """
    Output node - sink that resolves a single value from its inputs and
    optionally formats it for display.
    """
    config_model = OutputNodeModel

    async def process(self, inputs, config: OutputNodeModel):
        value = self.resolve_input(inputs)
        logger.info("NodeOutput:%s received %s", self.node_id, type(value).__name__)
        return self.format_output(value, config.format)

    @staticmethod
    def format_output(data, fmt=None):
        if fmt == 'json':
            return json.dumps(data, indent=2, default=str)
        if fmt == 'string':
            return '' if data is None else str(data)
        if fmt == 'number':
            return to_number(data)
        return data
