import asyncio
import logging

from workflow_engine.models.factory.Nodes import ProcessNodeModel
from workflow_engine.node_system.Node import Node

logger = logging.getLogger(__name__)


class NodeProcess(Node):
    """
    Generic process node, also the fallback for unregistered node types.

    Operations: passthrough, delay, multiply, uppercase, lowercase. An
    unknown operation behaves like passthrough.
    """
    config_model = ProcessNodeModel
    DEFAULT_DELAY_MS = 1000

    def __init__(self, default_delay_ms: int = DEFAULT_DELAY_MS, **kwargs) -> None:
        super().__init__(**kwargs)
        self.default_delay_ms = default_delay_ms

    async def process(self, inputs, config: ProcessNodeModel):
        value = self.resolve_input(inputs)
        operation = (config.operation or 'passthrough').lower()

        if operation == 'delay':
            delay_ms = config.delayMs if config.delayMs is not None else self.default_delay_ms
            logger.debug("NodeProcess:%s delaying %sms", self.node_id, delay_ms)
            await asyncio.sleep(delay_ms / 1000)
            return value
        if operation == 'multiply':
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return value * config.factor
            return value
        if operation == 'uppercase':
            return value.upper() if isinstance(value, str) else value
        if operation == 'lowercase':
            return value.lower() if isinstance(value, str) else value
        if operation != 'passthrough':
            logger.warning("NodeProcess:%s unknown operation '%s', passing input through",
                           self.node_id, config.operation)
        return value
