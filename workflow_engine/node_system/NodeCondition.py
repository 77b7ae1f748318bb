from __future__ import annotations

import logging

from workflow_engine.errors import EvaluationError
from workflow_engine.models.factory.Nodes import ConditionNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.util.expression import evaluate

logger = logging.getLogger(__name__)


class NodeCondition(Node):
    """Evaluates a boolean expression against its input.

    Data fields
    -----------
    condition : str
        Expression evaluated with the resolved input bound to ``input``
        (also ``value``). A missing condition evaluates to false.
    trueValue / falseValue : Any
        Returned as ``value`` depending on the outcome.

    Output
    ------
    ``{"condition": bool, "value": trueValue | falseValue, "input": input}``

    Expression errors are logged and treated as false; they never fail the
    run.
    """
    config_model = ConditionNodeModel

    async def process(self, inputs, config: ConditionNodeModel):
        value = self.primary_input(inputs)
        result = False

        if config.condition:
            try:
                result = bool(evaluate(config.condition, input=value, value=value))
            except EvaluationError as e:
                logger.warning("NodeCondition:%s condition failed, treating as false: %s", self.node_id, e)
                result = False

        logger.info("NodeCondition:%s evaluated to %s", self.node_id, result)
        return {
            'condition': result,
            'value': config.trueValue if result else config.falseValue,
            'input': value,
        }
