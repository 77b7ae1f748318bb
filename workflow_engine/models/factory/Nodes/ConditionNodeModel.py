"""
ConditionNodeModel - Pydantic validation model for NodeCondition configuration.

Syntax is not validated here: a broken expression must degrade to
``false`` at run time rather than fail the node.
"""

from typing import Any, Optional

from workflow_engine.models.factory.Nodes.BaseNodeModel import BaseNodeModel


class ConditionNodeModel(BaseNodeModel):
    condition: Optional[str] = None
    trueValue: Optional[Any] = None
    falseValue: Optional[Any] = None
