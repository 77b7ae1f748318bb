import abc
import logging
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from workflow_engine.errors import ConfigurationError, InputValidationError
from workflow_engine.models.factory.Nodes import BaseNodeModel
from workflow_engine.util.const import HANDLE_DEFAULT
from workflow_engine.util.telemetry import flow_telemetry

logger = logging.getLogger(__name__)


class Node(abc.ABC):
    """
    Base processor: one input mapping (handle -> value) and one node
    configuration in, one output value out.

    Subclasses set ``config_model`` to the pydantic model validating their
    configuration and implement ``process``. ``process`` is wrapped with
    telemetry automatically.
    """
    config_model = BaseNodeModel
    # When True, a null primary input raises InputValidationError
    requires_input = False

    def __init__(self,
                 node_id: Optional[str] = None,
                 node_type: Optional[str] = None,
                 debug: bool = False,
                 **kwargs):
        self.node_id = node_id
        self.node_type = node_type
        self.debug = debug
        self.extra_params = kwargs

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Automatically decorate the `process` method of the subclass
        if 'process' in cls.__dict__:
            cls.process = flow_telemetry(cls.process)

    async def __call__(self, inputs: Dict[str, Any], config: Optional[Dict[str, Any]] = None) -> Any:
        data = self.parse_config(config)
        if data.requiredInputs:
            self.validate_inputs(inputs, data.requiredInputs)
        if self.requires_input:
            self.require_value(self.primary_input(inputs))
        return await self.process(inputs, data)

    @abc.abstractmethod
    async def process(self, inputs: Dict[str, Any], config: BaseNodeModel) -> Any:
        pass

    def get_debug(self):
        return self.debug

    def parse_config(self, config: Optional[Dict[str, Any]]) -> BaseNodeModel:
        if isinstance(config, self.config_model):
            return config
        try:
            return self.config_model.model_validate(config or {})
        except ValidationError as e:
            logger.error("%s:%s invalid configuration: %s", self.__class__.__name__, self.node_id, e)
            raise ConfigurationError(
                f"Invalid configuration for node '{self.node_id}' ({self.node_type}): {e}",
                node_id=self.node_id,
            ) from e

    def validate_inputs(self, inputs: Dict[str, Any], required: Iterable[str] = ()) -> None:
        for key in required:
            if inputs.get(key) is None:
                raise InputValidationError(
                    f"Required input '{key}' is missing for node '{self.node_id}'",
                    node_id=self.node_id,
                )

    def require_value(self, value: Any) -> Any:
        if value is None:
            raise InputValidationError(
                f"Node '{self.node_id}' ({self.node_type}) received no input value",
                node_id=self.node_id,
            )
        return value

    @staticmethod
    def resolve_input(inputs: Dict[str, Any]) -> Any:
        """
        Single value view of the inputs: the default handle if present,
        the sole value if only one handle is populated, otherwise the
        whole mapping unchanged.
        """
        if not inputs:
            return None
        if HANDLE_DEFAULT in inputs:
            return inputs[HANDLE_DEFAULT]
        if len(inputs) == 1:
            return next(iter(inputs.values()))
        return inputs

    @staticmethod
    def primary_input(inputs: Dict[str, Any]) -> Any:
        """The default handle if present, otherwise the first populated handle."""
        if not inputs:
            return None
        if inputs.get(HANDLE_DEFAULT) is not None:
            return inputs[HANDLE_DEFAULT]
        return next(iter(inputs.values()))
