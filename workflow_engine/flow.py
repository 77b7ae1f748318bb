"""
Workflow Flow Module

Processor registry, graph parsing/validation and a one-call runner built
on top of ExecutionEngine.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type, Union

from pydantic import ValidationError

from workflow_engine.config import EngineConfig
from workflow_engine.errors import ConfigurationError, GraphValidationError
from workflow_engine.models.factory import EdgeNodeModel, WorkflowModel, WorkflowNodeModel
from workflow_engine.models.factory.Nodes import ModelWorkflowNodeTypesModel
from workflow_engine.node_system import (
    InMemoryTables,
    Node,
    NodeAggregate,
    NodeCondition,
    NodeDataStore,
    NodeExternalCall,
    NodeFilter,
    NodeInput,
    NodeOutput,
    NodeProcess,
    NodeTransform,
)
from workflow_engine.util.const import NODE_TYPE_ALIASES, POLICY_ERROR, POLICY_FALLBACK
from workflow_engine.util.graph_validator import run_all_validations

logger = logging.getLogger(__name__)

NodeLike = Union[WorkflowNodeModel, Dict[str, Any]]
EdgeLike = Union[EdgeNodeModel, Dict[str, Any]]


class ProcessorRegistry:
    """
    Maps node type tags to processor classes.

    Unregistered types either go to the fallback processor (logged as a
    warning) or raise ConfigurationError, depending on
    ``unknown_type_policy``.

    Example:
        registry = ProcessorRegistry()
        registry.register('input', NodeInput)
        processor = registry.get('input', node_id='a')
        value = await processor({}, {'value': 5})
    """

    def __init__(self,
                 unknown_type_policy: str = POLICY_FALLBACK,
                 fallback_type: str = ModelWorkflowNodeTypesModel.PROCESS,
                 debug: bool = False):
        if unknown_type_policy not in (POLICY_FALLBACK, POLICY_ERROR):
            raise ValueError(f"Invalid unknown_type_policy '{unknown_type_policy}'")
        self.unknown_type_policy = unknown_type_policy
        self.fallback_type = fallback_type
        self.debug = debug
        self._processors: Dict[str, Tuple[Type[Node], Dict[str, Any]]] = {}

    def register(self, node_type: str, node_class: Type[Node], **init_kwargs) -> "ProcessorRegistry":
        """Register a processor class; ``init_kwargs`` are passed on every instantiation."""
        if not (isinstance(node_class, type) and issubclass(node_class, Node)):
            raise TypeError(f"{node_class!r} is not a Node subclass")
        self._processors[node_type] = (node_class, init_kwargs)
        return self

    def unregister(self, node_type: str) -> "ProcessorRegistry":
        self._processors.pop(node_type, None)
        return self

    @property
    def types(self) -> List[str]:
        return list(self._processors.keys())

    def __contains__(self, node_type: str) -> bool:
        return self._normalize(node_type) in self._processors

    @staticmethod
    def _normalize(node_type: str) -> str:
        return NODE_TYPE_ALIASES.get(node_type, node_type)

    def resolve_type(self, node_type: str) -> str:
        """
        Registered type that will process ``node_type``.

        Raises:
            ConfigurationError: unregistered type under the 'error' policy,
                or a fallback type that is itself unregistered.
        """
        normalized = self._normalize(node_type)
        if normalized in self._processors:
            return normalized
        if self.unknown_type_policy == POLICY_FALLBACK and self.fallback_type in self._processors:
            logger.warning("No processor for node type '%s'; falling back to '%s'",
                           node_type, self.fallback_type)
            return self.fallback_type
        raise ConfigurationError(
            f"No processor found for node type: {node_type} (available: {self.types})"
        )

    def get(self, node_type: str, node_id: Optional[str] = None) -> Node:
        """Instantiate the processor for ``node_type`` bound to ``node_id``."""
        try:
            resolved = self.resolve_type(node_type)
        except ConfigurationError as e:
            e.node_id = node_id
            raise
        node_class, init_kwargs = self._processors[resolved]
        return node_class(node_id=node_id, node_type=node_type, debug=self.debug, **init_kwargs)


def create_registry(config: Optional[EngineConfig] = None) -> ProcessorRegistry:
    """Registry with every built-in processor, configured from ``config``."""
    config = config or EngineConfig()
    registry = ProcessorRegistry(
        unknown_type_policy=config.unknown_type_policy,
        fallback_type=config.fallback_type,
        debug=config.debug,
    )
    tables = InMemoryTables()
    (registry
     .register(ModelWorkflowNodeTypesModel.INPUT, NodeInput)
     .register(ModelWorkflowNodeTypesModel.OUTPUT, NodeOutput)
     .register(ModelWorkflowNodeTypesModel.PROCESS, NodeProcess, default_delay_ms=config.default_delay_ms)
     .register(ModelWorkflowNodeTypesModel.TRANSFORM, NodeTransform)
     .register(ModelWorkflowNodeTypesModel.FILTER, NodeFilter)
     .register(ModelWorkflowNodeTypesModel.AGGREGATE, NodeAggregate)
     .register(ModelWorkflowNodeTypesModel.CONDITION, NodeCondition)
     .register(ModelWorkflowNodeTypesModel.EXTERNAL_CALL, NodeExternalCall, request_timeout=config.request_timeout)
     .register(ModelWorkflowNodeTypesModel.DATA_STORE, NodeDataStore, tables=tables))
    return registry


def parse_graph(nodes: Sequence[NodeLike],
                edges: Sequence[EdgeLike]) -> Tuple[List[WorkflowNodeModel], List[EdgeNodeModel]]:
    """
    Normalize editor payloads (dicts) or models into node/edge models,
    preserving both input orders.
    """
    try:
        node_models = [
            node if isinstance(node, WorkflowNodeModel) else WorkflowNodeModel.model_validate(node)
            for node in nodes
        ]
        edge_models = [
            edge if isinstance(edge, EdgeNodeModel) else EdgeNodeModel.model_validate(edge)
            for edge in edges
        ]
    except ValidationError as e:
        raise GraphValidationError(f"Malformed graph: {e}") from e
    return node_models, edge_models


def load_workflow(payload: Dict[str, Any]) -> WorkflowModel:
    """
    Parse a whole editor payload ``{"nodes": [...], "edges": [...], "input_bindings": {...}}``.

    Raises:
        GraphValidationError: the payload does not describe a graph.
    """
    try:
        return WorkflowModel.model_validate(payload)
    except ValidationError as e:
        raise GraphValidationError(f"Malformed workflow: {e}") from e


def validate_graph(nodes: Sequence[NodeLike],
                   edges: Sequence[EdgeLike],
                   registry: Optional[ProcessorRegistry] = None,
                   config: Optional[EngineConfig] = None) -> dict:
    """
    Validate the workflow graph structure without running it.

    Returns:
        dict: Validation result with 'valid' (bool) and 'errors' (list) keys.
    """
    config = config or EngineConfig()
    try:
        node_models, edge_models = parse_graph(nodes, edges)
    except GraphValidationError as e:
        return {"valid": False, "errors": [{"type": "MalformedGraph", "severity": "error",
                                            "error_message": e.message}]}

    known_types: Optional[Iterable[str]] = None
    if registry is not None:
        # Aliases such as 'api' count as known
        known_types = {node.type for node in node_models if node.type in registry}

    errors = run_all_validations(
        node_models,
        edge_models,
        known_types=known_types,
        strict_handles=config.handle_collision_policy == POLICY_ERROR,
        strict_types=config.unknown_type_policy == POLICY_ERROR,
    )
    return {
        "valid": not any(err['severity'] == 'error' for err in errors),
        "errors": errors,
    }


async def run_workflow(nodes: Sequence[NodeLike],
                       edges: Sequence[EdgeLike],
                       input_bindings: Optional[Dict[str, Any]] = None,
                       config: Optional[EngineConfig] = None,
                       listeners: Optional[Dict[str, Callable]] = None):
    """
    Run a workflow once on a fresh engine and return its final state.

    Args:
        nodes: Node list (dicts or WorkflowNodeModel)
        edges: Edge list (dicts or EdgeNodeModel)
        input_bindings: Seed values keyed by input node id
        config: Engine configuration; pacing defaults to none here
        listeners: Optional mapping of event name -> callback

    Returns:
        EngineState: snapshot taken after the run finished.
    """
    from workflow_engine.execution import ExecutionEngine

    engine = ExecutionEngine(config=config or EngineConfig(speed_ms=0))
    for event_name, callback in (listeners or {}).items():
        engine.add_listener(event_name, callback)
    await engine.execute_workflow(nodes, edges, input_bindings or {})
    return engine.get_state()
