"""
ExecutionEngine - sequential workflow run controller.

One engine runs at most one workflow at a time. A run validates and
orders the whole graph before any node executes, seeds the input nodes,
then walks the order one node at a time: gather inputs from incoming
edges, dispatch to the processor registry, store the output, record
history, notify listeners and pause for ``speed_ms``.

Cancellation is cooperative and only observed between nodes; an in-flight
processor (for example a slow external call) always runs to completion.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Dict, List, Optional, Sequence

from workflow_engine.config import EngineConfig
from workflow_engine.errors import ExecutionInProgressError, GraphValidationError, WorkflowError
from workflow_engine.execution.event_channel import (
    EventChannel,
    EventName,
    ExecutionCompleteEvent,
    ExecutionErrorEvent,
    ExecutionEventType,
    Listener,
    NodeExecutedEvent,
)
from workflow_engine.execution.run_state import RunDataStore, RunStatus
from workflow_engine.flow import EdgeLike, NodeLike, ProcessorRegistry, create_registry, parse_graph
from workflow_engine.models.factory import EdgeNodeModel, WorkflowNodeModel
from workflow_engine.models.factory.Nodes import ModelWorkflowNodeTypesModel
from workflow_engine.models.model_engine_state import EngineState
from workflow_engine.node_system import build_execution_order
from workflow_engine.util.const import POLICY_ERROR
from workflow_engine.util.graph_validator import run_all_validations

logger = logging.getLogger(__name__)


class ExecutionEngine:
    """
    Run controller for node/edge workflows.

    Usage:
        engine = ExecutionEngine(EngineConfig(speed_ms=0))
        engine.add_listener('nodeExecuted', on_node)
        status = await engine.execute_workflow(nodes, edges, {'a': 5})

    Controls (safe to call from listeners or other tasks):
        stop()      - finish the in-flight node, then end the run
        pause()     - hold the walk before the next node
        resume()    - release a paused walk
        step()      - let exactly one more node run, then hold
        reset()     - clear data, history and state, abandoning any run
        set_speed() - pacing for the next node onwards
    """

    def __init__(self,
                 config: Optional[EngineConfig] = None,
                 registry: Optional[ProcessorRegistry] = None):
        self.config = config or EngineConfig()
        self.registry = registry or create_registry(self.config)
        self.events = EventChannel()
        self.store = RunDataStore()
        self.status = RunStatus.IDLE
        self._speed_ms = self.config.speed_ms
        self._running = False
        self._stop_requested = False
        self._paused = False
        self._step_permits = 0
        # Bumped by every run and every reset; an abandoned run notices
        # the change and exits without touching shared state
        self._generation = 0
        self._gate: Optional[asyncio.Event] = None
        self._wake: Optional[asyncio.Event] = None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_listener(self, event: EventName, callback: Listener) -> None:
        self.events.add_listener(event, callback)

    def remove_listener(self, event: EventName, callback: Listener) -> None:
        self.events.remove_listener(event, callback)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def speed(self) -> int:
        return self._speed_ms

    def set_speed(self, speed_ms: int) -> None:
        if speed_ms is None or speed_ms < 0:
            raise ValueError(f"speed must be >= 0 ms, got {speed_ms}")
        self._speed_ms = int(speed_ms)
        logger.debug("Execution speed set to %dms", self._speed_ms)

    def stop(self) -> None:
        if self._running and not self._stop_requested:
            logger.info("Stop requested; remaining nodes will not execute")
        self._stop_requested = True
        self._release()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        self._step_permits = 0
        if self._gate is not None:
            self._gate.set()

    def step(self) -> None:
        self._paused = True
        self._step_permits += 1
        if self._gate is not None:
            self._gate.set()

    def reset(self) -> None:
        if self._running:
            logger.info("Reset during an active run; abandoning it")
        self._generation += 1
        self._stop_requested = True
        self._release()
        self._running = False
        self._paused = False
        self._step_permits = 0
        self.store.clear()
        self.status = RunStatus.IDLE

    def get_state(self) -> EngineState:
        return EngineState(
            running=self._running,
            status=self.status.value,
            current_data=self.store.snapshot(),
            history=self.store.history,
            speed=self._speed_ms,
        )

    def _release(self) -> None:
        for event in (self._gate, self._wake):
            if event is not None:
                event.set()

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    async def execute_workflow(self,
                               nodes: Sequence[NodeLike],
                               edges: Sequence[EdgeLike],
                               input_bindings: Optional[Dict[str, Any]] = None,
                               step_mode: bool = False) -> RunStatus:
        """
        Execute a workflow from its input nodes.

        Args:
            nodes: Node list; its order breaks ties in the execution order
            edges: Edge list; later edges win handle collisions
            input_bindings: Seed values keyed by input node id
            step_mode: Start paused; each step() runs one node

        Returns:
            RunStatus: COMPLETED, STOPPED or FAILED (IDLE if reset mid-run).
            Failures are reported through the executionError event rather
            than raised.

        Raises:
            ExecutionInProgressError: a run is already active on this engine.
        """
        if self._running:
            raise ExecutionInProgressError("A workflow is already running on this engine")

        generation = self._begin_run(step_mode)
        input_bindings = input_bindings or {}
        current_node: Optional[str] = None

        try:
            node_models, edge_models = parse_graph(nodes, edges)
            order = self._prepare(node_models, edge_models)
            logger.info("Executing workflow: %d nodes, %d edges", len(node_models), len(edge_models))

            await self._seed_inputs(node_models, input_bindings)

            node_map = {node.id: node for node in node_models}
            incoming = self._incoming_edges(edge_models)

            for node_id in order:
                if self._stop_requested:
                    break
                if node_id in self.store:
                    # Seeded input node
                    continue
                await self._wait_for_gate()
                if self._stop_requested or generation != self._generation:
                    break

                current_node = node_id
                node = node_map[node_id]
                inputs = self._gather_inputs(incoming.get(node_id, []))
                processor = self.registry.get(node.type, node_id=node_id)
                output = await processor(inputs, node.config)

                if generation != self._generation:
                    logger.info("Run abandoned by reset; discarding output of %s", node_id)
                    return RunStatus.IDLE

                self.store.set(node_id, output)
                self.store.record(node_id, inputs, output)
                current_node = None
                await self.events.emit(ExecutionEventType.NODE_EXECUTED,
                                       NodeExecutedEvent(node_id, copy.deepcopy(output)))
                await self._pace()

            if generation != self._generation:
                return RunStatus.IDLE

            status = RunStatus.STOPPED if self._stop_requested else RunStatus.COMPLETED
            self.status = status
            logger.info("Workflow %s: %d nodes produced output", status.value, len(self.store))
            await self.events.emit(
                ExecutionEventType.EXECUTION_COMPLETE,
                ExecutionCompleteEvent(data=self.store.snapshot(), history=self.store.history, status=status.value),
            )
            return status

        except Exception as e:
            if generation != self._generation:
                return RunStatus.IDLE
            node_id = current_node or getattr(e, 'node_id', None)
            if isinstance(e, WorkflowError) and e.node_id is None:
                e.node_id = node_id
            self.status = RunStatus.FAILED
            logger.error("Workflow failed at node %s: %s", node_id, e)
            await self.events.emit(ExecutionEventType.EXECUTION_ERROR, ExecutionErrorEvent(error=e, node_id=node_id))
            return RunStatus.FAILED

        finally:
            if generation == self._generation:
                self._running = False

    def _begin_run(self, step_mode: bool) -> int:
        self._generation += 1
        self._running = True
        self._stop_requested = False
        self._paused = step_mode
        self._step_permits = 0
        self._gate = asyncio.Event()
        self._wake = asyncio.Event()
        self.store.clear()
        self.status = RunStatus.RUNNING
        return self._generation

    def _prepare(self, nodes: List[WorkflowNodeModel], edges: List[EdgeNodeModel]) -> List[str]:
        """Validate and order the whole graph; nothing has executed yet."""
        findings = run_all_validations(
            nodes,
            edges,
            strict_handles=self.config.handle_collision_policy == POLICY_ERROR,
        )
        errors = [finding for finding in findings if finding['severity'] == 'error']
        if errors:
            raise GraphValidationError(errors[0]['error_message'], errors=errors)

        if self.registry.unknown_type_policy == POLICY_ERROR:
            for node in nodes:
                self.registry.get(node.type, node_id=node.id)

        return build_execution_order(nodes, edges)

    async def _seed_inputs(self, nodes: List[WorkflowNodeModel], input_bindings: Dict[str, Any]) -> None:
        for node in nodes:
            if node.type != ModelWorkflowNodeTypesModel.INPUT:
                continue
            value = input_bindings.get(node.id)
            if value is None:
                value = node.config.get('defaultValue')
            self.store.set(node.id, value)
            self.store.record(node.id, {}, value)
            logger.debug("Seeded input node %s", node.id)
            await self.events.emit(ExecutionEventType.NODE_EXECUTED, NodeExecutedEvent(node.id, copy.deepcopy(value)))

    @staticmethod
    def _incoming_edges(edges: List[EdgeNodeModel]) -> Dict[str, List[EdgeNodeModel]]:
        incoming: Dict[str, List[EdgeNodeModel]] = {}
        for edge in edges:
            incoming.setdefault(edge.target, []).append(edge)
        return incoming

    def _gather_inputs(self, edges: List[EdgeNodeModel]) -> Dict[str, Any]:
        """Handle -> source output; with several edges on one handle the last one wins."""
        inputs: Dict[str, Any] = {}
        for edge in edges:
            if edge.source in self.store:
                inputs[edge.handle] = self.store.get(edge.source)
        return inputs

    async def _wait_for_gate(self) -> None:
        while self._paused and not self._stop_requested:
            if self._step_permits > 0:
                self._step_permits -= 1
                return
            self._gate.clear()
            await self._gate.wait()

    async def _pace(self) -> None:
        if self._speed_ms <= 0:
            await asyncio.sleep(0)
            return
        self._wake.clear()
        if self._stop_requested:
            return
        try:
            await asyncio.wait_for(self._wake.wait(), timeout=self._speed_ms / 1000)
        except asyncio.TimeoutError:
            pass
