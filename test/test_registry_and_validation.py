import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from workflow_engine import ExecutionEngine, ProcessorRegistry, create_registry, load_workflow, validate_graph
from workflow_engine.config import EngineConfig, fast_config, strict_config
from workflow_engine.errors import ConfigurationError, GraphValidationError
from workflow_engine.flow import parse_graph
from workflow_engine.node_system import NodeExternalCall, NodeInput, NodeProcess


class TestProcessorRegistry:

    def setup_method(self):
        self.registry = create_registry()

    def test_builtin_types(self):
        assert set(self.registry.types) == {
            "input", "output", "process", "transform", "filter",
            "aggregate", "condition", "external-call", "data-store",
        }

    def test_aliases(self):
        assert "api" in self.registry
        assert isinstance(self.registry.get("api", node_id="n"), NodeExternalCall)
        assert self.registry.resolve_type("database") == "data-store"

    def test_fallback(self):
        processor = self.registry.get("mystery", node_id="m")
        assert isinstance(processor, NodeProcess)
        assert processor.node_id == "m"
        assert processor.node_type == "mystery"

    def test_strict_rejects_unknown(self):
        registry = create_registry(strict_config())
        with pytest.raises(ConfigurationError) as exc_info:
            registry.get("mystery", node_id="m")
        assert exc_info.value.node_id == "m"

    def test_missing_fallback_processor(self):
        registry = ProcessorRegistry().register("input", NodeInput)
        with pytest.raises(ConfigurationError):
            registry.get("mystery")

    @pytest.mark.asyncio
    async def test_custom_processor(self):
        class NodeDouble(NodeProcess):
            async def process(self, inputs, config):
                return self.resolve_input(inputs) * 2

        self.registry.register("double", NodeDouble)
        processor = self.registry.get("double", node_id="d")
        assert await processor({"default": 4}, {}) == 8

        self.registry.unregister("double")
        assert "double" not in self.registry

    def test_register_rejects_non_nodes(self):
        with pytest.raises(TypeError):
            self.registry.register("bad", dict)

    def test_process_delay_follows_config(self):
        registry = create_registry(EngineConfig(default_delay_ms=0))
        assert registry.get("process").default_delay_ms == 0


class TestParseGraph:

    def test_handle_resolution(self):
        _, edges = parse_graph([{"id": "a"}, {"id": "b"}], [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e2", "source": "a", "target": "b", "sourceHandle": "out"},
            {"id": "e3", "source": "a", "target": "b", "sourceHandle": "out", "targetHandle": "in"},
            {"id": "e4", "source": "a", "target": "b", "targetHandle": "in", "handle": "explicit"},
        ])
        assert [edge.handle for edge in edges] == ["default", "out", "in", "explicit"]

    def test_node_config_from_data(self):
        nodes, _ = parse_graph([{"id": "a", "type": "input", "data": {"value": 3}}], [])
        assert nodes[0].config == {"value": 3}
        assert nodes[0].type == "input"

    def test_node_defaults_to_process(self):
        nodes, _ = parse_graph([{"id": "a"}], [])
        assert nodes[0].type == "process"
        assert nodes[0].config == {}

    def test_malformed_node(self):
        with pytest.raises(GraphValidationError):
            parse_graph([{"type": "input"}], [])


class TestValidateGraph:

    def test_valid_graph(self):
        result = validate_graph(
            [{"id": "a", "type": "input"}, {"id": "b", "type": "output"}],
            [{"id": "e1", "source": "a", "target": "b"}],
        )
        assert result["valid"] is True
        assert result["errors"] == []

    def test_dangling_edge(self):
        result = validate_graph([{"id": "a"}], [{"id": "e1", "source": "a", "target": "zzz"}])
        assert result["valid"] is False
        assert result["errors"][0]["type"] == "InvalidEdgeTarget"

    def test_duplicate_ids(self):
        result = validate_graph([{"id": "a"}, {"id": "a"}], [])
        assert result["valid"] is False
        assert any(err["type"] == "DuplicateNodeId" for err in result["errors"])

    def test_self_loop_and_duplicate_edges_are_warnings(self):
        result = validate_graph([{"id": "a"}, {"id": "b"}], [
            {"id": "e1", "source": "a", "target": "a"},
            {"id": "e2", "source": "a", "target": "b"},
            {"id": "e3", "source": "a", "target": "b"},
        ])
        types = {err["type"] for err in result["errors"]}
        assert "SelfLoopEdge" in types
        assert "DuplicateEdge" in types
        assert all(err["severity"] == "warning" for err in result["errors"]
                   if err["type"] in ("SelfLoopEdge", "DuplicateEdge"))

    def test_handle_collision_severity(self):
        nodes = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        edges = [
            {"id": "e1", "source": "a", "target": "c"},
            {"id": "e2", "source": "b", "target": "c"},
        ]
        lenient = validate_graph(nodes, edges)
        assert lenient["valid"] is True
        assert lenient["errors"][0]["type"] == "HandleCollision"

        strict = validate_graph(nodes, edges, config=strict_config())
        assert strict["valid"] is False

    def test_unknown_types_with_registry(self):
        registry = create_registry()
        nodes = [{"id": "a", "type": "api"}, {"id": "b", "type": "mystery"}]

        lenient = validate_graph(nodes, [], registry=registry)
        assert lenient["valid"] is True
        assert [err["node_id"] for err in lenient["errors"]] == ["b"]

        strict = validate_graph(nodes, [], registry=registry, config=strict_config())
        assert strict["valid"] is False

    def test_malformed_payload(self):
        result = validate_graph([{"id": "a"}], [{"id": "e1", "source": "a"}])
        assert result["valid"] is False
        assert result["errors"][0]["type"] == "MalformedGraph"


class TestLoadWorkflow:

    @pytest.mark.asyncio
    async def test_payload_runs_on_engine(self):
        workflow = load_workflow({
            "nodes": [
                {"id": "in", "type": "input", "position": {"x": 0, "y": 0}},
                {"id": "up", "type": "process", "data": {"operation": "uppercase"}},
            ],
            "edges": [{"id": "e1", "source": "in", "target": "up"}],
            "input_bindings": {"in": "hi"},
        })
        assert workflow.get_node("up").config == {"operation": "uppercase"}
        assert workflow.get_node("nope") is None

        engine = ExecutionEngine(fast_config())
        await engine.execute_workflow(workflow.nodes, workflow.edges, workflow.input_bindings)
        assert engine.store.get("up") == "HI"

    def test_malformed_payload(self):
        with pytest.raises(GraphValidationError):
            load_workflow({"nodes": [{"type": "input"}]})
