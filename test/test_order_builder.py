import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from workflow_engine.errors import CycleError, GraphValidationError
from workflow_engine.flow import parse_graph
from workflow_engine.node_system import build_execution_order


def order_of(nodes, edges):
    node_models, edge_models = parse_graph(nodes, edges)
    return build_execution_order(node_models, edge_models)


class TestOrderBuilder:
    """Kahn ordering, tie-breaks and cycle rejection."""

    def test_linear_chain(self):
        nodes = [{"id": "c"}, {"id": "b"}, {"id": "a"}]
        edges = [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e2", "source": "b", "target": "c"},
        ]
        assert order_of(nodes, edges) == ["a", "b", "c"]

    def test_ties_follow_node_list_order(self):
        nodes = [{"id": "zeta"}, {"id": "alpha"}, {"id": "mid"}]
        assert order_of(nodes, []) == ["zeta", "alpha", "mid"]

        reordered = [{"id": "mid"}, {"id": "zeta"}, {"id": "alpha"}]
        assert order_of(reordered, []) == ["mid", "zeta", "alpha"]

    def test_successors_released_in_edge_order(self):
        nodes = [{"id": "root"}, {"id": "x"}, {"id": "y"}]
        edges = [
            {"id": "e1", "source": "root", "target": "y"},
            {"id": "e2", "source": "root", "target": "x"},
        ]
        assert order_of(nodes, edges) == ["root", "y", "x"]

    def test_every_edge_source_precedes_target(self):
        nodes = [{"id": n} for n in ["out", "merge", "left", "right", "src", "lonely"]]
        edges = [
            {"id": "1", "source": "src", "target": "left"},
            {"id": "2", "source": "src", "target": "right"},
            {"id": "3", "source": "left", "target": "merge"},
            {"id": "4", "source": "right", "target": "merge"},
            {"id": "5", "source": "merge", "target": "out"},
            {"id": "6", "source": "src", "target": "out"},
        ]
        order = order_of(nodes, edges)
        assert len(order) == len(nodes)
        position = {node_id: index for index, node_id in enumerate(order)}
        for edge in edges:
            assert position[edge["source"]] < position[edge["target"]]

    def test_deterministic_across_calls(self):
        nodes = [{"id": str(i)} for i in range(10)]
        edges = [{"id": f"e{i}", "source": str(i), "target": str(i + 2)} for i in range(8)]
        first = order_of(nodes, edges)
        for _ in range(5):
            assert order_of(nodes, edges) == first

    def test_cycle_raises(self):
        nodes = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        edges = [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e2", "source": "b", "target": "c"},
            {"id": "e3", "source": "c", "target": "b"},
        ]
        with pytest.raises(CycleError) as exc_info:
            order_of(nodes, edges)
        cycle_nodes = {node for edge in exc_info.value.cycle for node in edge}
        assert cycle_nodes == {"b", "c"}

    def test_self_loop_is_a_cycle(self):
        with pytest.raises(CycleError):
            order_of([{"id": "a"}], [{"id": "e1", "source": "a", "target": "a"}])

    def test_cycle_error_is_value_error(self):
        with pytest.raises(ValueError):
            order_of([{"id": "a"}, {"id": "b"}], [
                {"id": "e1", "source": "a", "target": "b"},
                {"id": "e2", "source": "b", "target": "a"},
            ])

    def test_unknown_edge_endpoint(self):
        with pytest.raises(GraphValidationError):
            order_of([{"id": "a"}], [{"id": "e1", "source": "a", "target": "ghost"}])

    def test_duplicate_node_ids(self):
        with pytest.raises(GraphValidationError):
            order_of([{"id": "a"}, {"id": "a"}], [])

    def test_empty_graph(self):
        assert order_of([], []) == []
