from collections import deque
from typing import Dict, List, Sequence

import networkx as nx

from workflow_engine.errors import CycleError, GraphValidationError
from workflow_engine.models.factory import EdgeNodeModel, WorkflowNodeModel
from workflow_engine.node_system.Node import Node
from workflow_engine.node_system.NodeAggregate import NodeAggregate
from workflow_engine.node_system.NodeCondition import NodeCondition
from workflow_engine.node_system.NodeDataStore import InMemoryTables, NodeDataStore
from workflow_engine.node_system.NodeExternalCall import NodeExternalCall
from workflow_engine.node_system.NodeFilter import NodeFilter
from workflow_engine.node_system.NodeInput import NodeInput
from workflow_engine.node_system.NodeOutput import NodeOutput
from workflow_engine.node_system.NodeProcess import NodeProcess
from workflow_engine.node_system.NodeTransform import NodeTransform


def build_graph(nodes: Sequence[WorkflowNodeModel], edges: Sequence[EdgeNodeModel]) -> nx.MultiDiGraph:
    """Create directed multigraph from nodes and edges (parallel edges kept)."""
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(node.id for node in nodes)
    for edge in edges:
        graph.add_edge(edge.source, edge.target, key=edge.id, handle=edge.handle)
    return graph


def detect_cycles(nodes: Sequence[WorkflowNodeModel], edges: Sequence[EdgeNodeModel]):
    """Detects cycles and raises CycleError naming one of them."""
    try:
        cycle = nx.find_cycle(build_graph(nodes, edges))
    except nx.NetworkXNoCycle:
        return
    cycle_edges = [(source, target) for source, target, *_ in cycle]
    raise CycleError(f"Workflow contains cycles - cannot execute: {cycle_edges}", cycle=cycle_edges)


def build_execution_order(nodes: Sequence[WorkflowNodeModel], edges: Sequence[EdgeNodeModel]) -> List[str]:
    """
    Kahn's algorithm over the caller's node order.

    Nodes with no incoming edges are queued in the order they appear in
    ``nodes``; successors are released in edge-list order. Ties are never
    broken by id, so the result depends only on the two input orders.

    Raises:
        GraphValidationError: duplicate node ids, or an edge references
            an unknown node.
        CycleError: not every node could be ordered.
    """
    in_degree: Dict[str, int] = {}
    successors: Dict[str, List[str]] = {}
    for node in nodes:
        if node.id in in_degree:
            raise GraphValidationError(f"Duplicate node id: '{node.id}'")
        in_degree[node.id] = 0
        successors[node.id] = []

    for edge in edges:
        if edge.source not in in_degree or edge.target not in in_degree:
            raise GraphValidationError(
                f"Edge '{edge.id}' references an unknown node: {edge.source} -> {edge.target}"
            )
        successors[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    result: List[str] = []
    while queue:
        node_id = queue.popleft()
        result.append(node_id)
        for successor in successors[node_id]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                queue.append(successor)

    if len(result) != len(in_degree):
        detect_cycles(nodes, edges)
        raise CycleError("Workflow contains cycles - cannot execute")
    return result


__all__ = [
    "Node",
    "NodeInput",
    "NodeOutput",
    "NodeProcess",
    "NodeTransform",
    "NodeFilter",
    "NodeAggregate",
    "NodeCondition",
    "NodeExternalCall",
    "NodeDataStore",
    "InMemoryTables",
    "build_graph",
    "detect_cycles",
    "build_execution_order",
]
