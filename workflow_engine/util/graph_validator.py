"""
Graph Validator - Pre-run validation for workflow graphs.

Checks structural integrity that Kahn's ordering does not cover on its
own: dangling edges, self loops, duplicate edges, unknown node types and
fan-in handle collisions. Every finding is a dict with a ``severity`` of
``error`` or ``warning``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from workflow_engine.models.factory.EdgeNodeModel import EdgeNodeModel
    from workflow_engine.models.factory.WorkflowNodeModel import WorkflowNodeModel

logger = logging.getLogger(__name__)


def validate_edge_connectivity(
    nodes: Sequence['WorkflowNodeModel'],
    edges: Sequence['EdgeNodeModel']
) -> List[Dict[str, Any]]:
    """
    Validate basic edge connectivity in the graph.

    Checks:
    1. Node ids are unique
    2. Source and target nodes exist
    3. No self-loops
    4. No duplicate edges
    """
    errors = []
    node_ids = set()

    for node in nodes:
        if node.id in node_ids:
            errors.append({
                "type": "DuplicateNodeId",
                "severity": "error",
                "node_id": node.id,
                "error_message": f"Duplicate node id: '{node.id}'",
            })
        node_ids.add(node.id)

    seen_edges = set()
    for edge in edges:
        if edge.source not in node_ids:
            errors.append({
                "type": "InvalidEdgeSource",
                "severity": "error",
                "edge_id": edge.id,
                "error_message": f"Edge references non-existent source node: '{edge.source}'",
                "source": edge.source,
                "target": edge.target
            })

        if edge.target not in node_ids:
            errors.append({
                "type": "InvalidEdgeTarget",
                "severity": "error",
                "edge_id": edge.id,
                "error_message": f"Edge references non-existent target node: '{edge.target}'",
                "source": edge.source,
                "target": edge.target
            })

        # A self loop is also a cycle; ordering rejects it
        if edge.source == edge.target:
            errors.append({
                "type": "SelfLoopEdge",
                "severity": "warning",
                "edge_id": edge.id,
                "error_message": f"Edge creates a self-loop on node: '{edge.source}'",
                "node_id": edge.source
            })

        edge_key = (edge.source, edge.target, edge.handle)
        if edge_key in seen_edges:
            errors.append({
                "type": "DuplicateEdge",
                "severity": "warning",
                "edge_id": edge.id,
                "error_message": f"Duplicate edge: {edge.source} -> {edge.target}.{edge.handle}",
                "source": edge.source,
                "target": edge.target,
                "handle": edge.handle,
            })
        seen_edges.add(edge_key)

    return errors


def validate_handle_collisions(
    edges: Sequence['EdgeNodeModel'],
    severity: str = "warning"
) -> List[Dict[str, Any]]:
    """
    Find handles on a node fed by more than one edge.

    At run time the later edge in the list wins; ``severity='error'`` turns
    that into a rejection.
    """
    sources: Dict[tuple, List[str]] = {}
    for edge in edges:
        sources.setdefault((edge.target, edge.handle), []).append(edge.source)

    errors = []
    for (target, handle), feeding in sources.items():
        if len(feeding) > 1:
            errors.append({
                "type": "HandleCollision",
                "severity": severity,
                "node_id": target,
                "handle": handle,
                "sources": feeding,
                "error_message": (
                    f"Node '{target}' receives {len(feeding)} edges on handle '{handle}' "
                    f"from {feeding}; the value from '{feeding[-1]}' wins"
                ),
                "suggestion": "Give each incoming edge its own targetHandle.",
            })
    return errors


def validate_node_types(
    nodes: Sequence['WorkflowNodeModel'],
    known_types: Iterable[str],
    severity: str = "warning"
) -> List[Dict[str, Any]]:
    """Report node types with no registered processor."""
    known = set(known_types)
    return [
        {
            "type": "UnknownNodeType",
            "severity": severity,
            "node_id": node.id,
            "attempted_type": node.type,
            "available_types": sorted(known),
            "error_message": f"No processor registered for node type '{node.type}' (node '{node.id}')",
        }
        for node in nodes
        if node.type not in known
    ]


def run_all_validations(
    nodes: Sequence['WorkflowNodeModel'],
    edges: Sequence['EdgeNodeModel'],
    known_types: Optional[Iterable[str]] = None,
    strict_handles: bool = False,
    strict_types: bool = False,
) -> List[Dict[str, Any]]:
    """
    Run all graph validations.

    Args:
        nodes: Workflow nodes
        edges: Workflow edges
        known_types: Registered node types; unknown types are skipped when None
        strict_handles: Report fan-in handle collisions as errors
        strict_types: Report unknown node types as errors

    Returns:
        Combined list of all validation errors/warnings
    """
    errors = []
    errors.extend(validate_edge_connectivity(nodes, edges))
    errors.extend(validate_handle_collisions(edges, severity="error" if strict_handles else "warning"))
    if known_types is not None:
        errors.extend(validate_node_types(nodes, known_types, severity="error" if strict_types else "warning"))

    for err in errors:
        if err['severity'] == 'warning':
            logger.warning("Graph validation warning: %s", err['error_message'])
        else:
            logger.error("Graph validation error: %s", err['error_message'])
    return errors
