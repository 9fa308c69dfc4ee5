#!/usr/bin/env python3
"""
Workflow document format.

Converts between JSON documents (the shape the canvas UI exchanges) and
GraphStore instances. Documents are read for a run; nothing is stored.
"""
import json
from pathlib import Path
from typing import Dict, List, Any, Optional, Tuple

from flowcanvas.engine.graph import GraphStore
from flowcanvas.engine.resolver import NO_START_NODES
from flowcanvas.nodes.base import NodeType
from flowcanvas.nodes.registry import NodeRegistry, get_registry

FORMAT_VERSION = "1.0"

# Node data keys that belong to run state, not configuration
RUN_STATE_KEYS = ("label", "status", "result", "error")


class WorkflowSerializer:
    """Handles workflow document conversion"""

    def __init__(self, registry: Optional[NodeRegistry] = None):
        self.registry = registry or get_registry()

    def serialize_workflow(self, graph: GraphStore,
                           metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Serialize a graph to dictionary format.

        Args:
            graph: Graph to serialize
            metadata: Optional workflow metadata

        Returns:
            Dictionary representation of the workflow
        """
        workflow = {
            "version": FORMAT_VERSION,
            "metadata": metadata or {},
        }
        workflow.update(graph.to_dict())
        return workflow

    def deserialize_workflow(self, workflow_data: Dict[str, Any],
                             graph: Optional[GraphStore] = None) -> GraphStore:
        """
        Build a graph from dictionary format.

        Args:
            workflow_data: Dictionary representation of the workflow
            graph: Graph to load into (default: a new one)

        Returns:
            The populated graph

        Raises:
            GraphError: on unknown node types, duplicate ids or dangling edges
        """
        if graph is None:
            graph = GraphStore()

        for node_data in workflow_data.get("nodes", []):
            data = dict(node_data.get("data") or {})
            config = {key: value for key, value in data.items() if key not in RUN_STATE_KEYS}
            config.update(node_data.get("config") or {})
            graph.add_node(
                node_data["type"],
                node_id=str(node_data["id"]) if "id" in node_data else None,
                label=node_data.get("label") or data.get("label"),
                config=config,
                position=node_data.get("position"),
            )

        for edge_data in workflow_data.get("edges", []):
            graph.add_edge(
                str(edge_data["source"]),
                str(edge_data["target"]),
                edge_id=str(edge_data["id"]) if edge_data.get("id") is not None else None,
            )

        return graph

    def validate_workflow(self, workflow_data: Dict[str, Any]) -> List[str]:
        """
        Check a workflow document without building it.

        Returns:
            List of problems (empty when the document is valid)
        """
        errors: List[str] = []
        node_ids = set()
        has_entry = False
        targets = {str(edge.get("target")) for edge in workflow_data.get("edges", [])}

        for index, node_data in enumerate(workflow_data.get("nodes", [])):
            node_id = node_data.get("id")
            if node_id is None:
                errors.append(f"Node #{index} has no id")
                continue
            node_id = str(node_id)
            if node_id in node_ids:
                errors.append(f"Duplicate node id: {node_id}")
            node_ids.add(node_id)

            try:
                node_type = NodeType.parse(node_data.get("type"))
            except ValueError:
                errors.append(f"Node {node_id} has unknown type: {node_data.get('type')}")
                continue
            if not self.registry.has_behavior(node_type):
                errors.append(f"Node {node_id}: no behavior registered for type {node_type.value}")
            if node_type is NodeType.START or node_id not in targets:
                has_entry = True

        for edge_data in workflow_data.get("edges", []):
            for end in ("source", "target"):
                if str(edge_data.get(end)) not in node_ids:
                    errors.append(f"Edge references unknown node: {edge_data.get(end)}")

        if node_ids and not has_entry:
            errors.append(NO_START_NODES)

        return errors

    def load_workflow(self, workflow_path: Path) -> Tuple[GraphStore, Dict[str, Any]]:
        """
        Load a workflow document from a JSON file.

        Args:
            workflow_path: Path to workflow file

        Returns:
            Tuple of (graph, metadata)
        """
        with open(workflow_path, 'r') as f:
            workflow_data = json.load(f)

        graph = self.deserialize_workflow(workflow_data)
        metadata = workflow_data.get("metadata", {})

        return graph, metadata

