#!/usr/bin/env python3
"""
Dependency resolution over the workflow graph.
"""
from typing import Dict, List

from flowcanvas.engine.graph import Edge, GraphStore
from flowcanvas.nodes.base import NodeType

NO_START_NODES = "No start nodes found. Add a Start node to begin the workflow."


class NoStartNodesError(RuntimeError):
    """The graph has no entry point"""

    def __init__(self, message: str = NO_START_NODES):
        super().__init__(message)


class DependencyResolver:
    """Answers dependency questions about a graph, always from its current state"""

    def __init__(self, graph: GraphStore):
        self.graph = graph

    def live_edges(self) -> List[Edge]:
        """Edges whose endpoints both exist; anything else is inert"""
        return [
            edge for edge in self.graph.edges
            if self.graph.has_node(edge.source) and self.graph.has_node(edge.target)
        ]

    def incoming_of(self, node_id: str) -> List[str]:
        """Source ids of edges into node_id, in edge order"""
        return [edge.source for edge in self.live_edges() if edge.target == node_id]

    def outgoing_of(self, node_id: str) -> List[str]:
        """Target ids of edges out of node_id, in edge order"""
        return [edge.target for edge in self.live_edges() if edge.source == node_id]

    def in_degrees(self) -> Dict[str, int]:
        """Number of incoming edges per node"""
        degrees = {node.node_id: 0 for node in self.graph.nodes}
        for edge in self.live_edges():
            degrees[edge.target] += 1
        return degrees

    def start_nodes(self) -> List[str]:
        """
        Entry points of the workflow, in node order.

        A node qualifies when it has no incoming edges or is typed start,
        even if a start node has predecessors.

        Raises:
            NoStartNodesError: if no node qualifies
        """
        degrees = self.in_degrees()
        start_ids = [
            node.node_id for node in self.graph.nodes
            if degrees[node.node_id] == 0 or node.node_type is NodeType.START
        ]
        if not start_ids:
            raise NoStartNodesError()
        return start_ids
