#!/usr/bin/env python3
"""
Graph store for the workflow canvas.

Holds the current nodes and edges plus each node's run state. Every
mutation is synchronous and visible to the next read.
"""
import itertools
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from flowcanvas.nodes.base import NodeStatus, NodeType


class GraphError(ValueError):
    """Invalid edit of the workflow graph"""


@dataclass
class CanvasNode:
    """A node on the canvas together with its run state"""
    node_id: str
    node_type: NodeType
    label: str
    status: NodeStatus = NodeStatus.IDLE
    result: Any = None
    error: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    position: Dict[str, float] = field(default_factory=lambda: {"x": 0.0, "y": 0.0})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.node_id,
            "type": self.node_type.value,
            "position": dict(self.position),
            "data": {
                **self.config,
                "label": self.label,
                "status": self.status.value,
                "result": self.result,
                "error": self.error,
            }
        }


@dataclass(frozen=True)
class Edge:
    """Directed data dependency: target consumes source's result"""
    edge_id: str
    source: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.edge_id, "source": self.source, "target": self.target}


def counter_ids(start: int = 0) -> Callable[[], str]:
    """Node id generator yielding "0", "1", "2", ..."""
    counter: Iterator[int] = itertools.count(start)
    return lambda: str(next(counter))


def uuid_ids() -> str:
    return str(uuid.uuid4())


class GraphStore:
    """Nodes and edges of one workflow canvas"""

    def __init__(self, node_id_factory: Optional[Callable[[], str]] = None,
                 edge_id_factory: Optional[Callable[[], str]] = None):
        """
        Initialize an empty graph.

        Args:
            node_id_factory: Generates ids for nodes added without one
                (default: per-store counter)
            edge_id_factory: Generates ids for edges added without one
                (default: uuid4)
        """
        self._node_ids = node_id_factory or counter_ids()
        self._edge_ids = edge_id_factory or uuid_ids
        self._nodes: Dict[str, CanvasNode] = {}
        self._edges: Dict[str, Edge] = {}

    @property
    def nodes(self) -> List[CanvasNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> CanvasNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise GraphError(f"Unknown node: {node_id}") from None

    def nodes_of_type(self, node_type: NodeType) -> List[CanvasNode]:
        return [node for node in self._nodes.values() if node.node_type is node_type]

    def add_node(self, node_type: Union[NodeType, str], node_id: Optional[str] = None,
                 label: Optional[str] = None, config: Optional[Dict[str, Any]] = None,
                 position: Optional[Dict[str, float]] = None) -> CanvasNode:
        """Insert a node in idle state"""
        try:
            node_type = NodeType.parse(node_type)
        except ValueError:
            raise GraphError(f"Unknown node type: {node_type}") from None

        if node_id is None:
            node_id = self._node_ids()
            while node_id in self._nodes:
                node_id = self._node_ids()
        elif node_id in self._nodes:
            raise GraphError(f"Duplicate node id: {node_id}")

        node = CanvasNode(
            node_id=node_id,
            node_type=node_type,
            label=label or node_type.default_label,
            config=dict(config or {}),
        )
        if position is not None:
            node.position = dict(position)
        self._nodes[node_id] = node
        return node

    def remove_node(self, node_id: str) -> CanvasNode:
        """Remove a node and every edge touching it"""
        node = self.get_node(node_id)
        del self._nodes[node_id]
        self._edges = {
            edge_id: edge for edge_id, edge in self._edges.items()
            if edge.source != node_id and edge.target != node_id
        }
        return node

    def add_edge(self, source: str, target: str, edge_id: Optional[str] = None) -> Edge:
        """Connect source -> target; both endpoints must exist"""
        for endpoint in (source, target):
            if endpoint not in self._nodes:
                raise GraphError(f"Edge endpoint does not exist: {endpoint}")
        if edge_id is None:
            edge_id = self._edge_ids()
        elif edge_id in self._edges:
            raise GraphError(f"Duplicate edge id: {edge_id}")

        edge = Edge(edge_id=edge_id, source=source, target=target)
        self._edges[edge_id] = edge
        return edge

    def remove_edge(self, edge_id: str) -> Edge:
        try:
            return self._edges.pop(edge_id)
        except KeyError:
            raise GraphError(f"Unknown edge: {edge_id}") from None

    def update_node_config(self, node_id: str, label: Optional[str] = None,
                           **config) -> CanvasNode:
        """Edit-time changes: label and type-specific configuration"""
        node = self.get_node(node_id)
        if label is not None:
            node.label = label
        node.config.update(config)
        return node

    def update_status(self, node_id: str, status: NodeStatus, result: Any = None,
                      error: Optional[str] = None) -> CanvasNode:
        """Replace status, result and error of one node; nothing else changes"""
        node = self.get_node(node_id)
        node.status = status
        node.result = result
        node.error = error
        return node

    def copy(self) -> "GraphStore":
        """Detached copy of the current nodes and edges; later edits to either side are not shared"""
        clone = GraphStore()
        for node_id, node in self._nodes.items():
            clone._nodes[node_id] = replace(node, config=dict(node.config), position=dict(node.position))
        clone._edges = dict(self._edges)
        return clone

    def reset_run_state(self):
        """Put every node back to idle with no result or error"""
        for node_id in list(self._nodes):
            self.update_status(node_id, NodeStatus.IDLE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges.values()],
        }

    def __len__(self) -> int:
        return len(self._nodes)
