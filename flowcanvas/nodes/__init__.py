"""
Node system for flowcanvas workflows.

Each node type on the canvas is bound to a behavior: a strategy object that
turns the node's merged input and configuration into a result.
"""
from .base import NodeBehavior, NodeStatus, NodeType
from .registry import NodeRegistry, UnknownNodeTypeError, get_registry, register_node

__all__ = [
    'NodeBehavior',
    'NodeStatus',
    'NodeType',
    'NodeRegistry',
    'UnknownNodeTypeError',
    'get_registry',
    'register_node',
]
