#!/usr/bin/env python3
"""
Node registry mapping node types to their behaviors.

Automatically discovers and registers the built-in behaviors.
"""
from typing import Dict, Optional, List, Type, Union
import importlib
import inspect
import logging
from pathlib import Path

from .base import NodeBehavior, NodeType

logger = logging.getLogger(__name__)


class UnknownNodeTypeError(LookupError):
    """No behavior is registered for a node type"""

    def __init__(self, node_type: Union[NodeType, str]):
        tag = node_type.value if isinstance(node_type, NodeType) else node_type
        super().__init__(f"No function defined for node type: {tag}")
        self.node_type = node_type


class NodeRegistry:
    """Registry of behaviors keyed by node type"""

    def __init__(self):
        self._behaviors: Dict[NodeType, NodeBehavior] = {}
        self._node_metadata: Dict[NodeType, Dict] = {}

    def register(self, behavior: NodeBehavior, metadata: Optional[Dict] = None):
        """
        Register a behavior instance.

        Args:
            behavior: Behavior to register; its node_type is the key
            metadata: Optional metadata (defaults to the class metadata)
        """
        if behavior.node_type is None:
            raise ValueError(f"{behavior.__class__.__name__} does not declare a node_type")
        self._behaviors[behavior.node_type] = behavior
        self._node_metadata[behavior.node_type] = dict(metadata or behavior.metadata or {})

    def behavior_for(self, node_type: Union[NodeType, str]) -> NodeBehavior:
        """
        Get the behavior for a node type.

        Raises:
            UnknownNodeTypeError: if nothing is registered for the type
        """
        try:
            key = NodeType.parse(node_type)
        except ValueError:
            raise UnknownNodeTypeError(node_type) from None
        behavior = self._behaviors.get(key)
        if behavior is None:
            raise UnknownNodeTypeError(key)
        return behavior

    def has_behavior(self, node_type: Union[NodeType, str]) -> bool:
        try:
            self.behavior_for(node_type)
        except UnknownNodeTypeError:
            return False
        return True

    def list_node_types(self) -> List[NodeType]:
        """List all registered node types"""
        return list(self._behaviors.keys())

    def get_node_metadata(self, node_type: Union[NodeType, str]) -> Dict:
        """Get metadata for a node type"""
        return self._node_metadata.get(NodeType.parse(node_type), {})

    def discover_nodes(self, package_path: Path, package: str = "flowcanvas.nodes"):
        """
        Discover and register behaviors from a package.

        Args:
            package_path: Path to package containing node modules
            package: Dotted name of that package
        """
        if not package_path.exists():
            return

        for module_file in sorted(package_path.glob("*.py")):
            if module_file.name.startswith("_") or module_file.stem in ("base", "registry"):
                continue

            module = importlib.import_module(f"{package}.{module_file.stem}")
            for name, obj in inspect.getmembers(module, inspect.isclass):
                if (issubclass(obj, NodeBehavior) and
                        obj is not NodeBehavior and
                        obj.node_type is not None and
                        obj.__module__ == module.__name__):
                    self.register(obj())
                    logger.debug("Registered %s for node type %s", name, obj.node_type.value)


# Global registry instance
_registry = None


def get_registry() -> NodeRegistry:
    """Get the global node registry (lazy initialization)"""
    global _registry
    if _registry is None:
        _registry = NodeRegistry()
        _registry.discover_nodes(Path(__file__).parent)
    return _registry


def register_node(metadata: Optional[Dict] = None):
    """
    Decorator attaching registry metadata to a behavior class.

    Usage:
        @register_node(metadata={"category": "pool"})
        class PoolBehavior(NodeBehavior):
            ...
    """
    def decorator(behavior_class: Type[NodeBehavior]):
        behavior_class.metadata = dict(metadata or {})
        return behavior_class
    return decorator
