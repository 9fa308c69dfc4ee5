#!/usr/bin/env python3
"""
Base classes for the workflow node system.

Defines the closed set of node types, per-node execution status and the
behavior strategy each node type is bound to.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class NodeType(Enum):
    """Node type tags understood by the canvas"""
    START = "start"
    TRIGGER = "trigger"
    AGENT = "agent"
    POOL = "pool"
    POOL_WATCHER = "pool-watcher"
    TEST = "test"
    OUTPUT = "output"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """Parse a type tag, accepting the legacy 'poolwatcher' spelling"""
        if isinstance(value, cls):
            return value
        if value == "poolwatcher":
            return cls.POOL_WATCHER
        return cls(value)

    @property
    def default_label(self) -> str:
        return f"{self.value.capitalize()} Node"


class NodeStatus(Enum):
    """Execution status of a node within a run"""
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


class NodeBehavior(ABC):
    """
    Executable logic bound to one node type.

    Behaviors are stateless strategies: the same instance serves every node
    of its type, receiving the merged upstream input and the node's own
    configuration on each call.
    """

    node_type: Optional[NodeType] = None
    metadata: Dict[str, Any] = {}

    def prepare_input(self, input_data: Any, config: Dict[str, Any]) -> Any:
        """Adjust the merged input before execution (default: unchanged)"""
        return input_data

    @abstractmethod
    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Any:
        """
        Run the node.

        Args:
            input_data: Merged results of upstream nodes (None for entry nodes)
            config: The node's own configuration

        Returns:
            Result payload recorded for the node and handed downstream
        """
        pass

    def get_title(self) -> str:
        return self.node_type.default_label if self.node_type else self.__class__.__name__

    def get_description(self) -> str:
        return (self.__doc__ or "").strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.node_type.value if self.node_type else None,
            "title": self.get_title(),
            "description": self.get_description(),
            "category": self.metadata.get("category", "other"),
        }
