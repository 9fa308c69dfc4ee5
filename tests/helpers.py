"""Behaviors and registries shared by the test modules."""

import asyncio
from typing import Any, Dict

from flowcanvas.nodes.agent_nodes import AgentBehavior
from flowcanvas.nodes.base import NodeBehavior, NodeType
from flowcanvas.nodes.control_nodes import OutputBehavior, StartBehavior, TestBehavior, TriggerBehavior
from flowcanvas.nodes.pool_nodes import PoolBehavior, PoolWatcherBehavior
from flowcanvas.nodes.registry import NodeRegistry


def fake_agent(question: str) -> Dict[str, Any]:
    return {"answer": f"echo: {question}"}


class FailingBehavior(NodeBehavior):
    """Always raises"""

    def __init__(self, node_type: NodeType, message: str = "boom"):
        self.node_type = node_type
        self.message = message

    async def execute(self, input_data, config):
        raise RuntimeError(self.message)


class PayloadBehavior(NodeBehavior):
    """Returns the payload configured on the node"""

    def __init__(self, node_type: NodeType):
        self.node_type = node_type

    async def execute(self, input_data, config):
        return config.get("payload")


class GateBehavior(NodeBehavior):
    """Blocks until released, so a run can be held open"""

    def __init__(self, node_type: NodeType):
        self.node_type = node_type
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def execute(self, input_data, config):
        self.entered.set()
        await self.release.wait()
        return {"gated": True}


class ConcurrencyMeter(NodeBehavior):
    """Records how many executions overlap"""

    def __init__(self, node_type: NodeType, delay: float = 0.02):
        self.node_type = node_type
        self.delay = delay
        self.in_flight = 0
        self.peak = 0

    async def execute(self, input_data, config):
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(self.delay)
        self.in_flight -= 1
        return {"measured": config.get("name")}


def build_registry(*overrides: NodeBehavior) -> NodeRegistry:
    registry = NodeRegistry()
    for behavior in (
        StartBehavior(),
        TriggerBehavior(),
        AgentBehavior(query=fake_agent),
        PoolBehavior(),
        PoolWatcherBehavior(watch_delay=0),
        TestBehavior(),
        OutputBehavior(),
    ):
        registry.register(behavior)
    for behavior in overrides:
        registry.register(behavior)
    return registry
