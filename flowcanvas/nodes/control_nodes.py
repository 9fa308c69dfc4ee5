#!/usr/bin/env python3
"""
Flow control nodes: workflow entry points, test probes and outputs.
"""
from typing import Dict, Any

from flowcanvas.nodes.base import NodeBehavior, NodeType
from flowcanvas.nodes.registry import register_node
from flowcanvas.utils.common import utc_timestamp


@register_node(metadata={"category": "control", "description": "Entry point of a workflow"})
class StartBehavior(NodeBehavior):
    """Entry point of a workflow"""

    node_type = NodeType.START

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "message": "Workflow started",
            "timestamp": utc_timestamp()
        }


@register_node(metadata={"category": "control", "description": "Fire the workflow, echoing its input"})
class TriggerBehavior(NodeBehavior):
    """Fire the workflow, echoing its input"""

    node_type = NodeType.TRIGGER

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "triggered": True,
            "triggerData": input_data or "Manual trigger",
            "timestamp": utc_timestamp()
        }


@register_node(metadata={"category": "control", "description": "Pass input through, tagged as a test run"})
class TestBehavior(NodeBehavior):
    """Pass input through, tagged as a test run"""

    node_type = NodeType.TEST
    __test__ = False  # not a pytest test class

    def prepare_input(self, input_data: Any, config: Dict[str, Any]) -> Any:
        # A configured question stands in for missing upstream input
        question = config.get("question")
        if question and not input_data:
            return {"question": question}
        return input_data

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        result = {
            "testResult": "Test node executed successfully",
            "inputData": input_data,
            "timestamp": utc_timestamp()
        }
        if isinstance(input_data, dict):
            result.update(input_data)
        return result


@register_node(metadata={"category": "control", "description": "Collect the final workflow result"})
class OutputBehavior(NodeBehavior):
    """Collect the final workflow result"""

    node_type = NodeType.OUTPUT

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "finalResult": input_data,
            "outputGenerated": True,
            "timestamp": utc_timestamp()
        }
