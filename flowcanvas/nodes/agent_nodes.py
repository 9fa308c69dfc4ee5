#!/usr/bin/env python3
"""
Agent nodes.

Wraps the external agent query service as a node.
"""
import asyncio
import json
import logging
from typing import Dict, Any, Callable, Optional

from flowcanvas.api.agent_query import query_agent
from flowcanvas.nodes.base import NodeBehavior, NodeType
from flowcanvas.nodes.registry import register_node
from flowcanvas.utils.common import utc_timestamp

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = "Default query"


def extract_question(input_data: Any) -> str:
    """Pick the question to send from whatever reached the agent node"""
    if isinstance(input_data, dict):
        nested = input_data.get("inputData")
        if isinstance(nested, dict) and nested.get("question"):
            return str(nested["question"])
        if input_data.get("question"):
            return str(input_data["question"])
    if not input_data:
        return DEFAULT_QUESTION
    if isinstance(input_data, str):
        return input_data
    return json.dumps(input_data, default=str)


@register_node(metadata={"category": "agent", "description": "Ask the agent service a question"})
class AgentBehavior(NodeBehavior):
    """
    Ask the agent service a question.

    Failures never escape this node: they come back as a normal result
    with success=False and the error message, so the node itself still
    completes and downstream nodes see the failure as data.
    """

    node_type = NodeType.AGENT

    def __init__(self, query: Optional[Callable[[str], Any]] = None):
        self.query = query or query_agent

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        question = extract_question(input_data)
        try:
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, self.query, question)
        except Exception as e:
            logger.error("Agent API request failed: %s", e)
            return {
                "agentResult": None,
                "processedInput": input_data,
                "success": False,
                "error": str(e) or "Unknown error",
                "timestamp": utc_timestamp()
            }

        return {
            "agentResult": response,
            "processedInput": input_data,
            "success": True,
            "timestamp": utc_timestamp()
        }
