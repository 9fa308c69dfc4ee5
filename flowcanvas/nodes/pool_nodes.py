#!/usr/bin/env python3
"""
Liquidity pool nodes.
"""
import asyncio
import random
from typing import Dict, Any, Optional

from flowcanvas.nodes.base import NodeBehavior, NodeType
from flowcanvas.nodes.registry import register_node
from flowcanvas.utils.common import random_id, utc_timestamp
from flowcanvas.utils.config import get_config_manager


@register_node(metadata={"category": "pool", "description": "Store input in a pool"})
class PoolBehavior(NodeBehavior):
    """Store input in a pool"""

    node_type = NodeType.POOL

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "poolData": input_data,
            "poolStatus": "stored",
            "poolId": random_id(),
            "timestamp": utc_timestamp()
        }


@register_node(metadata={"category": "pool", "description": "Watch a pool for changes"})
class PoolWatcherBehavior(NodeBehavior):
    """Watch a pool for changes"""

    node_type = NodeType.POOL_WATCHER

    def __init__(self, watch_delay: Optional[float] = None):
        self.watch_delay = watch_delay

    async def execute(self, input_data: Any, config: Dict[str, Any]) -> Dict[str, Any]:
        delay = self.watch_delay
        if delay is None:
            delay = get_config_manager().get_engine_config().pool_watch_delay
        if delay > 0:
            await asyncio.sleep(delay)

        return {
            "watchStatus": "monitoring",
            "poolChanges": random.randint(0, 9),
            "lastUpdate": utc_timestamp(),
            "inputData": input_data
        }
