#!/usr/bin/env python3
"""
Status sinks: observers of per-node updates and finished runs.

Sinks only receive data; they never write back into the graph.
"""
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from flowcanvas.nodes.base import NodeStatus

logger = logging.getLogger(__name__)

NodeUpdate = Tuple[str, NodeStatus, Any, Optional[str]]


class StatusSink:
    """Base sink; ignores everything"""

    async def node_updated(self, node_id: str, status: NodeStatus,
                           result: Any = None, error: Optional[str] = None):
        pass

    async def run_finished(self, snapshot: Dict[str, Any]):
        pass


NullSink = StatusSink


class CollectingSink(StatusSink):
    """Keeps every update in memory"""

    def __init__(self):
        self.updates: List[NodeUpdate] = []
        self.snapshots: List[Dict[str, Any]] = []

    async def node_updated(self, node_id, status, result=None, error=None):
        self.updates.append((node_id, status, result, error))

    async def run_finished(self, snapshot):
        self.snapshots.append(snapshot)

    def statuses_for(self, node_id: str) -> List[NodeStatus]:
        return [status for nid, status, _, _ in self.updates if nid == node_id]


class LoggingSink(StatusSink):
    """Writes updates to the log"""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    async def node_updated(self, node_id, status, result=None, error=None):
        if status is NodeStatus.ERROR:
            logger.warning("node %s -> %s: %s", node_id, status.value, error)
        else:
            logger.log(self.level, "node %s -> %s", node_id, status.value)

    async def run_finished(self, snapshot):
        logger.info("run %s: %s", snapshot.get("status"), snapshot.get("summary") or snapshot.get("error"))


class CallbackSink(StatusSink):
    """Forwards updates to plain or async callables"""

    def __init__(self, on_node: Optional[Callable[..., Any]] = None,
                 on_finish: Optional[Callable[[Dict[str, Any]], Any]] = None):
        self.on_node = on_node
        self.on_finish = on_finish

    async def node_updated(self, node_id, status, result=None, error=None):
        if self.on_node is not None:
            outcome = self.on_node(node_id, status, result, error)
            if inspect.isawaitable(outcome):
                await outcome

    async def run_finished(self, snapshot):
        if self.on_finish is not None:
            outcome = self.on_finish(snapshot)
            if inspect.isawaitable(outcome):
                await outcome


class MultiSink(StatusSink):
    """Fans updates out to several sinks in order"""

    def __init__(self, *sinks: StatusSink):
        self.sinks = list(sinks)

    async def node_updated(self, node_id, status, result=None, error=None):
        for sink in self.sinks:
            await sink.node_updated(node_id, status, result, error)

    async def run_finished(self, snapshot):
        for sink in self.sinks:
            await sink.run_finished(snapshot)
