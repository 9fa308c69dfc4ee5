#!/usr/bin/env python3
"""
Workflow execution engine.

Drives one run of the canvas graph: dependency ordering, input merging,
per-node status tracking and partial-failure tolerance.
"""
import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Set, Tuple

from flowcanvas.engine.data import DataManager
from flowcanvas.engine.graph import GraphStore
from flowcanvas.engine.resolver import DependencyResolver
from flowcanvas.engine.sink import StatusSink
from flowcanvas.nodes.base import NodeStatus, NodeType
from flowcanvas.nodes.registry import NodeRegistry, get_registry
from flowcanvas.utils.config import get_config_manager

logger = logging.getLogger(__name__)


class WorkflowStatus(Enum):
    """Run-level status"""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RunState:
    """State of a single run; replaced when the next run starts"""
    status: WorkflowStatus = WorkflowStatus.IDLE
    running: bool = False
    executed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    blocked: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None
    started_at: Optional[float] = None

    @property
    def attempted(self) -> Set[str]:
        return set(self.executed) | set(self.failed)


@dataclass
class ExecutionResult:
    """Result of workflow execution"""
    status: WorkflowStatus
    node_results: Dict[str, Any]
    executed_nodes: List[str]
    errors: Dict[str, str]
    blocked_nodes: List[str]
    error: Optional[str]
    execution_time: float
    total_nodes: int

    @property
    def success(self) -> bool:
        return self.status is WorkflowStatus.COMPLETED

    @property
    def completed_nodes(self) -> int:
        return len(self.executed_nodes)

    @property
    def failed_nodes(self) -> int:
        return len(self.errors)

    @property
    def summary(self) -> str:
        return f"Workflow completed. Executed {len(self.executed_nodes)} nodes."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "success": self.success,
            "node_results": self.node_results,
            "executed_nodes": self.executed_nodes,
            "errors": self.errors,
            "blocked_nodes": self.blocked_nodes,
            "error": self.error,
            "execution_time": self.execution_time,
            "total_nodes": self.total_nodes,
            "completed_nodes": self.completed_nodes,
            "failed_nodes": self.failed_nodes,
        }


class WorkflowExecutor:
    """Executes the workflow held by a graph store"""

    def __init__(self, graph: GraphStore, registry: Optional[NodeRegistry] = None,
                 sink: Optional[StatusSink] = None, pacing_delay: Optional[float] = None,
                 max_workers: Optional[int] = None):
        """
        Initialize workflow executor.

        Args:
            graph: Canvas to run. Each run executes a copy taken when it starts
                and writes node states back to the canvas
            registry: Node behaviors (default: global registry)
            sink: Receives every node update and the final snapshot
            pacing_delay: Pause after each node so live observers can follow
                (default: engine.pacing_delay from config)
            max_workers: Maximum ready nodes executed concurrently
                (default: engine.max_workers from config; 1 is strictly sequential)
        """
        engine_config = None
        if pacing_delay is None or max_workers is None:
            engine_config = get_config_manager().get_engine_config()

        self.graph = graph
        self.registry = registry or get_registry()
        self.sink = sink or StatusSink()
        self.pacing_delay = pacing_delay if pacing_delay is not None else engine_config.pacing_delay
        self.max_workers = max(1, max_workers if max_workers is not None else engine_config.max_workers)
        self.run_graph = graph
        self.resolver = DependencyResolver(graph)
        self.data_manager = DataManager(self.resolver)
        self.state = RunState()

    @property
    def is_running(self) -> bool:
        return self.state.running

    async def _set_status(self, node_id: str, status: NodeStatus, result: Any = None,
                          error: Optional[str] = None):
        # Nodes deleted mid-run still execute from the run copy but are not shown
        if not self.graph.has_node(node_id):
            logger.debug("Node %s was removed from the canvas; skipping %s update", node_id, status.value)
            return
        self.graph.update_status(node_id, status, result, error)
        await self.sink.node_updated(node_id, status, result, error)

    async def _reset(self):
        self.graph.reset_run_state()
        for node in self.graph.nodes:
            await self.sink.node_updated(node.node_id, NodeStatus.IDLE)

        # The run works on a copy taken now; canvas edits made while it runs
        # are not picked up until the next run
        self.run_graph = self.graph.copy()
        self.resolver = DependencyResolver(self.run_graph)
        self.data_manager = DataManager(self.resolver)

    async def execute_node(self, node_id: str, inputs: Any) -> Tuple[Any, Optional[str]]:
        """
        Execute a single node.

        Returns:
            Tuple of (result, error_message); error_message is None on success
        """
        node = self.run_graph.get_node(node_id)
        try:
            behavior = self.registry.behavior_for(node.node_type)
            actual_input = behavior.prepare_input(inputs, node.config)
            result = await behavior.execute(actual_input, node.config)
        except Exception as e:
            error = str(e) or e.__class__.__name__
            logger.warning("Error executing node %s (%s): %s", node_id, node.node_type.value, error)
            return None, error
        return result, None

    async def _execute_batch(self, batch: List[str]) -> List[Tuple[Any, Optional[str]]]:
        inputs = [self.data_manager.resolve_node_input(node_id) for node_id in batch]
        for node_id in batch:
            await self._set_status(node_id, NodeStatus.RUNNING)

        if len(batch) == 1:
            return [await self.execute_node(batch[0], inputs[0])]
        return list(await asyncio.gather(
            *(self.execute_node(node_id, node_input) for node_id, node_input in zip(batch, inputs))
        ))

    async def _drain(self, start_ids: List[str]):
        # Remaining unexecuted dependencies per node; a node is queued once it reaches zero
        remaining = self.resolver.in_degrees()
        queue: Deque[str] = deque(node_id for node_id in start_ids if remaining[node_id] == 0)
        queued: Set[str] = set(queue)

        while queue:
            batch = [queue.popleft() for _ in range(min(self.max_workers, len(queue)))]
            outcomes = await self._execute_batch(batch)

            # Outcomes are applied in queue order so the result map and the
            # enqueue order do not depend on completion order
            for node_id, (result, error) in zip(batch, outcomes):
                if error is not None:
                    self.state.failed.append(node_id)
                    self.state.errors[node_id] = error
                    await self._set_status(node_id, NodeStatus.ERROR, None, error)
                    continue

                self.data_manager.set_node_result(node_id, result)
                self.state.executed.append(node_id)
                await self._set_status(node_id, NodeStatus.SUCCESS, result)

                for target in self.resolver.outgoing_of(node_id):
                    remaining[target] -= 1
                    if remaining[target] == 0 and target not in queued:
                        queue.append(target)
                        queued.add(target)

            if self.pacing_delay > 0:
                await asyncio.sleep(self.pacing_delay)

        attempted = self.state.attempted
        self.state.blocked = [node.node_id for node in self.run_graph.nodes if node.node_id not in attempted]
        if self.state.blocked:
            logger.warning("Nodes never became ready: %s", ", ".join(self.state.blocked))

    def _bundle(self) -> Dict[str, Any]:
        return {
            "workflowResults": self.data_manager.node_results,
            "executedNodes": list(self.state.executed),
            "blockedNodes": list(self.state.blocked),
            "summary": f"Workflow completed. Executed {len(self.state.executed)} nodes.",
        }

    async def run(self) -> Optional[ExecutionResult]:
        """
        Run the workflow once.

        Returns:
            ExecutionResult, or None when a run is already in progress
            (the request is ignored, not queued)
        """
        if self.state.running:
            logger.info("Workflow run already in progress; ignoring run request")
            return None

        self.state = RunState(status=WorkflowStatus.RUNNING, running=True, started_at=time.time())
        logger.info("Workflow run started: %d nodes, %d edges", len(self.graph), len(self.graph.edges))

        try:
            await self._reset()
            start_ids = self.resolver.start_nodes()
            await self._drain(start_ids)

            bundle = self._bundle()
            for node in self.run_graph.nodes_of_type(NodeType.OUTPUT):
                await self._set_status(node.node_id, NodeStatus.SUCCESS, bundle)
            self.state.status = WorkflowStatus.COMPLETED
        except Exception as e:
            message = str(e) or "Workflow execution failed"
            logger.error("Workflow execution failed: %s", message)
            self.state.status = WorkflowStatus.FAILED
            self.state.error = message
            for node in self.run_graph.nodes_of_type(NodeType.OUTPUT):
                await self._set_status(node.node_id, NodeStatus.ERROR, None, message)
        finally:
            self.state.running = False

        result = ExecutionResult(
            status=self.state.status,
            node_results=self.data_manager.node_results,
            executed_nodes=list(self.state.executed),
            errors=dict(self.state.errors),
            blocked_nodes=list(self.state.blocked),
            error=self.state.error,
            execution_time=time.time() - self.state.started_at,
            total_nodes=len(self.run_graph),
        )
        logger.info("Workflow run %s in %.2fs (%d executed, %d failed, %d blocked)",
                    result.status.value, result.execution_time, result.completed_nodes,
                    result.failed_nodes, len(result.blocked_nodes))

        snapshot = dict(self._bundle(), status=result.status.value, error=result.error,
                        errors=result.errors)
        if not result.success:
            snapshot["summary"] = None
        await self.sink.run_finished(snapshot)
        return result
