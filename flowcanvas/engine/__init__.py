"""
Execution engine for canvas workflows.

Handles the graph store, dependency resolution, input merging and runs.
"""
from .graph import CanvasNode, Edge, GraphError, GraphStore
from .resolver import DependencyResolver, NoStartNodesError
from .data import DataManager, merge_inputs
from .sink import StatusSink, NullSink, CollectingSink, LoggingSink, CallbackSink, MultiSink
from .executor import WorkflowExecutor, ExecutionResult, RunState, WorkflowStatus

__all__ = [
    'CanvasNode',
    'Edge',
    'GraphError',
    'GraphStore',
    'DependencyResolver',
    'NoStartNodesError',
    'DataManager',
    'merge_inputs',
    'StatusSink',
    'NullSink',
    'CollectingSink',
    'LoggingSink',
    'CallbackSink',
    'MultiSink',
    'WorkflowExecutor',
    'ExecutionResult',
    'RunState',
    'WorkflowStatus',
]
