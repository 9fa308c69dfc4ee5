import pytest

from flowcanvas.engine.executor import WorkflowExecutor
from flowcanvas.engine.graph import GraphStore
from flowcanvas.engine.sink import CollectingSink

from .helpers import build_registry


@pytest.fixture
def graph():
    return GraphStore()


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def make_executor(graph, registry, sink):
    def factory(**kwargs):
        kwargs.setdefault("registry", registry)
        kwargs.setdefault("sink", sink)
        kwargs.setdefault("pacing_delay", 0)
        kwargs.setdefault("max_workers", 1)
        return WorkflowExecutor(graph, **kwargs)
    return factory
