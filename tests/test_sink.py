"""Tests for status sinks."""

import pytest

from flowcanvas.engine.sink import CallbackSink, CollectingSink, MultiSink
from flowcanvas.nodes.base import NodeStatus

pytestmark = pytest.mark.asyncio


async def test_callback_sink_with_plain_callables():
    updates, finished = [], []
    sink = CallbackSink(on_node=lambda *args: updates.append(args), on_finish=finished.append)

    await sink.node_updated("a", NodeStatus.SUCCESS, {"ok": True})
    await sink.run_finished({"status": "completed"})

    assert updates == [("a", NodeStatus.SUCCESS, {"ok": True}, None)]
    assert finished == [{"status": "completed"}]


async def test_callback_sink_awaits_coroutines():
    updates, finished = [], []

    async def on_node(node_id, status, result, error):
        updates.append((node_id, status, error))

    async def on_finish(snapshot):
        finished.append(snapshot["status"])

    sink = CallbackSink(on_node=on_node, on_finish=on_finish)
    await sink.node_updated("a", NodeStatus.ERROR, None, "boom")
    await sink.run_finished({"status": "failed"})

    assert updates == [("a", NodeStatus.ERROR, "boom")]
    assert finished == ["failed"]


async def test_callback_sink_without_callables():
    sink = CallbackSink()
    await sink.node_updated("a", NodeStatus.RUNNING)
    await sink.run_finished({})


async def test_multi_sink_fans_out_in_order():
    first, second = CollectingSink(), CollectingSink()
    sink = MultiSink(first, second)

    await sink.node_updated("a", NodeStatus.RUNNING)
    await sink.run_finished({"status": "completed"})

    assert first.updates == second.updates == [("a", NodeStatus.RUNNING, None, None)]
    assert first.snapshots == second.snapshots == [{"status": "completed"}]
