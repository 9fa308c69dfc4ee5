"""Tests for the canvas web API."""

import pytest
from fastapi.testclient import TestClient

from flowcanvas.web.server import create_app

from .helpers import build_registry


@pytest.fixture
def client():
    app = create_app(registry=build_registry(), pacing_delay=0, max_workers=1)
    with TestClient(app) as client:
        yield client


def add_node(client, node_type, **body):
    response = client.post("/api/workflow/nodes", json={"type": node_type, **body})
    assert response.status_code == 200
    return response.json()["id"]


class TestCanvasEditing:

    def test_list_node_types(self, client):
        nodes = client.get("/api/nodes").json()["nodes"]
        assert len(nodes) == 7
        assert {node["type"] for node in nodes} >= {"start", "agent", "pool-watcher"}

    def test_add_and_read_back(self, client):
        node_id = add_node(client, "test", label="Ask", data={"question": "ping"},
                           position={"x": 5, "y": 7})

        workflow = client.get("/api/workflow").json()

        assert workflow["running"] is False
        assert workflow["run_status"] == "idle"
        [node] = workflow["nodes"]
        assert node["id"] == node_id
        assert node["data"]["label"] == "Ask"
        assert node["data"]["question"] == "ping"
        assert node["data"]["status"] == "idle"

    def test_unknown_type_rejected(self, client):
        response = client.post("/api/workflow/nodes", json={"type": "oracle"})
        assert response.status_code == 400

    def test_update_node(self, client):
        node_id = add_node(client, "agent")
        response = client.patch(f"/api/workflow/nodes/{node_id}",
                                json={"label": "Ask agent", "data": {"question": "pool size?"}})
        assert response.status_code == 200
        assert response.json()["data"]["question"] == "pool size?"
        assert response.json()["data"]["label"] == "Ask agent"

    def test_update_missing_node(self, client):
        assert client.patch("/api/workflow/nodes/ghost", json={}).status_code == 404

    def test_edges(self, client):
        a = add_node(client, "start")
        b = add_node(client, "output")

        assert client.post("/api/workflow/edges",
                           json={"source": a, "target": "ghost"}).status_code == 400

        edge = client.post("/api/workflow/edges", json={"source": a, "target": b, "id": "e1"}).json()
        assert edge == {"id": "e1", "source": a, "target": b}

        assert client.delete("/api/workflow/edges/e1").json() == {"success": True, "id": "e1"}
        assert client.delete("/api/workflow/edges/e1").status_code == 404

    def test_remove_node_removes_edges(self, client):
        a = add_node(client, "start")
        b = add_node(client, "output")
        client.post("/api/workflow/edges", json={"source": a, "target": b})

        assert client.delete(f"/api/workflow/nodes/{b}").status_code == 200
        assert client.get("/api/workflow").json()["edges"] == []
        assert client.delete(f"/api/workflow/nodes/{b}").status_code == 404

    def test_validate_document(self, client):
        body = client.post("/api/workflow/validate", json={
            "nodes": [{"id": "a", "type": "trigger"}, {"id": "b", "type": "pool"}],
            "edges": [{"source": "a", "target": "b"}, {"source": "b", "target": "a"}],
        }).json()
        assert body["valid"] is False
        assert body["errors"]


class TestRuns:

    def test_run_over_rest(self, client):
        start = add_node(client, "start")
        trigger = add_node(client, "trigger")
        output = add_node(client, "output")
        client.post("/api/workflow/edges", json={"source": start, "target": trigger})
        client.post("/api/workflow/edges", json={"source": trigger, "target": output})

        body = client.post("/api/workflow/run").json()

        assert body["started"] is True
        assert body["status"] == "completed"
        assert body["executed_nodes"] == [start, trigger, output]

        nodes = {node["id"]: node for node in client.get("/api/workflow").json()["nodes"]}
        assert nodes[output]["data"]["status"] == "success"
        assert nodes[output]["data"]["result"]["executedNodes"] == [start, trigger, output]

    def test_run_without_start_nodes(self, client):
        body = client.post("/api/workflow/run").json()
        assert body["status"] == "failed"
        assert body["error"].startswith("No start nodes found")

    def test_run_over_websocket(self, client):
        start = add_node(client, "start")
        output = add_node(client, "output")
        client.post("/api/workflow/edges", json={"source": start, "target": output})

        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"type": "run"})
            messages = []
            while True:
                message = websocket.receive_json()
                messages.append(message)
                if message["type"] == "execution_complete":
                    break

        updates = [(m["node_id"], m["status"]) for m in messages if m["type"] == "node_status"]
        assert (start, "running") in updates
        assert (start, "success") in updates
        assert updates[-1] == (output, "success")
        assert messages[-1]["executedNodes"] == [start, output]
        assert messages[-1]["status"] == "completed"

    def test_websocket_ignores_non_object_frames(self, client):
        add_node(client, "start")

        with client.websocket_connect("/ws") as websocket:
            websocket.send_json([1])
            websocket.send_json("run")
            websocket.send_json({"type": "run"})
            message = websocket.receive_json()
            while message["type"] != "execution_complete":
                message = websocket.receive_json()

        assert message["status"] == "completed"
