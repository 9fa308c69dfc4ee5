"""Tests for the command line interface."""

import json
import sys

import pytest

from flowcanvas.nodes.registry import get_registry
from flowcanvas.workflows.cli import main

WORKFLOW = {
    "version": "1.0",
    "metadata": {"name": "cli run"},
    "nodes": [
        {"id": "s", "type": "start"},
        {"id": "p", "type": "pool"},
        {"id": "o", "type": "output"},
    ],
    "edges": [
        {"source": "s", "target": "p"},
        {"source": "p", "target": "o"},
    ],
}


@pytest.fixture
def workflow_file(tmp_path):
    path = tmp_path / "workflow.json"
    path.write_text(json.dumps(WORKFLOW))
    return path


def run_cli(monkeypatch, *args):
    """Run main() with the given arguments; returns the exit code"""
    monkeypatch.setattr(sys, "argv", ["flowcanvas", *args])
    try:
        main()
    except SystemExit as e:
        return e.code
    return 0


class TestListNodes:

    def test_groups_types_by_category(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "list-nodes") == 0

        out = capsys.readouterr().out
        assert "Available Node Types" in out
        for heading in ("AGENT:", "CONTROL:", "POOL:"):
            assert heading in out
        assert "pool-watcher" in out


class TestValidate:

    def test_valid_file(self, monkeypatch, capsys, workflow_file):
        assert run_cli(monkeypatch, "validate", str(workflow_file)) == 0
        assert "Workflow is valid" in capsys.readouterr().out

    def test_invalid_file(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({
            "nodes": [{"id": "a", "type": "oracle"}],
            "edges": [{"source": "a", "target": "b"}],
        }))

        assert run_cli(monkeypatch, "validate", str(path)) == 1

        out = capsys.readouterr().out
        assert "Node a has unknown type: oracle" in out
        assert "Edge references unknown node: b" in out

    def test_missing_file(self, monkeypatch, capsys, tmp_path):
        assert run_cli(monkeypatch, "validate", str(tmp_path / "nope.json")) == 1
        assert "Workflow file not found" in capsys.readouterr().err


class TestExecute:

    def test_successful_run_writes_results(self, monkeypatch, capsys, workflow_file, tmp_path):
        output = tmp_path / "out" / "results.json"

        code = run_cli(monkeypatch, "execute", str(workflow_file), "--output", str(output))

        assert code == 0
        assert "Workflow completed. Executed 3 nodes." in capsys.readouterr().out
        results = json.loads(output.read_text())
        assert results["status"] == "completed"
        assert results["executed_nodes"] == ["s", "p", "o"]
        assert results["node_results"]["p"]["poolStatus"] == "stored"
        assert results["workflow"]["metadata"] == {"name": "cli run"}
        assert results["workflow"]["nodes"][2]["data"]["result"]["executedNodes"] == ["s", "p", "o"]

    def test_node_failure_exits_non_zero(self, monkeypatch, capsys, workflow_file):
        async def offline(input_data, config):
            raise RuntimeError("pool offline")

        monkeypatch.setattr(get_registry().behavior_for("pool"), "execute", offline)

        code = run_cli(monkeypatch, "execute", str(workflow_file))

        assert code == 1
        out = capsys.readouterr().out
        assert "p: pool offline" in out
        assert "Never ran" in out

    def test_no_start_nodes_exits_non_zero(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "loop.json"
        path.write_text(json.dumps({
            "nodes": [{"id": "a", "type": "trigger"}, {"id": "b", "type": "pool"}],
            "edges": [{"source": "a", "target": "b"}, {"source": "b", "target": "a"}],
        }))

        assert run_cli(monkeypatch, "execute", str(path)) == 1
        assert "Run error: No start nodes found" in capsys.readouterr().out

    def test_missing_file(self, monkeypatch, capsys, tmp_path):
        assert run_cli(monkeypatch, "execute", str(tmp_path / "nope.json")) == 1
        assert "Workflow file not found" in capsys.readouterr().err

    def test_dangling_edge_reported(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "dangling.json"
        path.write_text(json.dumps({
            "nodes": [{"id": "s", "type": "start"}],
            "edges": [{"source": "s", "target": "ghost"}],
        }))

        assert run_cli(monkeypatch, "execute", str(path)) == 1
        assert "Could not load workflow" in capsys.readouterr().err
