#!/usr/bin/env python3
"""
Web server backing the workflow canvas.

Provides a REST API for editing the canvas and running it, plus a
WebSocket feed of node status changes for live repainting.
"""
import logging
from typing import Dict, List, Any, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from pydantic import BaseModel
import uvicorn

from flowcanvas.engine.executor import WorkflowExecutor
from flowcanvas.engine.graph import GraphError, GraphStore
from flowcanvas.engine.sink import LoggingSink, MultiSink, StatusSink
from flowcanvas.nodes.base import NodeStatus
from flowcanvas.nodes.registry import NodeRegistry, get_registry
from flowcanvas.workflows.serialization import WorkflowSerializer

logger = logging.getLogger(__name__)


class WorkflowRequest(BaseModel):
    nodes: List[Dict[str, Any]]
    edges: List[Dict[str, Any]] = []


class NodeCreateRequest(BaseModel):
    type: str
    id: Optional[str] = None
    label: Optional[str] = None
    position: Optional[Dict[str, float]] = None
    data: Dict[str, Any] = {}


class NodeUpdateRequest(BaseModel):
    label: Optional[str] = None
    data: Dict[str, Any] = {}


class EdgeCreateRequest(BaseModel):
    source: str
    target: str
    id: Optional[str] = None


# WebSocket for real-time execution updates
class ConnectionManager(StatusSink):
    """Broadcasts run progress to every connected editor"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def send_message(self, message: dict):
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.info("Dropping websocket connection: %s", e)
                self.disconnect(connection)

    async def node_updated(self, node_id, status: NodeStatus, result=None, error=None):
        await self.send_message({
            "type": "node_status",
            "node_id": node_id,
            "status": status.value,
            "result": result,
            "error": error,
        })

    async def run_finished(self, snapshot):
        await self.send_message({"type": "execution_complete", **snapshot})


def create_app(graph: Optional[GraphStore] = None, registry: Optional[NodeRegistry] = None,
               pacing_delay: Optional[float] = None, max_workers: Optional[int] = None) -> FastAPI:
    """
    Build the API around one in-memory canvas.

    Args:
        graph: Canvas to serve (default: empty)
        registry: Node behaviors (default: global registry)
        pacing_delay: Passed to the executor
        max_workers: Passed to the executor
    """
    app = FastAPI(title="flowcanvas")

    canvas = graph if graph is not None else GraphStore()
    registry = registry or get_registry()
    manager = ConnectionManager()
    serializer = WorkflowSerializer(registry)
    runner = WorkflowExecutor(
        canvas,
        registry=registry,
        sink=MultiSink(LoggingSink(), manager),
        pacing_delay=pacing_delay,
        max_workers=max_workers,
    )

    app.state.canvas = canvas
    app.state.manager = manager
    app.state.runner = runner

    def not_found(e: GraphError):
        return HTTPException(status_code=404, detail=str(e))

    @app.get("/api/nodes")
    async def list_nodes():
        """Get all available node types"""
        nodes_info = []
        for node_type in registry.list_node_types():
            info = registry.behavior_for(node_type).to_dict()
            info.update(registry.get_node_metadata(node_type))
            nodes_info.append(info)
        return {"nodes": nodes_info}

    @app.get("/api/workflow")
    async def get_workflow():
        """Current canvas with run state"""
        return {
            **serializer.serialize_workflow(canvas),
            "running": runner.is_running,
            "run_status": runner.state.status.value,
        }

    @app.post("/api/workflow/nodes")
    async def add_node(request: NodeCreateRequest):
        try:
            node = canvas.add_node(
                request.type,
                node_id=request.id,
                label=request.label,
                config=request.data,
                position=request.position,
            )
        except GraphError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return node.to_dict()

    @app.patch("/api/workflow/nodes/{node_id}")
    async def update_node(node_id: str, request: NodeUpdateRequest):
        try:
            node = canvas.update_node_config(node_id, label=request.label, **request.data)
        except GraphError as e:
            raise not_found(e)
        return node.to_dict()

    @app.delete("/api/workflow/nodes/{node_id}")
    async def remove_node(node_id: str):
        try:
            canvas.remove_node(node_id)
        except GraphError as e:
            raise not_found(e)
        return {"success": True, "id": node_id}

    @app.post("/api/workflow/edges")
    async def add_edge(request: EdgeCreateRequest):
        try:
            edge = canvas.add_edge(request.source, request.target, edge_id=request.id)
        except GraphError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return edge.to_dict()

    @app.delete("/api/workflow/edges/{edge_id}")
    async def remove_edge(edge_id: str):
        try:
            canvas.remove_edge(edge_id)
        except GraphError as e:
            raise not_found(e)
        return {"success": True, "id": edge_id}

    @app.post("/api/workflow/validate")
    async def validate_workflow(request: WorkflowRequest):
        """Validate a workflow document"""
        errors = serializer.validate_workflow({"nodes": request.nodes, "edges": request.edges})
        return {
            "valid": len(errors) == 0,
            "errors": errors
        }

    @app.post("/api/workflow/run")
    async def run_workflow():
        """Run the canvas; a request while a run is active is ignored"""
        result = await runner.run()
        if result is None:
            return {"started": False, "detail": "Workflow is already running"}
        return {"started": True, **result.to_dict()}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for real-time updates"""
        await manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_json()
                if isinstance(data, dict) and data.get("type") == "run":
                    await runner.run()
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(websocket)

    return app


app = create_app()


def main():
    """Run the web server"""
    import argparse
    parser = argparse.ArgumentParser(description="flowcanvas web API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s"
    )

    uvicorn.run(
        "flowcanvas.web.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    main()
