from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
import uvicorn

from entity_graph.config import settings
from entity_graph.graph.session import GraphSession
from entity_graph.utils.logger import app_logger


logger = app_logger.bind(component="api_server")

app = FastAPI(title="Entity Graph API", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize components
graph_session = GraphSession(settings.graph_storage_path)


class GraphDataResponse(BaseModel):
    nodes: List[Dict[str, Any]]
    edges: List[Dict[str, Any]]
    metadata: Dict[str, Any]


class NodeDetailsResponse(BaseModel):
    node: Dict[str, Any]
    related_edges: List[Dict[str, Any]]
    related_nodes: List[Dict[str, Any]]


class BuildRequest(BaseModel):
    text: str
    separate_array_nodes: Optional[bool] = None
    linked_field_names: Optional[List[Any]] = None


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


@app.post("/api/graph", response_model=GraphDataResponse)
def build_graph_data(request: BuildRequest):
    """Rebuild the graph from the editor's full JSON text."""
    try:
        result = graph_session.update(
            request.text,
            separate_array_nodes=request.separate_array_nodes,
            linked_field_names=request.linked_field_names,
        )
    except Exception as e:
        logger.error(f"Error building graph: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error)
    return GraphDataResponse(**result.graph.to_dict())


@app.get("/api/graph", response_model=GraphDataResponse)
def get_graph_data():
    """Get the last successfully built graph."""
    try:
        return GraphDataResponse(**graph_session.get_graph_data())
    except Exception as e:
        logger.error(f"Error getting graph data: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/node/{node_id:path}", response_model=NodeDetailsResponse)
def get_node_details(node_id: str):
    """Get detailed information about a specific node."""
    details = graph_session.get_node_details(node_id)
    if not details:
        raise HTTPException(status_code=404, detail="Node not found")
    return NodeDetailsResponse(**details)


@app.get("/api/stats")
def get_stats():
    """Get graph statistics."""
    try:
        return graph_session.get_stats()
    except Exception as e:
        logger.error(f"Error getting stats: {e}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    logger.info("Starting Entity Graph API server")

    uvicorn.run(
        "api_server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level="info"
    )
