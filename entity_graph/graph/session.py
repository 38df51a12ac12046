from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass
import datetime
import json
import threading
from pathlib import Path

from ..errors import GraphBuildError
from ..types import Graph, GraphEdge, GraphNode
from ..utils.logger import app_logger
from .builder import BuildOptions, build_graph_from_text


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of one editor update."""
    ok: bool
    graph: Graph
    error: Optional[str] = None


class GraphSession:
    """Holds the last successfully built graph for a live editor.

    Every update rebuilds the graph from the full editor text. A failed build
    is logged and recorded, and the previous graph stays current.
    """

    def __init__(self, storage_path: Optional[Union[str, Path]] = None,
                 options: Optional[BuildOptions] = None):
        self.logger = app_logger.bind(component="graph_session")
        self.storage_path = Path(storage_path) if storage_path else None
        self.options = options or BuildOptions.from_settings()
        self._lock = threading.Lock()
        self._graph = Graph.empty()
        self._last_error: Optional[str] = None
        self._created_at: Optional[str] = None

        # Load existing snapshot if file exists
        self._load_snapshot()

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def _load_snapshot(self):
        """Restore the last graph from the snapshot file."""
        if self.storage_path is None or not self.storage_path.exists():
            return
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._graph = Graph.from_dict(data)
            self._created_at = data.get("metadata", {}).get("created_at")
            self.logger.info(f"Loaded graph snapshot from {self.storage_path}")
        except (OSError, ValueError, TypeError) as e:
            self.logger.error(f"Error loading graph snapshot: {e}")
            self._graph = Graph.empty()

    def _save_snapshot(self):
        """Write the current graph to the snapshot file."""
        if self.storage_path is None:
            return
        now = datetime.datetime.now().isoformat()
        if not self._created_at:
            self._created_at = now

        data = self._graph.to_dict()
        data["metadata"]["created_at"] = self._created_at
        data["metadata"]["updated_at"] = now

        try:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.storage_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            self.logger.debug(f"Saved graph snapshot to {self.storage_path}")
        except OSError as e:
            self.logger.error(f"Error saving graph snapshot: {e}")

    def update(self, text: Union[str, bytes], separate_array_nodes: Optional[bool] = None,
               linked_field_names: Optional[List[str]] = None) -> UpdateResult:
        """Rebuild the graph from the full editor text."""
        with self._lock:
            try:
                options = self._options_for(separate_array_nodes, linked_field_names)
                graph = build_graph_from_text(text, options=options)
            except GraphBuildError as e:
                self._last_error = str(e)
                self.logger.error(f"Graph build failed, keeping last graph: {e}")
                return UpdateResult(ok=False, graph=self._graph, error=self._last_error)

            self._graph = graph
            self._last_error = None
            self._save_snapshot()
            self.logger.info(f"Rebuilt graph: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
            return UpdateResult(ok=True, graph=graph)

    def _options_for(self, separate_array_nodes: Optional[bool],
                     linked_field_names: Optional[List[str]]) -> BuildOptions:
        overrides = {}
        if separate_array_nodes is not None:
            overrides["separate_array_nodes"] = separate_array_nodes
        if linked_field_names is not None:
            overrides["linked_field_names"] = linked_field_names
        if not overrides:
            return self.options
        return BuildOptions.create(**{**self.options.model_dump(), **overrides})

    def clear(self):
        """Drop the current graph and any recorded error."""
        with self._lock:
            self._graph = Graph.empty()
            self._last_error = None
            self._created_at = None
            self._save_snapshot()
        self.logger.info("Cleared graph session")

    def get_graph_data(self) -> Dict[str, Any]:
        """Get the complete graph data for rendering."""
        return self._graph.to_dict()

    def get_node_details(self, node_id: str) -> Optional[Dict[str, Any]]:
        """Get a node with the edges touching it and the nodes at their other ends."""
        graph = self._graph
        node = graph.get_node(node_id)
        if node is None:
            return None

        related_edges: List[GraphEdge] = [
            edge for edge in graph.edges if edge.source == node_id or edge.target == node_id
        ]

        related_ids = []
        for edge in related_edges:
            for other in (edge.source, edge.target):
                if other != node_id and other not in related_ids:
                    related_ids.append(other)

        related_nodes: List[GraphNode] = []
        for related_id in related_ids:
            related = graph.get_node(related_id)
            if related is not None:
                related_nodes.append(related)

        return {
            "node": node.to_dict(),
            "related_edges": [edge.to_dict() for edge in related_edges],
            "related_nodes": [related.to_dict() for related in related_nodes],
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get graph statistics."""
        stats = {}

        # Count nodes by kind
        node_counts = {}
        for node in self._graph.nodes:
            node_counts[node.kind] = node_counts.get(node.kind, 0) + 1
        stats["nodes"] = node_counts

        # Count edges by label
        edge_counts = {}
        for edge in self._graph.edges:
            edge_counts[edge.label] = edge_counts.get(edge.label, 0) + 1
        stats["edges"] = edge_counts

        stats["dangling_edges"] = len(self._graph.dangling_edges())
        stats["last_error"] = self._last_error
        return stats
