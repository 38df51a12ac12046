"""
Links nodes that share a value for a watched field name.
"""
import re
from typing import Dict, Iterable, List, Tuple

from ..types import Graph, GraphEdge, GraphNode
from ..utils.logger import app_logger
from .walker import ARRAY_PLACEHOLDER, OBJECT_PLACEHOLDER

SAME_VALUE_PREFIX = "same value: "

_DECORATION = re.compile(r"\[\d+\]$")
_PLACEHOLDERS = (OBJECT_PLACEHOLDER, ARRAY_PLACEHOLDER)

logger = app_logger.bind(component="cross_linker")


def semantic_name(node: GraphNode) -> str:
    """Node name without its item decoration: items[3] -> items."""
    return _DECORATION.sub("", node.name)


def same_value_label(value: str) -> str:
    return f"{SAME_VALUE_PREFIX}{value}"


def group_by_value(nodes: Iterable[GraphNode], field_names: Iterable[str]) -> Dict[str, List[str]]:
    """Ids of watched nodes grouped by value, both in encounter order."""
    watched = set(field_names)
    groups: Dict[str, List[str]] = {}
    for node in nodes:
        if semantic_name(node) not in watched:
            continue
        if not node.value or node.value in _PLACEHOLDERS:
            continue
        groups.setdefault(node.value, []).append(node.id)
    return groups


def find_cross_links(nodes: Iterable[GraphNode], field_names: Iterable[str]) -> List[GraphEdge]:
    """Edges from the first node of each shared value to every other node holding it."""
    links: List[GraphEdge] = []
    for value, node_ids in group_by_value(nodes, field_names).items():
        first, rest = node_ids[0], node_ids[1:]
        for node_id in rest:
            links.append(GraphEdge(source=first, target=node_id, label=same_value_label(value)))
    return links


def link_same_values(graph: Graph, field_names: Iterable[str]) -> Tuple[Graph, int]:
    """Return `graph` with same-value edges appended, and how many were added.

    Only nodes are scanned, so calling this twice with the same field names
    appends the same links a second time. Callers link a freshly built graph
    exactly once.
    """
    field_names = list(field_names)
    if not field_names:
        return graph, 0

    links = find_cross_links(graph.nodes, field_names)
    if links:
        logger.debug(f"Adding {len(links)} same-value links for fields {field_names}")
    return Graph(nodes=graph.nodes, edges=graph.edges + tuple(links), metadata=graph.metadata), len(links)
