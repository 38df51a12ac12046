"""
Entity graph: converts nested JSON documents into entity-relationship graphs.
"""

from .errors import GraphBuildError, InvalidConfigurationError, MalformedInputError
from .graph import build_graph, build_graph_from_text
from .types import Graph, GraphEdge, GraphNode, NodeKey

__all__ = [
    'build_graph',
    'build_graph_from_text',
    'Graph',
    'GraphEdge',
    'GraphNode',
    'NodeKey',
    'GraphBuildError',
    'InvalidConfigurationError',
    'MalformedInputError',
]
