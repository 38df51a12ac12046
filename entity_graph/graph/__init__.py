"""
Graph module for turning JSON documents into entity-relationship graphs.
"""

from .builder import BuildOptions, build_graph, build_graph_from_text
from .cross_linker import link_same_values
from .identity import IdentityResolver
from .session import GraphSession, UpdateResult
from .walker import EntityWalker

__all__ = [
    'BuildOptions',
    'build_graph',
    'build_graph_from_text',
    'link_same_values',
    'IdentityResolver',
    'EntityWalker',
    'GraphSession',
    'UpdateResult',
]
