"""
Builds an entity-relationship graph from a JSON document.

The build runs in three steps: the options are validated, the document is
walked into nodes and containment edges, and the cross-linker appends
same-value edges. Every call starts from scratch and returns a frozen Graph.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, ValidationError, field_validator

from ..config import settings
from ..errors import InvalidConfigurationError
from ..types import Graph, GraphEdge, GraphFragment, GraphNode, JsonArray, JsonObject
from ..utils.logger import app_logger
from .cross_linker import link_same_values
from .identity import IDENTITY_SCHEMES, IdentityResolver, get_identity_strategy
from .json_values import classify, parse_json_text
from .walker import EntityWalker

logger = app_logger.bind(component="graph_builder")


class BuildOptions(BaseModel):
    """Validated build configuration."""

    model_config = ConfigDict(frozen=True)

    separate_array_nodes: StrictBool = False
    linked_field_names: Tuple[StrictStr, ...] = ()
    identity_scheme: StrictStr = "positional"
    root_entity_name: StrictStr = "ROOT"
    root_entity_id: StrictStr = "root"
    root_collection_key: StrictStr = "items"

    @field_validator("linked_field_names", mode="before")
    @classmethod
    def _reject_bare_string(cls, value):
        if isinstance(value, (str, bytes)):
            raise ValueError("linked_field_names must be a list of field names, not a single string")
        return value

    @field_validator("identity_scheme")
    @classmethod
    def _known_scheme(cls, value):
        if value not in IDENTITY_SCHEMES:
            raise ValueError(f"unknown identity scheme {value!r}; expected one of {sorted(IDENTITY_SCHEMES)}")
        return value

    @classmethod
    def create(cls, **kwargs) -> "BuildOptions":
        """Validate options, raising InvalidConfigurationError on bad input."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid build options: {e}", errors=e.errors()) from e

    @classmethod
    def from_settings(cls, **overrides) -> "BuildOptions":
        values = {
            "separate_array_nodes": settings.separate_array_nodes,
            "linked_field_names": settings.linked_field_names_list,
            "identity_scheme": settings.identity_scheme,
            "root_entity_name": settings.root_entity_name,
            "root_entity_id": settings.root_entity_id,
            "root_collection_key": settings.root_collection_key,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.create(**values)


def build_graph(
    document: Any,
    separate_array_nodes: bool = False,
    linked_field_names: Iterable[str] = (),
    identity_scheme: str = "positional",
    options: Optional[BuildOptions] = None,
) -> Graph:
    """Build the entity graph of `document`.

    Args:
        document: Parsed JSON value, normally an object whose top-level keys
            name entity collections.
        separate_array_nodes: Insert a proxy node between an array field and
            each of its items.
        linked_field_names: Field names whose equal values get cross-linked.
        identity_scheme: How ids are synthesized for objects without one.
        options: Pre-validated options; overrides the keyword arguments.

    Raises:
        InvalidConfigurationError: The options were rejected.
        MalformedInputError: The document holds a value JSON cannot express.
    """
    if options is None:
        options = BuildOptions.create(
            separate_array_nodes=separate_array_nodes,
            linked_field_names=linked_field_names,
            identity_scheme=identity_scheme,
        )

    logger.debug(
        f"Building graph (separate_array_nodes={options.separate_array_nodes}, "
        f"linked_field_names={list(options.linked_field_names)}, identity_scheme={options.identity_scheme})"
    )

    walker = EntityWalker(
        resolver=IdentityResolver(get_identity_strategy(options.identity_scheme)),
        separate_array_nodes=options.separate_array_nodes,
    )
    fragment = _walk_document(walker, document, options)

    nodes, edges, conflicts = _dedupe(fragment)
    graph = Graph(nodes=nodes, edges=edges)
    graph, cross_links = link_same_values(graph, options.linked_field_names)

    metadata = _build_metadata(graph, options, cross_links, conflicts)
    logger.debug(f"Built graph with {metadata['node_count']} nodes and {metadata['edge_count']} edges")
    return Graph(nodes=graph.nodes, edges=graph.edges, metadata=metadata)


def build_graph_from_text(text: Union[str, bytes], **kwargs) -> Graph:
    """Parse raw JSON text and build its graph."""
    return build_graph(parse_json_text(text), **kwargs)


def _walk_document(walker: EntityWalker, document: Any, options: BuildOptions) -> GraphFragment:
    value = classify(options.root_entity_name, document)
    if isinstance(value, JsonArray):
        value = JsonObject(((options.root_collection_key, document),))
    if not isinstance(value, JsonObject):
        logger.warning(f"Document is not an object or array; nothing to walk ({type(document).__name__})")
        return GraphFragment()
    return walker.walk(value, options.root_entity_name, options.root_entity_id, is_root=True)


def _dedupe(fragment: GraphFragment) -> Tuple[Tuple[GraphNode, ...], Tuple[GraphEdge, ...], int]:
    """Keep the first node per id and the first edge per (source, target, label).

    Also returns how many dropped nodes carried data that differed from the
    kept one.
    """
    nodes: Dict[str, GraphNode] = {}
    conflicts = 0
    for node in fragment.nodes:
        kept = nodes.get(node.id)
        if kept is None:
            nodes[node.id] = node
        elif kept != node:
            conflicts += 1
            logger.warning(f"Duplicate node id {node.id!r}: keeping {kept.value!r}, dropping {node.value!r}")

    edges: List[GraphEdge] = []
    seen = set()
    for edge in fragment.edges:
        key = (edge.source, edge.target, edge.label)
        if key not in seen:
            seen.add(key)
            edges.append(edge)

    return tuple(nodes.values()), tuple(edges), conflicts


def _build_metadata(graph: Graph, options: BuildOptions, cross_links: int, conflicts: int) -> Dict[str, Any]:
    return {
        "separate_array_nodes": options.separate_array_nodes,
        "linked_field_names": options.linked_field_names,
        "identity_scheme": options.identity_scheme,
        "node_count": len(graph.nodes),
        "edge_count": len(graph.edges),
        "cross_link_count": cross_links,
        "dangling_edge_count": len(graph.dangling_edges()),
        "conflicting_duplicate_count": conflicts,
    }
