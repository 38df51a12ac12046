from typing import List, Dict, Any, Mapping, Optional, Tuple
from dataclasses import dataclass, field
from types import MappingProxyType
import json


# --- Classified JSON values -------------------------------------------------

@dataclass(frozen=True)
class JsonNull:
    """A null field or item."""


@dataclass(frozen=True)
class JsonPrimitive:
    """A string, number or boolean with its rendered text."""
    kind: str
    text: str


@dataclass(frozen=True)
class JsonArray:
    """An array; items are still raw values."""
    items: Tuple[Any, ...]


@dataclass(frozen=True)
class JsonObject:
    """A mapping; values are still raw values, keys in document order."""
    fields: Tuple[Tuple[str, Any], ...]

    def get(self, key: str, default: Any = None) -> Any:
        for name, value in self.fields:
            if name == key:
                return value
        return default


# --- Graph --------------------------------------------------------------------

_ESCAPES = str.maketrans({"\\": "\\\\", ".": "\\."})
# The field is the last component, so only it can be confused with an item index.
_FIELD_ESCAPES = str.maketrans({"\\": "\\\\", ".": "\\.", "[": "\\["})


def escape_key_segment(segment: str, is_field: bool = False) -> str:
    """Escape one NodeKey component so separators inside names stay literal."""
    return str(segment).translate(_FIELD_ESCAPES if is_field else _ESCAPES)


@dataclass(frozen=True)
class NodeKey:
    """Composite key of a node: entity name, entity id, field and item index."""
    entity: str
    entity_id: str
    field: str
    index: Optional[int] = None

    def __str__(self) -> str:
        base = ".".join((
            escape_key_segment(self.entity),
            escape_key_segment(self.entity_id),
            escape_key_segment(self.field, is_field=True),
        ))
        if self.index is not None:
            return f"{base}[{self.index}]"
        return base


@dataclass(frozen=True)
class GraphNode:
    """Represents one field of an entity, or a pointer to a sub-entity or array."""
    id: str
    name: str
    kind: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "value": self.value,
        }


@dataclass(frozen=True)
class GraphEdge:
    """Represents a labelled edge between two node ids."""
    source: str
    target: str
    label: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "label": self.label,
        }


@dataclass(frozen=True)
class GraphFragment:
    """Nodes and edges produced by one walker call."""
    nodes: Tuple[GraphNode, ...] = ()
    edges: Tuple[GraphEdge, ...] = ()


@dataclass(frozen=True)
class Graph:
    """Represents a built entity-relationship graph."""
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Read-only view over a private copy.
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def empty(cls, metadata: Optional[Mapping[str, Any]] = None) -> "Graph":
        return cls(nodes=(), edges=(), metadata=metadata or {})

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def dangling_edges(self) -> List[GraphEdge]:
        """Edges whose source or target is not a node of this graph."""
        known = set(self.node_ids())
        return [edge for edge in self.edges if edge.source not in known or edge.target not in known]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "metadata": dict(self.metadata),
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            nodes=tuple(GraphNode(**node) for node in data.get("nodes", [])),
            edges=tuple(GraphEdge(**edge) for edge in data.get("edges", [])),
            metadata=dict(data.get("metadata", {})),
        )
