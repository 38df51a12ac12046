"""
Walks a JSON document and emits entity nodes and containment edges.
"""
from typing import Any, List, Optional, Tuple

from ..errors import MalformedInputError
from ..types import GraphEdge, GraphFragment, GraphNode, JsonArray, JsonNull, JsonObject, JsonPrimitive, NodeKey
from .identity import VALUE_FIELD, EntityRef, IdentityResolver, capitalize
from .json_values import classify

HAS = "has"
CONTAINS = "contains"
OBJECT_PLACEHOLDER = "{...}"
ARRAY_PLACEHOLDER = "[{...}]"

FieldTask = Tuple[str, Any, str, str, bool]
ChildEntity = Tuple[JsonObject, EntityRef]


class EntityWalker:
    """Turns objects into entity fragments.

    Pending fields are kept on an explicit stack rather than the call stack,
    so nesting depth is bounded by memory. Each call returns its own fragment;
    nothing is shared between calls, so a walker can be reused across builds.
    """

    def __init__(self, resolver: Optional[IdentityResolver] = None, separate_array_nodes: bool = False):
        self.resolver = resolver or IdentityResolver()
        self.separate_array_nodes = separate_array_nodes

    def walk(self, obj: JsonObject, entity: str, entity_id: str, is_root: bool = False) -> GraphFragment:
        """Emit the fragment for every field of `obj` and everything below it.

        Output is in document pre-order: a field's own nodes, then everything
        below it, then the next field.
        """
        nodes: List[GraphNode] = []
        edges: List[GraphEdge] = []
        pending = _field_tasks(obj, entity, entity_id, is_root)
        while pending:
            key, raw, owner, owner_id, owner_is_root = pending.pop()
            fragment, children = self._walk_field(key, raw, owner, owner_id, owner_is_root)
            nodes.extend(fragment.nodes)
            edges.extend(fragment.edges)
            # Last child first, so the first child's fields are popped next.
            for child, ref in reversed(children):
                pending.extend(_field_tasks(child, ref.name, ref.entity_id))
        return GraphFragment(tuple(nodes), tuple(edges))

    def _walk_field(self, key: str, raw: Any, entity: str, entity_id: str,
                    is_root: bool) -> Tuple[GraphFragment, List[ChildEntity]]:
        """Own nodes and edges of one field, plus the child entities still to walk."""
        value = classify(key, raw)
        if isinstance(value, JsonNull):
            return GraphFragment(), []
        if isinstance(value, JsonPrimitive):
            node = GraphNode(
                id=str(NodeKey(entity, entity_id, key)),
                name=key,
                kind=value.kind,
                value=value.text,
            )
            return GraphFragment(nodes=(node,)), []
        if isinstance(value, JsonArray):
            return self._walk_array(key, value, entity, entity_id, is_root)
        if isinstance(value, JsonObject):
            return self._walk_object(key, value, entity, entity_id, is_root)
        raise MalformedInputError(f"Unclassified value {value!r}", field_key=key)

    def _walk_object(self, key: str, child: JsonObject, entity: str, entity_id: str,
                     is_root: bool) -> Tuple[GraphFragment, List[ChildEntity]]:
        ref = self.resolver.identify(key, child, parent_id=None if is_root else entity_id)
        if is_root:
            return GraphFragment(), [(child, ref)]

        node = GraphNode(
            id=str(NodeKey(entity, entity_id, key)),
            name=key,
            kind=capitalize(key),
            value=OBJECT_PLACEHOLDER,
        )
        edge = GraphEdge(source=node.id, target=identity_node_id(ref), label=HAS)
        return GraphFragment(nodes=(node,), edges=(edge,)), [(child, ref)]

    def _walk_array(self, key: str, array: JsonArray, entity: str, entity_id: str,
                    is_root: bool) -> Tuple[GraphFragment, List[ChildEntity]]:
        items = self._walk_items(key, array, None if is_root else entity_id)
        children = [(item, ref) for _, ref, item in items]
        if is_root:
            return GraphFragment(), children

        summary = GraphNode(
            id=str(NodeKey(entity, entity_id, key)),
            name=key,
            kind=f"[{capitalize(key)}]",
            value=ARRAY_PLACEHOLDER,
        )
        nodes: List[GraphNode] = [summary]
        edges: List[GraphEdge] = []

        for index, ref, _ in items:
            if self.separate_array_nodes:
                proxy = GraphNode(
                    id=str(NodeKey(entity, entity_id, key, index)),
                    name=f"{key}[{index}]",
                    kind=f"[{ref.name}]",
                    value=OBJECT_PLACEHOLDER,
                )
                # Only the first proxy hangs off the summary node.
                if len(nodes) == 1:
                    edges.append(GraphEdge(source=summary.id, target=proxy.id, label=HAS))
                nodes.append(proxy)
                edges.append(GraphEdge(source=proxy.id, target=identity_node_id(ref), label=CONTAINS))
            else:
                edges.append(GraphEdge(source=summary.id, target=identity_node_id(ref), label=HAS))

        return GraphFragment(nodes=tuple(nodes), edges=tuple(edges)), children

    def _walk_items(self, key: str, array: JsonArray,
                    parent_id: Optional[str]) -> List[Tuple[int, EntityRef, JsonObject]]:
        """Identify every non-null item as its own entity, keeping its position."""
        identified = []
        for index, raw in enumerate(array.items):
            item = classify(f"{key}[{index}]", raw)
            if isinstance(item, JsonNull):
                continue
            if isinstance(item, JsonObject):
                ref = self.resolver.identify(key, item, index, parent_id=parent_id)
            else:
                # Scalars and nested arrays become an entity with a single value field.
                item = JsonObject(((VALUE_FIELD, raw),))
                ref = self.resolver.identify(key, item, index, parent_id=parent_id, id_field=VALUE_FIELD)
            identified.append((index, ref, item))
        return identified


def _field_tasks(obj: JsonObject, entity: str, entity_id: str, is_root: bool = False) -> List[FieldTask]:
    """Fields of `obj` reversed, so popping yields them in document order."""
    return [(key, raw, entity, entity_id, is_root) for key, raw in reversed(obj.fields)]


def identity_node_id(ref: EntityRef) -> str:
    """Id of the node an entity is addressed by."""
    return str(NodeKey(ref.name, ref.entity_id, ref.id_field))
