import pytest
import sys
from pathlib import Path
from typing import Dict, Any

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from entity_graph.graph.builder import build_graph
from entity_graph.graph.cross_linker import find_cross_links, link_same_values, semantic_name
from entity_graph.types import Graph, GraphEdge, GraphNode


def make_node(node_id: str, name: str, value: str, kind: str = "string") -> GraphNode:
    return GraphNode(id=node_id, name=name, kind=kind, value=value)


class TestCrossLinker:
    """Test same-value cross-linking."""

    def test_k_nodes_give_k_minus_one_links(self, orders_document: Dict[str, Any]):
        graph = build_graph(orders_document, linked_field_names=["customerId"])
        links = [edge for edge in graph.edges if edge.label == "same value: C1"]

        assert len(links) == 2
        assert {edge.source for edge in links} == {"ORDERHISTORY.ORDERHISTORY[0].customerId"}
        assert [edge.target for edge in links] == [
            "ORDERHISTORY.ORDERHISTORY[1].customerId",
            "ORDERHISTORY.ORDERHISTORY[2].customerId",
        ]

    def test_distinct_values_are_not_linked(self, orders_document: Dict[str, Any]):
        graph = build_graph(orders_document, linked_field_names=["orderId"])

        assert not [edge for edge in graph.edges if edge.label.startswith("same value")]
        assert graph.metadata["cross_link_count"] == 0

    def test_empty_field_list_disables_linking(self, orders_document: Dict[str, Any]):
        linked = build_graph(orders_document, linked_field_names=[])
        plain = build_graph(orders_document)

        assert linked.edges == plain.edges

    def test_links_only_append(self, orders_document: Dict[str, Any]):
        plain = build_graph(orders_document)
        linked = build_graph(orders_document, linked_field_names=["customerId"])

        assert linked.nodes == plain.nodes
        assert linked.edges[:len(plain.edges)] == plain.edges

    def test_empty_values_and_placeholders_are_skipped(self):
        graph = Graph(nodes=(
            make_node("A.1.code", "code", ""),
            make_node("A.2.code", "code", ""),
            make_node("A.1.items", "code", "[{...}]", kind="[Code]"),
            make_node("A.2.items", "code", "[{...}]", kind="[Code]"),
        ), edges=())

        assert find_cross_links(graph.nodes, ["code"]) == []

    def test_decoration_is_stripped(self):
        node = make_node("A.1.code[3]", "code[3]", "x")

        assert semantic_name(node) == "code"
        assert semantic_name(make_node("A.1.code", "code", "x")) == "code"

    def test_values_group_across_watched_names(self):
        nodes = (
            make_node("A.1.userId", "userId", "7"),
            make_node("B.1.ownerId", "ownerId", "7"),
            make_node("C.1.other", "other", "7"),
        )

        assert find_cross_links(nodes, ["userId", "ownerId"]) == [
            GraphEdge(source="A.1.userId", target="B.1.ownerId", label="same value: 7"),
        ]

    def test_second_pass_repeats_links(self):
        graph = Graph(nodes=(
            make_node("A.1.code", "code", "x"),
            make_node("A.2.code", "code", "x"),
        ), edges=())

        once, added = link_same_values(graph, ["code"])
        twice, added_again = link_same_values(once, ["code"])

        assert added == added_again == 1
        assert len(twice.edges) == 2
        assert twice.edges[0] == twice.edges[1]

    @pytest.mark.parametrize("field_names", [[], ()])
    def test_link_same_values_without_fields(self, field_names):
        graph = Graph(nodes=(make_node("A.1.code", "code", "x"),), edges=())

        assert link_same_values(graph, field_names) == (graph, 0)
