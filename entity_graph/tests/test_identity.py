import pytest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from entity_graph.errors import InvalidConfigurationError
from entity_graph.graph.identity import (
    FixedSuffixIdentity,
    IdentityResolver,
    PositionalIdentity,
    capitalize,
    get_identity_strategy,
    singularize,
)


class TestNaming:
    """Test entity naming helpers."""

    @pytest.mark.parametrize("key,expected", [
        ("orders", "order"),
        ("addresses", "address"),
        ("categories", "category"),
        ("boxes", "box"),
        ("matches", "match"),
        ("status", "status"),
        ("address", "address"),
        ("orderHistory", "orderHistory"),
        ("s", "s"),
        ("", ""),
    ])
    def test_singularize(self, key, expected):
        assert singularize(key) == expected

    def test_capitalize_keeps_rest_of_key(self):
        assert capitalize("orderHistory") == "OrderHistory"
        assert capitalize("") == ""


class TestIdentityResolver:
    """Test entity id resolution."""

    def setup_method(self):
        self.resolver = IdentityResolver()

    def test_explicit_id(self):
        assert self.resolver.resolve("user", {"id": "U1", "age": 30}) == "U1"

    def test_numeric_id_is_rendered(self):
        assert self.resolver.resolve("users", {"id": 7}, 0) == "7"

    def test_entity_named_id_for_items(self):
        ref = self.resolver.identify("orders", {"orderId": "O1"}, 0)

        assert ref.name == "ORDER"
        assert ref.entity_id == "O1"
        assert ref.id_field == "orderId"

    def test_plain_id_wins_over_entity_named_id(self):
        assert self.resolver.resolve("orders", {"orderId": "O1", "id": "X"}, 0) == "X"

    def test_positional_synthesis_for_items(self):
        ref = self.resolver.identify("addresses", {"city": "Paris"}, 0)

        assert ref.name == "ADDRESS"
        assert ref.entity_id == "ADDRESS[0]"
        assert ref.id_field == "id"

    def test_synthesis_for_singular_child(self):
        ref = self.resolver.identify("address", {"city": "London"})

        assert ref.name == "ADDRESS"
        assert ref.entity_id == "AddressId"

    @pytest.mark.parametrize("candidate", [
        {"id": ""},
        {"id": None},
        {"id": {"nested": 1}},
        {"id": [1, 2]},
        {},
    ])
    def test_unusable_ids_are_synthesized(self, candidate):
        assert self.resolver.resolve("addresses", candidate, 2) == "ADDRESS[2]"

    def test_resolution_is_deterministic(self):
        candidate = {"city": "Rome"}
        first = self.resolver.resolve("addresses", candidate, 4)
        second = self.resolver.resolve("addresses", candidate, 4)

        assert first == second == "ADDRESS[4]"
        assert candidate == {"city": "Rome"}


class TestIdentityStrategies:
    """Test the configurable synthesis schemes."""

    def test_fixed_suffix_scheme(self):
        resolver = IdentityResolver(FixedSuffixIdentity())

        assert resolver.resolve("addresses", {}, 0) == "ADDRESS001"
        assert resolver.resolve("addresses", {}, 1) == "ADDRESS002"
        assert resolver.resolve("address", {}) == "ADDRESS001"

    def test_scheme_lookup(self):
        assert isinstance(get_identity_strategy("positional"), PositionalIdentity)
        assert isinstance(get_identity_strategy("fixed-suffix"), FixedSuffixIdentity)

    def test_unknown_scheme(self):
        with pytest.raises(InvalidConfigurationError):
            get_identity_strategy("random")

    def test_scoped_scheme_prefixes_parent(self):
        resolver = IdentityResolver(get_identity_strategy("scoped"))

        assert resolver.resolve("addresses", {}, 0, parent_id="U1") == "U1/ADDRESS[0]"
        assert resolver.resolve("address", {}, parent_id="U1") == "U1/AddressId"
        assert resolver.resolve("addresses", {}, 0) == "ADDRESS[0]"
        assert resolver.resolve("addresses", {"id": "A1"}, 0, parent_id="U1") == "A1"
