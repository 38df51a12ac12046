import pytest
import json
from pathlib import Path
from typing import Generator, Dict, Any
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from entity_graph.config import settings
from entity_graph.graph.builder import BuildOptions
from entity_graph.graph.session import GraphSession


@pytest.fixture(scope="session")
def test_settings():
    """Override settings for testing."""
    original_settings = {}

    # Store original values
    original_settings['separate_array_nodes'] = settings.separate_array_nodes
    original_settings['linked_field_names'] = settings.linked_field_names
    original_settings['identity_scheme'] = settings.identity_scheme
    original_settings['graph_storage_path'] = settings.graph_storage_path

    # Builds in tests start from the plain defaults
    settings.separate_array_nodes = False
    settings.linked_field_names = ""
    settings.identity_scheme = "positional"
    settings.graph_storage_path = None

    yield settings

    # Restore original values
    for key, value in original_settings.items():
        setattr(settings, key, value)


@pytest.fixture
def user_document() -> Dict[str, Any]:
    """A user with a nested object, an array of objects and a null field."""
    return {
        "user": {
            "id": "U1",
            "name": "Ada",
            "age": 36,
            "active": True,
            "nickname": None,
            "address": {"city": "London", "zip": "N1"},
            "addresses": [
                {"city": "Paris"},
                {"city": "Rome"},
                {"city": "Oslo"},
            ],
        }
    }


@pytest.fixture
def orders_document() -> Dict[str, Any]:
    """Orders that reference customers by id, nested under a user."""
    return {
        "user": {
            "id": "U1",
            "orderHistory": [
                {"orderId": "O1", "customerId": "C1"},
                {"orderId": "O2", "customerId": "C1"},
                {"orderId": "O3", "customerId": "C1"},
            ],
        }
    }


@pytest.fixture
def default_options(test_settings) -> BuildOptions:
    """Build options with every default."""
    return BuildOptions.create()


@pytest.fixture
def graph_session(test_settings, tmp_path) -> Generator[GraphSession, None, None]:
    """Create a graph session persisting to a temporary snapshot file."""
    session = GraphSession(tmp_path / "graph_data.json", options=BuildOptions.create())

    yield session

    # Cleanup: drop the session's graph
    session.clear()


@pytest.fixture
def user_text(user_document) -> str:
    """The user document as raw editor text."""
    return json.dumps(user_document, indent=2)
