import pytest
import sys
import importlib
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


class TestRequirements:
    """Test that all required dependencies are available."""

    def test_python_version(self):
        """Test Python version is supported."""
        assert sys.version_info >= (3, 8), f"Python 3.8+ required, got {sys.version_info}"

    def test_core_dependencies(self):
        """Test that core dependencies can be imported."""
        required_modules = [
            'pydantic',
            'pydantic_settings',
            'loguru',
            'fastapi',
            'uvicorn',
        ]

        missing_modules = []
        for module_name in required_modules:
            try:
                importlib.import_module(module_name)
                print(f"✓ {module_name} available")
            except ImportError:
                missing_modules.append(module_name)
                print(f"✗ {module_name} missing")

        if missing_modules:
            pytest.fail(f"Missing required modules: {missing_modules}")

    def test_test_dependencies(self):
        """Test the API test client's transport is available."""
        try:
            importlib.import_module('httpx')
        except ImportError:
            pytest.fail("httpx is required by fastapi.testclient")

    def test_environment_setup(self):
        """Test environment setup and configuration."""
        import os

        # Check if .env file exists
        env_file = Path('.env')
        if env_file.exists():
            print("✓ .env file found")
        else:
            print("? .env file not found (using environment variables)")

        optional_vars = [
            'ENTITY_GRAPH_LINKED_FIELD_NAMES',
            'ENTITY_GRAPH_SEPARATE_ARRAY_NODES',
            'ENTITY_GRAPH_GRAPH_STORAGE_PATH',
        ]

        for var in optional_vars:
            if os.getenv(var):
                print(f"✓ {var} set")
            else:
                print(f"? {var} not set")

        # Test passes regardless - this is just for information
        assert True

    def test_settings_load(self):
        """Test the settings object loads with its defaults."""
        from entity_graph.config import settings

        assert settings.identity_scheme in ("positional", "fixed-suffix", "scoped")
        assert isinstance(settings.linked_field_names_list, list)
