"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from gearmanager.config import DATA_DIR
from gearmanager.core.item.registry import DefinitionRegistry
from gearmanager.main import app

CATALOG_PATH = DATA_DIR / "items.json"
SAMPLE_CHARACTER_PATH = DATA_DIR / "sample_character.json"


@pytest.fixture()
def catalog() -> DefinitionRegistry:
    """Registry loaded from the packaged catalog."""
    registry = DefinitionRegistry()
    registry.load_from_json(CATALOG_PATH)
    return registry


@pytest.fixture()
def client() -> TestClient:
    """TestClient with the app lifespan run (catalog + sample character)."""
    with TestClient(app) as test_client:
        yield test_client
