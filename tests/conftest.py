import pytest
from fastapi.testclient import TestClient

from gamebackend.app import create_app
from gamebackend.config import Settings
from gamebackend.registry import UserRegistry


@pytest.fixture
def registry() -> UserRegistry:
    """A fresh, empty registry per test."""
    return UserRegistry()


@pytest.fixture
def client(registry: UserRegistry) -> TestClient:
    app = create_app(registry, Settings())
    with TestClient(app) as test_client:
        yield test_client
