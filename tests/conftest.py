import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

from rfi_responder.main import app  # noqa: E402


@pytest.fixture
def test_client():
    """TestClient without the lifespan; route dependencies are overridden per test."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    yield
    app.dependency_overrides.clear()
