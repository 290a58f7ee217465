"""
FS RAG Test Fixtures
Shared fixtures for all test modules.
"""
import sys
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

# Fix import paths for the hyphenated service directory
# This allows importing from services/edge-functions/src as 'src.*'
_project_root = Path(__file__).parent.parent
_edge_functions = _project_root / "services" / "edge-functions"

# Add project root for 'shared.*' imports
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
# Add edge-functions for 'src.*' imports
if str(_edge_functions) not in sys.path:
    sys.path.insert(0, str(_edge_functions))

from shared.config import Settings, get_settings  # noqa: E402

SUPABASE_URL = "https://project.supabase.co"
FUNCTIONS_URL = f"{SUPABASE_URL}/functions/v1"


# ============================================================
# Settings
# ============================================================

@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings with test credentials, ignoring .env and real keys."""
    def _make(**overrides) -> Settings:
        values = {
            "AI_GATEWAY_URL": "https://gateway.test/v1",
            "AI_GATEWAY_API_KEY": "test-gateway-key",
            "SUPABASE_URL": SUPABASE_URL,
            "SUPABASE_ANON_KEY": "anon-key",
            "SUPABASE_SERVICE_ROLE_KEY": "service-role-key",
            "STRUCTURED_LOGGING": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


# ============================================================
# Supabase SDK stand-in
# ============================================================

@pytest.fixture
def supabase_client() -> MagicMock:
    """MagicMock shaped like supabase.Client (storage + table query builder)."""
    client = MagicMock()
    client.storage.from_.return_value.download.return_value = b"media-bytes"
    client.table.return_value.insert.return_value.execute.return_value.data = [{"id": "doc-1"}]
    return client


# ============================================================
# FastAPI app
# ============================================================

@pytest.fixture
def app():
    from src.main import app as edge_app

    yield edge_app
    edge_app.dependency_overrides.clear()


@pytest.fixture
def client_factory(app, make_settings):
    """
    TestClient with settings, outbound HTTP and storage overridden.

    ``handler`` receives every outbound httpx.Request (AI gateway, gold
    providers, sibling functions) and returns an httpx.Response.
    """
    from fastapi.testclient import TestClient

    from src.dependencies import get_document_store, get_http_transport

    def _client(handler=None, store=None, **settings_overrides):
        test_settings = make_settings(**settings_overrides)
        app.dependency_overrides[get_settings] = lambda: test_settings
        if handler is not None:
            app.dependency_overrides[get_http_transport] = lambda: httpx.MockTransport(handler)
        if store is not None:
            app.dependency_overrides[get_document_store] = lambda: store
        return TestClient(app, raise_server_exceptions=False)

    return _client
