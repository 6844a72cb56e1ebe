"""
Fixtures para testes do ClickUp MCP Bridge.
"""
import os
import sys

import pytest

# Adiciona src ao path para importar o pacote
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from clickup_bridge import config, token_store
from clickup_bridge.client import clickup
from clickup_bridge.context import InvocationContext
from clickup_bridge.metrics import metrics
from clickup_bridge.token_store import TokenStore

API_BASE = "https://api.clickup.com/api/v2"
API_V3_BASE = "https://api.clickup.com/api/v3"
API_KEY = "pk_test_token_123456789"


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Cada teste começa sem credencial, sem tokens e com métricas zeradas."""
    monkeypatch.setattr(config, "CLICKUP_API_KEY", "")
    monkeypatch.setattr(config, "CLICKUP_CLIENT_ID", "")
    monkeypatch.setattr(config, "READ_ONLY_MODE", False)
    monkeypatch.setattr(token_store, "_token_store", TokenStore())
    metrics.reset()
    # O pool httpx fica preso ao event loop do teste que o criou
    clickup._http_client = None
    yield
    clickup._http_client = None


@pytest.fixture
def api_key(monkeypatch):
    """Credencial configurada via CLICKUP_API_KEY."""
    monkeypatch.setattr(config, "CLICKUP_API_KEY", API_KEY)
    return API_KEY


@pytest.fixture
def header_context():
    """Contexto de invocação com a API key no header."""
    return InvocationContext.from_headers({config.API_KEY_HEADER: "pk_header_key"})


@pytest.fixture
def mock_spaces_response():
    """Resposta de GET /team/{team_id}/space."""
    return {
        "spaces": [
            {
                "id": "space1",
                "name": "Consultoria",
                "private": False,
                "statuses": [
                    {"status": "Aberto", "color": "#87909e"},
                    {"status": "Concluído", "color": "#6bc950"}
                ]
            },
            {"id": "space2", "name": "Administrativo", "private": True, "statuses": []}
        ]
    }


@pytest.fixture
def mock_task():
    """Task de exemplo."""
    return {
        "id": "abc123",
        "name": "Notificação Extrajudicial - Cliente X",
        "status": {"status": "Em andamento"},
        "date_created": "1704067200000",
        "assignees": [{"id": 1, "username": "joao"}],
        "list": {"id": "list1", "name": "Cliente X"},
        "url": "https://app.clickup.com/t/abc123"
    }


@pytest.fixture
def mock_oauth_token():
    """Resposta de POST /oauth/token."""
    return {"access_token": "oauth_access_token_xyz", "token_type": "Bearer"}
