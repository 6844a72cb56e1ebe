"""
Testes do cliente HTTP genérico (ClickUpClient.call) com mocks respx.
"""
import json

import httpx
import pytest
import respx
from httpx import Response

from clickup_bridge.client import (
    ApiVersion,
    ClickUpClient,
    HttpMethod,
    RequestSpec,
    build_query,
    clickup,
    is_error_result,
    parse_query,
)
from clickup_bridge.metrics import metrics

API_BASE = "https://api.clickup.com/api/v2"
API_V3_BASE = "https://api.clickup.com/api/v3"


# ============================================================================
# QUERY STRING
# ============================================================================

class TestQuery:
    """Testes de montagem da query string."""

    def test_booleans_viram_true_false(self):
        """Booleanos devem ser enviados como 'true'/'false'."""
        assert build_query({"archived": False, "reverse": True}) == [
            ("archived", "false"),
            ("reverse", "true"),
        ]

    def test_listas_viram_chaves_repetidas(self):
        """Listas devem gerar uma chave por item, na ordem."""
        pairs = build_query({"statuses": ["open", "in progress"], "page": 2})
        assert pairs == [("statuses", "open"), ("statuses", "in progress"), ("page", "2")]

    def test_none_e_descartado(self):
        """Valores None não entram na query."""
        assert build_query({"archived": None, "page": 0}) == [("page", "0")]

    def test_enum_usa_valor(self):
        """Enums devem ser enviados pelo valor."""
        assert build_query({"version": ApiVersion.V3}) == [("version", "v3")]

    def test_parse_query_agrupa_chaves(self):
        """parse_query deve agrupar chaves repetidas."""
        assert parse_query("statuses=a&statuses=b&page=1") == {
            "statuses": ["a", "b"],
            "page": ["1"],
        }


# ============================================================================
# URL E HEADERS
# ============================================================================

class TestUrlAndHeaders:
    """Testes de montagem de URL e headers."""

    def test_url_v2(self):
        """Path relativo usa a base v2 por padrão."""
        assert clickup.url_for(RequestSpec(path="team/1/space")) == f"{API_BASE}/team/1/space"

    def test_url_v3(self):
        """api_version v3 usa a base v3."""
        request = RequestSpec(path="workspaces/1/docs", api_version=ApiVersion.V3)
        assert clickup.url_for(request) == f"{API_V3_BASE}/workspaces/1/docs"

    def test_url_absoluta(self):
        """URL absoluta é usada como está."""
        request = RequestSpec(path="https://example.com/oauth/token")
        assert clickup.url_for(request) == "https://example.com/oauth/token"

    def test_headers_com_credencial(self):
        """Credencial vai no Authorization sem prefixo."""
        assert ClickUpClient.build_headers("pk_1") == {
            "Content-Type": "application/json",
            "Authorization": "pk_1",
        }

    def test_headers_sem_credencial(self):
        """Sem credencial, Authorization é omitido."""
        assert ClickUpClient.build_headers(None) == {"Content-Type": "application/json"}


# ============================================================================
# CHAMADAS
# ============================================================================

class TestCall:
    """Testes de ClickUpClient.call."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_sucesso(self):
        """Deve retornar o JSON e enviar Authorization."""
        route = respx.get(f"{API_BASE}/team").mock(
            return_value=Response(200, json={"teams": [{"id": "t1"}]})
        )

        result = await clickup.call(RequestSpec(path="team"), "pk_1")

        assert result == {"teams": [{"id": "t1"}]}
        request = route.calls.last.request
        assert request.headers["Authorization"] == "pk_1"
        assert request.headers["Content-Type"] == "application/json"
        assert metrics.api_calls == 1
        assert metrics.api_errors == 0

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_nao_envia_body(self):
        """GET nunca envia body, mesmo se informado."""
        route = respx.get(f"{API_BASE}/user").mock(return_value=Response(200, json={}))

        await clickup.call(RequestSpec(path="user", body={"x": 1}), "pk_1")

        assert route.calls.last.request.content == b""

    @respx.mock
    @pytest.mark.asyncio
    async def test_post_envia_json(self):
        """POST deve serializar o body como JSON."""
        route = respx.post(f"{API_BASE}/list/L1/task").mock(
            return_value=Response(200, json={"id": "t1"})
        )

        await clickup.call(
            RequestSpec(path="list/L1/task", method=HttpMethod.POST, body={"name": "T"}),
            "pk_1",
        )

        assert json.loads(route.calls.last.request.content) == {"name": "T"}

    @respx.mock
    @pytest.mark.asyncio
    async def test_query_repetida(self):
        """Query com chaves repetidas deve chegar à API."""
        route = respx.get(f"{API_BASE}/list/L1/task").mock(return_value=Response(200, json={"tasks": []}))

        await clickup.call(
            RequestSpec(path="list/L1/task", query=build_query({"statuses": ["a", "b"], "archived": False})),
            "pk_1",
        )

        params = route.calls.last.request.url.params
        assert params.get_list("statuses") == ["a", "b"]
        assert params["archived"] == "false"

    @respx.mock
    @pytest.mark.asyncio
    async def test_erro_404(self):
        """Status não-2xx vira {error, status} sem exceção."""
        respx.get(f"{API_BASE}/task/x").mock(
            return_value=Response(404, json={"err": "not found"})
        )

        result = await clickup.call(RequestSpec(path="task/x"), "pk_1")

        assert result == {"error": {"err": "not found"}, "status": 404}
        assert is_error_result(result)
        assert metrics.api_errors == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_erro_com_corpo_texto(self):
        """Corpo de erro não-JSON é devolvido como texto."""
        respx.get(f"{API_BASE}/team").mock(return_value=Response(502, text="Bad Gateway"))

        result = await clickup.call(RequestSpec(path="team"), "pk_1")

        assert result == {"error": "Bad Gateway", "status": 502}

    @respx.mock
    @pytest.mark.asyncio
    async def test_sucesso_sem_corpo(self):
        """DELETE com 204 retorna objeto vazio."""
        respx.delete(f"{API_BASE}/task/t1").mock(return_value=Response(204))

        result = await clickup.call(RequestSpec(path="task/t1", method=HttpMethod.DELETE), "pk_1")

        assert result == {}
        assert not is_error_result(result)

    @respx.mock
    @pytest.mark.asyncio
    async def test_falha_de_rede(self):
        """Falha de transporte vira {error} sem status."""
        respx.get(f"{API_BASE}/team").mock(side_effect=httpx.ConnectError("connection refused"))

        result = await clickup.call(RequestSpec(path="team"), "pk_1")

        assert result == {"error": "connection refused"}
        assert metrics.api_errors == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeout é tratado como falha de transporte."""
        respx.get(f"{API_BASE}/team").mock(side_effect=httpx.ReadTimeout("timed out"))

        result = await clickup.call(RequestSpec(path="team"), "pk_1")

        assert result == {"error": "timed out"}


class TestIsErrorResult:
    """Testes de is_error_result."""

    def test_payload_normal_nao_e_erro(self):
        """Payloads de sucesso não são confundidos com erro."""
        assert not is_error_result({"tasks": []})
        assert not is_error_result([{"error": "x"}])

    def test_payload_com_campo_error_e_outros(self):
        """Um objeto da API com 'error' e outros campos não é falha normalizada."""
        assert not is_error_result({"error": "x", "id": "1"})

    def test_erro_normalizado(self):
        assert is_error_result({"error": "boom"})
        assert is_error_result({"error": {"err": "x"}, "status": 400})
