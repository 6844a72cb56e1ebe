"""
Testes da publicação das tools no FastMCP e do entry point.
"""
import json

import pytest
import respx
from httpx import Response
from mcp.server.fastmcp.exceptions import ToolError

from clickup_bridge import config, server
from clickup_bridge.errors import ConfigurationError
from clickup_bridge.server import mcp
from clickup_bridge.tools import registry

API_BASE = "https://api.clickup.com/api/v2"


def contents(result):
    """Conteúdo não estruturado retornado por FastMCP.call_tool."""
    if isinstance(result, tuple):
        result = result[0]
    return list(result)


async def tools_by_name():
    return {tool.name: tool for tool in await mcp.list_tools()}


class TestListTools:
    """Schema publicado para os clientes MCP."""

    @pytest.mark.asyncio
    async def test_todas_as_tools_publicadas(self):
        tools = await tools_by_name()

        assert set(tools) == set(registry.names())

    @pytest.mark.asyncio
    async def test_schema_camel_case(self):
        """Parâmetros aparecem achatados e em camelCase, sem o ctx."""
        schema = (await tools_by_name())["getSpaces"].inputSchema

        assert set(schema["properties"]) == {"workspaceId", "archived"}
        assert schema["required"] == ["workspaceId"]
        assert schema["properties"]["workspaceId"]["description"] == "ID do workspace/team"

    @pytest.mark.asyncio
    async def test_schema_sem_parametros(self):
        schema = (await tools_by_name())["getWorkspaces"].inputSchema

        assert schema.get("properties", {}) == {}

    @pytest.mark.asyncio
    async def test_annotations(self):
        """Hints de leitura/destruição seguem o descritor."""
        tools = await tools_by_name()

        assert tools["getTask"].annotations.readOnlyHint is True
        assert tools["deleteTask"].annotations.readOnlyHint is False
        assert tools["deleteTask"].annotations.destructiveHint is True
        assert tools["createTask"].annotations.idempotentHint is False
        assert tools["getMetrics"].annotations.openWorldHint is False

    @pytest.mark.asyncio
    async def test_descricao(self):
        tools = await tools_by_name()

        assert tools["getWorkspaces"].description == "Lista todos os workspaces (teams) que você tem acesso."


class TestCallTool:
    """Chamadas pelo FastMCP chegam ao registry."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_call_tool(self, api_key, mock_spaces_response):
        route = respx.get(f"{API_BASE}/team/123/space").mock(
            return_value=Response(200, json=mock_spaces_response)
        )

        result = contents(await mcp.call_tool("getSpaces", {"workspaceId": "123"}))

        assert route.called
        assert len(result) == 1
        assert result[0].type == "text"
        assert json.loads(result[0].text) == mock_spaces_response

    @respx.mock
    @pytest.mark.asyncio
    async def test_call_tool_objeto_aninhado(self, api_key):
        route = respx.post(f"{API_BASE}/team/t1/space").mock(return_value=Response(200, json={"id": "s1"}))

        await mcp.call_tool("createSpace", {
            "workspaceId": "t1", "name": "S", "features": {"tags": True},
        })

        assert json.loads(route.calls.last.request.content) == {
            "name": "S",
            "features": {"tags": {"enabled": True}},
        }

    @pytest.mark.asyncio
    async def test_sem_credencial_e_resultado_da_tool(self):
        """Credencial ausente não é erro de protocolo."""
        result = contents(await mcp.call_tool("getWorkspaces", {}))

        assert "API key" in result[0].text

    @pytest.mark.asyncio
    async def test_input_invalido_e_erro_de_protocolo(self):
        with pytest.raises(ToolError):
            await mcp.call_tool("getLists", {})

    @pytest.mark.asyncio
    async def test_tool_desconhecida(self):
        with pytest.raises(ToolError):
            await mcp.call_tool("naoExiste", {})


class TestMain:
    """Entry point."""

    def test_main_usa_transporte_configurado(self, monkeypatch):
        calls = []
        monkeypatch.setattr(server, "configure_logging", lambda level, log_file: None)
        monkeypatch.setattr(config, "MCP_TRANSPORT", "streamable-http")
        monkeypatch.setattr(mcp, "run", lambda transport: calls.append(transport))

        server.main()

        assert calls == ["streamable-http"]

    def test_main_transporte_invalido(self, monkeypatch):
        monkeypatch.setattr(server, "configure_logging", lambda level, log_file: None)
        monkeypatch.setattr(config, "MCP_TRANSPORT", "websocket")
        monkeypatch.setattr(mcp, "run", lambda transport: pytest.fail("não deveria iniciar"))

        with pytest.raises(ConfigurationError):
            server.main()
