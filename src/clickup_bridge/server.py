"""
Servidor MCP do ClickUp Bridge.

Publica cada tool do registry no FastMCP com o schema do seu modelo de input
(nomes camelCase, achatados) e encaminha as chamadas para
``ToolRegistry.invoke``.
"""

import inspect
from typing import Annotated, Any, Dict, List

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import TextContent, ToolAnnotations
from pydantic import Field

from . import config
from .context import InvocationContext
from .logging_config import configure_logging
from .registry import ToolDescriptor, ToolRegistry
from .tools import registry

mcp = FastMCP("clickup_bridge", host=config.MCP_HOST, port=config.MCP_PORT)


def _tool_parameters(descriptor: ToolDescriptor) -> List[inspect.Parameter]:
    """Um parâmetro keyword-only por campo do input, nomeado pelo alias."""
    parameters = [inspect.Parameter("ctx", inspect.Parameter.KEYWORD_ONLY, annotation=Context)]
    for name, field in descriptor.input_model.model_fields.items():
        if field.is_required():
            default = inspect.Parameter.empty
        else:
            default = field.get_default(call_default_factory=True)
        parameters.append(inspect.Parameter(
            field.alias or name,
            inspect.Parameter.KEYWORD_ONLY,
            annotation=Annotated[field.annotation, Field(description=field.description)],
            default=default,
        ))
    return parameters


def build_tool_function(descriptor: ToolDescriptor, tool_registry: ToolRegistry = registry):
    """
    Cria a função assíncrona registrada no FastMCP para uma tool.

    O FastMCP monta o inputSchema a partir da assinatura; a validação
    definitiva continua sendo a do modelo de input, dentro do registry.
    """
    name = descriptor.name

    async def tool_fn(ctx: Context, **arguments: Any) -> List[TextContent]:
        raw_input = {key: value for key, value in arguments.items() if value is not None}
        envelope = await tool_registry.invoke(name, raw_input, InvocationContext.from_mcp_context(ctx))
        return envelope.content

    parameters = _tool_parameters(descriptor)
    annotations: Dict[str, Any] = {p.name: p.annotation for p in parameters}
    annotations["return"] = List[TextContent]

    tool_fn.__name__ = name
    tool_fn.__qualname__ = name
    tool_fn.__doc__ = descriptor.description
    tool_fn.__signature__ = inspect.Signature(parameters, return_annotation=List[TextContent])
    tool_fn.__annotations__ = annotations
    return tool_fn


def register_tools(server: FastMCP, tool_registry: ToolRegistry = registry) -> None:
    """Registra todas as tools do registry no servidor MCP."""
    for descriptor in tool_registry:
        server.add_tool(
            build_tool_function(descriptor, tool_registry),
            name=descriptor.name,
            title=descriptor.title,
            description=descriptor.description,
            annotations=ToolAnnotations(
                title=descriptor.title,
                readOnlyHint=descriptor.read_only,
                destructiveHint=descriptor.destructive,
                idempotentHint=descriptor.idempotent,
                openWorldHint=descriptor.open_world,
            ),
            structured_output=False,
        )
    logger.debug(f"{len(tool_registry)} tools registradas no servidor MCP")


register_tools(mcp)


# ============================================================================
# MAIN
# ============================================================================

def main() -> None:
    """Entry point do servidor."""
    configure_logging(config.LOG_LEVEL, config.LOG_FILE or None)
    config.validate_config()
    logger.info(f"Iniciando ClickUp MCP Bridge com {len(registry)} tools")
    mcp.run(transport=config.MCP_TRANSPORT)


if __name__ == "__main__":
    main()
