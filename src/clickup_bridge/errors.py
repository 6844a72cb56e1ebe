"""Exceções do ClickUp MCP Bridge."""

from typing import List, Optional


class ClickUpError(Exception):
    """Exceção base para erros do ClickUp MCP Bridge."""
    pass


class ConfigurationError(ClickUpError):
    """Erro de configuração (variáveis de ambiente, etc)."""
    pass


class ReadOnlyModeError(ClickUpError):
    """Erro quando operação de escrita é bloqueada em modo read-only."""
    pass


class DuplicateToolError(ClickUpError):
    """Tool registrada duas vezes com o mesmo nome."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' já está registrada")


class ToolNotFoundError(ClickUpError, LookupError):
    """Nome de tool desconhecido pelo registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' não está registrada")


class InvalidInputError(ClickUpError, ValueError):
    """
    Input rejeitado pela validação do schema da tool.

    Attributes:
        tool: Nome da tool
        fields: Caminhos dos campos inválidos (ex: "features.tags")
        errors: Mensagens legíveis, uma por violação
    """

    def __init__(self, tool: str, fields: List[str], errors: Optional[List[str]] = None):
        self.tool = tool
        self.fields = fields
        self.errors = errors or []
        detail = "; ".join(self.errors) if self.errors else ", ".join(fields)
        super().__init__(f"Input inválido para '{tool}': {detail}")
