"""Contexto de uma invocação de tool."""

from typing import Any, Dict, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator


class InvocationContext(BaseModel):
    """
    Dados da requisição MCP que originou a invocação.

    Criado a cada chamada e passado explicitamente até o resolver de
    credenciais; nunca é compartilhado entre invocações.
    """

    headers: Dict[str, str] = Field(default_factory=dict, description="Headers do transporte (nomes em minúsculas)")
    request_id: Optional[str] = Field(default=None, description="ID da requisição MCP")

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        return {str(k).lower(): str(v) for k, v in dict(value).items()}

    def header(self, name: str) -> Optional[str]:
        """Valor do header (case-insensitive) ou None."""
        return self.headers.get(name.lower())

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], request_id: Optional[str] = None) -> "InvocationContext":
        return cls(headers=dict(headers), request_id=request_id)

    @classmethod
    def from_mcp_context(cls, ctx: Any) -> "InvocationContext":
        """
        Extrai headers e request_id do Context do FastMCP.

        No transporte stdio não existe requisição HTTP: o contexto volta vazio.
        """
        if ctx is None:
            return cls()
        try:
            request_context = ctx.request_context
        except (LookupError, ValueError):
            # Fora de uma requisição MCP (ex: chamada direta em testes)
            return cls()

        request_id = getattr(request_context, "request_id", None)
        request = getattr(request_context, "request", None)
        headers = getattr(request, "headers", None) or {}
        if request is None:
            logger.debug("Invocação sem requisição HTTP associada (stdio)")
        return cls(
            headers=dict(headers),
            request_id=str(request_id) if request_id is not None else None,
        )
