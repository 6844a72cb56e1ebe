"""
Configuração do ClickUp MCP Bridge.

Todas as variáveis são lidas do ambiente uma única vez, no import do módulo.
Quem precisa de um valor lê o atributo do módulo no momento do uso
(``config.CLICKUP_API_KEY``), o que permite sobrescrever nos testes.
"""

import os

from loguru import logger

from .errors import ConfigurationError

# ============================================================================
# API DO CLICKUP
# ============================================================================

API_BASE_URL = "https://api.clickup.com/api/v2"
API_V3_BASE_URL = "https://api.clickup.com/api/v3"
OAUTH_TOKEN_URL = f"{API_BASE_URL}/oauth/token"

# Headers aceitos por invocação (transportes HTTP)
API_KEY_HEADER = "X-ClickUp-API-Key"
CLIENT_ID_HEADER = "X-ClickUp-Client-Id"

# ============================================================================
# VARIÁVEIS DE AMBIENTE
# ============================================================================

CLICKUP_API_KEY = os.environ.get("CLICKUP_API_KEY", "")
CLICKUP_CLIENT_ID = os.environ.get("CLICKUP_CLIENT_ID", "")
CLICKUP_TOKEN_STORE = os.environ.get("CLICKUP_TOKEN_STORE", "")

DEFAULT_TIMEOUT = float(os.environ.get("DEFAULT_TIMEOUT", "30.0"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE", "")

# Modo operacional
READ_ONLY_MODE = os.environ.get("READ_ONLY_MODE", "false").lower() == "true"

# Transporte MCP
MCP_TRANSPORT = os.environ.get("MCP_TRANSPORT", "stdio")
MCP_HOST = os.environ.get("MCP_HOST", "127.0.0.1")
MCP_PORT = int(os.environ.get("MCP_PORT", "8000"))

SUPPORTED_TRANSPORTS = ("stdio", "sse", "streamable-http")

_KNOWN_VARS = {
    "CLICKUP_API_KEY",
    "CLICKUP_CLIENT_ID",
    "CLICKUP_TOKEN_STORE",
    "DEFAULT_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FILE",
    "READ_ONLY_MODE",
    "MCP_TRANSPORT",
    "MCP_HOST",
    "MCP_PORT",
}


def validate_config() -> None:
    """
    Valida configuração no startup.

    A API key não é obrigatória: ela pode chegar pelo header
    X-ClickUp-API-Key ou por um token OAuth salvo pela tool ``auth``.

    Raises:
        ConfigurationError: Se o transporte configurado não existe
    """
    if MCP_TRANSPORT not in SUPPORTED_TRANSPORTS:
        error_msg = (
            f"MCP_TRANSPORT inválido: '{MCP_TRANSPORT}'. "
            f"Use um de: {', '.join(SUPPORTED_TRANSPORTS)}"
        )
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    if not CLICKUP_API_KEY:
        logger.warning(
            f"CLICKUP_API_KEY não configurada. As tools dependem do header "
            f"{API_KEY_HEADER} ou de um token obtido pela tool 'auth'"
        )

    # Warning para desconhecidas (possível typo)
    env_vars = {k for k in os.environ.keys() if k.startswith("CLICKUP_")}
    for var in sorted(env_vars - _KNOWN_VARS):
        logger.warning(f"Variável desconhecida ignorada (possível typo?): {var}")

    mode = "READ_ONLY" if READ_ONLY_MODE else "READ_WRITE"
    logger.info(f"Configuração validada | Modo: {mode} | Transporte: {MCP_TRANSPORT}")
