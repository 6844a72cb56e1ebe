"""
Resolução da credencial usada em cada chamada à API do ClickUp.

Ordem de prioridade:
    1. Header X-ClickUp-API-Key da invocação
    2. CLICKUP_API_KEY do ambiente do processo
    3. Token OAuth salvo pela tool ``auth`` para o client da invocação
       (header X-ClickUp-Client-Id ou CLICKUP_CLIENT_ID)
"""

from typing import Any, Optional

from loguru import logger

from . import config
from .context import InvocationContext
from .token_store import TokenStore, get_token_store


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _access_token(token: Any) -> Optional[str]:
    """Extrai o access_token do payload salvo pela tool ``auth``."""
    if isinstance(token, str):
        return _clean(token)
    if isinstance(token, dict):
        value = token.get("access_token")
        return _clean(value) if isinstance(value, str) else None
    return None


class CredentialResolver:
    """Resolve a credencial de uma invocação a partir das fontes configuradas."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        default_client_id: Optional[str] = None,
    ):
        self.api_key = _clean(api_key)
        self.token_store = token_store
        self.default_client_id = _clean(default_client_id)

    @classmethod
    def from_config(cls) -> "CredentialResolver":
        """Resolver com os valores atuais de ``config``."""
        return cls(
            api_key=config.CLICKUP_API_KEY,
            token_store=get_token_store(),
            default_client_id=config.CLICKUP_CLIENT_ID,
        )

    def resolve(self, context: Optional[InvocationContext] = None) -> Optional[str]:
        """
        Retorna a credencial da invocação ou None.

        Nunca levanta exceção: ausência de credencial é um resultado esperado.
        """
        context = context or InvocationContext()

        header_key = _clean(context.header(config.API_KEY_HEADER))
        if header_key:
            logger.debug("Credencial obtida do header da invocação")
            return header_key

        if self.api_key:
            logger.debug("Credencial obtida de CLICKUP_API_KEY")
            return self.api_key

        client_id = _clean(context.header(config.CLIENT_ID_HEADER)) or self.default_client_id
        if client_id and self.token_store is not None:
            try:
                token = self.token_store.get(client_id)
            except Exception as e:
                logger.error(f"Falha ao consultar token do client {client_id}: {e}")
                return None
            access_token = _access_token(token)
            if access_token:
                logger.debug(f"Credencial obtida do token OAuth do client {client_id}")
                return access_token

        return None
