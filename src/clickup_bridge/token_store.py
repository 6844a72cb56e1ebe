"""
Armazenamento de tokens OAuth obtidos pela tool ``auth``.

Os tokens são indexados pelo ``client_id`` da aplicação OAuth. Sem
``CLICKUP_TOKEN_STORE`` configurado, ficam apenas em memória.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from . import config


class TokenStore:
    """Store de tokens em memória, com persistência opcional em arquivo JSON."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path).expanduser() if path else None
        self._tokens: Dict[str, Any] = {}
        self._lock = threading.Lock()
        if self.path is not None:
            self._load()

    @staticmethod
    def _key(client_id: str) -> str:
        return f"token:{client_id}"

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            self._tokens = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Falha ao carregar tokens de {self.path}: {e}")
            self._tokens = {}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._tokens), encoding="utf-8")
        tmp_path.replace(self.path)

    def save(self, client_id: str, token: Any) -> bool:
        """
        Salva o token de um client.

        Returns:
            True se o token foi salvo; falhas de escrita são logadas.
        """
        with self._lock:
            self._tokens[self._key(client_id)] = token
            if self.path is None:
                logger.info(f"Token salvo para client {client_id}")
                return True
            try:
                self._flush()
            except OSError as e:
                logger.error(f"Falha ao salvar token: {e}")
                return False
        logger.info(f"Token salvo para client {client_id}")
        return True

    def get(self, client_id: str) -> Optional[Any]:
        """Retorna o token salvo para o client ou None."""
        with self._lock:
            token = self._tokens.get(self._key(client_id))
        if token is None:
            logger.debug(f"Nenhum token encontrado para client {client_id}")
        return token

    def clear(self) -> None:
        """Remove todos os tokens (apenas da memória)."""
        with self._lock:
            self._tokens.clear()


_token_store: Optional[TokenStore] = None


def get_token_store() -> TokenStore:
    """Retorna o store global, criado a partir de CLICKUP_TOKEN_STORE."""
    global _token_store
    if _token_store is None:
        _token_store = TokenStore(config.CLICKUP_TOKEN_STORE or None)
    return _token_store
