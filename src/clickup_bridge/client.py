"""
Cliente HTTP genérico da API do ClickUp.

Todas as tools passam por ``ClickUpClient.call``: ele monta a URL a partir da
versão da API declarada no ``RequestSpec``, anexa os headers de autenticação
e normaliza falhas em um dicionário ``{"error": ..., "status": ...}`` em vez
de levantar exceção.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict

from . import config
from .metrics import metrics

# ============================================================================
# ENUMS E MODELOS
# ============================================================================

class ApiVersion(str, Enum):
    """Versões da API do ClickUp."""
    V2 = "v2"
    V3 = "v3"


class HttpMethod(str, Enum):
    """Métodos HTTP aceitos pelo cliente."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


# Métodos que carregam body JSON
BODY_METHODS = {HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH}


class RequestSpec(BaseModel):
    """
    Descrição de uma requisição à API do ClickUp.

    ``path`` é relativo à base URL da versão (ex: ``team/123/space``); uma URL
    absoluta é usada como está (token OAuth).
    """
    model_config = ConfigDict(frozen=True)

    path: str
    method: HttpMethod = HttpMethod.GET
    api_version: ApiVersion = ApiVersion.V2
    body: Optional[Any] = None
    query: Optional[List[Tuple[str, str]]] = None


# ============================================================================
# QUERY STRING
# ============================================================================

def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def build_query(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """
    Converte parâmetros em pares (chave, valor) para a query string.

    Listas viram chaves repetidas (``statuses=a&statuses=b``), booleanos
    viram ``true``/``false`` e valores ``None`` são descartados. A ordem de
    inserção é preservada.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))
    return pairs


def parse_query(query: str) -> Dict[str, List[str]]:
    """Operação inversa de ``build_query``: agrupa chaves repetidas em listas."""
    grouped: Dict[str, List[str]] = {}
    for key, value in httpx.QueryParams(query).multi_items():
        grouped.setdefault(key, []).append(value)
    return grouped


# ============================================================================
# CLIENTE
# ============================================================================

class ClickUpClient:
    """Cliente da API do ClickUp com connection pooling."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        base_url: str = config.API_BASE_URL,
        v3_base_url: str = config.API_V3_BASE_URL,
    ):
        self.timeout = timeout if timeout is not None else config.DEFAULT_TIMEOUT
        self.base_urls = {ApiVersion.V2: base_url, ApiVersion.V3: v3_base_url}
        self._http_client: Optional[httpx.AsyncClient] = None

    async def get_http_client(self) -> httpx.AsyncClient:
        """Retorna cliente HTTP com connection pooling."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20)
            )
        return self._http_client

    async def aclose(self) -> None:
        """Fecha o pool de conexões."""
        if self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
        self._http_client = None

    def url_for(self, request: RequestSpec) -> str:
        """Monta a URL final da requisição."""
        if request.path.startswith(("https://", "http://")):
            return request.path
        base_url = self.base_urls[request.api_version]
        return f"{base_url}/{request.path.lstrip('/')}"

    @staticmethod
    def build_headers(credential: Optional[str]) -> Dict[str, str]:
        """Headers enviados em toda requisição."""
        headers = {"Content-Type": "application/json"}
        if credential:
            headers["Authorization"] = credential
        return headers

    async def call(self, request: RequestSpec, credential: Optional[str]) -> Any:
        """
        Executa a requisição e devolve o JSON da resposta.

        Args:
            request: Requisição a executar
            credential: Valor do header Authorization

        Returns:
            O corpo JSON da resposta em caso de sucesso. Em caso de falha,
            ``{"error": <corpo>, "status": <código>}`` para respostas não-2xx
            ou ``{"error": <mensagem>}`` quando não houve resposta.
        """
        url = self.url_for(request)
        kwargs: Dict[str, Any] = {"headers": self.build_headers(credential)}
        if request.query:
            kwargs["params"] = request.query
        if request.method in BODY_METHODS and request.body is not None:
            kwargs["json"] = request.body

        client = await self.get_http_client()
        metrics.record_api_call()
        logger.debug(f"API {request.method.value} {url}")

        try:
            response = await client.request(request.method.value, url, **kwargs)
        except httpx.TransportError as e:
            metrics.record_api_error()
            message = str(e) or type(e).__name__
            logger.warning(f"Falha de transporte em {request.method.value} {url}: {message}")
            return {"error": message}

        if not response.is_success:
            metrics.record_api_error()
            logger.warning(f"API respondeu {response.status_code} em {request.method.value} {url}")
            return {"error": _decode_body(response), "status": response.status_code}

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.warning(f"Resposta não-JSON em {request.method.value} {url}")
            return {"error": response.text, "status": response.status_code}


def _decode_body(response: httpx.Response) -> Any:
    """Corpo de erro como JSON; texto puro quando não for JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def is_error_result(result: Any) -> bool:
    """Indica se o resultado de ``call`` é um objeto de falha normalizado."""
    return (
        isinstance(result, dict)
        and "error" in result
        and set(result) <= {"error", "status"}
    )


# Instância global (pool compartilhado entre as tools)
clickup = ClickUpClient()
