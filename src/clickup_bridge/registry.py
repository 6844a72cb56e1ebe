"""
Registry de tools e despacho de invocações.

Cada tool é um ``ToolDescriptor``: nome, modelo pydantic de input e um
handler ``async (params, credential) -> resultado``. ``ToolRegistry.invoke``
aplica o contrato comum a todas elas:

- tool desconhecida ou input inválido levantam exceção (erro de protocolo);
- credencial ausente, erro da API, falha de rede ou exceção no handler
  voltam como texto no envelope, para o agente poder reagir.
"""

import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Type

from loguru import logger
from mcp.types import TextContent
from pydantic import BaseModel, ConfigDict, ValidationError

from . import config
from .client import is_error_result
from .context import InvocationContext
from .credentials import CredentialResolver
from .errors import DuplicateToolError, InvalidInputError, ReadOnlyModeError, ToolNotFoundError
from .logging_config import set_new_correlation_id
from .metrics import metrics

Handler = Callable[[Any, Optional[str]], Awaitable[Any]]

# JSON compacto, como a API do ClickUp responde
JSON_SEPARATORS = (",", ":")

CREDENTIAL_MISSING_MESSAGE = (
    "Error: no ClickUp API key available. Send the "
    f"{config.API_KEY_HEADER} header, set the CLICKUP_API_KEY environment "
    "variable, or authenticate with the 'auth' tool."
)


# ============================================================================
# ENVELOPE
# ============================================================================

class Envelope(BaseModel):
    """Resposta uniforme de toda tool: uma sequência de conteúdos texto."""

    content: List[TextContent]

    @classmethod
    def from_text(cls, text: str) -> "Envelope":
        return cls(content=[TextContent(type="text", text=text)])

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.content)


# ============================================================================
# DESCRITOR
# ============================================================================

class ToolDescriptor(BaseModel):
    """Definição imutável de uma tool."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    input_model: Type[BaseModel]
    handler: Handler
    action: str
    title: Optional[str] = None
    description: str = ""
    requires_credential: bool = True
    read_only: bool = True
    destructive: bool = False
    idempotent: bool = True
    open_world: bool = True


# ============================================================================
# REGISTRY
# ============================================================================

class ToolRegistry:
    """Registry em memória das tools expostas."""

    def __init__(
        self,
        resolver: Optional[CredentialResolver] = None,
        read_only_mode: Optional[bool] = None,
    ) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self._resolver = resolver
        self._read_only_mode = read_only_mode

    @property
    def resolver(self) -> CredentialResolver:
        """Resolver explícito ou, sem ele, um construído da configuração atual."""
        return self._resolver or CredentialResolver.from_config()

    @property
    def read_only_mode(self) -> bool:
        if self._read_only_mode is not None:
            return self._read_only_mode
        return config.READ_ONLY_MODE

    def register(self, descriptor: ToolDescriptor) -> ToolDescriptor:
        """Registra uma tool. Nomes repetidos são erro fatal de startup."""
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = descriptor
        logger.debug(f"Tool registrada: {descriptor.name}")
        return descriptor

    def tool(
        self,
        name: str,
        input_model: Type[BaseModel],
        action: str,
        *,
        title: Optional[str] = None,
        requires_credential: bool = True,
        read_only: bool = True,
        destructive: bool = False,
        idempotent: bool = True,
        open_world: bool = True,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator que registra a função como handler da tool ``name``.

        A docstring da função vira a descrição publicada no MCP.
        """
        def decorator(fn: Handler) -> Handler:
            self.register(ToolDescriptor(
                name=name,
                input_model=input_model,
                handler=fn,
                action=action,
                title=title,
                description=inspect.cleandoc(fn.__doc__ or ""),
                requires_credential=requires_credential,
                read_only=read_only,
                destructive=destructive,
                idempotent=idempotent,
                open_world=open_world,
            ))
            return fn
        return decorator

    def get(self, name: str) -> ToolDescriptor:
        """Retorna o descritor ou levanta ToolNotFoundError."""
        descriptor = self._tools.get(name)
        if descriptor is None:
            raise ToolNotFoundError(name)
        return descriptor

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    # ------------------------------------------------------------------------
    # Invocação
    # ------------------------------------------------------------------------

    @staticmethod
    def validate(descriptor: ToolDescriptor, raw_input: Mapping[str, Any]) -> BaseModel:
        """
        Valida o input contra o modelo da tool.

        Raises:
            InvalidInputError: Com o caminho de cada campo inválido
        """
        try:
            return descriptor.input_model.model_validate(dict(raw_input))
        except ValidationError as e:
            fields: List[str] = []
            messages: List[str] = []
            for error in e.errors():
                # Regras entre campos informam os campos envolvidos no ctx
                paths = error.get("ctx", {}).get("fields") or [
                    ".".join(str(part) for part in error["loc"]) or "(input)"
                ]
                for path in paths:
                    if path not in fields:
                        fields.append(path)
                path = ", ".join(paths)
                messages.append(f"{path}: {error['msg']}")
            raise InvalidInputError(descriptor.name, fields, messages) from e

    def check_write_permission(self, operation: str) -> None:
        """
        Verifica se operações de escrita são permitidas.

        Raises:
            ReadOnlyModeError: Se servidor está em modo read-only
        """
        if self.read_only_mode:
            raise ReadOnlyModeError(
                f"Operation '{operation}' blocked: server running in READ_ONLY mode. "
                f"Set READ_ONLY_MODE=false to enable writes"
            )

    async def invoke(
        self,
        name: str,
        raw_input: Optional[Mapping[str, Any]] = None,
        context: Optional[InvocationContext] = None,
    ) -> Envelope:
        """
        Executa a tool ``name`` e devolve o envelope de resposta.

        Raises:
            ToolNotFoundError: Tool não registrada
            InvalidInputError: Input não passa na validação
        """
        descriptor = self.get(name)
        set_new_correlation_id()
        metrics.record_tool_call(name)
        logger.info(f"Invocando tool {name}")

        try:
            params = self.validate(descriptor, raw_input or {})
        except InvalidInputError as e:
            metrics.record_tool_error(name)
            logger.warning(str(e))
            raise

        with metrics.measure_latency(name):
            return await self._run(descriptor, params, context or InvocationContext())

    async def _run(
        self,
        descriptor: ToolDescriptor,
        params: BaseModel,
        context: InvocationContext,
    ) -> Envelope:
        name = descriptor.name
        failure_prefix = f"Error {descriptor.action}"

        if not descriptor.read_only:
            try:
                self.check_write_permission(name)
            except ReadOnlyModeError as e:
                metrics.record_tool_error(name)
                logger.warning(str(e))
                return Envelope.from_text(f"{failure_prefix}: {e}")

        credential = None
        if descriptor.requires_credential:
            credential = self.resolver.resolve(context)
            if credential is None:
                metrics.record_tool_error(name)
                logger.warning(f"Tool {name} sem credencial disponível")
                return Envelope.from_text(CREDENTIAL_MISSING_MESSAGE)

        try:
            result = await descriptor.handler(params, credential)
        except Exception as e:
            metrics.record_tool_error(name)
            logger.exception(f"Tool {name} falhou: {e}")
            return Envelope.from_text(f"{failure_prefix}: {e}")

        if is_error_result(result):
            metrics.record_tool_error(name)
            return Envelope.from_text(f"{failure_prefix}: {json.dumps(result, ensure_ascii=False, separators=JSON_SEPARATORS)}")
        if isinstance(result, str):
            return Envelope.from_text(result)
        return Envelope.from_text(json.dumps(result, ensure_ascii=False, separators=JSON_SEPARATORS))
