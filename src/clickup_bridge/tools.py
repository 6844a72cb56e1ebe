"""
Catálogo de tools do ClickUp.

Cada tool declara um modelo de input (nomes camelCase no MCP, nomes
snake_case do ClickUp nos atributos) e um handler que só monta o
``RequestSpec`` e repassa a chamada ao cliente genérico.
"""

import json
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from . import config
from .client import ApiVersion, HttpMethod, RequestSpec, build_query, clickup, is_error_result
from .metrics import metrics
from .registry import ToolRegistry
from .token_store import get_token_store

registry = ToolRegistry()

# ============================================================================
# MODELOS BASE
# ============================================================================

class ToolInput(BaseModel):
    """Base dos inputs: aceita o nome camelCase (MCP) ou o snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class EmptyInput(ToolInput):
    """Input de tools sem parâmetros."""


class OrderBy(str, Enum):
    """Opções de ordenação para listagem de tasks."""
    ID = "id"
    CREATED = "created"
    UPDATED = "updated"
    DUE_DATE = "due_date"


ContentFormat = Literal["text/md", "text/plain"]


def to_upstream(
    params: BaseModel,
    exclude: Iterable[str] = (),
    renames: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Converte o input validado no payload do ClickUp.

    Campos não informados (None) ficam de fora. ``renames`` mapeia
    atributo do input -> nome do campo no ClickUp quando eles diferem.
    """
    data = params.model_dump(mode="json", exclude_none=True, exclude=set(exclude))
    for source, target in (renames or {}).items():
        if source in data:
            data[target] = data.pop(source)
    return data


def segment(value: str) -> str:
    """
    Codifica um valor para uso como um único segmento do path.

    Barras e segmentos ``.``/``..`` nunca chegam literais à URL, então o
    valor não consegue trocar o endpoint da tool.
    """
    encoded = quote(value, safe="")
    if encoded in (".", ".."):
        encoded = encoded.replace(".", "%2E")
    return encoded


class FolderOrSpaceInput(ToolInput):
    """Escopo alternativo: folder (prioritário) ou space."""
    folder_id: Optional[str] = Field(default=None, description="ID do folder (tem prioridade sobre spaceId)")
    space_id: Optional[str] = Field(default=None, description="ID do space (usado quando folderId não é informado)")

    @model_validator(mode="after")
    def require_folder_or_space(self) -> "FolderOrSpaceInput":
        if not self.folder_id and not self.space_id:
            raise PydanticCustomError(
                "missing_scope",
                "Either folderId or spaceId must be provided",
                {"fields": ["folderId", "spaceId"]},
            )
        return self

    def parent_path(self) -> str:
        if self.folder_id:
            return f"folder/{segment(self.folder_id)}"
        return f"space/{segment(self.space_id)}"


# ============================================================================
# TOOLS - AUTENTICAÇÃO
# ============================================================================

class AuthInput(ToolInput):
    """Input para troca do código OAuth por um access token."""
    client_id: str = Field(..., description="Client ID da aplicação OAuth", min_length=1)
    client_secret: str = Field(..., description="Client secret da aplicação OAuth", min_length=1)
    code: str = Field(..., description="Código de autorização recebido no redirect", min_length=1)
    redirect_uri: str = Field(..., description="Redirect URI registrada na aplicação", min_length=1)


@registry.tool(
    "auth", AuthInput, "authenticating with ClickUp",
    title="Autenticar via OAuth", requires_credential=False, idempotent=False,
)
async def auth(params: AuthInput, credential: Optional[str]) -> Any:
    """
    Troca um código OAuth do ClickUp por um access token e o salva.

    O token fica associado ao clientId; as próximas chamadas usam esse token
    quando enviam o header X-ClickUp-Client-Id (ou com CLICKUP_CLIENT_ID).
    """
    body = {
        "client_id": params.client_id,
        "client_secret": params.client_secret,
        "code": params.code,
        "grant_type": "authorization_code",
        "redirect_uri": params.redirect_uri,
    }
    result = await clickup.call(
        RequestSpec(path=config.OAUTH_TOKEN_URL, method=HttpMethod.POST, body=body),
        None,
    )
    if is_error_result(result):
        return result

    if not get_token_store().save(params.client_id, result):
        return {"error": "Authentication succeeded but the token could not be stored"}
    return (
        f"Authentication successful. Send the {config.CLIENT_ID_HEADER} header "
        f"with '{params.client_id}' (or set CLICKUP_CLIENT_ID) to use the ClickUp API."
    )


# ============================================================================
# TOOLS - USUÁRIO E WORKSPACES
# ============================================================================

@registry.tool("getAuthorizedUser", EmptyInput, "fetching user data", title="Usuário Autenticado")
async def get_authorized_user(params: EmptyInput, credential: Optional[str]) -> Any:
    """Retorna o usuário dono da credencial usada."""
    return await clickup.call(RequestSpec(path="user"), credential)


@registry.tool("getWorkspaces", EmptyInput, "fetching workspaces", title="Listar Workspaces")
async def get_workspaces(params: EmptyInput, credential: Optional[str]) -> Any:
    """Lista todos os workspaces (teams) que você tem acesso."""
    return await clickup.call(RequestSpec(path="team"), credential)


# ============================================================================
# TOOLS - SPACES
# ============================================================================

class SpaceFeatures(ToolInput):
    """Features de um space; cada uma vira ``{"enabled": valor}`` no ClickUp."""
    due_dates: Optional[bool] = None
    time_tracking: Optional[bool] = None
    tags: Optional[bool] = None
    time_estimates: Optional[bool] = None
    checklists: Optional[bool] = None
    custom_fields: Optional[bool] = None
    remap_dependencies: Optional[bool] = None
    dependency_warning: Optional[bool] = None
    portfolios: Optional[bool] = None
    priorities: Optional[bool] = None

    def to_upstream(self) -> Dict[str, Any]:
        return {name: {"enabled": enabled} for name, enabled in to_upstream(self).items()}


class GetSpacesInput(ToolInput):
    """Input para listar spaces de um workspace."""
    workspace_id: str = Field(..., description="ID do workspace/team", min_length=1)
    archived: Optional[bool] = Field(default=None, description="Incluir spaces arquivados")


class CreateSpaceInput(ToolInput):
    """Input para criar um space."""
    workspace_id: str = Field(..., description="ID do workspace/team", min_length=1)
    name: str = Field(..., description="Nome do space", min_length=1)
    multiple_assignees: Optional[bool] = Field(default=None, description="Permitir múltiplos responsáveis")
    features: Optional[SpaceFeatures] = Field(default=None, description="Features habilitadas/desabilitadas")


class SpaceInput(ToolInput):
    """Input com apenas o ID do space."""
    space_id: str = Field(..., description="ID do space", min_length=1)


class UpdateSpaceInput(SpaceInput):
    """Input para atualizar um space."""
    name: Optional[str] = Field(default=None, description="Novo nome")
    color: Optional[str] = Field(default=None, description="Cor (hex, ex: #7B68EE)")
    private: Optional[bool] = Field(default=None, description="Space privado")
    admin_can_manage: Optional[bool] = Field(default=None, description="Admins podem gerenciar o space")
    multiple_assignees: Optional[bool] = Field(default=None, description="Permitir múltiplos responsáveis")
    features: Optional[SpaceFeatures] = Field(default=None, description="Features habilitadas/desabilitadas")


def _space_body(params: BaseModel, exclude: Iterable[str]) -> Dict[str, Any]:
    body = to_upstream(params, exclude=set(exclude) | {"features"})
    if params.features is not None:
        body["features"] = params.features.to_upstream()
    return body


@registry.tool("getSpaces", GetSpacesInput, "fetching spaces", title="Listar Spaces")
async def get_spaces(params: GetSpacesInput, credential: Optional[str]) -> Any:
    """Lista todos os spaces de um workspace."""
    return await clickup.call(
        RequestSpec(
            path=f"team/{segment(params.workspace_id)}/space",
            query=build_query({"archived": params.archived}),
        ),
        credential,
    )


@registry.tool(
    "createSpace", CreateSpaceInput, "creating space",
    title="Criar Space", read_only=False, idempotent=False,
)
async def create_space(params: CreateSpaceInput, credential: Optional[str]) -> Any:
    """Cria um space em um workspace."""
    return await clickup.call(
        RequestSpec(
            path=f"team/{segment(params.workspace_id)}/space",
            method=HttpMethod.POST,
            body=_space_body(params, exclude={"workspace_id"}),
        ),
        credential,
    )


@registry.tool("getSpace", SpaceInput, "fetching space", title="Detalhes do Space")
async def get_space(params: SpaceInput, credential: Optional[str]) -> Any:
    """Retorna os detalhes de um space (statuses, features, membros)."""
    return await clickup.call(RequestSpec(path=f"space/{segment(params.space_id)}"), credential)


@registry.tool("updateSpace", UpdateSpaceInput, "updating space", title="Atualizar Space", read_only=False)
async def update_space(params: UpdateSpaceInput, credential: Optional[str]) -> Any:
    """Atualiza nome, cor, privacidade ou features de um space."""
    return await clickup.call(
        RequestSpec(
            path=f"space/{segment(params.space_id)}",
            method=HttpMethod.PUT,
            body=_space_body(params, exclude={"space_id"}),
        ),
        credential,
    )


@registry.tool(
    "deleteSpace", SpaceInput, "deleting space",
    title="Deletar Space", read_only=False, destructive=True,
)
async def delete_space(params: SpaceInput, credential: Optional[str]) -> Any:
    """Deleta um space. ATENÇÃO: Esta ação é irreversível!"""
    return await clickup.call(
        RequestSpec(path=f"space/{segment(params.space_id)}", method=HttpMethod.DELETE),
        credential,
    )


# ============================================================================
# TOOLS - FOLDERS
# ============================================================================

class GetFoldersInput(ToolInput):
    """Input para listar folders de um space."""
    space_id: str = Field(..., description="ID do space", min_length=1)
    archived: Optional[bool] = Field(default=None, description="Incluir folders arquivados")


class CreateFolderInput(ToolInput):
    """Input para criar um novo folder."""
    space_id: str = Field(..., description="ID do space", min_length=1)
    name: str = Field(..., description="Nome do folder", min_length=1, max_length=200)


class FolderInput(ToolInput):
    """Input com apenas o ID do folder."""
    folder_id: str = Field(..., description="ID do folder", min_length=1)


class UpdateFolderInput(FolderInput):
    """Input para atualizar um folder."""
    name: str = Field(..., description="Novo nome do folder", min_length=1, max_length=200)


@registry.tool("getFolders", GetFoldersInput, "fetching folders", title="Listar Folders")
async def get_folders(params: GetFoldersInput, credential: Optional[str]) -> Any:
    """Lista os folders de um space."""
    return await clickup.call(
        RequestSpec(
            path=f"space/{segment(params.space_id)}/folder",
            query=build_query({"archived": params.archived}),
        ),
        credential,
    )


@registry.tool(
    "createFolder", CreateFolderInput, "creating folder",
    title="Criar Folder", read_only=False, idempotent=False,
)
async def create_folder(params: CreateFolderInput, credential: Optional[str]) -> Any:
    """Cria um folder em um space."""
    return await clickup.call(
        RequestSpec(
            path=f"space/{segment(params.space_id)}/folder",
            method=HttpMethod.POST,
            body={"name": params.name},
        ),
        credential,
    )


@registry.tool("getFolder", FolderInput, "fetching folder", title="Detalhes do Folder")
async def get_folder(params: FolderInput, credential: Optional[str]) -> Any:
    """Retorna os detalhes de um folder, incluindo suas lists."""
    return await clickup.call(RequestSpec(path=f"folder/{segment(params.folder_id)}"), credential)


@registry.tool("updateFolder", UpdateFolderInput, "updating folder", title="Atualizar Folder", read_only=False)
async def update_folder(params: UpdateFolderInput, credential: Optional[str]) -> Any:
    """Renomeia um folder."""
    return await clickup.call(
        RequestSpec(
            path=f"folder/{segment(params.folder_id)}",
            method=HttpMethod.PUT,
            body={"name": params.name},
        ),
        credential,
    )


@registry.tool(
    "deleteFolder", FolderInput, "deleting folder",
    title="Deletar Folder", read_only=False, destructive=True,
)
async def delete_folder(params: FolderInput, credential: Optional[str]) -> Any:
    """Deleta um folder e suas lists. ATENÇÃO: Esta ação é irreversível!"""
    return await clickup.call(
        RequestSpec(path=f"folder/{segment(params.folder_id)}", method=HttpMethod.DELETE),
        credential,
    )


# ============================================================================
# TOOLS - LISTS
# ============================================================================

class GetListsInput(FolderOrSpaceInput):
    """Input para listar lists de um folder ou de um space."""
    archived: Optional[bool] = Field(default=None, description="Incluir lists arquivadas")


class CreateListInput(FolderOrSpaceInput):
    """Input para criar uma nova list."""
    name: str = Field(..., description="Nome da list", min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, description="Descrição da list")
    markdown_content: Optional[str] = Field(default=None, description="Descrição em markdown")
    due_date: Optional[int] = Field(default=None, description="Due date (timestamp ms)")
    due_date_time: Optional[bool] = Field(default=None, description="Se due_date inclui horário")
    priority: Optional[int] = Field(default=None, description="Prioridade (1=urgent, 2=high, 3=normal, 4=low)", ge=1, le=4)
    assignee: Optional[int] = Field(default=None, description="ID do responsável")
    status: Optional[str] = Field(default=None, description="Status da list")


class ListInput(ToolInput):
    """Input com apenas o ID da list."""
    list_id: str = Field(..., description="ID da list", min_length=1)


class UpdateListInput(ListInput):
    """Input para atualizar uma list."""
    name: Optional[str] = Field(default=None, description="Novo nome")
    content: Optional[str] = Field(default=None, description="Nova descrição")
    markdown_content: Optional[str] = Field(default=None, description="Nova descrição em markdown")
    due_date: Optional[int] = Field(default=None, description="Novo due date (timestamp ms)")
    due_date_time: Optional[bool] = Field(default=None, description="Se due_date inclui horário")
    priority: Optional[int] = Field(default=None, description="Nova prioridade (1-4)", ge=1, le=4)
    assignee: Optional[int] = Field(default=None, description="ID do novo responsável")
    status: Optional[str] = Field(default=None, description="Novo status (cor da list)")
    unset_status: Optional[bool] = Field(default=None, description="Remover status")


class GetFolderlessListInput(ToolInput):
    """Input para listar lists sem folder (diretamente no space)."""
    space_id: str = Field(..., description="ID do space", min_length=1)
    archived: Optional[bool] = Field(default=None, description="Incluir lists arquivadas")


@registry.tool("getLists", GetListsInput, "fetching lists", title="Listar Lists")
async def get_lists(params: GetListsInput, credential: Optional[str]) -> Any:
    """
    Lista as lists de um folder ou, sem folderId, as lists sem folder de um space.

    Informe folderId OU spaceId; se ambos vierem, folderId é usado.
    """
    return await clickup.call(
        RequestSpec(
            path=f"{params.parent_path()}/list",
            query=build_query({"archived": params.archived}),
        ),
        credential,
    )


@registry.tool(
    "createList", CreateListInput, "creating list",
    title="Criar List", read_only=False, idempotent=False,
)
async def create_list(params: CreateListInput, credential: Optional[str]) -> Any:
    """
    Cria uma nova list em um folder ou diretamente em um space.

    Informe folderId OU spaceId; se ambos vierem, folderId é usado.
    """
    return await clickup.call(
        RequestSpec(
            path=f"{params.parent_path()}/list",
            method=HttpMethod.POST,
            body=to_upstream(params, exclude={"folder_id", "space_id"}),
        ),
        credential,
    )


@registry.tool("getList", ListInput, "fetching list", title="Detalhes da List")
async def get_list(params: ListInput, credential: Optional[str]) -> Any:
    """Retorna os detalhes de uma list (statuses, datas, responsável)."""
    return await clickup.call(RequestSpec(path=f"list/{segment(params.list_id)}"), credential)


@registry.tool("updateList", UpdateListInput, "updating list", title="Atualizar List", read_only=False)
async def update_list(params: UpdateListInput, credential: Optional[str]) -> Any:
    """Atualiza uma list existente."""
    return await clickup.call(
        RequestSpec(
            path=f"list/{segment(params.list_id)}",
            method=HttpMethod.PUT,
            body=to_upstream(params, exclude={"list_id"}),
        ),
        credential,
    )


@registry.tool(
    "deleteList", ListInput, "deleting list",
    title="Deletar List", read_only=False, destructive=True,
)
async def delete_list(params: ListInput, credential: Optional[str]) -> Any:
    """Deleta uma list. ATENÇÃO: Esta ação é irreversível!"""
    return await clickup.call(
        RequestSpec(path=f"list/{segment(params.list_id)}", method=HttpMethod.DELETE),
        credential,
    )


@registry.tool("getFolderlessList", GetFolderlessListInput, "fetching folderless lists", title="Listar Lists sem Folder")
async def get_folderless_list(params: GetFolderlessListInput, credential: Optional[str]) -> Any:
    """Lista as lists que ficam diretamente no space, fora de qualquer folder."""
    return await clickup.call(
        RequestSpec(
            path=f"space/{segment(params.space_id)}/list",
            query=build_query({"archived": params.archived}),
        ),
        credential,
    )


# ============================================================================
# TOOLS - TASKS
# ============================================================================

class TaskFilters(ToolInput):
    """Filtros comuns de listagem de tasks (viram query string)."""
    page: Optional[int] = Field(default=None, description="Página (começa em 0)", ge=0)
    order_by: Optional[OrderBy] = Field(default=None, description="Ordenar por: id, created, updated, due_date")
    reverse: Optional[bool] = Field(default=None, description="Ordem reversa")
    subtasks: Optional[bool] = Field(default=None, description="Incluir subtasks")
    statuses: Optional[List[str]] = Field(default=None, description="Filtrar por status")
    include_closed: Optional[bool] = Field(default=None, description="Incluir tasks fechadas")
    assignees: Optional[List[str]] = Field(default=None, description="Filtrar por assignee IDs")
    tags: Optional[List[str]] = Field(default=None, description="Filtrar por tags")
    due_date_gt: Optional[int] = Field(default=None, description="Due date maior que (timestamp ms)")
    due_date_lt: Optional[int] = Field(default=None, description="Due date menor que (timestamp ms)")
    date_created_gt: Optional[int] = Field(default=None, description="Criado após (timestamp ms)")
    date_created_lt: Optional[int] = Field(default=None, description="Criado antes (timestamp ms)")
    date_updated_gt: Optional[int] = Field(default=None, description="Atualizado após (timestamp ms)")
    date_updated_lt: Optional[int] = Field(default=None, description="Atualizado antes (timestamp ms)")


class GetTasksInput(TaskFilters):
    """Input para listar tasks de uma list."""
    list_id: str = Field(..., description="ID da list", min_length=1)
    archived: Optional[bool] = Field(default=None, description="Incluir tasks arquivadas")


class GetFilteredTeamTasksInput(TaskFilters):
    """Input para busca filtrada de tasks em todo o workspace."""
    workspace_id: str = Field(..., description="ID do workspace/team", min_length=1)
    space_ids: Optional[List[str]] = Field(default=None, description="Filtrar por space IDs")
    project_ids: Optional[List[str]] = Field(default=None, description="Filtrar por folder IDs")
    list_ids: Optional[List[str]] = Field(default=None, description="Filtrar por list IDs")


class CustomFieldValue(ToolInput):
    """Valor de custom field: {'id': 'field_id', 'value': valor}."""
    id: str = Field(..., description="ID do custom field", min_length=1)
    value: Any = Field(..., description="Valor no formato do tipo do campo")


class CreateTaskInput(ToolInput):
    """Input para criar uma nova task."""
    list_id: str = Field(..., description="ID da list onde criar a task", min_length=1)
    name: str = Field(..., description="Nome da task", min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, description="Descrição da task")
    assignees: Optional[List[int]] = Field(default=None, description="IDs dos responsáveis")
    tags: Optional[List[str]] = Field(default=None, description="Tags da task")
    status: Optional[str] = Field(default=None, description="Status inicial")
    priority: Optional[int] = Field(default=None, description="Prioridade (1=urgent, 2=high, 3=normal, 4=low)", ge=1, le=4)
    due_date: Optional[int] = Field(default=None, description="Due date (timestamp em ms)")
    due_date_time: Optional[bool] = Field(default=None, description="Se due_date inclui horário")
    time_estimate: Optional[int] = Field(default=None, description="Tempo estimado em ms")
    start_date: Optional[int] = Field(default=None, description="Start date (timestamp em ms)")
    start_date_time: Optional[bool] = Field(default=None, description="Se start_date inclui horário")
    notify_all: Optional[bool] = Field(default=None, description="Notificar todos os responsáveis")
    parent: Optional[str] = Field(default=None, description="ID da task pai (para subtask)")
    links_to: Optional[str] = Field(default=None, description="ID de task para criar link de dependência")
    custom_fields: Optional[List[CustomFieldValue]] = Field(default=None, description="Custom fields: [{'id': 'field_id', 'value': valor}]")


class GetTaskInput(ToolInput):
    """Input para buscar uma task específica."""
    task_id: str = Field(..., description="ID da task", min_length=1)
    include_subtasks: Optional[bool] = Field(default=None, description="Incluir subtasks")
    custom_task_ids: Optional[bool] = Field(default=None, description="taskId é um custom task ID")
    team_id: Optional[str] = Field(default=None, description="Workspace ID (obrigatório com customTaskIds)")


class UpdateTaskInput(ToolInput):
    """Input para atualizar uma task existente."""
    task_id: str = Field(..., description="ID da task a atualizar", min_length=1)
    name: Optional[str] = Field(default=None, description="Novo nome da task")
    description: Optional[str] = Field(default=None, description="Nova descrição")
    status: Optional[str] = Field(default=None, description="Novo status")
    priority: Optional[int] = Field(default=None, description="Nova prioridade (1-4)", ge=1, le=4)
    due_date: Optional[int] = Field(default=None, description="Novo due date (timestamp ms)")
    due_date_time: Optional[bool] = Field(default=None, description="Se due_date inclui horário")
    time_estimate: Optional[int] = Field(default=None, description="Novo tempo estimado (ms)")
    start_date: Optional[int] = Field(default=None, description="Novo start date (timestamp ms)")
    start_date_time: Optional[bool] = Field(default=None, description="Se start_date inclui horário")
    parent: Optional[str] = Field(default=None, description="Nova task pai")
    archived: Optional[bool] = Field(default=None, description="Arquivar/desarquivar")
    assignees_add: Optional[List[int]] = Field(default=None, description="IDs de responsáveis a adicionar")
    assignees_remove: Optional[List[int]] = Field(default=None, description="IDs de responsáveis a remover")


class TaskInput(ToolInput):
    """Input com apenas o ID da task."""
    task_id: str = Field(..., description="ID da task", min_length=1)


@registry.tool("getTasks", GetTasksInput, "fetching tasks", title="Listar Tasks")
async def get_tasks(params: GetTasksInput, credential: Optional[str]) -> Any:
    """
    Lista tasks de uma list com filtros e paginação.

    Filtros em lista (statuses, assignees, tags) aceitam vários valores.
    """
    return await clickup.call(
        RequestSpec(
            path=f"list/{segment(params.list_id)}/task",
            query=build_query(to_upstream(params, exclude={"list_id"})),
        ),
        credential,
    )


@registry.tool("getFilteredTeamTasks", GetFilteredTeamTasksInput, "fetching workspace tasks", title="Buscar Tasks no Workspace")
async def get_filtered_team_tasks(params: GetFilteredTeamTasksInput, credential: Optional[str]) -> Any:
    """Busca tasks em todo o workspace, filtrando por spaces, folders, lists e datas."""
    return await clickup.call(
        RequestSpec(
            path=f"team/{segment(params.workspace_id)}/task",
            query=build_query(to_upstream(params, exclude={"workspace_id"})),
        ),
        credential,
    )


@registry.tool(
    "createTask", CreateTaskInput, "creating task",
    title="Criar Task", read_only=False, idempotent=False,
)
async def create_task(params: CreateTaskInput, credential: Optional[str]) -> Any:
    """
    Cria uma nova task em uma list.

    Suporta custom fields ao criar a task. Use getCustomFields para
    obter os IDs dos campos disponíveis.
    """
    return await clickup.call(
        RequestSpec(
            path=f"list/{segment(params.list_id)}/task",
            method=HttpMethod.POST,
            body=to_upstream(params, exclude={"list_id"}),
        ),
        credential,
    )


@registry.tool("getTask", GetTaskInput, "fetching task", title="Detalhes da Task")
async def get_task(params: GetTaskInput, credential: Optional[str]) -> Any:
    """Retorna todos os dados de uma task."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}",
            query=build_query(to_upstream(params, exclude={"task_id"})),
        ),
        credential,
    )


@registry.tool("updateTask", UpdateTaskInput, "updating task", title="Atualizar Task", read_only=False)
async def update_task(params: UpdateTaskInput, credential: Optional[str]) -> Any:
    """
    Atualiza uma task existente.

    Responsáveis são alterados por diferença: assigneesAdd e assigneesRemove.
    """
    body = to_upstream(params, exclude={"task_id", "assignees_add", "assignees_remove"})

    # Assignees
    if params.assignees_add or params.assignees_remove:
        body["assignees"] = {}
        if params.assignees_add:
            body["assignees"]["add"] = params.assignees_add
        if params.assignees_remove:
            body["assignees"]["rem"] = params.assignees_remove

    return await clickup.call(
        RequestSpec(path=f"task/{segment(params.task_id)}", method=HttpMethod.PUT, body=body),
        credential,
    )


@registry.tool(
    "deleteTask", TaskInput, "deleting task",
    title="Deletar Task", read_only=False, destructive=True,
)
async def delete_task(params: TaskInput, credential: Optional[str]) -> Any:
    """Deleta uma task. ATENÇÃO: Esta ação é irreversível!"""
    return await clickup.call(
        RequestSpec(path=f"task/{segment(params.task_id)}", method=HttpMethod.DELETE),
        credential,
    )


# ============================================================================
# TOOLS - COMMENTS
# ============================================================================

class GetTaskCommentsInput(TaskInput):
    """Input para buscar comentários de uma task."""
    start: Optional[int] = Field(default=None, description="Paginação: timestamp (ms) do último comentário recebido")
    start_id: Optional[str] = Field(default=None, description="Paginação: ID do último comentário recebido")


class CreateTaskCommentInput(TaskInput):
    """Input para criar comentário em uma task."""
    comment_text: str = Field(..., description="Texto do comentário", min_length=1)
    assignee: Optional[int] = Field(default=None, description="ID do usuário a atribuir o comentário")
    notify_all: Optional[bool] = Field(default=None, description="Notificar todos")


class UpdateCommentInput(ToolInput):
    """Input para editar um comentário."""
    comment_id: str = Field(..., description="ID do comentário", min_length=1)
    comment_text: str = Field(..., description="Novo texto do comentário", min_length=1)
    assignee: Optional[int] = Field(default=None, description="ID do usuário atribuído")
    resolved: Optional[bool] = Field(default=None, description="Marcar como resolvido")


class CommentInput(ToolInput):
    """Input com apenas o ID do comentário."""
    comment_id: str = Field(..., description="ID do comentário", min_length=1)


@registry.tool("getTaskComments", GetTaskCommentsInput, "fetching task comments", title="Listar Comentários da Task")
async def get_task_comments(params: GetTaskCommentsInput, credential: Optional[str]) -> Any:
    """Lista os comentários de uma task (25 por página, do mais recente)."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}/comment",
            query=build_query(to_upstream(params, exclude={"task_id"})),
        ),
        credential,
    )


@registry.tool(
    "createTaskComment", CreateTaskCommentInput, "creating task comment",
    title="Criar Comentário", read_only=False, idempotent=False,
)
async def create_task_comment(params: CreateTaskCommentInput, credential: Optional[str]) -> Any:
    """Adiciona um comentário a uma task."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}/comment",
            method=HttpMethod.POST,
            body=to_upstream(params, exclude={"task_id"}),
        ),
        credential,
    )


@registry.tool("updateComment", UpdateCommentInput, "updating comment", title="Editar Comentário", read_only=False)
async def update_comment(params: UpdateCommentInput, credential: Optional[str]) -> Any:
    """Edita o texto, o responsável ou o estado de resolução de um comentário."""
    return await clickup.call(
        RequestSpec(
            path=f"comment/{segment(params.comment_id)}",
            method=HttpMethod.PUT,
            body=to_upstream(params, exclude={"comment_id"}),
        ),
        credential,
    )


@registry.tool(
    "deleteComment", CommentInput, "deleting comment",
    title="Deletar Comentário", read_only=False, destructive=True,
)
async def delete_comment(params: CommentInput, credential: Optional[str]) -> Any:
    """Deleta um comentário."""
    return await clickup.call(
        RequestSpec(path=f"comment/{segment(params.comment_id)}", method=HttpMethod.DELETE),
        credential,
    )


# ============================================================================
# TOOLS - TAGS
# ============================================================================

class TaskTagInput(TaskInput):
    """Input para adicionar/remover tag de uma task."""
    tag_name: str = Field(..., description="Nome da tag (precisa existir no space)", min_length=1)


@registry.tool("getSpaceTags", SpaceInput, "fetching space tags", title="Listar Tags do Space")
async def get_space_tags(params: SpaceInput, credential: Optional[str]) -> Any:
    """Lista as tags disponíveis em um space."""
    return await clickup.call(RequestSpec(path=f"space/{segment(params.space_id)}/tag"), credential)


@registry.tool("addTagToTask", TaskTagInput, "adding tag to task", title="Adicionar Tag à Task", read_only=False)
async def add_tag_to_task(params: TaskTagInput, credential: Optional[str]) -> Any:
    """Adiciona uma tag existente do space a uma task."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}/tag/{segment(params.tag_name)}",
            method=HttpMethod.POST,
        ),
        credential,
    )


@registry.tool(
    "removeTagFromTask", TaskTagInput, "removing tag from task",
    title="Remover Tag da Task", read_only=False, destructive=True,
)
async def remove_tag_from_task(params: TaskTagInput, credential: Optional[str]) -> Any:
    """Remove uma tag de uma task (a tag continua existindo no space)."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}/tag/{segment(params.tag_name)}",
            method=HttpMethod.DELETE,
        ),
        credential,
    )


# ============================================================================
# TOOLS - CUSTOM FIELDS
# ============================================================================

class SetCustomFieldValueInput(TaskInput):
    """Input para definir valor de custom field em uma task."""
    field_id: str = Field(..., description="ID do custom field", min_length=1)
    value: Any = Field(..., description="Valor no formato do tipo do campo (texto, número, option_id, timestamp...)")


@registry.tool("getCustomFields", ListInput, "fetching custom fields", title="Listar Custom Fields")
async def get_custom_fields(params: ListInput, credential: Optional[str]) -> Any:
    """Lista os custom fields acessíveis em uma list, com IDs e tipos."""
    return await clickup.call(RequestSpec(path=f"list/{segment(params.list_id)}/field"), credential)


@registry.tool("setCustomFieldValue", SetCustomFieldValueInput, "setting custom field value", title="Definir Custom Field", read_only=False)
async def set_custom_field_value(params: SetCustomFieldValueInput, credential: Optional[str]) -> Any:
    """Define o valor de um custom field em uma task."""
    return await clickup.call(
        RequestSpec(
            path=f"task/{segment(params.task_id)}/field/{segment(params.field_id)}",
            method=HttpMethod.POST,
            body={"value": params.value},
        ),
        credential,
    )


# ============================================================================
# TOOLS - DOCS (API v3)
# ============================================================================

# Códigos de tipo de parent na API v3 de Docs
DOC_PARENT_TYPES = {
    "space": 4,
    "folder": 5,
    "list": 6,
    "everything": 7,
    "workspace": 12,
}


class DocParent(ToolInput):
    """Local onde o doc é criado."""
    id: str = Field(..., description="ID do parent", min_length=1)
    type: Literal["space", "folder", "list", "everything", "workspace"] = Field(..., description="Tipo do parent")


class SearchDocsInput(ToolInput):
    """Input para buscar docs de um workspace."""
    workspace_id: str = Field(..., description="ID do workspace", min_length=1)
    id: Optional[str] = Field(default=None, description="Filtrar por ID do doc")
    creator: Optional[int] = Field(default=None, description="Filtrar por ID do criador")
    deleted: bool = Field(default=False, description="Incluir docs deletados")
    archived: bool = Field(default=False, description="Incluir docs arquivados")
    parent_id: Optional[str] = Field(default=None, description="Filtrar por ID do parent")
    parent_type: Optional[str] = Field(default=None, description="Filtrar por tipo do parent (SPACE, FOLDER, LIST...)")
    limit: int = Field(default=50, ge=10, le=100, description="Máximo de docs por página (10-100)")
    next_cursor: Optional[str] = Field(default=None, description="Cursor da próxima página")


class CreateDocInput(ToolInput):
    """Input para criar um documento."""
    workspace_id: str = Field(..., description="ID do workspace", min_length=1)
    title: str = Field(..., description="Nome do documento", min_length=1)
    parent: Optional[DocParent] = Field(default=None, description="Parent do doc (space, folder, list...)")
    visibility: Optional[Literal["PUBLIC", "PRIVATE", "PERSONAL", "HIDDEN"]] = Field(default=None, description="Visibilidade do doc")
    create_page: Optional[bool] = Field(default=None, description="Criar a primeira página junto com o doc")


class DocInput(ToolInput):
    """Input com workspace e doc."""
    workspace_id: str = Field(..., description="ID do workspace", min_length=1)
    doc_id: str = Field(..., description="ID do doc", min_length=1)


class GetDocPagesInput(DocInput):
    """Input para buscar as páginas de um doc."""
    max_page_depth: Optional[int] = Field(default=None, description="Profundidade máxima (-1 = todas)", ge=-1)
    content_format: Optional[ContentFormat] = Field(default=None, description="Formato do conteúdo: text/md ou text/plain")


class GetDocPageInput(DocInput):
    """Input para buscar uma página de um doc."""
    page_id: str = Field(..., description="ID da página", min_length=1)
    content_format: Optional[ContentFormat] = Field(default=None, description="Formato do conteúdo: text/md ou text/plain")


class CreateDocPageInput(DocInput):
    """Input para criar uma página em um doc."""
    name: str = Field(..., description="Título da página", min_length=1)
    content: Optional[str] = Field(default=None, description="Conteúdo da página")
    content_format: Optional[ContentFormat] = Field(default=None, description="Formato do conteúdo: text/md ou text/plain")
    parent_page_id: Optional[str] = Field(default=None, description="ID da página pai (subpágina)")
    sub_title: Optional[str] = Field(default=None, description="Subtítulo da página")


@registry.tool("searchDocs", SearchDocsInput, "searching docs", title="Buscar Docs")
async def search_docs(params: SearchDocsInput, credential: Optional[str]) -> Any:
    """
    Lista os documentos (Docs) de um workspace.

    Usa API v3, que é obrigatória para o recurso de Docs.
    """
    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs",
            api_version=ApiVersion.V3,
            query=build_query(to_upstream(params, exclude={"workspace_id"})),
        ),
        credential,
    )


@registry.tool(
    "createDoc", CreateDocInput, "creating doc",
    title="Criar Documento", read_only=False, idempotent=False,
)
async def create_doc(params: CreateDocInput, credential: Optional[str]) -> Any:
    """
    Cria um novo documento (Doc) no workspace.

    Docs podem ser associados a spaces, folders ou lists.
    Usa API v3, que é obrigatória para o recurso de Docs.
    """
    body = to_upstream(params, exclude={"workspace_id", "parent"}, renames={"title": "name"})
    if params.parent is not None:
        body["parent"] = {"id": params.parent.id, "type": DOC_PARENT_TYPES[params.parent.type]}

    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs",
            method=HttpMethod.POST,
            api_version=ApiVersion.V3,
            body=body,
        ),
        credential,
    )


@registry.tool("getDoc", DocInput, "fetching doc", title="Detalhes do Documento")
async def get_doc(params: DocInput, credential: Optional[str]) -> Any:
    """Retorna os metadados de um doc."""
    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs/{segment(params.doc_id)}",
            api_version=ApiVersion.V3,
        ),
        credential,
    )


@registry.tool("getDocPages", GetDocPagesInput, "fetching doc pages", title="Páginas do Documento")
async def get_doc_pages(params: GetDocPagesInput, credential: Optional[str]) -> Any:
    """Retorna as páginas de um doc com o conteúdo."""
    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs/{segment(params.doc_id)}/pages",
            api_version=ApiVersion.V3,
            query=build_query(to_upstream(params, exclude={"workspace_id", "doc_id"})),
        ),
        credential,
    )


@registry.tool("getDocPage", GetDocPageInput, "fetching doc page", title="Página do Documento")
async def get_doc_page(params: GetDocPageInput, credential: Optional[str]) -> Any:
    """Retorna uma página específica de um doc."""
    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs/{segment(params.doc_id)}/pages/{segment(params.page_id)}",
            api_version=ApiVersion.V3,
            query=build_query(to_upstream(params, exclude={"workspace_id", "doc_id", "page_id"})),
        ),
        credential,
    )


@registry.tool(
    "createDocPage", CreateDocPageInput, "creating doc page",
    title="Criar Página", read_only=False, idempotent=False,
)
async def create_doc_page(params: CreateDocPageInput, credential: Optional[str]) -> Any:
    """Cria uma página (ou subpágina) em um doc."""
    return await clickup.call(
        RequestSpec(
            path=f"workspaces/{segment(params.workspace_id)}/docs/{segment(params.doc_id)}/pages",
            method=HttpMethod.POST,
            api_version=ApiVersion.V3,
            body=to_upstream(params, exclude={"workspace_id", "doc_id"}),
        ),
        credential,
    )


# ============================================================================
# TOOLS - DIAGNÓSTICO
# ============================================================================

@registry.tool(
    "getMetrics", EmptyInput, "fetching metrics",
    title="Métricas do Servidor", requires_credential=False, open_world=False,
)
async def get_metrics(params: EmptyInput, credential: Optional[str]) -> Any:
    """Retorna métricas do servidor: chamadas e erros por tool, chamadas à API e latência."""
    return json.dumps(metrics.get_summary(), indent=2, ensure_ascii=False)
