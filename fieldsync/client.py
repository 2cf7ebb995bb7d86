"""
Main fieldsync client.

Provides a unified interface to every entity repository and workflow.
"""

from __future__ import annotations

from typing import Any

from .clients.http import AsyncHTTPClient, ClientConfig, TokenProvider
from .hooks import Hooks
from .models.types import DEFAULT_BASE_URL, EntityType
from .services.app_messages import AppMessageService
from .services.base import EntityRepository
from .services.calendar import CalendarEventService
from .services.clients import ClientService, SubClientService
from .services.companies import CompanyService, UserService
from .services.inventory import (
    InventoryItemService,
    InventorySnapshotItemService,
    InventorySnapshotService,
    InventoryTagService,
    InventoryUnitService,
)
from .services.projects import ProjectService
from .services.tasks import TaskService, TaskStatusService, TaskTypeService
from .services.workflows import WorkflowService

_REPOSITORIES: dict[EntityType, type[EntityRepository[Any]]] = {
    EntityType.PROJECT: ProjectService,
    EntityType.TASK: TaskService,
    EntityType.TASK_STATUS: TaskStatusService,
    EntityType.TASK_TYPE: TaskTypeService,
    EntityType.CALENDAR_EVENT: CalendarEventService,
    EntityType.CLIENT: ClientService,
    EntityType.SUB_CLIENT: SubClientService,
    EntityType.COMPANY: CompanyService,
    EntityType.USER: UserService,
    EntityType.INVENTORY_UNIT: InventoryUnitService,
    EntityType.INVENTORY_ITEM: InventoryItemService,
    EntityType.INVENTORY_TAG: InventoryTagService,
    EntityType.INVENTORY_SNAPSHOT: InventorySnapshotService,
    EntityType.INVENTORY_SNAPSHOT_ITEM: InventorySnapshotItemService,
    EntityType.APP_MESSAGE: AppMessageService,
}


class AsyncFieldSync:
    """
    Asynchronous client for the field-service object store.

    Every repository shares one executor, so all calls made through a client are
    paced by the same rate limiter.

    Example:
        ```python
        async with AsyncFieldSync(api_token="...") as client:
            projects = await client.projects.in_window(company_id)
            for task in await client.tasks.for_project(projects[0].id):
                print(task.status)
        ```
    """

    def __init__(
        self,
        api_token: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        token_provider: TokenProvider | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        min_request_interval: float = 0.5,
        hooks: Hooks | None = None,
        config: ClientConfig | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_token: Static bearer token for authenticated calls
            base_url: API root, e.g. `https://opsapp.co/api/1.1`
            token_provider: Async callable returning the current token
            timeout: Request timeout in seconds
            max_retries: Extra attempts for transient failures
            min_request_interval: Minimum spacing between dispatches in seconds
            hooks: Request/response/error callbacks
            config: Full configuration; overrides every other argument
        """
        if config is None:
            config = ClientConfig(
                base_url=base_url,
                api_token=api_token,
                token_provider=token_provider,
                timeout=timeout,
                max_retries=max_retries,
                min_request_interval=min_request_interval,
                hooks=hooks or Hooks(),
            )
        self._http = AsyncHTTPClient(config)
        self._repositories: dict[EntityType, EntityRepository[Any]] = {}
        self._workflows: WorkflowService | None = None

    @classmethod
    def from_env(cls, *, load_dotenv: bool = False, **overrides: Any) -> AsyncFieldSync:
        """Create a client from `FIELDSYNC_*` environment variables."""
        return cls(config=ClientConfig.from_env(load_dotenv=load_dotenv, **overrides))

    @property
    def http(self) -> AsyncHTTPClient:
        return self._http

    async def __aenter__(self) -> AsyncFieldSync:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._http.close()

    # =========================================================================
    # Service Properties (lazy initialization)
    # =========================================================================

    def repository(self, kind: EntityType | str) -> EntityRepository[Any]:
        """Repository for an entity kind, by enum or backend type name."""
        entity_type = kind if isinstance(kind, EntityType) else EntityType(kind)
        repo = self._repositories.get(entity_type)
        if repo is None:
            repo = _REPOSITORIES[entity_type](self._http)
            self._repositories[entity_type] = repo
        return repo

    @property
    def projects(self) -> ProjectService:
        return self.repository(EntityType.PROJECT)  # type: ignore[return-value]

    @property
    def tasks(self) -> TaskService:
        return self.repository(EntityType.TASK)  # type: ignore[return-value]

    @property
    def task_statuses(self) -> TaskStatusService:
        return self.repository(EntityType.TASK_STATUS)  # type: ignore[return-value]

    @property
    def task_types(self) -> TaskTypeService:
        return self.repository(EntityType.TASK_TYPE)  # type: ignore[return-value]

    @property
    def calendar_events(self) -> CalendarEventService:
        return self.repository(EntityType.CALENDAR_EVENT)  # type: ignore[return-value]

    @property
    def clients(self) -> ClientService:
        return self.repository(EntityType.CLIENT)  # type: ignore[return-value]

    @property
    def sub_clients(self) -> SubClientService:
        return self.repository(EntityType.SUB_CLIENT)  # type: ignore[return-value]

    @property
    def companies(self) -> CompanyService:
        return self.repository(EntityType.COMPANY)  # type: ignore[return-value]

    @property
    def users(self) -> UserService:
        return self.repository(EntityType.USER)  # type: ignore[return-value]

    @property
    def inventory_units(self) -> InventoryUnitService:
        return self.repository(EntityType.INVENTORY_UNIT)  # type: ignore[return-value]

    @property
    def inventory_items(self) -> InventoryItemService:
        return self.repository(EntityType.INVENTORY_ITEM)  # type: ignore[return-value]

    @property
    def inventory_tags(self) -> InventoryTagService:
        return self.repository(EntityType.INVENTORY_TAG)  # type: ignore[return-value]

    @property
    def inventory_snapshots(self) -> InventorySnapshotService:
        return self.repository(EntityType.INVENTORY_SNAPSHOT)  # type: ignore[return-value]

    @property
    def inventory_snapshot_items(self) -> InventorySnapshotItemService:
        return self.repository(EntityType.INVENTORY_SNAPSHOT_ITEM)  # type: ignore[return-value]

    @property
    def app_messages(self) -> AppMessageService:
        return self.repository(EntityType.APP_MESSAGE)  # type: ignore[return-value]

    @property
    def workflows(self) -> WorkflowService:
        """Backend workflow (`wf/`) calls."""
        if self._workflows is None:
            self._workflows = WorkflowService(self._http)
        return self._workflows


__all__ = ["AsyncFieldSync"]
