"""
Generic entity repository.

One `EntityRepository` subclass exists per backend data type. Repositories only
build request descriptors and hand them to an executor; pacing, retries,
decoding and pagination all live elsewhere, so tests can swap in any object
with an async `execute(descriptor, result_type)` method.
"""

from __future__ import annotations

import builtins
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from ..clients.http import encode_body
from ..clients.pipeline import RequestDescriptor
from ..constraints import C, Constraint, ConstraintInput, serialize
from ..models import fields as F
from ..models.entities import CreatedObject, EmptyResponse, EntityModel, Payload, SoftDelete
from ..models.pagination import ListPage
from ..models.types import EntityType, SortOrder, entity_path
from ..pagination import DEFAULT_PAGE_SIZE, PageCursor, fetch_all, iter_pages

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=EntityModel)


class Executor(Protocol):
    async def execute(self, descriptor: RequestDescriptor, result_type: Any = ...) -> Any: ...


def _constraint_list(constraints: ConstraintInput | None) -> builtins.list[Constraint]:
    if constraints is None:
        return []
    if isinstance(constraints, Constraint):
        return [constraints]
    return builtins.list(constraints)


class EntityRepository(Generic[T]):
    """
    CRUD and query operations for one entity kind.

    Subclasses set `entity_type` (the backend data type) and `model` (the read
    model the collection decodes into).
    """

    entity_type: ClassVar[EntityType]
    model: ClassVar[type[EntityModel]]

    def __init__(self, client: AsyncHTTPClient | Executor, *, page_size: int | None = None):
        self._client = client
        config = getattr(client, "config", None)
        self._page_size = page_size or getattr(config, "page_size", DEFAULT_PAGE_SIZE)

    @property
    def path(self) -> str:
        return entity_path(self.entity_type)

    @property
    def page_size(self) -> int:
        return self._page_size

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def get(self, object_id: str) -> T:
        """Fetch one object by id (`GET obj/<type>/<id>`)."""
        descriptor = RequestDescriptor(path=entity_path(self.entity_type, object_id))
        result: T = await self._client.execute(descriptor, self.model)
        return result

    async def list(
        self,
        constraints: ConstraintInput | None = None,
        *,
        limit: int | None = None,
        cursor: int = 0,
        sort_field: str | None = None,
        descending: bool = False,
    ) -> ListPage[T]:
        """
        Fetch one page of the collection.

        Args:
            constraints: Filter expression(s); omitted from the query when empty.
            limit: Page size (defaults to the repository's page size).
            cursor: Zero-based offset of the first result.
            sort_field: Backend field name to sort by.
            descending: Sort direction when `sort_field` is given.
        """
        if cursor < 0:
            raise ValueError("cursor must be >= 0")
        params: builtins.list[tuple[str, Any]] = [
            ("limit", limit or self._page_size),
            ("cursor", cursor),
        ]
        if sort_field:
            params.append(("sort_field", sort_field))
            params.append(("sort_order", SortOrder.DESC if descending else SortOrder.ASC))
        items = _constraint_list(constraints)
        if items:
            params.append(("constraints", serialize(items)))
        descriptor = RequestDescriptor.build(self.path, "GET", params=params)
        page_type = ListPage[self.model]  # type: ignore[name-defined]
        page: ListPage[T] = await self._client.execute(descriptor, page_type)
        return page

    def _page_fetcher(
        self,
        constraints: ConstraintInput | None,
        sort_field: str | None,
        descending: bool,
    ) -> Callable[[PageCursor], Awaitable[builtins.list[T]]]:
        async def fetch_page(cursor: PageCursor) -> builtins.list[T]:
            page = await self.list(
                constraints,
                limit=cursor.page_size,
                cursor=cursor.offset,
                sort_field=sort_field,
                descending=descending,
            )
            return page.results

        return fetch_page

    def pages(
        self,
        constraints: ConstraintInput | None = None,
        *,
        page_size: int | None = None,
        sort_field: str | None = None,
        descending: bool = False,
        max_pages: int | None = None,
    ) -> AsyncIterator[builtins.list[T]]:
        """Iterate the collection page by page (lists of items)."""
        fetch_page = self._page_fetcher(constraints, sort_field, descending)
        return iter_pages(fetch_page, page_size or self._page_size, max_pages=max_pages)

    async def all(
        self,
        constraints: ConstraintInput | None = None,
        *,
        page_size: int | None = None,
        sort_field: str | None = None,
        descending: bool = False,
        max_pages: int | None = None,
    ) -> builtins.list[T]:
        """Fetch every matching object, following pages until a short one."""
        fetch_page = self._page_fetcher(constraints, sort_field, descending)
        return await fetch_all(fetch_page, page_size or self._page_size, max_pages=max_pages)

    async def by_ids(self, object_ids: Sequence[str]) -> builtins.list[T]:
        """Fetch objects whose `_id` is in `object_ids`; an empty list makes no request."""
        ids = builtins.list(dict.fromkeys(i for i in object_ids if i))
        if not ids:
            return []
        return await self.all(C.field(F.ID).in_(ids))

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def create(self, payload: Payload) -> T:
        """
        Create an object (`POST obj/<type>`).

        The backend only answers with the new id, so the returned model is built
        from the payload plus that id.
        """
        descriptor = RequestDescriptor(
            path=self.path, method="POST", body=encode_body(payload)
        )
        created: CreatedObject = await self._client.execute(descriptor, CreatedObject)
        logger.debug("Created %s %s", self.entity_type.value, created.id)
        values = {**payload.field_values(), "id": created.id}
        return self.model.model_validate(values)  # type: ignore[return-value]

    async def update(self, object_id: str, patch: Payload | dict[str, Any]) -> None:
        """
        Patch an object (`PATCH obj/<type>/<id>`).

        Dict patches are sent as-is and must use backend field names. An empty
        patch is a no-op and makes no request.
        """
        if isinstance(patch, Payload):
            if patch.is_empty():
                logger.debug("Skipping empty update for %s %s", self.entity_type.value, object_id)
                return
        elif not patch:
            logger.debug("Skipping empty update for %s %s", self.entity_type.value, object_id)
            return
        descriptor = RequestDescriptor(
            path=entity_path(self.entity_type, object_id),
            method="PATCH",
            body=encode_body(patch),
        )
        await self._client.execute(descriptor, EmptyResponse)

    async def soft_delete(self, object_id: str, *, at: datetime | None = None) -> None:
        """Mark an object deleted by setting `deletedAt` to `at` (default now)."""
        await self.update(object_id, SoftDelete(deleted_at=at or datetime.now(timezone.utc)))

    async def delete(self, object_id: str) -> None:
        """Hard-delete an object (`DELETE obj/<type>/<id>`)."""
        descriptor = RequestDescriptor(
            path=entity_path(self.entity_type, object_id), method="DELETE"
        )
        await self._client.execute(descriptor, EmptyResponse)


__all__ = ["EntityRepository", "Executor"]
