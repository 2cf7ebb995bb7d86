"""
fieldsync data models.

All Pydantic models and type definitions are available from this module.
"""

from __future__ import annotations

from .entities import (
    Address,
    AppMessage,
    CalendarEvent,
    CalendarEventCreate,
    CalendarEventUpdate,
    Client,
    ClientCreate,
    ClientUpdate,
    Company,
    CreatedObject,
    EmptyResponse,
    EntityModel,
    FieldSyncModel,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemUpdate,
    InventorySnapshot,
    InventorySnapshotItem,
    InventoryTag,
    InventoryTagCreate,
    InventoryTagUpdate,
    InventoryUnit,
    InventoryUnitCreate,
    InventoryUnitUpdate,
    Payload,
    Project,
    ProjectCreate,
    ProjectUpdate,
    SubClient,
    SubClientCreate,
    Task,
    TaskCreate,
    TaskStatusOption,
    TaskType,
    TaskTypeCreate,
    TaskUpdate,
    User,
    UserUpdate,
)
from .pagination import ListPage
from .types import (
    DEFAULT_BASE_URL,
    EntityType,
    SortOrder,
    Timestamp,
    entity_path,
    entity_slug,
    workflow_path,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "EntityType",
    "SortOrder",
    "Timestamp",
    "entity_path",
    "entity_slug",
    "workflow_path",
    # Base
    "FieldSyncModel",
    "EntityModel",
    "Payload",
    "CreatedObject",
    "EmptyResponse",
    "ListPage",
    # Entities
    "Address",
    "AppMessage",
    "CalendarEvent",
    "CalendarEventCreate",
    "CalendarEventUpdate",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "Company",
    "InventoryItem",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "InventorySnapshot",
    "InventorySnapshotItem",
    "InventoryTag",
    "InventoryTagCreate",
    "InventoryTagUpdate",
    "InventoryUnit",
    "InventoryUnitCreate",
    "InventoryUnitUpdate",
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "SubClient",
    "SubClientCreate",
    "Task",
    "TaskCreate",
    "TaskStatusOption",
    "TaskType",
    "TaskTypeCreate",
    "TaskUpdate",
    "User",
    "UserUpdate",
]
