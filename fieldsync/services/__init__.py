"""
Entity repositories, one per backend data type.
"""

from __future__ import annotations

from .app_messages import AppMessageService
from .base import EntityRepository, Executor
from .calendar import CalendarEventService
from .clients import ClientService, SubClientService
from .companies import CompanyService, UserService
from .inventory import (
    InventoryItemService,
    InventorySnapshotItemService,
    InventorySnapshotService,
    InventoryTagService,
    InventoryUnitService,
)
from .projects import ProjectService
from .tasks import TaskService, TaskStatusService, TaskTypeService
from .workflows import WorkflowService

__all__ = [
    "AppMessageService",
    "CalendarEventService",
    "ClientService",
    "CompanyService",
    "EntityRepository",
    "Executor",
    "InventoryItemService",
    "InventorySnapshotItemService",
    "InventorySnapshotService",
    "InventoryTagService",
    "InventoryUnitService",
    "ProjectService",
    "SubClientService",
    "TaskService",
    "TaskStatusService",
    "TaskTypeService",
    "UserService",
    "WorkflowService",
]
