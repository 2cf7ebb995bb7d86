"""
Entity models and write payloads.

Read models are validated from decoder-normalized (snake_case) bodies. Write
payloads are small frozen models, one per operation, that serialize to the
backend's own field names through `serialization_alias`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from . import fields as F
from .types import SOFT_DELETE_FIELD, Timestamp

# =============================================================================
# Base Models
# =============================================================================


class FieldSyncModel(BaseModel):
    """Base model for everything decoded from the backend."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )


class EntityModel(FieldSyncModel):
    """Object-store record: a server id plus the standard metadata fields."""

    id: str
    created_date: Timestamp | None = None
    modified_date: Timestamp | None = None
    deleted_at: Timestamp | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Payload(BaseModel):
    """Base class for request bodies; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_body(self) -> dict[str, Any]:
        """Wire body keyed by backend field names, unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def field_values(self) -> dict[str, Any]:
        """Set fields keyed by model field name (used to merge into read models)."""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.field_values()


class CreatedObject(FieldSyncModel):
    """Reply to `POST obj/<type>`: `{"status": "success", "id": "..."}`."""

    id: str
    status: str | None = None


class EmptyResponse(FieldSyncModel):
    """Sentinel result for endpoints whose reply carries no data."""


class SoftDelete(Payload):
    """Patch that marks any object deleted."""

    deleted_at: Timestamp = Field(serialization_alias=SOFT_DELETE_FIELD)


# =============================================================================
# Projects
# =============================================================================


class Address(FieldSyncModel):
    formatted_address: str | None = None
    lat: float | None = None
    lng: float | None = None


class Project(EntityModel):
    project_name: str | None = None
    address: Address | None = None
    all_day: bool | None = None
    client: str | None = None
    company: str | None = None
    completion: Timestamp | None = None
    description: str | None = None
    start_date: Timestamp | None = None
    status: str | None = None
    team_members: list[str] = Field(default_factory=list)
    team_notes: str | None = None
    teams: list[str] = Field(default_factory=list)


class ProjectCreate(Payload):
    project_name: str = Field(serialization_alias=F.Project.PROJECT_NAME)
    company: str = Field(serialization_alias=F.Project.COMPANY)
    client: str | None = Field(None, serialization_alias=F.Project.CLIENT)
    status: str | None = Field(None, serialization_alias=F.Project.STATUS)
    start_date: Timestamp | None = Field(None, serialization_alias=F.Project.START_DATE)
    completion: Timestamp | None = Field(None, serialization_alias=F.Project.COMPLETION)
    all_day: bool | None = Field(None, serialization_alias=F.Project.ALL_DAY)
    description: str | None = Field(None, serialization_alias=F.Project.DESCRIPTION)
    team_members: list[str] | None = Field(None, serialization_alias=F.Project.TEAM_MEMBERS)


class ProjectUpdate(Payload):
    project_name: str | None = Field(None, serialization_alias=F.Project.PROJECT_NAME)
    status: str | None = Field(None, serialization_alias=F.Project.STATUS)
    start_date: Timestamp | None = Field(None, serialization_alias=F.Project.START_DATE)
    completion: Timestamp | None = Field(None, serialization_alias=F.Project.COMPLETION)
    all_day: bool | None = Field(None, serialization_alias=F.Project.ALL_DAY)
    description: str | None = Field(None, serialization_alias=F.Project.DESCRIPTION)
    team_notes: str | None = Field(None, serialization_alias=F.Project.TEAM_NOTES)
    team_members: list[str] | None = Field(None, serialization_alias=F.Project.TEAM_MEMBERS)


# =============================================================================
# Tasks
# =============================================================================


class Task(EntityModel):
    project_id: str | None = None
    company_id: str | None = None
    type: str | None = None
    status: str | None = None
    task_color: str | None = None
    task_notes: str | None = None
    team_members: list[str] = Field(default_factory=list)
    task_index: int | None = None
    calendar_event_id: str | None = None


class TaskCreate(Payload):
    project_id: str = Field(serialization_alias=F.Task.PROJECT_ID)
    company_id: str = Field(serialization_alias=F.Task.COMPANY_ID)
    type: str | None = Field(None, serialization_alias=F.Task.TYPE)
    status: str | None = Field(None, serialization_alias=F.Task.STATUS)
    task_color: str | None = Field(None, serialization_alias=F.Task.TASK_COLOR)
    task_notes: str | None = Field(None, serialization_alias=F.Task.TASK_NOTES)
    team_members: list[str] | None = Field(None, serialization_alias=F.Task.TEAM_MEMBERS)
    task_index: int | None = Field(None, serialization_alias=F.Task.TASK_INDEX)
    calendar_event_id: str | None = Field(None, serialization_alias=F.Task.CALENDAR_EVENT_ID)


class TaskUpdate(Payload):
    type: str | None = Field(None, serialization_alias=F.Task.TYPE)
    status: str | None = Field(None, serialization_alias=F.Task.STATUS)
    task_color: str | None = Field(None, serialization_alias=F.Task.TASK_COLOR)
    task_notes: str | None = Field(None, serialization_alias=F.Task.TASK_NOTES)
    team_members: list[str] | None = Field(None, serialization_alias=F.Task.TEAM_MEMBERS)
    task_index: int | None = Field(None, serialization_alias=F.Task.TASK_INDEX)
    calendar_event_id: str | None = Field(None, serialization_alias=F.Task.CALENDAR_EVENT_ID)


class TaskStatusOption(EntityModel):
    company: str | None = None
    display: str | None = None
    color: str | None = None
    index: int | None = None


class TaskType(EntityModel):
    company: str | None = None
    display: str | None = None
    color: str | None = None
    icon: str | None = None
    is_default: bool | None = None


class TaskTypeCreate(Payload):
    company: str = Field(serialization_alias=F.TaskType.COMPANY)
    display: str = Field(serialization_alias=F.TaskType.DISPLAY)
    color: str | None = Field(None, serialization_alias=F.TaskType.COLOR)
    icon: str | None = Field(None, serialization_alias=F.TaskType.ICON)
    is_default: bool | None = Field(None, serialization_alias=F.TaskType.IS_DEFAULT)


# =============================================================================
# Calendar
# =============================================================================


class CalendarEvent(EntityModel):
    title: str | None = None
    color: str | None = None
    company: str | None = None
    project: str | None = None
    task: str | None = None
    duration: int | None = None
    start_date: Timestamp | None = None
    end_date: Timestamp | None = None
    team_members: list[str] = Field(default_factory=list)
    type: str | None = None


class CalendarEventCreate(Payload):
    title: str = Field(serialization_alias=F.CalendarEvent.TITLE)
    company: str = Field(serialization_alias=F.CalendarEvent.COMPANY)
    project: str = Field(serialization_alias=F.CalendarEvent.PROJECT)
    start_date: Timestamp = Field(serialization_alias=F.CalendarEvent.START_DATE)
    end_date: Timestamp = Field(serialization_alias=F.CalendarEvent.END_DATE)
    color: str | None = Field(None, serialization_alias=F.CalendarEvent.COLOR)
    task: str | None = Field(None, serialization_alias=F.CalendarEvent.TASK)
    duration: int | None = Field(None, serialization_alias=F.CalendarEvent.DURATION)
    team_members: list[str] | None = Field(None, serialization_alias=F.CalendarEvent.TEAM_MEMBERS)
    type: str | None = Field(None, serialization_alias=F.CalendarEvent.TYPE)


class CalendarEventUpdate(Payload):
    title: str | None = Field(None, serialization_alias=F.CalendarEvent.TITLE)
    color: str | None = Field(None, serialization_alias=F.CalendarEvent.COLOR)
    start_date: Timestamp | None = Field(None, serialization_alias=F.CalendarEvent.START_DATE)
    end_date: Timestamp | None = Field(None, serialization_alias=F.CalendarEvent.END_DATE)
    duration: int | None = Field(None, serialization_alias=F.CalendarEvent.DURATION)
    team_members: list[str] | None = Field(None, serialization_alias=F.CalendarEvent.TEAM_MEMBERS)


# =============================================================================
# Clients
# =============================================================================


class Client(EntityModel):
    name: str | None = None
    email_address: str | None = None
    phone_number: str | None = None
    address: Address | str | None = None
    parent_company: str | None = None
    status: str | None = None
    is_company: bool | None = None
    avatar: str | None = None
    balance: float | None = None
    projects_list: list[str] = Field(default_factory=list)
    sub_clients: list[str] = Field(default_factory=list)


class ClientCreate(Payload):
    name: str = Field(serialization_alias=F.Client.NAME)
    parent_company: str = Field(serialization_alias=F.Client.PARENT_COMPANY)
    email_address: str | None = Field(None, serialization_alias=F.Client.EMAIL_ADDRESS)
    phone_number: str | None = Field(None, serialization_alias=F.Client.PHONE_NUMBER)
    is_company: bool | None = Field(None, serialization_alias=F.Client.IS_COMPANY)


class ClientUpdate(Payload):
    name: str | None = Field(None, serialization_alias=F.Client.NAME)
    email_address: str | None = Field(None, serialization_alias=F.Client.EMAIL_ADDRESS)
    phone_number: str | None = Field(None, serialization_alias=F.Client.PHONE_NUMBER)
    address: str | None = Field(None, serialization_alias=F.Client.ADDRESS)
    status: str | None = Field(None, serialization_alias=F.Client.STATUS)


class SubClient(EntityModel):
    name: str | None = None
    title: str | None = None
    email_address: str | None = None
    phone_number: str | None = None
    address: Address | str | None = None
    parent_client: str | None = None


class SubClientCreate(Payload):
    parent_client: str = Field(serialization_alias=F.SubClient.PARENT_CLIENT)
    name: str = Field(serialization_alias=F.SubClient.NAME)
    title: str | None = Field(None, serialization_alias=F.SubClient.TITLE)
    email_address: str | None = Field(None, serialization_alias=F.SubClient.EMAIL_ADDRESS)
    phone_number: str | None = Field(None, serialization_alias=F.SubClient.PHONE_NUMBER)


# =============================================================================
# Companies & Users
# =============================================================================


class Company(EntityModel):
    company_name: str | None = None
    company_id: str | None = None
    logo: str | None = None
    projects: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)
    inventory_units: list[str] = Field(default_factory=list)


class User(EntityModel):
    name_first: str | None = None
    name_last: str | None = None
    email: str | None = None
    company: str | None = None
    employee_type: str | None = None
    user_type: str | None = None
    avatar: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.name_first, self.name_last) if part)


class UserUpdate(Payload):
    name_first: str | None = Field(None, serialization_alias=F.User.NAME_FIRST)
    name_last: str | None = Field(None, serialization_alias=F.User.NAME_LAST)
    employee_type: str | None = Field(None, serialization_alias=F.User.EMPLOYEE_TYPE)


# =============================================================================
# Inventory
# =============================================================================


class InventoryUnit(EntityModel):
    display: str
    company: str | None = None
    is_default: bool | None = None
    sort_order: int | None = None


class InventoryUnitCreate(Payload):
    display: str = Field(serialization_alias=F.InventoryUnit.DISPLAY)
    company: str | None = Field(None, serialization_alias=F.InventoryUnit.COMPANY)
    is_default: bool | None = Field(None, serialization_alias=F.InventoryUnit.IS_DEFAULT)
    sort_order: int | None = Field(None, serialization_alias=F.InventoryUnit.SORT_ORDER)


class InventoryUnitUpdate(Payload):
    display: str | None = Field(None, serialization_alias=F.InventoryUnit.DISPLAY)
    sort_order: int | None = Field(None, serialization_alias=F.InventoryUnit.SORT_ORDER)


class InventoryItem(EntityModel):
    name: str
    description: str | None = None
    quantity: float | None = None
    unit: str | None = None
    tags: list[str] = Field(default_factory=list)
    company: str | None = None
    sku: str | None = None
    notes: str | None = None
    image_url: str | None = None
    warning_threshold: float | None = None
    critical_threshold: float | None = None


class InventoryItemCreate(Payload):
    name: str = Field(serialization_alias=F.InventoryItem.NAME)
    company: str = Field(serialization_alias=F.InventoryItem.COMPANY)
    quantity: float | None = Field(None, serialization_alias=F.InventoryItem.QUANTITY)
    unit: str | None = Field(None, serialization_alias=F.InventoryItem.UNIT)
    tags: list[str] | None = Field(None, serialization_alias=F.InventoryItem.TAGS)
    description: str | None = Field(None, serialization_alias=F.InventoryItem.DESCRIPTION)
    sku: str | None = Field(None, serialization_alias=F.InventoryItem.SKU)
    notes: str | None = Field(None, serialization_alias=F.InventoryItem.NOTES)
    image_url: str | None = Field(None, serialization_alias=F.InventoryItem.IMAGE_URL)
    warning_threshold: float | None = Field(
        None, serialization_alias=F.InventoryItem.WARNING_THRESHOLD
    )
    critical_threshold: float | None = Field(
        None, serialization_alias=F.InventoryItem.CRITICAL_THRESHOLD
    )


class InventoryItemUpdate(Payload):
    name: str | None = Field(None, serialization_alias=F.InventoryItem.NAME)
    quantity: float | None = Field(None, serialization_alias=F.InventoryItem.QUANTITY)
    unit: str | None = Field(None, serialization_alias=F.InventoryItem.UNIT)
    tags: list[str] | None = Field(None, serialization_alias=F.InventoryItem.TAGS)
    description: str | None = Field(None, serialization_alias=F.InventoryItem.DESCRIPTION)
    sku: str | None = Field(None, serialization_alias=F.InventoryItem.SKU)
    notes: str | None = Field(None, serialization_alias=F.InventoryItem.NOTES)
    warning_threshold: float | None = Field(
        None, serialization_alias=F.InventoryItem.WARNING_THRESHOLD
    )
    critical_threshold: float | None = Field(
        None, serialization_alias=F.InventoryItem.CRITICAL_THRESHOLD
    )


class InventoryTag(EntityModel):
    name: str
    company: str | None = None
    warning_threshold: float | None = None
    critical_threshold: float | None = None


class InventoryTagCreate(Payload):
    name: str = Field(serialization_alias=F.InventoryTag.NAME)
    company: str = Field(serialization_alias=F.InventoryTag.COMPANY)
    warning_threshold: float | None = Field(
        None, serialization_alias=F.InventoryTag.WARNING_THRESHOLD
    )
    critical_threshold: float | None = Field(
        None, serialization_alias=F.InventoryTag.CRITICAL_THRESHOLD
    )


class InventoryTagUpdate(Payload):
    name: str | None = Field(None, serialization_alias=F.InventoryTag.NAME)
    warning_threshold: float | None = Field(
        None, serialization_alias=F.InventoryTag.WARNING_THRESHOLD
    )
    critical_threshold: float | None = Field(
        None, serialization_alias=F.InventoryTag.CRITICAL_THRESHOLD
    )


class InventorySnapshot(EntityModel):
    company: str | None = None
    created_at: Timestamp | None = None
    created_by: str | None = None
    is_automatic: bool | None = None
    item_count: int | None = None
    notes: str | None = None


class InventorySnapshotItem(EntityModel):
    snapshot: str | None = None
    original_item_id: str | None = None
    name: str | None = None
    quantity: float | None = None
    unit_display: str | None = None
    sku: str | None = None
    tags: list[str] = Field(default_factory=list)
    description: str | None = None


# =============================================================================
# App messages
# =============================================================================


class AppMessage(EntityModel):
    active: bool = False
    title: str | None = None
    body: str | None = None
    message_type: str | None = None
    dismissable: bool = True
    target_user_types: list[str] = Field(default_factory=list)
    app_store_url: str | None = None


__all__ = [
    "Address",
    "AppMessage",
    "CalendarEvent",
    "CalendarEventCreate",
    "CalendarEventUpdate",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "Company",
    "CreatedObject",
    "EmptyResponse",
    "EntityModel",
    "FieldSyncModel",
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
    "Payload",
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "SoftDelete",
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
