"""
Core type definitions: entity kinds, path helpers and shared annotated types.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, TypeAlias

from pydantic import BeforeValidator, PlainSerializer

from ..constraints import format_timestamp

DEFAULT_BASE_URL = "https://opsapp.co/api/1.1"
DATA_API_PREFIX = "obj"
WORKFLOW_API_PREFIX = "wf"

# Field set on soft delete (ISO-8601 timestamp).
SOFT_DELETE_FIELD = "deletedAt"


class EntityType(str, Enum):
    """Backend data types, by their display names."""

    PROJECT = "Project"
    TASK = "Task"
    TASK_TYPE = "Task Type"
    TASK_STATUS = "task_status"
    CALENDAR_EVENT = "Calendar Event"
    CLIENT = "Client"
    SUB_CLIENT = "Sub Client"
    COMPANY = "Company"
    USER = "User"
    INVENTORY_UNIT = "Inventory Unit"
    INVENTORY_ITEM = "Inventory Item"
    INVENTORY_TAG = "Inventory Tag"
    INVENTORY_SNAPSHOT = "Inventory Snapshot"
    INVENTORY_SNAPSHOT_ITEM = "Inventory Snapshot Item"
    APP_MESSAGE = "App Message"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def entity_slug(kind: EntityType | str) -> str:
    """Backend path segment for an entity kind: lower-cased, spaces removed."""
    name = kind.value if isinstance(kind, EntityType) else kind
    slug = name.lower().replace(" ", "")
    if not slug:
        raise ValueError("Entity type cannot be empty")
    return slug


def entity_path(kind: EntityType | str, object_id: str | None = None) -> str:
    """`obj/<kind>` for collections, `obj/<kind>/<id>` for a single object."""
    path = f"{DATA_API_PREFIX}/{entity_slug(kind)}"
    if object_id is not None:
        if not object_id:
            raise ValueError("Object id cannot be empty")
        path = f"{path}/{object_id}"
    return path


def workflow_path(name: str) -> str:
    if not name or "/" in name:
        raise ValueError(f"Invalid workflow name: {name!r}")
    return f"{WORKFLOW_API_PREFIX}/{name}"


def parse_timestamp(value: Any) -> Any:
    """
    Parse backend timestamps (ISO-8601 extended, e.g. `2025-04-21T14:03:00.000Z`).

    Only strings are accepted from the wire; `datetime` instances pass through so
    models can also be built in code.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise ValueError("timestamp must be an ISO-8601 string")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


Timestamp: TypeAlias = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]


__all__ = [
    "DATA_API_PREFIX",
    "DEFAULT_BASE_URL",
    "EntityType",
    "SOFT_DELETE_FIELD",
    "SortOrder",
    "Timestamp",
    "WORKFLOW_API_PREFIX",
    "entity_path",
    "entity_slug",
    "parse_timestamp",
    "workflow_path",
]
