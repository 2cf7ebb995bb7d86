from __future__ import annotations

from typing import Any

from pydantic import Field

from ..models.entities import FieldSyncModel


class ErrorInfo(FieldSyncModel):
    type: str
    message: str
    details: dict[str, Any] | None = None


class CommandMeta(FieldSyncModel):
    duration_ms: int = Field(..., alias="durationMs")
    pagination: dict[str, Any] | None = None


class CommandResult(FieldSyncModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None
