"""
Task, task status and task type services.
"""

from __future__ import annotations

import builtins
from collections.abc import Sequence

from ..constraints import C
from ..models import fields as F
from ..models.entities import Task, TaskStatusOption, TaskType, TaskUpdate
from ..models.types import EntityType
from .base import EntityRepository


class TaskService(EntityRepository[Task]):
    entity_type = EntityType.TASK
    model = Task

    async def for_project(self, project_id: str) -> builtins.list[Task]:
        return await self.all(
            C.field(F.Task.PROJECT_ID).equals(project_id),
            sort_field=F.Task.TASK_INDEX,
        )

    async def for_company(self, company_id: str) -> builtins.list[Task]:
        return await self.all(C.field(F.Task.COMPANY_ID).equals(company_id))

    async def for_user(self, user_id: str) -> builtins.list[Task]:
        return await self.all(C.field(F.Task.TEAM_MEMBERS).contains(user_id))

    async def update_status(self, task_id: str, status: str) -> None:
        await self.update(task_id, TaskUpdate(status=status))

    async def update_notes(self, task_id: str, notes: str) -> None:
        await self.update(task_id, TaskUpdate(task_notes=notes))

    async def update_team_members(self, task_id: str, user_ids: Sequence[str]) -> None:
        # An empty list clears the team; only None means "unchanged".
        await self.update(task_id, TaskUpdate(team_members=builtins.list(user_ids)))


class TaskStatusService(EntityRepository[TaskStatusOption]):
    """Per-company task status options (`task_status`)."""

    entity_type = EntityType.TASK_STATUS
    model = TaskStatusOption

    async def for_company(self, company_id: str) -> builtins.list[TaskStatusOption]:
        return await self.all(
            C.field(F.TaskStatus.COMPANY).equals(company_id),
            sort_field=F.TaskStatus.INDEX,
        )


class TaskTypeService(EntityRepository[TaskType]):
    entity_type = EntityType.TASK_TYPE
    model = TaskType

    async def for_company(self, company_id: str) -> builtins.list[TaskType]:
        return await self.all(C.field(F.TaskType.COMPANY).equals(company_id))


__all__ = ["TaskService", "TaskStatusService", "TaskTypeService"]
