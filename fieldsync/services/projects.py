"""
Project service.

Field workers only sync projects that matter to them: projects of their
company whose start date falls in a sliding window, plus anything currently in
progress.
"""

from __future__ import annotations

import builtins
from datetime import datetime, timedelta, timezone

from ..constraints import C, Constraint
from ..models import fields as F
from ..models.entities import Project, ProjectUpdate
from ..models.types import EntityType
from .base import EntityRepository

DEFAULT_HISTORY_DAYS = 30
DEFAULT_FUTURE_DAYS = 60


def window_constraint(
    *,
    now: datetime | None = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
    future_days: int = DEFAULT_FUTURE_DAYS,
) -> Constraint:
    """Start date inside `[now - history_days, now + future_days]`, or status In Progress."""
    if history_days < 0 or future_days < 0:
        raise ValueError("history_days and future_days must be >= 0")
    now = now or datetime.now(timezone.utc)
    in_range = C.date_range(
        F.Project.START_DATE,
        now - timedelta(days=history_days),
        now + timedelta(days=future_days),
    )
    return in_range | C.field(F.Project.STATUS).equals(F.ProjectStatus.IN_PROGRESS)


class ProjectService(EntityRepository[Project]):
    entity_type = EntityType.PROJECT
    model = Project

    async def for_company(self, company_id: str) -> builtins.list[Project]:
        return await self.all(
            C.field(F.Project.COMPANY).equals(company_id),
            sort_field=F.Project.START_DATE,
        )

    async def for_user(self, user_id: str) -> builtins.list[Project]:
        """Projects whose team includes `user_id`."""
        return await self.all(
            C.field(F.Project.TEAM_MEMBERS).contains(user_id),
            sort_field=F.Project.START_DATE,
        )

    async def in_window(
        self,
        company_id: str,
        *,
        now: datetime | None = None,
        history_days: int = DEFAULT_HISTORY_DAYS,
        future_days: int = DEFAULT_FUTURE_DAYS,
    ) -> builtins.list[Project]:
        """
        Projects of a company relevant to the current schedule.

        Args:
            company_id: Owning company.
            now: Reference time (defaults to the current UTC time).
            history_days: How far back start dates may lie.
            future_days: How far ahead start dates may lie.
        """
        constraints = [
            C.field(F.Project.COMPANY).equals(company_id),
            window_constraint(now=now, history_days=history_days, future_days=future_days),
        ]
        return await self.all(constraints, sort_field=F.Project.START_DATE)

    async def update_status(self, project_id: str, status: str) -> None:
        await self.update(project_id, ProjectUpdate(status=status))


__all__ = ["DEFAULT_FUTURE_DAYS", "DEFAULT_HISTORY_DAYS", "ProjectService", "window_constraint"]
