"""
Calendar event service.
"""

from __future__ import annotations

import builtins
from datetime import datetime

from ..constraints import C
from ..models import fields as F
from ..models.entities import CalendarEvent
from ..models.types import EntityType
from .base import EntityRepository


class CalendarEventService(EntityRepository[CalendarEvent]):
    entity_type = EntityType.CALENDAR_EVENT
    model = CalendarEvent

    async def for_company(self, company_id: str) -> builtins.list[CalendarEvent]:
        return await self.all(C.field(F.CalendarEvent.COMPANY).equals(company_id))

    async def for_project(self, project_id: str) -> builtins.list[CalendarEvent]:
        return await self.all(C.field(F.CalendarEvent.PROJECT).equals(project_id))

    async def between(
        self, company_id: str, start: datetime, end: datetime
    ) -> builtins.list[CalendarEvent]:
        """Company events starting strictly between `start` and `end`."""
        if end < start:
            raise ValueError("end must not be before start")
        return await self.all(
            [
                C.field(F.CalendarEvent.COMPANY).equals(company_id),
                C.date_range(F.CalendarEvent.START_DATE, start, end),
            ],
            sort_field=F.CalendarEvent.START_DATE,
        )


__all__ = ["CalendarEventService"]
