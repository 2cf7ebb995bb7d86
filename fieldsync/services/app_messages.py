"""
App message service (announcements shown at launch).
"""

from __future__ import annotations

import builtins

from ..constraints import C
from ..models import fields as F
from ..models.entities import AppMessage
from ..models.types import EntityType
from .base import EntityRepository


class AppMessageService(EntityRepository[AppMessage]):
    entity_type = EntityType.APP_MESSAGE
    model = AppMessage

    async def active(self, *, user_type: str | None = None) -> builtins.list[AppMessage]:
        """
        Active messages, newest first.

        When `user_type` is given, messages targeted at other user types are
        dropped; untargeted messages are kept.
        """
        messages = await self.all(
            C.field(F.AppMessage.ACTIVE).equals(True),
            sort_field=F.CREATED_DATE,
            descending=True,
        )
        if user_type is None:
            return messages
        return [
            m for m in messages if not m.target_user_types or user_type in m.target_user_types
        ]


__all__ = ["AppMessageService"]
