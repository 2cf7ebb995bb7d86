"""
Company and user services.
"""

from __future__ import annotations

import builtins

from ..constraints import C
from ..models import fields as F
from ..models.entities import Company, User
from ..models.types import EntityType
from .base import EntityRepository


class CompanyService(EntityRepository[Company]):
    entity_type = EntityType.COMPANY
    model = Company


class UserService(EntityRepository[User]):
    entity_type = EntityType.USER
    model = User

    async def for_company(self, company_id: str) -> builtins.list[User]:
        return await self.all(C.field(F.User.COMPANY).equals(company_id))


__all__ = ["CompanyService", "UserService"]
