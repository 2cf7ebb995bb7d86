"""
Client and sub-client services.
"""

from __future__ import annotations

import builtins

from ..constraints import C
from ..models import fields as F
from ..models.entities import Client, ClientUpdate, SubClient
from ..models.types import EntityType
from .base import EntityRepository


class ClientService(EntityRepository[Client]):
    entity_type = EntityType.CLIENT
    model = Client

    async def for_company(self, company_id: str) -> builtins.list[Client]:
        return await self.all(C.field(F.Client.PARENT_COMPANY).equals(company_id))

    async def update_contact(
        self,
        client_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> None:
        """Update contact details; fields left as None are not sent."""
        await self.update(
            client_id,
            ClientUpdate(name=name, email_address=email, phone_number=phone, address=address),
        )


class SubClientService(EntityRepository[SubClient]):
    entity_type = EntityType.SUB_CLIENT
    model = SubClient

    async def for_client(self, client_id: str) -> builtins.list[SubClient]:
        return await self.all(C.field(F.SubClient.PARENT_CLIENT).equals(client_id))


__all__ = ["ClientService", "SubClientService"]
