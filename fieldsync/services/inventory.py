"""
Inventory services: units, items, tags and snapshots.

Units, items and tags are soft-deleted, so company listings exclude anything
with `deletedAt` set.
"""

from __future__ import annotations

import builtins

from ..constraints import C, Constraint
from ..models import fields as F
from ..models.entities import (
    InventoryItem,
    InventoryItemUpdate,
    InventorySnapshot,
    InventorySnapshotItem,
    InventoryTag,
    InventoryUnit,
)
from ..models.types import EntityType
from .base import EntityRepository


def _live_for_company(company_key: str, company_id: str) -> builtins.list[Constraint]:
    return [
        C.field(company_key).equals(company_id),
        C.field(F.DELETED_AT).is_empty(),
    ]


class InventoryUnitService(EntityRepository[InventoryUnit]):
    entity_type = EntityType.INVENTORY_UNIT
    model = InventoryUnit

    async def for_company(self, company_id: str) -> builtins.list[InventoryUnit]:
        return await self.all(
            _live_for_company(F.InventoryUnit.COMPANY, company_id),
            sort_field=F.InventoryUnit.SORT_ORDER,
        )


class InventoryItemService(EntityRepository[InventoryItem]):
    entity_type = EntityType.INVENTORY_ITEM
    model = InventoryItem

    async def for_company(self, company_id: str) -> builtins.list[InventoryItem]:
        return await self.all(_live_for_company(F.InventoryItem.COMPANY, company_id))

    async def update_quantity(self, item_id: str, quantity: float) -> None:
        await self.update(item_id, InventoryItemUpdate(quantity=quantity))


class InventoryTagService(EntityRepository[InventoryTag]):
    entity_type = EntityType.INVENTORY_TAG
    model = InventoryTag

    async def for_company(self, company_id: str) -> builtins.list[InventoryTag]:
        return await self.all(_live_for_company(F.InventoryTag.COMPANY, company_id))


class InventorySnapshotService(EntityRepository[InventorySnapshot]):
    entity_type = EntityType.INVENTORY_SNAPSHOT
    model = InventorySnapshot

    async def for_company(self, company_id: str) -> builtins.list[InventorySnapshot]:
        return await self.all(
            C.field(F.InventorySnapshot.COMPANY).equals(company_id),
            sort_field=F.InventorySnapshot.CREATED_AT,
            descending=True,
        )


class InventorySnapshotItemService(EntityRepository[InventorySnapshotItem]):
    entity_type = EntityType.INVENTORY_SNAPSHOT_ITEM
    model = InventorySnapshotItem

    async def for_snapshot(self, snapshot_id: str) -> builtins.list[InventorySnapshotItem]:
        return await self.all(C.field(F.InventorySnapshotItem.SNAPSHOT).equals(snapshot_id))


__all__ = [
    "InventoryItemService",
    "InventorySnapshotItemService",
    "InventorySnapshotService",
    "InventoryTagService",
    "InventoryUnitService",
]
