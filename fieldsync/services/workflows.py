"""
Backend workflow service (`wf/<name>` endpoints).
"""

from __future__ import annotations

import builtins
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..clients.http import encode_body
from ..clients.pipeline import RequestDescriptor
from ..decoding import ResponseDecoder
from ..exceptions import DecodeFailureReason, DecodingError
from ..models.entities import InventoryUnit
from ..models.types import workflow_path
from .inventory import InventoryUnitService

if TYPE_CHECKING:
    from ..clients.http import AsyncHTTPClient
    from .base import Executor

logger = logging.getLogger(__name__)

CREATE_DEFAULT_INVENTORY_UNITS = "create_default_inventory_units"


class WorkflowService:
    """Runs named backend workflows."""

    def __init__(self, client: AsyncHTTPClient | Executor):
        self._client = client
        self._decoder = ResponseDecoder()

    async def run(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        result_type: Any = dict[str, Any],
        *,
        requires_auth: bool = True,
    ) -> Any:
        """
        POST `wf/<name>` with `params` as the JSON body.

        Returns:
            The reply decoded as `result_type` (envelope or bare).
        """
        descriptor = RequestDescriptor(
            path=workflow_path(name),
            method="POST",
            body=encode_body(dict(params or {})),
            requires_auth=requires_auth,
        )
        return await self._client.execute(descriptor, result_type)

    async def create_default_inventory_units(self, company_id: str) -> builtins.list[InventoryUnit]:
        """
        Seed a company's default inventory units.

        The workflow may answer with the unit list, with an object holding
        `inventoryUnits`, or with a bare status. In the last case the units are
        fetched from the collection instead.
        """
        try:
            reply = await self.run(
                CREATE_DEFAULT_INVENTORY_UNITS,
                {"company": company_id},
                Any,
                requires_auth=False,
            )
        except DecodingError as e:
            if e.reason is not DecodeFailureReason.EMPTY_BODY:
                raise
            reply = None

        units = self._units_from_reply(reply)
        if units:
            return units
        logger.debug("Workflow returned no units for %s; fetching them", company_id)
        return await InventoryUnitService(self._client).for_company(company_id)

    def _units_from_reply(self, reply: Any) -> builtins.list[InventoryUnit]:
        if isinstance(reply, Mapping):
            reply = reply.get("inventory_units")
        if not isinstance(reply, list):
            return []
        units: builtins.list[InventoryUnit] = self._decoder.decode_value(
            reply, builtins.list[InventoryUnit]
        )
        return units


__all__ = ["CREATE_DEFAULT_INVENTORY_UNITS", "WorkflowService"]
