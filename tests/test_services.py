from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from fieldsync.constraints import C, Combinator, parse
from fieldsync.exceptions import DecodingError, ServerError
from fieldsync.services import (
    AppMessageService,
    CalendarEventService,
    ClientService,
    InventorySnapshotService,
    InventoryUnitService,
    ProjectService,
    WorkflowService,
)
from fieldsync.services.projects import window_constraint

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _page(results: list[dict[str, Any]]) -> dict[str, Any]:
    return {"response": {"cursor": 0, "results": results, "remaining": 0, "count": len(results)}}


def _collection_handler(seen: list[httpx.Request], results: list[dict[str, Any]]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_page(results), request=request)

    return handler


def _constraints(request: httpx.Request) -> list[Any]:
    return parse(request.url.params["constraints"])


# =============================================================================
# Projects
# =============================================================================


def test_window_constraint_is_date_range_or_in_progress() -> None:
    expr = window_constraint(now=NOW)
    assert isinstance(expr, Combinator)
    assert expr.kind == "or"
    in_range, in_progress = expr.children
    assert in_range == C.date_range(
        "Start Date", NOW - timedelta(days=30), NOW + timedelta(days=60)
    )
    assert in_progress == C.field("Status").equals("In Progress")


def test_window_constraint_rejects_negative_spans() -> None:
    with pytest.raises(ValueError):
        window_constraint(now=NOW, history_days=-1)


@pytest.mark.asyncio
async def test_projects_in_window_are_scoped_to_company(make_http: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_collection_handler(seen, [{"_id": "p1", "Company": "c1"}]))
    try:
        projects = await ProjectService(http).in_window("c1", now=NOW)
    finally:
        await http.close()

    assert [p.id for p in projects] == ["p1"]
    company, window = _constraints(seen[0])
    assert company == C.field("Company").equals("c1")
    assert window == window_constraint(now=NOW)
    assert seen[0].url.params["sort_field"] == "Start Date"


@pytest.mark.asyncio
async def test_update_status_patches_status_field(make_http: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204, request=request)

    http = make_http(handler)
    try:
        await ProjectService(http).update_status("p1", "Completed")
    finally:
        await http.close()

    assert seen[0].method == "PATCH"
    assert seen[0].url.path.endswith("/obj/project/p1")
    assert json.loads(seen[0].content) == {"Status": "Completed"}


# =============================================================================
# Other kinds
# =============================================================================


@pytest.mark.asyncio
async def test_calendar_between_uses_strict_range(make_http: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_collection_handler(seen, []))
    end = NOW + timedelta(days=7)
    try:
        assert await CalendarEventService(http).between("c1", NOW, end) == []
        with pytest.raises(ValueError):
            await CalendarEventService(http).between("c1", end, NOW)
    finally:
        await http.close()

    assert len(seen) == 1
    assert _constraints(seen[0]) == [
        C.field("Company").equals("c1"),
        C.date_range("Start Date", NOW, end),
    ]


@pytest.mark.asyncio
async def test_inventory_units_exclude_soft_deleted(make_http: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_collection_handler(seen, [{"_id": "u1", "display": "Each"}]))
    try:
        units = await InventoryUnitService(http).for_company("c1")
    finally:
        await http.close()

    assert [u.display for u in units] == ["Each"]
    assert _constraints(seen[0]) == [
        C.field("company").equals("c1"),
        C.field("deletedAt").is_empty(),
    ]
    assert seen[0].url.params["sort_field"] == "sortOrder"


@pytest.mark.asyncio
async def test_snapshots_are_newest_first(make_http: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_collection_handler(seen, []))
    try:
        await InventorySnapshotService(http).for_company("c1")
    finally:
        await http.close()

    assert seen[0].url.params["sort_field"] == "createdAt"
    assert seen[0].url.params["sort_order"] == "desc"


@pytest.mark.asyncio
async def test_client_contact_update_skips_unset_fields(make_http: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204, request=request)

    http = make_http(handler)
    try:
        await ClientService(http).update_contact("cl1", email="a@b.example")
        await ClientService(http).update_contact("cl1")
    finally:
        await http.close()

    assert len(seen) == 1
    assert json.loads(seen[0].content) == {"emailAddress": "a@b.example"}


@pytest.mark.asyncio
async def test_active_app_messages_filtered_by_user_type(make_http: Any) -> None:
    messages = [
        {"_id": "m1", "active": True, "title": "All"},
        {"_id": "m2", "active": True, "title": "Admins", "targetUserTypes": ["Admin"]},
        {"_id": "m3", "active": True, "title": "Crew", "targetUserTypes": ["Employee"]},
    ]
    seen: list[httpx.Request] = []
    http = make_http(_collection_handler(seen, messages))
    try:
        service = AppMessageService(http)
        everyone = await service.active()
        crew = await service.active(user_type="Employee")
    finally:
        await http.close()

    assert [m.id for m in everyone] == ["m1", "m2", "m3"]
    assert [m.id for m in crew] == ["m1", "m3"]
    assert _constraints(seen[0]) == [C.field("active").equals(True)]
    assert seen[0].url.params["sort_order"] == "desc"


# =============================================================================
# Workflows
# =============================================================================


def _workflow_handler(seen: list[httpx.Request], reply: Any, units: list[dict[str, Any]]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/wf/create_default_inventory_units"):
            if reply is None:
                return httpx.Response(200, content=b"", request=request)
            return httpx.Response(200, json=reply, request=request)
        return httpx.Response(200, json=_page(units), request=request)

    return handler


UNITS = [{"_id": "u1", "display": "Each"}, {"_id": "u2", "display": "Box"}]


@pytest.mark.parametrize(
    "reply",
    [
        {"response": UNITS},
        UNITS,
        {"response": {"inventoryUnits": UNITS}},
        {"inventoryUnits": UNITS},
    ],
)
@pytest.mark.asyncio
async def test_default_units_from_workflow_reply(make_http: Any, reply: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_workflow_handler(seen, reply, []), api_token=None)
    try:
        units = await WorkflowService(http).create_default_inventory_units("c1")
    finally:
        await http.close()

    assert [u.display for u in units] == ["Each", "Box"]
    assert len(seen) == 1
    assert json.loads(seen[0].content) == {"company": "c1"}
    assert "authorization" not in seen[0].headers


@pytest.mark.parametrize("reply", [{"response": {"status": "success"}}, None])
@pytest.mark.asyncio
async def test_default_units_refetched_after_status_reply(make_http: Any, reply: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_workflow_handler(seen, reply, UNITS))
    try:
        units = await WorkflowService(http).create_default_inventory_units("c1")
    finally:
        await http.close()

    assert [u.id for u in units] == ["u1", "u2"]
    assert [r.method for r in seen] == ["POST", "GET"]
    assert seen[1].url.path.endswith("/obj/inventoryunit")


@pytest.mark.asyncio
async def test_default_units_malformed_reply_fails(make_http: Any) -> None:
    seen: list[httpx.Request] = []
    http = make_http(_workflow_handler(seen, [{"_id": "u1"}], []))
    try:
        with pytest.raises(DecodingError):
            await WorkflowService(http).create_default_inventory_units("c1")
    finally:
        await http.close()


@pytest.mark.asyncio
async def test_workflow_errors_propagate(make_http: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={}, request=request)

    http = make_http(handler, max_retries=0)
    try:
        with pytest.raises(ServerError):
            await WorkflowService(http).run("sync_now", {"company": "c1"})
    finally:
        await http.close()
