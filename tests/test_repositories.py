from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest
from pydantic import ValidationError

from fieldsync.clients.pipeline import RequestDescriptor
from fieldsync.constraints import C, parse
from fieldsync.decoding import ResponseDecoder
from fieldsync.exceptions import DecodingError
from fieldsync.models import fields as F
from fieldsync.models.entities import (
    EmptyResponse,
    ProjectCreate,
    ProjectUpdate,
    SoftDelete,
    TaskUpdate,
)
from fieldsync.services import ProjectService, TaskService


class RecordingExecutor:
    """Executor double: records descriptors and decodes queued JSON replies."""

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.descriptors: list[RequestDescriptor] = []
        self.decoder = ResponseDecoder()

    async def execute(self, descriptor: RequestDescriptor, result_type: Any = EmptyResponse) -> Any:
        self.descriptors.append(descriptor)
        reply = self.replies.pop(0) if self.replies else None
        content = b"" if reply is None else json.dumps(reply).encode()
        return self.decoder.decode(content, result_type)


def _page(results: list[dict[str, Any]], remaining: int = 0) -> dict[str, Any]:
    return {
        "response": {
            "cursor": 0,
            "results": results,
            "remaining": remaining,
            "count": len(results),
        }
    }


def _params(descriptor: RequestDescriptor) -> dict[str, str]:
    return dict(descriptor.params)


@pytest.mark.asyncio
async def test_get_builds_object_path() -> None:
    executor = RecordingExecutor({"response": {"_id": "p1", "Project Name": "Roof"}})
    project = await ProjectService(executor).get("p1")
    assert project.project_name == "Roof"
    (descriptor,) = executor.descriptors
    assert descriptor.method == "GET"
    assert descriptor.path == "obj/project/p1"
    assert descriptor.params == ()


@pytest.mark.asyncio
async def test_list_sends_paging_sort_and_constraints() -> None:
    executor = RecordingExecutor(_page([{"_id": "t1"}], remaining=4))
    page = await TaskService(executor).list(
        [C.field(F.Task.PROJECT_ID).equals("p1")],
        limit=25,
        cursor=50,
        sort_field=F.Task.TASK_INDEX,
        descending=True,
    )
    assert [t.id for t in page.results] == ["t1"]
    assert page.remaining == 4

    params = _params(executor.descriptors[0])
    assert executor.descriptors[0].path == "obj/task"
    assert params["limit"] == "25"
    assert params["cursor"] == "50"
    assert params["sort_field"] == "taskIndex"
    assert params["sort_order"] == "desc"
    assert parse(params["constraints"]) == [C.field("projectID").equals("p1")]


@pytest.mark.asyncio
async def test_list_without_constraints_or_sort_omits_them() -> None:
    executor = RecordingExecutor(_page([]))
    await TaskService(executor, page_size=10).list()
    params = _params(executor.descriptors[0])
    assert params == {"limit": "10", "cursor": "0"}


@pytest.mark.asyncio
async def test_list_rejects_negative_cursor() -> None:
    with pytest.raises(ValueError):
        await TaskService(RecordingExecutor()).list(cursor=-1)


@pytest.mark.asyncio
async def test_all_follows_offsets_until_short_page() -> None:
    executor = RecordingExecutor(
        _page([{"_id": "a"}, {"_id": "b"}]),
        _page([{"_id": "c"}, {"_id": "d"}]),
        _page([{"_id": "e"}]),
    )
    tasks = await TaskService(executor, page_size=2).all(C.field("type").equals("Install"))
    assert [t.id for t in tasks] == ["a", "b", "c", "d", "e"]
    assert [_params(d)["cursor"] for d in executor.descriptors] == ["0", "2", "4"]
    assert {_params(d)["limit"] for d in executor.descriptors} == {"2"}


@pytest.mark.asyncio
async def test_pages_yields_lists() -> None:
    executor = RecordingExecutor(_page([{"_id": "a"}, {"_id": "b"}]), _page([]))
    pages = [page async for page in TaskService(executor, page_size=2).pages()]
    assert [[t.id for t in page] for page in pages] == [["a", "b"], []]


@pytest.mark.asyncio
async def test_by_ids_uses_in_constraint_and_skips_empty() -> None:
    executor = RecordingExecutor(_page([{"_id": "a"}]))
    service = TaskService(executor)
    assert await service.by_ids([]) == []
    assert executor.descriptors == []

    await service.by_ids(["a", "b", "a", ""])
    constraints = parse(_params(executor.descriptors[0])["constraints"])
    assert constraints == [C.field("_id").in_(["a", "b"])]


@pytest.mark.asyncio
async def test_create_merges_payload_with_new_id() -> None:
    executor = RecordingExecutor({"status": "success", "id": "p9"})
    start = datetime(2025, 5, 1, 8, 0, tzinfo=timezone.utc)
    project = await ProjectService(executor).create(
        ProjectCreate(project_name="Deck", company="c1", start_date=start)
    )
    assert project.id == "p9"
    assert project.project_name == "Deck"
    assert project.start_date == start

    (descriptor,) = executor.descriptors
    assert descriptor.method == "POST"
    assert descriptor.path == "obj/project"
    assert json.loads(descriptor.body or b"") == {
        "Project Name": "Deck",
        "Company": "c1",
        "Start Date": "2025-05-01T08:00:00.000Z",
    }


@pytest.mark.asyncio
async def test_update_sends_only_set_fields() -> None:
    executor = RecordingExecutor()
    await ProjectService(executor).update("p1", ProjectUpdate(status="Completed"))
    (descriptor,) = executor.descriptors
    assert descriptor.method == "PATCH"
    assert descriptor.path == "obj/project/p1"
    assert json.loads(descriptor.body or b"") == {"Status": "Completed"}


@pytest.mark.asyncio
async def test_empty_update_makes_no_request() -> None:
    executor = RecordingExecutor()
    service = TaskService(executor)
    await service.update("t1", TaskUpdate())
    await service.update("t1", {})
    assert executor.descriptors == []


@pytest.mark.asyncio
async def test_team_members_can_be_cleared() -> None:
    executor = RecordingExecutor()
    await TaskService(executor).update_team_members("t1", [])
    assert json.loads(executor.descriptors[0].body or b"") == {"Team Members": []}


@pytest.mark.asyncio
async def test_soft_delete_sets_deleted_at() -> None:
    executor = RecordingExecutor()
    when = datetime(2025, 6, 1, 12, 30, tzinfo=timezone.utc)
    await TaskService(executor).soft_delete("t1", at=when)
    (descriptor,) = executor.descriptors
    assert descriptor.method == "PATCH"
    assert json.loads(descriptor.body or b"") == {"deletedAt": "2025-06-01T12:30:00.000Z"}


@pytest.mark.asyncio
async def test_hard_delete() -> None:
    executor = RecordingExecutor()
    await TaskService(executor).delete("t1")
    (descriptor,) = executor.descriptors
    assert (descriptor.method, descriptor.path, descriptor.body) == ("DELETE", "obj/task/t1", None)


@pytest.mark.asyncio
async def test_repository_over_http_client(make_http: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_page([{"_id": "t1", "projectID": "p1"}]), request=request)

    http = make_http(handler, page_size=50)
    try:
        tasks = await TaskService(http).for_project("p1")
    finally:
        await http.close()

    assert [t.id for t in tasks] == ["t1"]
    (request,) = seen
    assert request.url.path == "/api/1.1/obj/task"
    assert request.url.params["limit"] == "50"
    assert request.url.params["sort_field"] == "taskIndex"
    assert request.url.params["sort_order"] == "asc"
    assert parse(request.url.params["constraints"]) == [C.field("projectID").equals("p1")]


@pytest.mark.asyncio
async def test_all_fails_on_malformed_page_instead_of_truncating() -> None:
    executor = RecordingExecutor(
        _page([{"_id": "a"}, {"_id": "b"}]),
        _page([{"_id": "c"}, {"Project Name": "no id"}], remaining=3),
        _page([{"_id": "e"}]),
    )
    with pytest.raises(DecodingError):
        await ProjectService(executor, page_size=2).all()
    assert len(executor.descriptors) == 2


def test_task_update_distinguishes_cleared_from_unset_team() -> None:
    assert TaskUpdate(team_members=[]).to_body() == {"Team Members": []}
    assert not TaskUpdate(team_members=[]).is_empty()
    assert TaskUpdate().is_empty()


def test_soft_delete_payload_is_validated() -> None:
    when = datetime(2025, 6, 1, 12, 30, tzinfo=timezone.utc)
    assert SoftDelete(deleted_at=when).to_body() == {"deletedAt": "2025-06-01T12:30:00.000Z"}
    with pytest.raises(ValidationError):
        SoftDelete(deleted_at="yesterday")
    with pytest.raises(ValidationError):
        SoftDelete(deleted_at=when, reason="cleanup")  # type: ignore[call-arg]
