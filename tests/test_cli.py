from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

pytest.importorskip("rich_click")
pytest.importorskip("rich")

from click.testing import CliRunner

import fieldsync
from fieldsync.cli.main import cli
from fieldsync.clients.http import AsyncHTTPClient, ClientConfig
from fieldsync.constraints import C, parse

BASE = ["--base-url", "https://api.example/api/1.1", "--token", "tok"]


async def _no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def route(monkeypatch: pytest.MonkeyPatch) -> Callable[[Callable[[httpx.Request], Any]], None]:
    """Point every client the CLI builds at a mock transport."""

    def _install(handler: Callable[[httpx.Request], Any]) -> None:
        def factory(config: ClientConfig, **kwargs: Any) -> AsyncHTTPClient:
            return AsyncHTTPClient(
                config.with_overrides(
                    transport=httpx.MockTransport(handler),
                    min_request_interval=0.0,
                    sleep=_no_sleep,
                ),
                **kwargs,
            )

        monkeypatch.setattr("fieldsync.client.AsyncHTTPClient", factory)

    return _install


def _payload(result: Any) -> dict[str, Any]:
    data: dict[str, Any] = json.loads(result.stdout.strip().splitlines()[-1])
    return data


def _page(results: list[dict[str, Any]], remaining: int = 0) -> dict[str, Any]:
    return {"response": {"cursor": 0, "results": results, "remaining": remaining}}


def test_cli_no_args_shows_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_cli_version_table_output() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert fieldsync.__version__ in result.output


def test_cli_version_json_after_subcommand() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["version", "--json"])
    assert result.exit_code == 0
    payload = _payload(result)
    assert payload["ok"] is True
    assert payload["command"] == "version"
    assert payload["data"]["version"] == fieldsync.__version__
    assert "durationMs" in payload["meta"]


def test_cli_list_json_sends_constraints(route: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        results = [{"_id": "p1", "Project Name": "Roof", "Status": "Accepted"}]
        return httpx.Response(200, json=_page(results, remaining=3), request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            *BASE,
            "--json",
            "list",
            "project",
            "--where",
            "Company=c1",
            "--contains",
            "Team Members=u1",
            "--limit",
            "1",
        ],
    )
    assert result.exit_code == 0, result.output
    payload = _payload(result)
    (row,) = payload["data"]
    assert row["id"] == "p1"
    assert row["project_name"] == "Roof"
    assert row["status"] == "Accepted"
    assert "created_date" not in row
    assert payload["meta"]["pagination"] == {"cursor": 0, "count": 1, "remaining": 3}

    (request,) = seen
    assert request.url.path == "/api/1.1/obj/project"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.url.params["limit"] == "1"
    assert parse(request.url.params["constraints"]) == [
        C.field("Company").equals("c1"),
        C.field("Team Members").contains("u1"),
    ]


def test_cli_list_all_follows_pages(route: Any) -> None:
    cursors: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        cursor = request.url.params["cursor"]
        cursors.append(cursor)
        results = [{"_id": f"t{cursor}"}] if cursor == "0" else []
        return httpx.Response(200, json=_page(results), request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "list", "task", "--all", "--limit", "1", "--json"])
    assert result.exit_code == 0, result.output
    assert [row["id"] for row in _payload(result)["data"]] == ["t0"]
    assert cursors == ["0", "1"]


def test_cli_list_table_output(route: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        results = [{"_id": "u1", "display": "Each"}]
        return httpx.Response(200, json=_page(results), request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "list", "inventory-unit"])
    assert result.exit_code == 0, result.output
    assert "u1" in result.output
    assert "Each" in result.output


def test_cli_get_not_found_exits_4(route: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={}, request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "--json", "get", "task", "missing"])
    assert result.exit_code == 4
    payload = _payload(result)
    assert payload["ok"] is False
    assert payload["error"]["type"] == "http_error"
    assert payload["error"]["details"]["statusCode"] == 404


def test_cli_unauthorized_exits_3_with_friendly_message(route: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={}, request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "get", "project", "p1"])
    assert result.exit_code == 3
    assert "Not signed in" in result.output
    assert "tok" not in result.output


def test_cli_missing_token_makes_no_request(
    route: Any, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={}, request=request)

    monkeypatch.delenv("FIELDSYNC_API_TOKEN", raising=False)
    route(handler)
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--base-url", "https://api.example/api/1.1", "--json", "get", "project", "p1"]
    )
    assert result.exit_code == 3
    assert calls == []


def test_cli_unknown_entity_is_usage_error(route: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail(f"Unexpected network call: {request.method} {request.url!s}")

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "--json", "list", "spaceship"])
    assert result.exit_code == 2
    payload = _payload(result)
    assert payload["error"]["type"] == "usage_error"
    assert "spaceship" in payload["error"]["message"]


def test_cli_invalid_constraints_is_usage_error(route: Any) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        pytest.fail("Unexpected network call")

    route(handler)
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "list", "task", "--constraints", "{not json"])
    assert result.exit_code == 2
    assert "Invalid --constraints" in result.output


def test_cli_workflow_posts_typed_params(route: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"response": {"status": "success"}}, request=request)

    route(handler)
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            *BASE,
            "--json",
            "workflow",
            "create_default_inventory_units",
            "--param",
            "company=c1",
            "--param",
            "force=true",
            "--no-auth",
        ],
    )
    assert result.exit_code == 0, result.output
    assert _payload(result)["data"] == {"status": "success"}
    (request,) = seen
    assert request.url.path == "/api/1.1/wf/create_default_inventory_units"
    assert json.loads(request.content) == {"company": "c1", "force": True}
    assert "authorization" not in request.headers


def test_cli_rejects_bad_assignment() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, [*BASE, "--json", "workflow", "sync", "--param", "novalue"])
    assert result.exit_code == 2
    assert _payload(result)["error"]["type"] == "usage_error"


def _grouped(groups: list[dict[str, Any]]) -> set[str]:
    return {opt for group in groups for opt in group["options"]}


def test_help_panels_cover_every_option() -> None:
    import rich_click

    from fieldsync.cli.click_compat import COMMAND_GROUPS, OPTION_GROUPS

    assert rich_click.rich_click.OPTION_GROUPS["fieldsync"] == OPTION_GROUPS["fieldsync"]
    for path, command in [("fieldsync", cli), ("fieldsync list", cli.commands["list"])]:
        grouped = _grouped(OPTION_GROUPS[path])
        for param in command.params:
            if param.param_type_name == "option":
                assert grouped & set(param.opts), f"{path}: {param.opts} has no help panel"

    listed = {name for group in COMMAND_GROUPS["fieldsync"] for name in group["commands"]}
    assert listed == set(cli.commands)


def test_help_shows_panels() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Connection" in result.output
    assert "FIELDSYNC_API_TOKEN" in result.output
