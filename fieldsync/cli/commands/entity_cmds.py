"""
`get` and `list` commands for any entity kind.
"""

from __future__ import annotations

from typing import Any

from ...client import AsyncFieldSync
from ...constraints import C, Constraint, parse
from ..click_compat import RichCommand, click
from ..context import CLIContext, parse_assignments, resolve_entity_type
from ..errors import CLIError
from ..options import output_options
from ..runner import CommandOutput, run_command


def _dump(model: Any) -> dict[str, Any]:
    data: dict[str, Any] = model.model_dump(mode="json", exclude_none=True)
    return data


@click.command(name="get", cls=RichCommand)
@click.argument("entity")
@click.argument("object_id")
@output_options
@click.pass_obj
def get_cmd(ctx: CLIContext, entity: str, object_id: str) -> None:
    """Fetch one object by id, e.g. `fieldsync get project 1699...x12`."""

    async def fn(client: AsyncFieldSync, _warnings: list[str]) -> CommandOutput:
        kind = resolve_entity_type(entity)
        obj = await client.repository(kind).get(object_id)
        return CommandOutput(data=_dump(obj))

    run_command(ctx, command="get", fn=fn)


def _build_constraints(
    where: tuple[str, ...], contains: tuple[str, ...], raw: str | None
) -> list[Constraint]:
    constraints: list[Constraint] = []
    for key, value in parse_assignments(where, option="--where"):
        constraints.append(C.field(key).equals(value))
    for key, value in parse_assignments(contains, option="--contains"):
        constraints.append(C.field(key).contains(value))
    if raw:
        try:
            constraints.extend(parse(raw))
        except ValueError as exc:
            raise CLIError.usage(f"Invalid --constraints: {exc}") from exc
    return constraints


@click.command(name="list", cls=RichCommand)
@click.argument("entity")
@click.option("--where", multiple=True, metavar="KEY=VALUE", help="Field equals value.")
@click.option("--contains", multiple=True, metavar="KEY=VALUE", help="List field contains value.")
@click.option("--constraints", "raw_constraints", default=None, help="Raw constraints JSON.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Page size.")
@click.option("--cursor", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--all", "fetch_all", is_flag=True, help="Follow pages until exhausted.")
@click.option("--sort-field", default=None, help="Backend field to sort by.")
@click.option("--desc", is_flag=True, help="Sort descending.")
@output_options
@click.pass_obj
def list_cmd(
    ctx: CLIContext,
    entity: str,
    *,
    where: tuple[str, ...],
    contains: tuple[str, ...],
    raw_constraints: str | None,
    limit: int | None,
    cursor: int,
    fetch_all: bool,
    sort_field: str | None,
    desc: bool,
) -> None:
    """List objects of ENTITY, optionally filtered."""

    async def fn(client: AsyncFieldSync, _warnings: list[str]) -> CommandOutput:
        kind = resolve_entity_type(entity)
        constraints = _build_constraints(where, contains, raw_constraints)
        if fetch_all and cursor:
            raise CLIError.usage("--cursor cannot be combined with --all.")
        repo = client.repository(kind)
        if fetch_all:
            items = await repo.all(
                constraints, page_size=limit, sort_field=sort_field, descending=desc
            )
            return CommandOutput(
                data=[_dump(item) for item in items],
                pagination={"count": len(items), "remaining": 0},
            )
        page = await repo.list(
            constraints, limit=limit, cursor=cursor, sort_field=sort_field, descending=desc
        )
        return CommandOutput(
            data=[_dump(item) for item in page.results],
            pagination={
                "cursor": page.cursor,
                "count": len(page.results),
                "remaining": page.remaining,
            },
        )

    run_command(ctx, command="list", fn=fn)
