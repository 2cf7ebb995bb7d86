from __future__ import annotations

import json
from typing import Any

from ...client import AsyncFieldSync
from ..click_compat import RichCommand, click
from ..context import CLIContext, parse_assignments
from ..options import output_options
from ..runner import CommandOutput, run_command


def _coerce(value: str) -> Any:
    """JSON literals (`true`, `3`, `["a"]`) pass through typed; anything else is a string."""
    try:
        return json.loads(value)
    except ValueError:
        return value


@click.command(name="workflow", cls=RichCommand)
@click.argument("name")
@click.option("--param", "params", multiple=True, metavar="KEY=VALUE", help="Workflow parameter.")
@click.option("--no-auth", is_flag=True, help="Call the workflow without credentials.")
@output_options
@click.pass_obj
def workflow_cmd(ctx: CLIContext, name: str, *, params: tuple[str, ...], no_auth: bool) -> None:
    """Run backend workflow NAME (`POST wf/NAME`)."""

    async def fn(client: AsyncFieldSync, _warnings: list[str]) -> CommandOutput:
        pairs = parse_assignments(params, option="--param")
        body = {key: _coerce(value) for key, value in pairs}
        reply = await client.workflows.run(name, body, Any, requires_auth=not no_auth)
        return CommandOutput(data=reply)

    run_command(ctx, command="workflow", fn=fn)
