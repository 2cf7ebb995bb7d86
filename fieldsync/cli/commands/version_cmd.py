from __future__ import annotations

import platform

from ... import __version__
from ..click_compat import RichCommand, click
from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_local_command


@click.command(name="version", cls=RichCommand)
@output_options
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show the fieldsync version."""

    def fn(_warnings: list[str]) -> CommandOutput:
        data = {
            "version": __version__,
            "pythonVersion": platform.python_version(),
            "platform": platform.platform(),
        }
        return CommandOutput(data=data)

    run_local_command(ctx, command="version", fn=fn)
