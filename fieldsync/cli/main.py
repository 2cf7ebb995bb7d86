from __future__ import annotations

from pathlib import Path

import fieldsync

from .click_compat import RichGroup, click, configure_help
from .context import CLIContext
from .logging import configure_logging, restore_logging

configure_help()


@click.group(
    name="fieldsync",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=RichGroup,
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--dotenv/--no-dotenv", default=False, help="Opt-in .env loading.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=".env",
)
@click.option("--base-url", type=str, default=None, help="Override the API base URL.")
@click.option(
    "--token",
    type=str,
    default=None,
    help="API token (defaults to FIELDSYNC_API_TOKEN).",
)
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option(
    "--max-retries",
    type=int,
    default=None,
    help="Extra attempts for transient failures (default 2).",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None)
@click.version_option(version=fieldsync.__version__, prog_name="fieldsync")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    dotenv: bool,
    env_file: str,
    base_url: str | None,
    token: str | None,
    timeout: float | None,
    max_retries: int | None,
    log_file: str | None,
) -> None:
    if click_ctx.invoked_subcommand is None:
        # No args: show help; no network calls.
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        dotenv=dotenv,
        env_file=Path(env_file),
        base_url=base_url,
        token=token,
        timeout=timeout,
        max_retries=max_retries,
    )

    previous_logging = configure_logging(
        verbosity=verbose,
        log_file=Path(log_file) if log_file else None,
        token_for_redaction=token,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.entity_cmds import get_cmd as _get_cmd  # noqa: E402
from .commands.entity_cmds import list_cmd as _list_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402
from .commands.workflow_cmd import workflow_cmd as _workflow_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_get_cmd)
cli.add_command(_list_cmd)
cli.add_command(_workflow_cmd)
