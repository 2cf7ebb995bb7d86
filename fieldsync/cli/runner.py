from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..client import AsyncFieldSync
from .click_compat import click
from .context import CLIContext, build_result
from .errors import error_details, exit_code_for_exception
from .render import RenderSettings, render_result
from .results import ErrorInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None
    warnings: list[str] | None = None
    pagination: dict[str, Any] | None = None
    exit_code: int = 0


CommandFn = Callable[[AsyncFieldSync, list[str]], Awaitable[CommandOutput]]
LocalCommandFn = Callable[[list[str]], CommandOutput]


def _settings(ctx: CLIContext) -> RenderSettings:
    return RenderSettings(output=ctx.output, quiet=ctx.quiet, verbosity=ctx.verbosity)


async def _with_client(ctx: CLIContext, fn: CommandFn, warnings: list[str]) -> CommandOutput:
    async with AsyncFieldSync(config=ctx.client_config()) as client:
        return await fn(client, warnings)


def _finish(
    ctx: CLIContext,
    *,
    command: str,
    started: float,
    warnings: list[str],
    out: CommandOutput | None = None,
    exc: Exception | None = None,
) -> None:
    if exc is None:
        assert out is not None
        result = build_result(
            ok=True,
            command=command,
            started_at=started,
            data=out.data,
            warnings=out.warnings or warnings,
            pagination=out.pagination,
        )
        render_result(result, settings=_settings(ctx))
        raise click.exceptions.Exit(out.exit_code)

    error_type, message, details = error_details(exc)
    logger.debug("Command %s failed", command, exc_info=exc)
    result = build_result(
        ok=False,
        command=command,
        started_at=started,
        data=None,
        warnings=warnings,
        error=ErrorInfo(type=error_type, message=message, details=details),
    )
    render_result(result, settings=_settings(ctx))
    raise click.exceptions.Exit(exit_code_for_exception(exc)) from exc


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    """Run an async command against a fresh client and render its result."""
    started = time.time()
    warnings: list[str] = []
    try:
        out = asyncio.run(_with_client(ctx, fn, warnings))
    except Exception as exc:
        _finish(ctx, command=command, started=started, warnings=warnings, exc=exc)
    else:
        _finish(ctx, command=command, started=started, warnings=warnings, out=out)


def run_local_command(ctx: CLIContext, *, command: str, fn: LocalCommandFn) -> None:
    """Run a command that makes no network calls."""
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(warnings)
    except Exception as exc:
        _finish(ctx, command=command, started=started, warnings=warnings, exc=exc)
    else:
        _finish(ctx, command=command, started=started, warnings=warnings, out=out)


__all__ = ["CommandOutput", "run_command", "run_local_command"]
