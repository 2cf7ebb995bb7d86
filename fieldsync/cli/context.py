from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from ..clients.http import ClientConfig
from ..models.types import EntityType, entity_slug
from .errors import CLIError
from .logging import set_redaction_token
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    dotenv: bool
    env_file: Path
    base_url: str | None
    token: str | None
    timeout: float | None
    max_retries: int | None

    def client_config(self) -> ClientConfig:
        """Environment-backed config with command-line options on top."""
        overrides: dict[str, Any] = {}
        if self.base_url:
            overrides["base_url"] = self.base_url
        if self.token:
            overrides["api_token"] = self.token
        if self.timeout is not None:
            if self.timeout <= 0:
                raise CLIError.usage("--timeout must be > 0.")
            overrides["timeout"] = self.timeout
        if self.max_retries is not None:
            if self.max_retries < 0:
                raise CLIError.usage("--max-retries must be >= 0.")
            overrides["max_retries"] = self.max_retries
        try:
            config = ClientConfig.from_env(
                load_dotenv=self.dotenv,
                dotenv_path=self.env_file,
                **overrides,
            )
        except ImportError as exc:
            raise CLIError(
                "Optional .env support requires python-dotenv; install `fieldsync[dotenv]`.",
                exit_code=2,
                error_type="usage_error",
            ) from exc
        except ValueError as exc:
            raise CLIError(str(exc), exit_code=2, error_type="config_error") from exc
        set_redaction_token(config.api_token)
        return config


def resolve_entity_type(text: str) -> EntityType:
    """
    Entity kind from CLI input: backend name (`"Task Type"`), path slug
    (`tasktype`) or enum-style name (`task_type`, `task-type`).
    """
    wanted = text.strip().lower()
    compact = wanted.replace("-", "").replace("_", "").replace(" ", "")
    for kind in EntityType:
        if wanted in (kind.value.lower(), kind.name.lower()):
            return kind
        if compact in (entity_slug(kind).replace("_", ""), kind.name.lower().replace("_", "")):
            return kind
    choices = ", ".join(k.name.lower() for k in EntityType)
    raise CLIError.usage(f"Unknown entity type: {text!r}", choices=choices)


def parse_assignments(values: tuple[str, ...], *, option: str) -> list[tuple[str, str]]:
    """`KEY=VALUE` pairs; the key may contain spaces (`"Start Date=..."`)."""
    pairs: list[tuple[str, str]] = []
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise CLIError.usage(f"{option} expects KEY=VALUE, got {raw!r}")
        pairs.append((key.strip(), value))
    return pairs


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    pagination: dict[str, Any] | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms, pagination=pagination),
        error=error,
    )
