"""
click with rich-click styling when it is installed.

Commands import `click`, `RichGroup` and `RichCommand` from here so the CLI
still works (plain help output) without rich-click. `configure_help()` groups
the fieldsync options and commands in rich help panels.
"""

from __future__ import annotations

from typing import Any, cast

import click

rich_click: Any
try:
    import rich_click as _rich_click  # pyright: ignore[reportMissingImports]
except ModuleNotFoundError:  # pragma: no cover
    rich_click = None
else:
    rich_click = _rich_click

HAS_RICH_CLICK = rich_click is not None

if rich_click is not None:  # pragma: no cover
    RichGroup = cast(type[click.Group], rich_click.RichGroup)
    RichCommand = cast(type[click.Command], rich_click.RichCommand)
else:
    RichGroup = click.Group
    RichCommand = click.Command

PROG_NAME = "fieldsync"

# Help panels keyed by command path, in rich-click's OPTION_GROUPS shape.
OPTION_GROUPS: dict[str, list[dict[str, Any]]] = {
    PROG_NAME: [
        {"name": "Output", "options": ["--output", "--json", "--quiet"]},
        {
            "name": "Connection",
            "options": ["--base-url", "--token", "--timeout", "--max-retries"],
        },
        {"name": "Environment", "options": ["--dotenv", "--env-file"]},
        {"name": "Logging", "options": ["-v", "--log-file"]},
        {"name": "Other", "options": ["--version", "--help"]},
    ],
    f"{PROG_NAME} list": [
        {"name": "Filters", "options": ["--where", "--contains", "--constraints"]},
        {"name": "Paging", "options": ["--limit", "--cursor", "--all"]},
        {"name": "Sorting", "options": ["--sort-field", "--desc"]},
    ],
}

COMMAND_GROUPS: dict[str, list[dict[str, Any]]] = {
    PROG_NAME: [
        {"name": "Data", "commands": ["get", "list"]},
        {"name": "Backend", "commands": ["workflow"]},
        {"name": "Info", "commands": ["version"]},
    ],
}

FOOTER_TEXT = (
    "Credentials come from --token or FIELDSYNC_API_TOKEN. "
    "Exit codes: 2 usage, 3 auth, 4 not found, 5 transient backend failure."
)


def configure_help() -> bool:
    """
    Install the fieldsync help panels into rich-click.

    Returns:
        False when rich-click is not installed (plain click help is used).
    """
    if rich_click is None:
        return False
    settings = rich_click.rich_click
    settings.OPTION_GROUPS = {**settings.OPTION_GROUPS, **OPTION_GROUPS}
    settings.COMMAND_GROUPS = {**settings.COMMAND_GROUPS, **COMMAND_GROUPS}
    settings.FOOTER_TEXT = FOOTER_TEXT
    return True


__all__ = [
    "COMMAND_GROUPS",
    "HAS_RICH_CLICK",
    "OPTION_GROUPS",
    "RichCommand",
    "RichGroup",
    "click",
    "configure_help",
]
