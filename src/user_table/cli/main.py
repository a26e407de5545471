#!/usr/bin/env python3
"""CLI interface for the user table.

Lists users from the users API or opens an interactive editing session on
them.
"""

import asyncio
from enum import Enum

import typer
from rich.console import Console
from rich.panel import Panel

from user_table.core.table.state import SortDirection, SortState
from user_table.core.table.sync import UserTableController
from user_table.entities.user import normalize_field
from user_table.runtime.context import get_config, set_config
from user_table.runtime.logging_setup import configure_logging
from user_table.ui.render import render_view
from user_table.ui.session import UserTableSession

console = Console()


class LogLevel(str, Enum):
    """Loguru levels accepted by ``--log-level``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


app = typer.Typer(
    name="user-table",
    help="Editable user table backed by the users REST API",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    base_url: str | None = typer.Option(
        None, "--base-url", help="Users API base URL (overrides config.yaml)"
    ),
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        case_sensitive=False,
        help="Logging level (overrides config.yaml)",
    ),
) -> None:
    """Configure the API endpoint and logging for every command."""
    if base_url:
        config = get_config().model_copy(deep=True)
        config.api.base_url = base_url.rstrip("/")
        set_config(config)
    configure_logging(log_level.value if log_level else None)


def _parse_sort(sort: str | None, descending: bool) -> SortState | None:
    if sort is None:
        return None
    try:
        field_name = normalize_field(sort)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--sort") from e
    direction = SortDirection.DESC if descending else SortDirection.ASC
    return SortState(field_name, direction)


async def _list_users(sort: SortState | None) -> bool:
    async with UserTableController() as controller:
        if sort is not None:
            controller.state.sort = sort
        ok = await controller.fetch()
        console.print(render_view(controller.state))
        return ok


@app.command(name="list")
def list_users(
    sort: str | None = typer.Option(None, "--sort", help="Field to sort by"),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
) -> None:
    """
    📋 Fetch the users once and print the table.
    """
    sort_state = _parse_sort(sort, descending)
    if not asyncio.run(_list_users(sort_state)):
        raise typer.Exit(1)


@app.command(name="edit")
def edit_users() -> None:
    """
    ✏️ Open an interactive session to add, edit, sort and save users.
    """
    console.print(
        Panel.fit(
            f"[bold green]Users at {get_config().api.base_url}[/bold green]",
            border_style="green",
        )
    )
    UserTableSession(UserTableController(), console).run()


if __name__ == "__main__":
    app()
