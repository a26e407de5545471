"""Interactive editing session for the user table.

Each line typed at the prompt maps onto one controller operation, the same
actions the toolbar, header clicks and cell inputs trigger in a graphical
table.
"""

from __future__ import annotations

import asyncio
import shlex
from dataclasses import dataclass, field

from loguru import logger
from rich.console import Console

from user_table.core.table.state import RowKey
from user_table.core.table.sync import SaveBlockedError, UserTableController
from user_table.entities.user import normalize_field
from user_table.ui.render import render_view

HELP_TEXT = """\
[bold]Commands[/bold]
  add                          append an empty draft row
  set <row> <field> <value>    edit a cell (row: new-<n> or a user id)
  sort <field>                 sort by field, again to reverse
  save                         create drafts and update edited rows
  undo                         not supported
  refresh                      re-fetch users, dropping local edits
  help                         show this help
  quit                         leave the session"""

COMMANDS = ("add", "set", "sort", "save", "undo", "refresh", "help", "quit")


@dataclass(frozen=True)
class Command:
    name: str
    args: list[str] = field(default_factory=list)


def parse_command(line: str) -> Command | None:
    """Parse one prompt line; blank lines give ``None``.

    Raises:
        ValueError: On unknown commands, bad arguments or unbalanced quotes.
    """
    tokens = shlex.split(line)
    if not tokens:
        return None

    name, args = tokens[0].lower(), tokens[1:]
    if name == "exit":
        name = "quit"
    if name not in COMMANDS:
        raise ValueError(f"Unknown command '{tokens[0]}', type 'help'")

    if name == "set":
        if len(args) < 2:
            raise ValueError("Usage: set <row> <field> <value>")
        RowKey.parse(args[0])
        normalize_field(args[1])
        # the value may be empty or contain spaces
        args = [args[0], args[1], " ".join(args[2:])]
    elif name == "sort":
        if len(args) != 1:
            raise ValueError("Usage: sort <field>")
        normalize_field(args[0])
    elif args:
        raise ValueError(f"'{name}' takes no arguments")

    return Command(name, args)


class UserTableSession:
    """Prompt loop rendering the table after every command."""

    def __init__(self, controller: UserTableController, console: Console | None = None):
        self.controller = controller
        self.console = console or Console()

    def render(self) -> None:
        self.console.print(render_view(self.controller.state))

    async def handle(self, line: str) -> bool:
        """Run one command line. Returns ``False`` once the user quits."""
        try:
            command = parse_command(line)
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")
            return True

        if command is None:
            return True

        logger.debug(f"Session command: {command.name} {command.args}")
        controller = self.controller

        if command.name == "quit":
            return False
        if command.name == "help":
            self.console.print(HELP_TEXT)
        elif command.name == "add":
            key = controller.add_row()
            self.console.print(f"[green]Added draft row {key.label}[/green]")
        elif command.name == "set":
            row, field_name, value = command.args
            try:
                await controller.edit_cell(RowKey.parse(row), field_name, value)
            except KeyError as e:
                self.console.print(f"[red]{e.args[0]}[/red]")
        elif command.name == "sort":
            await controller.sort_by(command.args[0])
        elif command.name == "save":
            try:
                if await controller.save():
                    self.console.print("[green]Saved[/green]")
            except SaveBlockedError as e:
                self.console.print(f"[yellow]{e}[/yellow]")
        elif command.name == "undo":
            controller.undo()
            self.console.print("[yellow]Undo is not supported[/yellow]")
        elif command.name == "refresh":
            await controller.fetch()

        self.render()
        return True

    def run(self) -> None:
        """Mount the table and process commands until ``quit``, EOF or Ctrl-C.

        The prompt is read on the main thread so Ctrl-C interrupts it
        directly. One event loop runs every controller call and closes the
        API client when the session ends.
        """
        with asyncio.Runner() as runner:
            try:
                self._loop(runner)
            except KeyboardInterrupt:
                self.console.print("\n[yellow]Session interrupted[/yellow]")
            finally:
                runner.run(self.controller.aclose())

    def _loop(self, runner: asyncio.Runner) -> None:
        runner.run(self.controller.mount())
        self.render()
        self.console.print("[dim]Type 'help' for commands[/dim]")

        while True:
            try:
                line = self.console.input("[bold cyan]> [/bold cyan]")
            except EOFError:
                self.console.print()
                return
            if not runner.run(self.handle(line)):
                return
