"""Rich renderables for the user table."""

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from user_table.core.table.state import RowKey, SortDirection, TableState
from user_table.entities.user import FIELD_LABELS, USER_FIELDS

SORT_GLYPHS = {SortDirection.ASC: "↑", SortDirection.DESC: "↓"}

FILLED_STYLE = "on green"
ERROR_STYLE = "on red"
DIRTY_STYLE = "bold on yellow"


def header_label(state: TableState, field_name: str) -> str:
    """Column title with the sort glyph when it is the active sort column."""
    label = FIELD_LABELS[field_name]
    if state.sort.field == field_name and state.sort.direction is not None:
        return f"{label} {SORT_GLYPHS[state.sort.direction]}"
    return label


def cell_style(state: TableState, key: RowKey, field_name: str, value: str) -> str:
    """Highlight for one cell.

    Draft cells turn green once filled, red for an email with an error.
    Persisted cells are highlighted when edited since the last fetch.
    """
    if key.is_draft:
        if not value:
            return ""
        if field_name == "email" and state.email_error(key):
            return ERROR_STYLE
        return FILLED_STYLE
    if field_name == "email" and state.email_error(key):
        return ERROR_STYLE
    if state.is_dirty(key.value, field_name):
        return DIRTY_STYLE
    return ""


def render_table(state: TableState) -> Table:
    table = Table(show_lines=False, header_style="bold")
    table.add_column("#", style="dim", no_wrap=True)
    for field_name in USER_FIELDS:
        table.add_column(header_label(state, field_name), no_wrap=True)

    for key, user in state.rows():
        cells: list[RenderableType] = [Text(key.label)]
        for field_name in USER_FIELDS:
            value = getattr(user, field_name)
            cells.append(Text(value, style=cell_style(state, key, field_name, value)))
        table.add_row(*cells)

    return table


def render_toolbar(state: TableState) -> Text:
    toolbar = Text()
    toolbar.append("[+] add  ")
    if state.has_errors:
        toolbar.append("[save disabled]", style="dim strike")
    else:
        toolbar.append("[save]", style="bold")
    toolbar.append("  [undo]")
    return toolbar


def render_email_errors(state: TableState) -> Text | None:
    errors = [(key, message) for key, message in state.email_errors.items() if message]
    if not errors:
        return None
    text = Text()
    for key, message in errors:
        text.append(f"{key.label}: ", style="bold")
        text.append(f"{message}\n", style="white on red")
    text.rstrip()
    return text


def render_error_alert(message: str) -> Panel:
    body = Text()
    body.append("Error! ", style="bold")
    body.append(message)
    return Panel(body, border_style="red", style="red")


def render_view(state: TableState) -> Group:
    """Alert, toolbar, table and inline email errors stacked top to bottom."""
    parts: list[RenderableType] = []
    if state.error_message:
        parts.append(render_error_alert(state.error_message))
    parts.append(render_toolbar(state))
    parts.append(render_table(state))
    email_errors = render_email_errors(state)
    if email_errors is not None:
        parts.append(email_errors)
    return Group(*parts)
