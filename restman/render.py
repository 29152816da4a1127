"""Rich renderables for the RestMan screen and its modals."""

from typing import Callable, Dict, List, Optional, Sequence

from rich.box import DOUBLE
from rich.console import Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .editor import PAGE_SIZE
from .environments import get_active_environment
from .modals import (
    EnvironmentEditorModal,
    EnvironmentSelectorModal,
    EnvironmentsManagerModal,
    ExitConfirmModal,
    HistoryViewerModal,
    MethodSelectorModal,
    Modal,
    ResponseViewerModal,
    SavedRequestsViewerModal,
    SaveRequestModal,
)
from .parsing import response_lines
from .state import FIELD_ORDER, REQUEST_TABS, RESPONSE_TABS, AppState, FocusField, ModalKind
from .variables import contains_variable, substitute

PRIMARY = "#CC8844"
BORDER_FOCUSED = "#CC8844"
BORDER_EDIT = "#BB7733"
BORDER_DEFAULT = "#555555"
TEXT_MUTED = "#999999"
TEXT_PLACEHOLDER = "#666666"

METHOD_COLORS = {
    "GET": "blue",
    "POST": "green",
    "PUT": "yellow",
    "PATCH": "cyan",
    "DELETE": "red",
}


def border_color(focused: bool, editing: bool) -> str:
    if editing:
        return BORDER_EDIT
    if focused:
        return BORDER_FOCUSED
    return BORDER_DEFAULT


def status_color(status: Optional[int]) -> str:
    if not status:
        return "grey50"
    if 200 <= status < 300:
        return "green"
    if status < 400:
        return "yellow"
    return "red"


def _field(state: AppState, field: FocusField, title: str, body: RenderableType) -> Panel:
    focused = state.focused_field is field
    editing = state.edit_mode is field
    suffix = " [edit]" if editing else ""
    return Panel(
        body,
        title=escape(f"[{FIELD_ORDER.index(field)}] {title}{suffix}"),
        title_align="left",
        border_style=border_color(focused, editing),
    )


def render_title() -> Text:
    return Text.assemble(("RestMan ", f"bold {PRIMARY}"), (f"v{__version__}", "dim italic"))


def render_environment(state: AppState) -> Panel:
    env = get_active_environment(state.environments)
    if env is None:
        body = Text("No environment", style=TEXT_PLACEHOLDER)
    else:
        count = len(env.variables)
        body = Text.assemble((env.name, "bold"), (f"  {count} variable{'s' if count != 1 else ''}", TEXT_MUTED))
    return _field(state, FocusField.ENVIRONMENT, "Environment", body)


def render_method(state: AppState) -> Panel:
    body = Text(state.method, style=f"bold {METHOD_COLORS.get(state.method, 'white')}")
    return _field(state, FocusField.METHOD, "Method", body)


def _editable(text: str, editing: bool, placeholder: str) -> Text:
    if editing:
        return Text(text + "▏")
    if not text:
        return Text(placeholder, style=TEXT_PLACEHOLDER)
    return Text(text, style=TEXT_MUTED)


def render_url(state: AppState) -> Panel:
    editing = state.edit_mode is FocusField.URL
    body = _editable(state.url, editing, "https://api.example.com/resource")
    env = get_active_environment(state.environments)
    if env is not None and contains_variable(state.url):
        body.append(f"\n→ {substitute(state.url, env.variables)}", style="dim")
    return _field(state, FocusField.URL, "URL", body)


def _tab_bar(tabs: Sequence[str], active: str, focused: bool) -> Text:
    bar = Text()
    for index, tab in enumerate(tabs):
        if index:
            bar.append(" │ ", style="dim")
        if tab == active:
            bar.append(tab.capitalize(), style="bold reverse cyan" if focused else "bold cyan")
        else:
            bar.append(tab.capitalize(), style="grey50")
    return bar


def render_request(state: AppState) -> Panel:
    focused = state.focused_field is FocusField.REQUEST
    editing = state.edit_mode is FocusField.REQUEST
    placeholders = {
        "headers": "Content-Type: application/json",
        "params": "key=value",
        "body": '{"key": "value"}',
    }
    tab = state.request_tab.value
    body = Group(
        _tab_bar([t.value for t in REQUEST_TABS], tab, focused),
        Text(""),
        _editable(state.request_text(), editing, placeholders[tab]),
    )
    return _field(state, FocusField.REQUEST, "Request", body)


def render_response(state: AppState, visible: int = PAGE_SIZE) -> Panel:
    focused = state.focused_field is FocusField.RESPONSE
    response = state.response
    parts: List[RenderableType] = []

    if state.loading:
        parts.append(Text("Sending request...", style="yellow"))
    if response is None:
        parts.append(Text("No response yet. Press Enter to send the request.", style=TEXT_PLACEHOLDER))
    else:
        parts.append(Text.assemble(
            (f"{response.status} {response.status_text}", f"bold {status_color(response.status)}"),
            (f"  {response.time}ms", TEXT_MUTED),
        ))
        parts.append(_tab_bar([t.value for t in RESPONSE_TABS], state.response_tab.value, focused))
        lines = response_lines(response, state.response_tab.value)
        window = lines[state.response_scroll:state.response_scroll + visible]
        parts.append(Text("\n".join(window)))
        if len(lines) > visible:
            parts.append(Text(
                f"Lines {state.response_scroll + 1}-{min(state.response_scroll + visible, len(lines))} of {len(lines)}",
                style="dim",
            ))
    return _field(state, FocusField.RESPONSE, "Response", Group(*parts))


def render_instructions(state: AppState) -> Text:
    if state.edit_mode is not None:
        return Text("ESC: Exit edit mode", style="dim")
    return Text(
        "↑↓/Tab: Navigate | 0-4: Jump | e: Edit | Enter: Send | s: Save | l: Saved | "
        "h: History | v: Environments | /: Help | q: Quit",
        style="dim",
    )


def _modal(title: str, body: RenderableType, footer: str, color: str = "cyan", width: int = 70) -> Panel:
    return Panel(
        Group(body, Text(""), Text(footer, style="dim italic", justify="center")),
        title=f"[bold {color}]{escape(title)}[/]",
        border_style=color,
        width=width,
        box=DOUBLE,
    )


def _selectable(items: Sequence[RenderableType], selected: int) -> Group:
    rows = []
    for index, item in enumerate(items):
        row = Text("▸ " if index == selected else "  ")
        row.append_text(item if isinstance(item, Text) else Text(str(item)))
        if index == selected:
            row.stylize("bold")
        rows.append(row)
    return Group(*rows)


def _render_exit(modal: ExitConfirmModal) -> Panel:
    yes = Text(" Yes ", style="reverse yellow" if modal.confirm_selected else "")
    no = Text(" No ", style="" if modal.confirm_selected else "reverse yellow")
    body = Group(Text("Are you sure you want to exit?"), Text(""), Text.assemble(yes, "   ", no, justify="center"))
    return _modal("Exit RestMan?", body, "←→: Choose | Enter: Confirm | y/n | ESC: Cancel", "yellow", 50)


HELP_TEXT = """[yellow]Navigation[/yellow]
  [cyan]↑/↓[/cyan]            Previous / next section
  [cyan]Tab/Shift+Tab[/cyan]  Next / previous tab or section
  [cyan]←/→[/cyan]            Switch request/response tab
  [cyan]0-4[/cyan]            Environment, Method, URL, Request, Response

[yellow]Actions[/yellow]
  [cyan]e[/cyan]              Edit focused section / pick method or environment
  [cyan]Enter[/cyan]          Send request
  [cyan]Space[/cyan]          Full-screen response body
  [cyan]s[/cyan]              Save request
  [cyan]l[/cyan]              Saved requests
  [cyan]h[/cyan]              History
  [cyan]v[/cyan]              Environments

[yellow]Other[/yellow]
  [cyan]ESC[/cyan]            Exit edit mode / exit confirmation
  [cyan]q[/cyan]              Exit confirmation
  [cyan]/[/cyan]              This help
  [cyan]Ctrl+C[/cyan]         Quit without confirmation (not while editing)"""


def _render_help(modal: Modal) -> Panel:
    return _modal("Keyboard Shortcuts", Text.from_markup(HELP_TEXT), "Press / or ESC to close")


def _render_method(modal: MethodSelectorModal) -> Panel:
    items = [Text(m, style=METHOD_COLORS.get(m, "white")) for m in modal.methods]
    return _modal("Select HTTP Method", _selectable(items, modal.selected),
                  "↑↓: Navigate | Enter: Select | ESC: Cancel", width=40)


def _environment_rows(modal, show_counts: bool) -> List[Text]:
    active = modal.state.environments.active_environment_id
    rows = []
    for env in modal.environments:
        row = Text(env.name)
        if env.id == active:
            row.append(" (active)", style="green")
        if show_counts:
            count = len(env.variables)
            row.append(f"  {count} variable{'s' if count != 1 else ''}", style=TEXT_MUTED)
        rows.append(row)
    return rows


def _render_environment_selector(modal: EnvironmentSelectorModal) -> Panel:
    if not modal.environments:
        body: RenderableType = Text("No environments. Press v to manage environments.", style=TEXT_PLACEHOLDER)
    else:
        body = _selectable(_environment_rows(modal, False), modal.selected)
    return _modal("Select Environment", body, "↑↓: Navigate | Enter: Activate | ESC: Cancel", width=50)


def _render_environments_manager(modal: EnvironmentsManagerModal) -> Panel:
    if not modal.environments:
        body: RenderableType = Text.from_markup(
            "No environments yet. Press [cyan]n[/cyan] to create one.\n\n"
            "URL: {{BASE_URL}}/api/users\nHeaders: Authorization: Bearer {{API_KEY}}"
        )
    else:
        body = Group(
            _selectable(_environment_rows(modal, True), modal.selected),
            Text(""),
            Text("Use variables: {{VARIABLE_NAME}}", style="dim"),
        )
    return _modal("Environments", body,
                  "↑↓: Navigate | Enter: Activate | n: New | e: Edit | Shift+D: Delete | ESC: Close")


def _render_environment_editor(modal: EnvironmentEditorModal) -> Panel:
    def section(label: str, text: str, active: bool) -> Panel:
        return Panel(Text(text + ("▏" if active else "")), title=label, title_align="left",
                     border_style=BORDER_FOCUSED if active else BORDER_DEFAULT)

    body = Group(
        section("Name", modal.name, modal.field == modal.NAME),
        section("Variables (KEY=value per line)", modal.variables_text, modal.field == modal.VARIABLES),
    )
    title = "New Environment" if modal.environment_id is None else "Edit Environment"
    return _modal(title, body, "Tab: Switch field | Ctrl+S: Save | ESC: Cancel")


def _render_save(modal: SaveRequestModal) -> Panel:
    body = Group(Text("Request name:"), Panel(Text(modal.name + "▏"), border_style=BORDER_FOCUSED))
    return _modal("Save Request", body, "Enter: Save | ESC: Cancel", width=60)


def _render_history(modal: HistoryViewerModal) -> Panel:
    entries = modal.entries
    if not entries:
        return _modal("Request History", Text("No requests yet.", style=TEXT_PLACEHOLDER), "ESC: Close")
    table = Table.grid(padding=(0, 1))
    window = entries[modal.offset:modal.offset + PAGE_SIZE]
    for index, entry in enumerate(window, start=modal.offset):
        marker = "▸" if index == modal.selected else " "
        status = str(entry.status) if entry.status is not None else "..."
        table.add_row(
            marker,
            Text(entry.timestamp.astimezone().strftime("%H:%M:%S"), style="dim"),
            Text(entry.request.method, style=METHOD_COLORS.get(entry.request.method, "white")),
            Text(entry.request.url, overflow="ellipsis", no_wrap=True),
            Text(status, style=status_color(entry.status)),
        )
    return _modal("Request History", table,
                  "↑↓: Navigate | PgUp/PgDn | g/G: Top/Bottom | Enter: Load | ESC: Close", width=100)


def _render_saved(modal: SavedRequestsViewerModal) -> Panel:
    entries = modal.entries
    if not entries:
        return _modal("Saved Requests", Text("No saved requests. Press s to save one.", style=TEXT_PLACEHOLDER),
                      "ESC: Close")
    window = entries[modal.offset:modal.offset + PAGE_SIZE]
    rows = [
        Text.assemble((entry.name, "bold"), "  ",
                      (entry.request.method, METHOD_COLORS.get(entry.request.method, "white")), " ",
                      (entry.request.url, TEXT_MUTED))
        for entry in window
    ]
    parts: List[RenderableType] = [_selectable(rows, modal.selected - modal.offset)]
    if len(entries) > PAGE_SIZE:
        parts.append(Text(f"{modal.selected + 1} of {len(entries)}", style="dim"))
    if modal.confirm_delete:
        parts.append(Text(""))
        parts.append(Text(f'Delete "{modal.selected_entry.name}"? (y/N)', style="bold red"))
        footer = "y: Delete | n/ESC: Cancel"
    else:
        footer = "↑↓: Navigate | PgUp/PgDn | g/G: Top/Bottom | Enter: Load | d: Delete | ESC: Close"
    return _modal("Saved Requests", Group(*parts), footer, width=100)


def _render_response_viewer(modal: ResponseViewerModal) -> Panel:
    lines = modal.lines
    window = lines[modal.offset:modal.offset + PAGE_SIZE]
    parts: List[RenderableType] = []
    if modal.offset > 0:
        parts.append(Text("▲ More above", style="yellow"))
    parts.append(Text("\n".join(window)))
    if modal.offset + PAGE_SIZE < len(lines):
        parts.append(Text("▼ More below", style="yellow"))
    footer = f"Lines {modal.offset + 1}-{min(modal.offset + PAGE_SIZE, len(lines))} of {len(lines)} | " \
             "↑↓/PgUp/PgDn: Scroll | g/G | Space/ESC: Close"
    return _modal("Response Body", Group(*parts), footer, width=120)


RENDERERS: Dict[ModalKind, Callable[..., Panel]] = {
    ModalKind.EXIT_CONFIRM: _render_exit,
    ModalKind.HELP: _render_help,
    ModalKind.METHOD_SELECTOR: _render_method,
    ModalKind.ENVIRONMENT_SELECTOR: _render_environment_selector,
    ModalKind.ENVIRONMENTS_MANAGER: _render_environments_manager,
    ModalKind.ENVIRONMENT_EDITOR: _render_environment_editor,
    ModalKind.SAVE_REQUEST: _render_save,
    ModalKind.HISTORY_VIEWER: _render_history,
    ModalKind.SAVED_REQUESTS_VIEWER: _render_saved,
    ModalKind.RESPONSE_VIEWER: _render_response_viewer,
}


def render_modal(modal: Optional[Modal]) -> RenderableType:
    if modal is None:
        return Text("")
    return RENDERERS[modal.kind](modal)
