"""rich renderables for the dashboard and first-run prompt."""

from collections.abc import Sequence
from pathlib import Path

from rich.console import Group, RenderableType
from rich.text import Text

from ssh_ogm.models import ProbeStatus, ProxyEntry, ServerEntry
from ssh_ogm.tui.state import DashboardState, View

ACCENT = "magenta"
HIGHLIGHT = "bold cyan"
MUTED = "grey50"

STATUS_STYLES = {
    ProbeStatus.CHECKING: "blue",
    ProbeStatus.ONLINE: "green",
    ProbeStatus.OFFLINE: "red",
}

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

EDITOR_LABELS = ("System Editor (Visual)", "Terminal Editor (Vim/Nano)")


def _title(text: str) -> Text:
    return Text(text, style=f"bold {ACCENT}")


def _choices(labels: Sequence[str], choice: int) -> list[Text]:
    lines = []
    for i, label in enumerate(labels):
        if i == choice:
            lines.append(Text(f"> {label}", style=HIGHLIGHT))
        else:
            lines.append(Text(f"  {label}"))
    return lines


def _server_row(entry: ServerEntry) -> Text:
    row = Text(f"{entry.alias} ({entry.target})")
    if entry.proxy:
        row.append(f" via {entry.proxy}", style=MUTED)
    return row


def _proxy_row(entry: ProxyEntry) -> Text:
    return Text(f"{entry.alias} ({entry.address} {entry.proxy_type.value})")


def render_editor_prompt(state: DashboardState) -> RenderableType:
    parts: list[RenderableType] = [_title("Edit Configuration"), Text()]
    if state.message:
        parts += [Text(state.message), Text()]
    parts += _choices(EDITOR_LABELS, state.prompt.choice)
    parts += [Text(), Text("(Enter to select, Esc to cancel)", style=MUTED)]
    return Group(*parts)


def render_install_prompt(state: DashboardState) -> RenderableType:
    parts: list[RenderableType] = [_title("Dependency Missing"), Text()]
    if state.prompt.installing:
        frame = SPINNER_FRAMES[state.prompt.spinner_frame % len(SPINNER_FRAMES)]
        parts.append(Text(f"{frame} Installing Netcat...", style=ACCENT))
    else:
        parts += [
            Text("Netcat is required to support Proxy tunneling."),
            Text("The system could not find 'nc', 'ncat', or 'netcat' in your PATH."),
            Text(),
            Text("Do you want to attempt automatic installation? (y/n)"),
            Text("(Windows: Winget/Scoop, Mac: Brew, Linux: Apt/Dnf/Pacman)", style=MUTED),
        ]
    if state.message:
        parts += [Text(), Text(state.message, style="red")]
    return Group(*parts)


def render_dashboard(
    state: DashboardState,
    servers: Sequence[ServerEntry],
    proxies: Sequence[ProxyEntry],
) -> RenderableType:
    """Render the current dashboard view."""
    if state.view is View.INSTALL_PROMPT:
        return render_install_prompt(state)
    if state.view is View.EDITOR_PROMPT:
        return render_editor_prompt(state)

    tabs = Text()
    for label, view in (("Servers", View.SERVERS), ("Proxies", View.PROXIES)):
        style = f"bold underline {ACCENT}" if state.view is view else MUTED
        tabs.append(f" {label} ", style=style)

    parts: list[RenderableType] = [_title("SSH OGM Dashboard"), Text(), tabs, Text()]

    rows: list[Text]
    if state.view is View.PROXIES:
        statuses = state.proxy_status
        rows = [_proxy_row(p) for p in proxies]
        aliases = [p.alias for p in proxies]
    else:
        statuses = state.server_status
        rows = [_server_row(s) for s in servers]
        aliases = [s.alias for s in servers]

    if not rows:
        parts.append(Text("  No items found. Press 'a' to add a template."))

    for i, (alias, row) in enumerate(zip(aliases, rows)):
        status = statuses.get(alias, ProbeStatus.CHECKING)
        selected = i == state.cursor
        if selected:
            row.stylize(HIGHLIGHT)
        line = Text("> " if selected else "  ", style=HIGHLIGHT if selected else "")
        line.append("●", style=STATUS_STYLES[status])
        line.append(" ")
        line.append_text(row)
        parts.append(line)

    parts += [
        Text(),
        Text("(q: quit, r: reload, a: add, e: edit, tab: switch view)", style=MUTED),
    ]
    if state.message:
        parts.append(Text(state.message, style=ACCENT))
    return Group(*parts)


def render_first_run(config_path: Path, choice: int) -> RenderableType:
    """Render the first-run editor choice screen."""
    return Group(
        _title("Welcome to SSH OGM!"),
        Text(),
        Text(f"Configuration created at: {config_path}"),
        Text(),
        Text("How would you like to edit the configuration?"),
        Text(),
        *_choices([f"Open in {label}" for label in EDITOR_LABELS], choice),
        Text(),
        Text("(Use arrow keys to navigate, Enter to select, q to skip)", style=MUTED),
    )
