"""Dashboard state, messages and commands.

Messages flow into the controller through a single FIFO queue. Commands
flow out of it and are executed by the app; the controller never does I/O.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ssh_ogm.models import (
    Collection,
    Entry,
    ProbeResult,
    ProbeStatus,
    ServerEntry,
)
from ssh_ogm.services.editor import EditorMode


class View(Enum):
    """Screen shown by the dashboard."""

    SERVERS = "servers"
    PROXIES = "proxies"
    EDITOR_PROMPT = "editor_prompt"
    INSTALL_PROMPT = "install_prompt"


class Outcome(Enum):
    """How the dashboard run ended."""

    SELECTED = "selected"
    QUIT = "quit"


EDITOR_CHOICES = (EditorMode.SYSTEM, EditorMode.TERMINAL)


@dataclass
class PromptState:
    """Data needed by the editor and install prompts."""

    target: Path | None = None
    choice: int = 0
    installing: bool = False
    spinner_frame: int = 0

    @property
    def editor_mode(self) -> EditorMode:
        return EDITOR_CHOICES[self.choice]


@dataclass
class DashboardState:
    """Everything the dashboard renders. Mutated only by the controller."""

    server_status: dict[str, ProbeStatus]
    proxy_status: dict[str, ProbeStatus]
    view: View = View.SERVERS
    cursor: int = 0
    selected: ServerEntry | None = None
    message: str = ""
    prompt: PromptState = field(default_factory=PromptState)
    outcome: Outcome | None = None

    @property
    def finished(self) -> bool:
        """True once the run loop should stop."""
        return self.outcome is not None


# Messages


@dataclass(frozen=True)
class KeyPressed:
    """A decoded key from the terminal."""

    key: str


@dataclass(frozen=True)
class InstallFinished:
    """The dependency installer returned."""

    error: str | None = None


@dataclass(frozen=True)
class Tick:
    """Spinner animation tick."""


@dataclass(frozen=True)
class Notice:
    """Text to show in the message line."""

    text: str


Message = KeyPressed | ProbeResult | InstallFinished | Tick | Notice


# Commands


@dataclass(frozen=True)
class DispatchProbes:
    """Probe every entry of a collection."""

    collection: Collection
    entries: tuple[Entry, ...]
    generation: int


@dataclass(frozen=True)
class AppendTemplate:
    """Append a placeholder block to a collection's config file."""

    collection: Collection
    alias: str


@dataclass(frozen=True)
class RunInstall:
    """Install the missing dependency in the background."""


@dataclass(frozen=True)
class LaunchEditor:
    """Open a config file once the dashboard has released the terminal."""

    path: Path
    mode: EditorMode


Command = DispatchProbes | AppendTemplate | RunInstall | LaunchEditor
