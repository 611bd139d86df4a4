"""Dashboard event loop.

All input (key presses, probe results, installer completion, spinner ticks)
goes through one asyncio.Queue and is handed to the controller one message
at a time. The app executes the commands the controller returns and
redraws after every message.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.live import Live

from ssh_ogm.errors import ConfigError, DependencyInstallError
from ssh_ogm.models import ServerEntry
from ssh_ogm.protocols import Dependency, KeySource, TemplateWriter
from ssh_ogm.services.orchestrator import ProbeOrchestrator
from ssh_ogm.tui.controller import DashboardController
from ssh_ogm.tui.render import render_dashboard
from ssh_ogm.tui.state import (
    AppendTemplate,
    Command,
    DispatchProbes,
    InstallFinished,
    KeyPressed,
    LaunchEditor,
    Message,
    Notice,
    Outcome,
    RunInstall,
    Tick,
)

logger = logging.getLogger(__name__)


@dataclass
class DashboardResult:
    """What the dashboard decided once its loop ended."""

    outcome: Outcome | None
    selected: ServerEntry | None = None
    message: str = ""
    editor: LaunchEditor | None = None


class DashboardApp:
    """Runs the controller against a live terminal."""

    def __init__(
        self,
        controller: DashboardController,
        orchestrator: ProbeOrchestrator,
        templates: TemplateWriter,
        dependency: Dependency,
        key_source: KeySource,
        console: Console | None = None,
        tick_interval: float = 0.1,
        screen: bool = True,
    ) -> None:
        self.controller = controller
        self.orchestrator = orchestrator
        self.templates = templates
        self.dependency = dependency
        self.key_source = key_source
        self.console = console or Console()
        self.tick_interval = tick_interval
        self.screen = screen
        self._queue: asyncio.Queue[Message] = asyncio.Queue()
        self._background: set[asyncio.Task[Any]] = set()
        self._editor: LaunchEditor | None = None

    def post(self, msg: Message) -> None:
        """Queue a message for the controller."""
        self._queue.put_nowait(msg)

    async def run(self) -> DashboardResult:
        """Run until the controller reaches an outcome.

        The editor, if requested, is not opened here: the caller opens it
        after the terminal has been released.
        """
        state = self.controller.state
        self.key_source.start(lambda key: self.post(KeyPressed(key)))
        try:
            with Live(
                self._render(),
                console=self.console,
                auto_refresh=False,
                screen=self.screen,
                transient=True,
            ) as live:
                self._execute_all(self.controller.init())
                while not state.finished:
                    msg = await self._queue.get()
                    self._execute_all(self.controller.update(msg))
                    live.update(self._render(), refresh=True)
        finally:
            self.key_source.stop()
            await self._shutdown()

        logger.info("Dashboard finished: %s", state.outcome.value if state.outcome else None)
        return DashboardResult(
            outcome=state.outcome,
            selected=state.selected,
            message=state.message,
            editor=self._editor,
        )

    def _render(self):
        return render_dashboard(
            self.controller.state, self.controller.servers, self.controller.proxies
        )

    def _execute_all(self, commands: list[Command]) -> None:
        for command in commands:
            self._execute(command)

    def _execute(self, command: Command) -> None:
        if isinstance(command, DispatchProbes):
            self.orchestrator.dispatch(command.entries, self.post, command.generation)
        elif isinstance(command, AppendTemplate):
            try:
                self.templates.append_template(command.collection, command.alias)
            except ConfigError as e:
                logger.error("Adding template failed: %s", e)
                self.post(Notice(f"Failed to add template: {e}"))
        elif isinstance(command, RunInstall):
            self._spawn(self._install())
        elif isinstance(command, LaunchEditor):
            self._editor = command
        else:
            logger.warning("Unhandled command: %r", command)

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _install(self) -> None:
        ticker = asyncio.create_task(self._tick())
        error = None
        try:
            await asyncio.to_thread(self.dependency.install)
        except DependencyInstallError as e:
            error = str(e)
        finally:
            ticker.cancel()
        self.post(InstallFinished(error=error))

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.post(Tick())

    async def _shutdown(self) -> None:
        await self.orchestrator.cancel_all()
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
