"""Dashboard controller.

A single-writer reducer: ``update`` is the only code that mutates
DashboardState. It handles one message at a time and returns the commands
the app should run (probe dispatch, template append, installer, editor).

Every probe dispatch carries a generation number per collection. Reload
bumps the generation, so results still in flight from an earlier dispatch
are dropped instead of overwriting the fresh CHECKING state.
"""

import logging
from collections.abc import Sequence

from ssh_ogm.models import (
    Collection,
    Entry,
    ProbeResult,
    ProbeStatus,
    ProxyEntry,
    ServerEntry,
)
from ssh_ogm.protocols import ConfigPaths, Dependency
from ssh_ogm.tui.state import (
    EDITOR_CHOICES,
    AppendTemplate,
    Command,
    DashboardState,
    DispatchProbes,
    InstallFinished,
    KeyPressed,
    LaunchEditor,
    Message,
    Notice,
    Outcome,
    PromptState,
    RunInstall,
    Tick,
    View,
)

logger = logging.getLogger(__name__)

UP_KEYS = frozenset({"up", "k"})
DOWN_KEYS = frozenset({"down", "j"})
TOGGLE_KEYS = frozenset({"tab", "left", "right", "h", "l"})
CANCEL_KEYS = frozenset({"esc", "q"})
FORCE_QUIT_KEY = "ctrl+c"

NEW_SERVER_ALIAS = "new_server"
NEW_PROXY_ALIAS = "new_proxy"

RESTART_MESSAGE = "Configuration edited. Please restart to apply changes."


class DashboardController:
    """State machine behind the dashboard."""

    def __init__(
        self,
        servers: Sequence[ServerEntry],
        proxies: Sequence[ProxyEntry],
        dependency: Dependency,
        paths: ConfigPaths,
    ) -> None:
        """Initialize with every status CHECKING.

        Args:
            servers: Loaded server entries
            proxies: Loaded proxy entries
            dependency: Tool required for proxy tunnelling
            paths: Locates the config file behind each collection
        """
        self.servers = tuple(servers)
        self.proxies = tuple(proxies)
        self.dependency = dependency
        self.paths = paths
        self.state = DashboardState(
            server_status={s.alias: ProbeStatus.CHECKING for s in self.servers},
            proxy_status={p.alias: ProbeStatus.CHECKING for p in self.proxies},
        )
        self._generation = {Collection.SERVERS: 0, Collection.PROXIES: 0}

    # Helpers

    def entries(self, collection: Collection) -> tuple[Entry, ...]:
        if collection is Collection.PROXIES:
            return self.proxies
        return self.servers

    def status_map(self, collection: Collection) -> dict[str, ProbeStatus]:
        if collection is Collection.PROXIES:
            return self.state.proxy_status
        return self.state.server_status

    @property
    def active_collection(self) -> Collection:
        """Collection shown by the current list view."""
        if self.state.view is View.PROXIES:
            return Collection.PROXIES
        return Collection.SERVERS

    def _dispatch(self, collection: Collection) -> DispatchProbes:
        return DispatchProbes(
            collection=collection,
            entries=self.entries(collection),
            generation=self._generation[collection],
        )

    def _show_list(self, view: View, message: str | None = None) -> None:
        self.state.view = view
        self.state.prompt = PromptState()
        if message is not None:
            self.state.message = message
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        last = max(0, len(self.entries(self.active_collection)) - 1)
        self.state.cursor = min(max(self.state.cursor, 0), last)

    # Reducer

    def init(self) -> list[Command]:
        """Commands to run when the dashboard starts."""
        return [self._dispatch(Collection.SERVERS), self._dispatch(Collection.PROXIES)]

    def update(self, msg: Message) -> list[Command]:
        """Apply one message to the state.

        Args:
            msg: Next message from the queue

        Returns:
            Commands for the app to execute
        """
        if self.state.finished:
            logger.debug("Ignoring %s after dashboard finished", type(msg).__name__)
            return []

        if isinstance(msg, ProbeResult):
            self._merge(msg)
            return []
        if isinstance(msg, Notice):
            self.state.message = msg.text
            return []
        if isinstance(msg, Tick):
            if self.state.prompt.installing:
                self.state.prompt.spinner_frame += 1
            return []
        if isinstance(msg, InstallFinished):
            self._install_finished(msg)
            return []
        if isinstance(msg, KeyPressed):
            return self._key(msg.key)

        logger.warning("Unhandled message: %r", msg)
        return []

    def _merge(self, result: ProbeResult) -> None:
        if result.collection is not None:
            collection = result.collection
            if result.alias not in self.status_map(collection):
                logger.debug(
                    "Dropping result for unknown %s alias %s", collection.value, result.alias
                )
                return
        elif result.alias in self.state.server_status:
            collection = Collection.SERVERS
        elif result.alias in self.state.proxy_status:
            collection = Collection.PROXIES
        else:
            logger.debug("Dropping result for unknown alias %s", result.alias)
            return

        if result.generation != self._generation[collection]:
            logger.debug(
                "Dropping stale result for %s (generation %d, current %d)",
                result.alias,
                result.generation,
                self._generation[collection],
            )
            return
        self.status_map(collection)[result.alias] = result.status

    def _install_finished(self, msg: InstallFinished) -> None:
        if not self.state.prompt.installing:
            logger.debug("Install result without a running install, ignoring")
            return
        if msg.error is not None:
            logger.error("Netcat installation failed: %s", msg.error)
            self._show_list(View.SERVERS, f"Installation failed: {msg.error}")
        else:
            self._show_list(View.PROXIES, "Netcat installed successfully!")

    def _key(self, key: str) -> list[Command]:
        view = self.state.view

        if view is View.INSTALL_PROMPT:
            return self._install_prompt_key(key)
        if key == FORCE_QUIT_KEY:
            self.state.outcome = Outcome.QUIT
            return []
        if view is View.EDITOR_PROMPT:
            return self._editor_prompt_key(key)
        return self._list_key(key)

    def _install_prompt_key(self, key: str) -> list[Command]:
        if self.state.prompt.installing:
            # One installer at a time; wait for InstallFinished
            return []
        if key == FORCE_QUIT_KEY:
            self.state.outcome = Outcome.QUIT
            return []
        if key in ("y", "Y"):
            self.state.prompt.installing = True
            self.state.message = ""
            return [RunInstall()]
        if key in ("n", "N") or key in CANCEL_KEYS:
            self._show_list(View.SERVERS, "Proxy setup cancelled. Netcat is required.")
        return []

    def _editor_prompt_key(self, key: str) -> list[Command]:
        prompt = self.state.prompt
        if key in UP_KEYS:
            prompt.choice = max(prompt.choice - 1, 0)
        elif key in DOWN_KEYS:
            prompt.choice = min(prompt.choice + 1, len(EDITOR_CHOICES) - 1)
        elif key == "enter" and prompt.target is not None:
            self.state.message = RESTART_MESSAGE
            self.state.outcome = Outcome.QUIT
            return [LaunchEditor(path=prompt.target, mode=prompt.editor_mode)]
        elif key in CANCEL_KEYS:
            self._show_list(View.SERVERS, "Edit cancelled.")
        return []

    def _list_key(self, key: str) -> list[Command]:
        state = self.state
        collection = self.active_collection
        count = len(self.entries(collection))

        if key == "q":
            state.outcome = Outcome.QUIT
        elif key in UP_KEYS:
            state.cursor = max(state.cursor - 1, 0)
        elif key in DOWN_KEYS:
            state.cursor = min(state.cursor + 1, max(count - 1, 0))
        elif key in TOGGLE_KEYS:
            state.view = View.PROXIES if state.view is View.SERVERS else View.SERVERS
            state.cursor = 0
            state.message = ""
        elif key == "enter":
            if collection is Collection.SERVERS and count:
                state.selected = self.servers[state.cursor]
                state.outcome = Outcome.SELECTED
        elif key == "r":
            return [self._reload(collection)]
        elif key == "a":
            return self._add(collection)
        elif key == "e":
            return self._edit(collection)
        return []

    def _reload(self, collection: Collection) -> DispatchProbes:
        statuses = self.status_map(collection)
        for alias in statuses:
            statuses[alias] = ProbeStatus.CHECKING
        self._generation[collection] += 1
        logger.info(
            "Reloading %s (generation %d)", collection.value, self._generation[collection]
        )
        return self._dispatch(collection)

    def _needs_install(self, collection: Collection) -> bool:
        if collection is Collection.PROXIES and not self.dependency.is_available():
            self.state.view = View.INSTALL_PROMPT
            self.state.prompt = PromptState()
            self.state.message = ""
            return True
        return False

    def _open_prompt(self, collection: Collection, message: str) -> None:
        self.state.prompt = PromptState(target=self.paths.path_for(collection))
        self.state.view = View.EDITOR_PROMPT
        self.state.message = message

    def _add(self, collection: Collection) -> list[Command]:
        if self._needs_install(collection):
            return []
        alias = NEW_PROXY_ALIAS if collection is Collection.PROXIES else NEW_SERVER_ALIAS
        self._open_prompt(collection, "Template added. Select editor:")
        return [AppendTemplate(collection=collection, alias=alias)]

    def _edit(self, collection: Collection) -> list[Command]:
        if self._needs_install(collection):
            return []
        self._open_prompt(collection, "Select editor to open config:")
        return []
