"""Entry point for the ssh-ogm command."""

import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console

from ssh_ogm.config import Settings, load_proxies, load_servers
from ssh_ogm.dependencies import Dependencies
from ssh_ogm.errors import (
    ConfigError,
    EditorError,
    LaunchError,
    ProxyNotFoundError,
)
from ssh_ogm.services.editor import EditorMode, open_editor
from ssh_ogm.services.launcher import connect, resolve_proxy
from ssh_ogm.tui import (
    DashboardApp,
    DashboardController,
    TerminalKeySource,
    run_first_run,
)
from ssh_ogm.utils.console import ColorfulFormatter

logger = logging.getLogger("ssh_ogm")

NOISY_LOGGERS = ("asyncssh", "asyncio")


def configure_logging(settings: Settings) -> None:
    """Configure logging for the ssh_ogm package.

    The dashboard owns the terminal, so records go to a log file in the
    config directory unless SSH_OGM_LOG_FILE is "-".
    """
    pkg_logger = logging.getLogger("ssh_ogm")
    pkg_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    if not pkg_logger.handlers:
        handler: logging.Handler
        path = settings.log_path
        use_colors = settings.log_colors
        if path is None:
            handler = logging.StreamHandler(sys.stderr)
            use_colors = use_colors and sys.stderr.isatty()
        else:
            try:
                path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
                handler = logging.FileHandler(path, encoding="utf-8")
            except OSError:
                handler = logging.StreamHandler(sys.stderr)
            use_colors = False
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        pkg_logger.addHandler(handler)
        pkg_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _edit(console: Console, path: Path, mode: EditorMode) -> None:
    try:
        open_editor(path, mode)
    except EditorError as e:
        logger.error("Opening editor failed: %s", e)
        console.print(f"Error opening editor: {e}", style="red")


def _first_run(deps: Dependencies, console: Console) -> int:
    path = deps.manager.config_path
    mode = asyncio.run(run_first_run(path, TerminalKeySource(), console))
    if mode is None:
        console.print("Setup skipped.")
        return 0
    _edit(console, path, mode)
    console.print("Configuration file opened. Please restart SSH OGM after editing.")
    return 0


def main() -> int:
    """Run SSH OGM.

    Returns:
        Process exit code: 0 on quit or successful session, 1 on fatal errors
    """
    deps = Dependencies.create()
    configure_logging(deps.settings)
    console = Console(highlight=False)

    if not sys.stdin.isatty():
        console.print("ssh-ogm needs an interactive terminal.", style="red")
        return 1

    try:
        first_run = deps.manager.initialize()
    except ConfigError as e:
        logger.error("Config initialization failed: %s", e)
        console.print(f"Error creating config: {e}", style="red")
        return 1

    if first_run:
        return _first_run(deps, console)

    try:
        servers = load_servers(deps.manager.config_path)
        proxies = load_proxies(deps.manager.proxies_path)
    except ConfigError as e:
        logger.error("Loading config failed: %s", e)
        console.print(f"Error parsing config: {e}", style="red")
        return 1
    console.print(f"Loaded {len(servers)} servers and {len(proxies)} proxies.")

    controller = DashboardController(servers, proxies, deps.netcat, deps.manager)
    app = DashboardApp(
        controller,
        deps.orchestrator,
        deps.manager,
        deps.netcat,
        TerminalKeySource(),
        console,
    )
    result = asyncio.run(app.run())

    if result.editor is not None:
        _edit(console, result.editor.path, result.editor.mode)
        console.print(result.message)
        return 0

    if result.selected is None:
        console.print(result.message or "Exiting.")
        return 0

    selected = result.selected
    console.print(f"Connecting to {selected.alias}...")
    try:
        proxy = resolve_proxy(selected, proxies)
        if proxy is not None:
            console.print(f"Using proxy: {proxy.alias} ({proxy.address})")
        connect(selected, proxy)
    except ProxyNotFoundError as e:
        logger.error("%s", e)
        console.print(f"Error: {e}. Aborting connection.", style="red")
        return 1
    except LaunchError as e:
        logger.error("Connection to %s failed: %s", selected.alias, e)
        console.print(f"Error connecting: {e}", style="red")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
