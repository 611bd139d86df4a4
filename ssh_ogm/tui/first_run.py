"""First-run editor choice.

Shown once, right after the config file is created, to ask how the user
wants to edit it.
"""

import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.live import Live

from ssh_ogm.protocols import KeySource
from ssh_ogm.services.editor import EditorMode
from ssh_ogm.tui.render import render_first_run
from ssh_ogm.tui.state import EDITOR_CHOICES

logger = logging.getLogger(__name__)


class FirstRunPrompt:
    """Reducer for the editor choice screen."""

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self.choice = 0
        self.chosen = False
        self.quitting = False

    @property
    def finished(self) -> bool:
        return self.chosen or self.quitting

    @property
    def result(self) -> EditorMode | None:
        """Chosen editor mode, or None if the user skipped setup."""
        return EDITOR_CHOICES[self.choice] if self.chosen else None

    def update(self, key: str) -> None:
        if key in ("q", "ctrl+c", "esc"):
            self.quitting = True
        elif key in ("up", "k"):
            self.choice = max(self.choice - 1, 0)
        elif key in ("down", "j"):
            self.choice = min(self.choice + 1, len(EDITOR_CHOICES) - 1)
        elif key == "enter":
            self.chosen = True


async def run_first_run(
    config_path: Path,
    key_source: KeySource,
    console: Console | None = None,
    screen: bool = True,
) -> EditorMode | None:
    """Ask which editor to open the new config in.

    Returns:
        The chosen mode, or None if the user skipped
    """
    prompt = FirstRunPrompt(config_path)
    queue: asyncio.Queue[str] = asyncio.Queue()
    key_source.start(queue.put_nowait)
    try:
        with Live(
            render_first_run(config_path, prompt.choice),
            console=console or Console(),
            auto_refresh=False,
            screen=screen,
            transient=True,
        ) as live:
            while not prompt.finished:
                prompt.update(await queue.get())
                live.update(render_first_run(config_path, prompt.choice), refresh=True)
    finally:
        key_source.stop()

    logger.info("First run choice: %s", prompt.result.value if prompt.result else "skipped")
    return prompt.result
