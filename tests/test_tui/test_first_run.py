"""Tests for the first-run editor choice."""

import asyncio
import io
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from ssh_ogm.services.editor import EditorMode
from ssh_ogm.tui.first_run import FirstRunPrompt, run_first_run


def test_defaults_to_system_editor() -> None:
    prompt = FirstRunPrompt(Path("/cfg/config"))
    prompt.update("enter")

    assert prompt.finished
    assert prompt.result is EditorMode.SYSTEM


def test_choice_is_clamped() -> None:
    prompt = FirstRunPrompt(Path("/cfg/config"))
    for key in ("up", "down", "j", "j", "down"):
        prompt.update(key)
    assert prompt.choice == 1

    prompt.update("k")
    prompt.update("k")
    assert prompt.choice == 0


@pytest.mark.parametrize("key", ["q", "esc", "ctrl+c"])
def test_skip_keys(key: str) -> None:
    prompt = FirstRunPrompt(Path("/cfg/config"))
    prompt.update("down")
    prompt.update(key)

    assert prompt.finished
    assert prompt.result is None


def test_other_keys_ignored() -> None:
    prompt = FirstRunPrompt(Path("/cfg/config"))
    prompt.update("x")
    prompt.update("tab")
    assert not prompt.finished


class ImmediateKeys:
    def __init__(self, *keys: str) -> None:
        self.keys = keys
        self.stopped = False

    def start(self, emit: Callable[[str], None]) -> None:
        loop = asyncio.get_running_loop()
        for key in self.keys:
            loop.call_soon(emit, key)

    def stop(self) -> None:
        self.stopped = True


@pytest.mark.asyncio
async def test_run_first_run_returns_choice() -> None:
    keys = ImmediateKeys("down", "enter")
    console = Console(file=io.StringIO(), width=80)

    mode = await run_first_run(Path("/cfg/config"), keys, console, screen=False)

    assert mode is EditorMode.TERMINAL
    assert keys.stopped


@pytest.mark.asyncio
async def test_run_first_run_skip() -> None:
    keys = ImmediateKeys("q")
    console = Console(file=io.StringIO(), width=80)

    assert await run_first_run(Path("/cfg/config"), keys, console, screen=False) is None
