"""Open config files in an editor."""

import logging
import os
import shutil
import subprocess
import sys
from enum import Enum
from pathlib import Path

from ssh_ogm.errors import EditorError

logger = logging.getLogger(__name__)


class EditorMode(Enum):
    """Which kind of editor to open."""

    SYSTEM = "system"
    TERMINAL = "terminal"


def editor_command(
    path: Path | str,
    mode: EditorMode,
    platform: str = sys.platform,
    environ: dict[str, str] | None = None,
) -> list[str]:
    """Build the editor command line.

    SYSTEM uses the desktop's default text editor. TERMINAL uses $EDITOR,
    then vim, then nano.

    Raises:
        EditorError: If no system editor exists for the platform
    """
    path = str(path)
    if mode is EditorMode.SYSTEM:
        if platform == "darwin":
            return ["open", "-t", path]
        if platform.startswith("win"):
            return ["cmd", "/c", "start", "notepad", path]
        if platform.startswith("linux"):
            return ["xdg-open", path]
        raise EditorError(f"unsupported platform for system editor: {platform}")

    env = os.environ if environ is None else environ
    editor = env.get("EDITOR") or "vim"
    if shutil.which(editor) is None:
        editor = "nano"
    return [editor, path]


def open_editor(path: Path | str, mode: EditorMode) -> None:
    """Open path in an editor and wait for it to exit.

    The terminal editor inherits stdin/stdout, so the caller must have
    released the terminal first.

    Raises:
        EditorError: If the editor cannot be started or fails
    """
    cmd = editor_command(path, mode)
    logger.info("Opening editor: %s", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        raise EditorError(f"{cmd[0]} exited with status {e.returncode}") from e
    except OSError as e:
        raise EditorError(f"cannot run {cmd[0]}: {e}") from e
