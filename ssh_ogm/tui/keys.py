"""Terminal key input.

Puts the terminal into cbreak mode and feeds decoded key names into the
dashboard queue through an asyncio reader callback.
"""

import asyncio
import logging
import os
import sys
import termios
import tty
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

ESCAPE_SEQUENCES = {
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
}

CONTROL_KEYS = {
    b"\r": "enter",
    b"\n": "enter",
    b"\t": "tab",
    b"\x03": "ctrl+c",
    b"\x1b": "esc",
}


def decode_keys(data: bytes) -> list[str]:
    """Split raw terminal input into key names.

    Args:
        data: Bytes read from the terminal in one go

    Returns:
        Key names such as "up", "enter", "esc" or the printable character
    """
    keys = []
    i = 0
    while i < len(data):
        chunk = data[i : i + 3]
        if chunk in ESCAPE_SEQUENCES:
            keys.append(ESCAPE_SEQUENCES[chunk])
            i += 3
            continue

        if data[i : i + 2] in (b"\x1b[", b"\x1bO") and i + 2 < len(data):
            # Unknown CSI sequence (e.g. F-keys): skip up to the final byte
            j = i + 2
            while j < len(data) and not 0x40 <= data[j] <= 0x7E:
                j += 1
            i = j + 1
            continue

        byte = data[i : i + 1]
        if byte in CONTROL_KEYS:
            keys.append(CONTROL_KEYS[byte])
        elif byte.isascii() and byte.decode().isprintable():
            keys.append(byte.decode())
        i += 1
    return keys


class TerminalKeySource:
    """Reads keys from a TTY without blocking the event loop."""

    def __init__(self, fd: int | None = None) -> None:
        self.fd = sys.stdin.fileno() if fd is None else fd
        self._saved: list[Any] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def start(self, emit: Callable[[str], None]) -> None:
        """Enter cbreak mode and start delivering keys.

        Args:
            emit: Called with each decoded key name
        """
        self._saved = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)
        # Deliver Ctrl+C as a key instead of SIGINT
        attrs = termios.tcgetattr(self.fd)
        attrs[3] &= ~termios.ISIG
        termios.tcsetattr(self.fd, termios.TCSANOW, attrs)

        def on_readable() -> None:
            try:
                data = os.read(self.fd, 64)
            except OSError as e:
                logger.warning("Reading terminal input failed: %s", e)
                return
            for key in decode_keys(data):
                emit(key)

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self.fd, on_readable)
        logger.debug("Terminal key source started on fd %d", self.fd)

    def stop(self) -> None:
        """Stop reading and restore the terminal."""
        if self._loop is not None:
            self._loop.remove_reader(self.fd)
            self._loop = None
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None
            logger.debug("Terminal attributes restored")
