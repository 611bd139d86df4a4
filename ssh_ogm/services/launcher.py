"""Start interactive ssh sessions."""

import logging
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence

from ssh_ogm.errors import LaunchError, ProxyNotFoundError
from ssh_ogm.models import ProxyEntry, ProxyType, ServerEntry

logger = logging.getLogger(__name__)


def proxy_command(proxy: ProxyEntry) -> str:
    """Build the netcat ProxyCommand tunnelling through a proxy.

    Args:
        proxy: Resolved proxy entry

    Returns:
        ProxyCommand value wrapping ssh's %h %p
    """
    if proxy.proxy_type is ProxyType.HTTP:
        auth = f" -P {proxy.user}" if proxy.user else ""
        return f"nc -X connect{auth} -x {proxy.address} %h %p"
    return f"nc -x {proxy.address} %h %p"


def build_ssh_args(entry: ServerEntry, proxy: ProxyEntry | None = None) -> list[str]:
    """Build ssh arguments for an entry.

    Args:
        entry: Server to connect to
        proxy: Resolved proxy, if the server goes through one

    Returns:
        Arguments for ssh, without the program name
    """
    args = []
    if entry.port is not None:
        args += ["-p", str(entry.port)]
    if entry.identity_file:
        args += ["-i", entry.identity_file]
    if proxy is not None:
        args += ["-o", f"ProxyCommand={proxy_command(proxy)}"]
    args.append(entry.target)
    return args


def resolve_proxy(
    entry: ServerEntry, proxies: Sequence[ProxyEntry]
) -> ProxyEntry | None:
    """Find the proxy a server refers to.

    Returns:
        The proxy entry, or None if the server uses no proxy

    Raises:
        ProxyNotFoundError: If the alias is not defined
    """
    if not entry.proxy:
        return None
    for proxy in proxies:
        if proxy.alias == entry.proxy:
            return proxy
    raise ProxyNotFoundError(entry.alias, entry.proxy)


def terminal_command(
    ssh_args: list[str],
    platform: str = sys.platform,
    which: Callable[[str], str | None] = shutil.which,
) -> tuple[list[str], bool]:
    """Wrap the ssh command so it opens in a new terminal window when possible.

    Returns:
        (command, inline) where inline means ssh takes over this terminal
    """
    ssh_cmd = ["ssh", *ssh_args]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", *ssh_cmd], False
    if platform.startswith("linux"):
        if path := which("gnome-terminal"):
            return [path, "--", *ssh_cmd], False
        if path := which("x-terminal-emulator"):
            return [path, "-e", *ssh_cmd], False
    return ssh_cmd, True


def connect(entry: ServerEntry, proxy: ProxyEntry | None = None) -> None:
    """Open an interactive ssh session to an entry.

    Raises:
        LaunchError: If ssh cannot be started or exits with an error
    """
    cmd, inline = terminal_command(build_ssh_args(entry, proxy))
    logger.info(
        "Connecting to %s (%s) inline=%s via %s",
        entry.alias,
        entry.target,
        inline,
        proxy.alias if proxy else "direct",
    )
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        raise LaunchError(f"{cmd[0]} exited with status {e.returncode}") from e
    except OSError as e:
        raise LaunchError(f"cannot run {cmd[0]}: {e}") from e
