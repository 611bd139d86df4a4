"""Netcat detection and installation.

Proxy tunnelling runs ssh with a netcat ProxyCommand, so netcat must be on
PATH before proxies can be added or edited.
"""

import logging
import shutil
import subprocess
import sys
from collections.abc import Callable
from typing import Any

from ssh_ogm.errors import DependencyInstallError

logger = logging.getLogger(__name__)

NETCAT_COMMANDS = ("nc", "ncat", "netcat")
NMAP_DOWNLOAD_URL = "https://nmap.org/download.html"


class NetcatDependency:
    """Detects and installs netcat using the platform package manager."""

    def __init__(
        self,
        which: Callable[[str], str | None] = shutil.which,
        run: Callable[..., Any] = subprocess.run,
        platform: str = sys.platform,
    ) -> None:
        """Initialize with injectable system lookups.

        Args:
            which: PATH lookup, returns the executable path or None
            run: Subprocess runner with the subprocess.run signature
            platform: sys.platform style platform name
        """
        self._which = which
        self._run = run
        self.platform = platform

    def is_available(self) -> bool:
        """Check whether nc, ncat or netcat is on PATH."""
        return any(self._which(cmd) for cmd in NETCAT_COMMANDS)

    def install_command(self) -> list[str]:
        """Pick the install command for this platform.

        Returns:
            Command line to run

        Raises:
            DependencyInstallError: If no supported package manager is found
        """
        if self.platform.startswith("win"):
            if self._which("winget"):
                return [
                    "winget",
                    "install",
                    "Insecure.Nmap",
                    "--accept-source-agreements",
                    "--accept-package-agreements",
                ]
            if self._which("scoop"):
                return ["scoop", "install", "ncat"]
            # No package manager: send the user to the download page
            return ["rundll32", "url.dll,FileProtocolHandler", NMAP_DOWNLOAD_URL]

        if self.platform == "darwin":
            if self._which("brew"):
                return ["brew", "install", "netcat"]
            raise DependencyInstallError("homebrew not found")

        if self.platform.startswith("linux"):
            if self._which("apt-get"):
                return ["sudo", "apt-get", "install", "-y", "netcat"]
            if self._which("dnf"):
                return ["sudo", "dnf", "install", "-y", "nmap-ncat"]
            if self._which("pacman"):
                return ["sudo", "pacman", "-S", "--noconfirm", "gnu-netcat"]
            raise DependencyInstallError("package manager not found or supported")

        raise DependencyInstallError(
            f"automatic installation not supported on {self.platform}"
        )

    def install(self) -> None:
        """Install netcat.

        Blocks until the package manager exits.

        Raises:
            DependencyInstallError: If installation fails
        """
        cmd = self.install_command()
        logger.info("Installing netcat: %s", " ".join(cmd))
        try:
            self._run(
                cmd,
                check=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise DependencyInstallError(
                f"{cmd[0]} exited with status {e.returncode}"
                + (f": {stderr}" if stderr else "")
            ) from e
        except OSError as e:
            raise DependencyInstallError(f"cannot run {cmd[0]}: {e}") from e
        logger.info("Netcat installed")
