"""Protocol interfaces for dependency inversion.

The dashboard depends on these abstractions rather than on the concrete
prober or installer, so tests can pass fakes in directly:

    class FakeDependency:
        def is_available(self) -> bool:
            return False

        def install(self) -> None:
            pass

    controller = DashboardController(servers, proxies, FakeDependency(), paths)
"""

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from ssh_ogm.models import Collection, ProbeStatus


@runtime_checkable
class HostProber(Protocol):
    """Protocol for single-host reachability checks."""

    async def probe(self, host: str, port: int | None = None) -> ProbeStatus:
        """Classify one host.

        Args:
            host: Host name or address
            port: Service port (implementation default when None)

        Returns:
            ONLINE or OFFLINE, never CHECKING
        """
        ...


@runtime_checkable
class Dependency(Protocol):
    """Protocol for an external tool that can be detected and installed."""

    def is_available(self) -> bool:
        """Check whether the tool is on PATH."""
        ...

    def install(self) -> None:
        """Install the tool.

        Raises:
            DependencyInstallError: If installation fails
        """
        ...


@runtime_checkable
class ConfigPaths(Protocol):
    """Protocol for locating the file behind a collection."""

    def path_for(self, collection: Collection) -> Path:
        """Get the config file for a collection."""
        ...


@runtime_checkable
class KeySource(Protocol):
    """Protocol for something that produces key presses."""

    def start(self, emit: Callable[[str], None]) -> None:
        """Begin delivering key names to emit (called on the event loop)."""
        ...

    def stop(self) -> None:
        """Stop delivering keys and release the input device."""
        ...


@runtime_checkable
class TemplateWriter(Protocol):
    """Protocol for appending entry templates to the config store."""

    def append_template(self, collection: Collection, alias: str) -> Path:
        """Append a placeholder block and return the modified file."""
        ...
