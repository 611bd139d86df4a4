"""Dependency injection container for SSH OGM."""

from dataclasses import dataclass

from ssh_ogm.config import ConfigManager, Settings
from ssh_ogm.services.deps import NetcatDependency
from ssh_ogm.services.orchestrator import ProbeOrchestrator
from ssh_ogm.services.prober import Prober


@dataclass
class Dependencies:
    """Container for SSH OGM collaborators.

    Example:
        deps = Dependencies.create()
        first_run = deps.manager.initialize()
    """

    settings: Settings
    manager: ConfigManager
    prober: Prober
    orchestrator: ProbeOrchestrator
    netcat: NetcatDependency

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment settings."""
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Create dependencies with custom settings.

        Args:
            settings: Custom Settings instance

        Returns:
            Dependencies wired from settings
        """
        prober = Prober(
            handshake_timeout=settings.handshake_timeout,
            tcp_timeout=settings.tcp_timeout,
            ping_timeout=settings.ping_timeout,
        )
        return cls(
            settings=settings,
            manager=ConfigManager(settings.home),
            prober=prober,
            orchestrator=ProbeOrchestrator(prober),
            netcat=NetcatDependency(),
        )
