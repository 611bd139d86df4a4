"""Exception hierarchy for SSH OGM."""


class SshOgmError(Exception):
    """Base class for all SSH OGM errors."""


class ConfigError(SshOgmError):
    """Configuration files could not be created, read or written."""


class ConfigParseError(ConfigError):
    """Configuration text does not follow the block grammar."""

    def __init__(self, reason: str, line: int | None = None):
        """Initialize parse error.

        Args:
            reason: Human readable description of the problem
            line: 1-based line number, or None when the error is at end of input
        """
        self.reason = reason
        self.line = line
        if line is None:
            super().__init__(reason)
        else:
            super().__init__(f"line {line}: {reason}")


class ProxyNotFoundError(SshOgmError):
    """A server references a proxy alias that is not defined."""

    def __init__(self, server_alias: str, proxy_alias: str):
        self.server_alias = server_alias
        self.proxy_alias = proxy_alias
        super().__init__(
            f"Proxy '{proxy_alias}' used by '{server_alias}' not found in proxies.conf"
        )


class LaunchError(SshOgmError):
    """The ssh session could not be started or exited with an error."""


class EditorError(SshOgmError):
    """The editor could not be opened."""


class DependencyInstallError(SshOgmError):
    """Automatic installation of a missing tool failed."""
