"""Server and proxy entry models."""

from dataclasses import dataclass
from enum import Enum


class Collection(Enum):
    """The two independent entry collections."""

    SERVERS = "servers"
    PROXIES = "proxies"


class ProxyType(Enum):
    """Tunnelling protocol spoken by a proxy."""

    SOCKS5 = "socks5"
    HTTP = "http"


@dataclass(frozen=True)
class ServerEntry:
    """An SSH server from the server config file."""

    alias: str
    host: str = ""
    port: int | None = None
    user: str = ""
    identity_file: str = ""
    proxy: str | None = None

    @property
    def target(self) -> str:
        """Get the ssh destination.

        Returns:
            user@host when a user is set, otherwise the bare host
        """
        return f"{self.user}@{self.host}" if self.user else self.host


@dataclass(frozen=True)
class ProxyEntry:
    """A SOCKS5 or HTTP proxy from the proxies config file."""

    alias: str
    host: str = ""
    port: int | None = None
    type: ProxyType | None = None
    user: str = ""
    password: str = ""

    @property
    def proxy_type(self) -> ProxyType:
        """Tunnelling protocol, SOCKS5 when unset."""
        return self.type or ProxyType.SOCKS5

    @property
    def address(self) -> str:
        """host:port of the proxy (port omitted when unset)."""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"


Entry = ServerEntry | ProxyEntry
