"""Reachability prober.

Classifies a host as online or offline with a staged fallback:

1. SSH handshake with throwaway credentials. Being rejected still proves the
   peer is up and speaks SSH.
2. Plain TCP connect to the same address.
3. ICMP echo via the platform ``ping`` utility (host only, no port).

Stages run in that order, each bounded by its own timeout, and the first
stage that proves reachability short-circuits the rest. Firewalls differ in
what they let through, so no single method is enough on its own.
"""

import asyncio
import logging
import sys

import asyncssh

from ssh_ogm.models import ProbeStatus

logger = logging.getLogger(__name__)

DEFAULT_PORT = 22

PROBE_USER = "ssh-ogm-probe"
PROBE_PASSWORD = "ssh-ogm-probe"

# Failures that can only happen after the peer answered in SSH
_SPOKE_SSH = (
    asyncssh.PermissionDenied,
    asyncssh.KeyExchangeFailed,
    asyncssh.ProtocolError,
    asyncssh.ProtocolNotSupported,
    asyncssh.ServiceNotAvailable,
    asyncssh.HostKeyNotVerifiable,
)


def _validate(host: str, port: int | None) -> int:
    if not host or any(c.isspace() for c in host):
        raise ValueError(f"Invalid host: {host!r}")
    if port is None:
        return DEFAULT_PORT
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")
    return port


async def check_ssh_handshake(host: str, port: int, timeout: float = 4.0) -> bool:
    """Attempt an SSH handshake and login with invalid credentials.

    Args:
        host: Host to check.
        port: SSH port.
        timeout: Handshake timeout in seconds.

    Returns:
        True if the peer completed or rejected the handshake in SSH.
    """
    try:
        conn = await asyncio.wait_for(
            asyncssh.connect(
                host,
                port=port,
                username=PROBE_USER,
                password=PROBE_PASSWORD,
                preferred_auth="password",
                known_hosts=None,
                client_keys=None,
                agent_path=None,
                config=None,
            ),
            timeout=timeout,
        )
    except _SPOKE_SSH as e:
        logger.debug("Handshake with %s:%d rejected (%s), host is up", host, port, e)
        return True
    except (TimeoutError, OSError, asyncssh.Error) as e:
        logger.debug("Handshake with %s:%d failed: %s", host, port, e)
        return False

    conn.close()
    await conn.wait_closed()
    return True


async def check_tcp(host: str, port: int, timeout: float = 2.0) -> bool:
    """Check if a host accepts a TCP connection.

    Args:
        host: Host to check.
        port: Port to connect to.
        timeout: Connection timeout in seconds.

    Returns:
        True if host is reachable, False otherwise.
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
        writer.close()
        await writer.wait_closed()
        return True
    except (TimeoutError, OSError) as e:
        logger.debug("TCP connect to %s:%d failed: %s", host, port, e)
        return False


def ping_command(host: str, platform: str = sys.platform) -> list[str]:
    """Build a single-echo ping command for the platform."""
    if platform.startswith("win"):
        return ["ping", "-n", "1", "-w", "1000", host]
    return ["ping", "-c", "1", host]


async def check_icmp(host: str, timeout: float = 2.0) -> bool:
    """Send one ICMP echo with the system ping utility.

    Args:
        host: Host to ping.
        timeout: Seconds before the ping process is killed.

    Returns:
        True if ping exited successfully.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *ping_command(host),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug("Cannot run ping for %s: %s", host, e)
        return False

    try:
        returncode = await asyncio.wait_for(proc.wait(), timeout=timeout)
    except TimeoutError:
        logger.debug("Ping to %s timed out after %.1fs", host, timeout)
        return False
    finally:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
    return returncode == 0


class Prober:
    """Staged reachability prober."""

    def __init__(
        self,
        handshake_timeout: float = 4.0,
        tcp_timeout: float = 2.0,
        ping_timeout: float = 2.0,
    ) -> None:
        """Initialize prober with per-stage timeouts.

        Args:
            handshake_timeout: SSH handshake stage timeout in seconds
            tcp_timeout: TCP connect stage timeout in seconds
            ping_timeout: ICMP echo stage timeout in seconds
        """
        self.handshake_timeout = handshake_timeout
        self.tcp_timeout = tcp_timeout
        self.ping_timeout = ping_timeout

    @property
    def max_latency(self) -> float:
        """Worst-case duration of one probe."""
        return self.handshake_timeout + self.tcp_timeout + self.ping_timeout

    async def probe(self, host: str, port: int | None = None) -> ProbeStatus:
        """Classify one host as online or offline.

        Args:
            host: Host name or address
            port: SSH port (default 22)

        Returns:
            ONLINE if any stage reached the host, otherwise OFFLINE

        Raises:
            ValueError: If host is empty or port out of range
        """
        port = _validate(host, port)

        if await check_ssh_handshake(host, port, self.handshake_timeout):
            return ProbeStatus.ONLINE
        if await check_tcp(host, port, self.tcp_timeout):
            logger.debug("%s:%d reachable via TCP fallback", host, port)
            return ProbeStatus.ONLINE
        if await check_icmp(host, self.ping_timeout):
            logger.debug("%s reachable via ICMP fallback", host)
            return ProbeStatus.ONLINE

        logger.debug("%s:%d is offline", host, port)
        return ProbeStatus.OFFLINE
