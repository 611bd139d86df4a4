"""Block config parser.

Reads the server and proxy config files. The grammar is a sequence of blocks::

    alias {
        key: value
    }

Blank lines and ``#`` comments are ignored. A block may also be written on a
single line (``alias { host: 1.2.3.4 }``). Every violation is a hard error
carrying the offending line number.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TypeVar

from ssh_ogm.errors import ConfigError, ConfigParseError
from ssh_ogm.models import ProxyEntry, ProxyType, ServerEntry

logger = logging.getLogger(__name__)

SERVER_KEYS = frozenset({"host", "user", "port", "identity", "proxy"})
PROXY_KEYS = frozenset({"host", "port", "type", "user", "password"})

T = TypeVar("T")


def _iter_blocks(
    text: str, allowed_keys: frozenset[str]
) -> Iterator[tuple[str, dict[str, str], dict[str, int]]]:
    """Yield (alias, values, key line numbers) for each block in input order.

    Raises:
        ConfigParseError: On any grammar violation
    """
    alias: str | None = None
    values: dict[str, str] = {}
    key_lines: dict[str, int] = {}
    seen: set[str] = set()

    def apply_pair(pair: str, lineno: int) -> None:
        key, sep, value = pair.partition(":")
        if not sep:
            raise ConfigParseError("expected 'key: value'", lineno)
        key = key.strip()
        if key not in allowed_keys:
            raise ConfigParseError(f"unknown key '{key}'", lineno)
        values[key] = value.strip()
        key_lines[key] = lineno

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        head, brace, rest = line.partition("{")
        if brace and ":" not in head:
            if alias is not None:
                raise ConfigParseError(
                    "nested blocks or missing closing brace not supported", lineno
                )
            name = head.strip()
            if not name:
                raise ConfigParseError("missing alias before '{'", lineno)
            if name in seen:
                raise ConfigParseError(f"duplicate alias '{name}'", lineno)
            seen.add(name)
            alias, values, key_lines = name, {}, {}

            rest = rest.strip()
            closes = rest.endswith("}")
            if closes:
                rest = rest[:-1].strip()
            if rest:
                apply_pair(rest, lineno)
            if closes:
                yield alias, values, key_lines
                alias = None
            continue

        if line == "}":
            if alias is None:
                raise ConfigParseError("unexpected closing brace", lineno)
            yield alias, values, key_lines
            alias = None
            continue

        if alias is None:
            raise ConfigParseError(f"unexpected text outside block: {line}", lineno)

        # "key: value }" closes the block on the same line
        if line.endswith("}"):
            apply_pair(line[:-1].strip(), lineno)
            yield alias, values, key_lines
            alias = None
            continue

        apply_pair(line, lineno)

    if alias is not None:
        raise ConfigParseError(
            f"unterminated block '{alias}': missing closing brace at end of input"
        )


def _parse_port(value: str, lineno: int) -> int | None:
    if not value:
        return None
    try:
        port = int(value)
    except ValueError:
        raise ConfigParseError(f"invalid port '{value}'", lineno) from None
    if not 0 < port < 65536:
        raise ConfigParseError(f"port out of range: {port}", lineno)
    return port


def parse_servers(text: str) -> list[ServerEntry]:
    """Parse server config text.

    Args:
        text: Contents of the server config file

    Returns:
        Server entries in input order

    Raises:
        ConfigParseError: If the text is malformed
    """
    servers = []
    for alias, values, lines in _iter_blocks(text, SERVER_KEYS):
        servers.append(
            ServerEntry(
                alias=alias,
                host=values.get("host", ""),
                port=_parse_port(values.get("port", ""), lines.get("port", 0)),
                user=values.get("user", ""),
                identity_file=values.get("identity", ""),
                proxy=values.get("proxy") or None,
            )
        )
    return servers


def parse_proxies(text: str) -> list[ProxyEntry]:
    """Parse proxy config text.

    Args:
        text: Contents of the proxies config file

    Returns:
        Proxy entries in input order

    Raises:
        ConfigParseError: If the text is malformed or a proxy type is unknown
    """
    proxies = []
    for alias, values, lines in _iter_blocks(text, PROXY_KEYS):
        proxy_type = None
        if raw_type := values.get("type", "").lower():
            try:
                proxy_type = ProxyType(raw_type)
            except ValueError:
                raise ConfigParseError(
                    f"unknown proxy type '{raw_type}' (expected socks5 or http)",
                    lines["type"],
                ) from None
        proxies.append(
            ProxyEntry(
                alias=alias,
                host=values.get("host", ""),
                port=_parse_port(values.get("port", ""), lines.get("port", 0)),
                type=proxy_type,
                user=values.get("user", ""),
                password=values.get("password", ""),
            )
        )
    return proxies


def _load(path: Path, parse: Callable[[str], list[T]]) -> list[T]:
    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    logger.debug("Reading config from %s", path)
    entries = parse(content)
    logger.info("Parsed %d entries from %s", len(entries), path)
    return entries


def load_servers(path: Path | str) -> list[ServerEntry]:
    """Read and parse the server config file."""
    return _load(Path(path), parse_servers)


def load_proxies(path: Path | str) -> list[ProxyEntry]:
    """Read and parse the proxies config file."""
    return _load(Path(path), parse_proxies)
