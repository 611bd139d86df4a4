"""Config directory management.

Creates ~/.ssh-ogm with the server and proxy config files on first run and
appends entry templates when the user adds a server or proxy.
"""

import logging
import os
from pathlib import Path

from ssh_ogm.errors import ConfigError
from ssh_ogm.models import Collection

logger = logging.getLogger(__name__)

CONFIG_NAME = "config"
PROXIES_NAME = "proxies.conf"

SERVER_CONFIG_HEADER = """\
# SSH OGM Server Configuration
# Syntax: Alias { host: ... user: ... }
# Example:
# myserver {
#    host: 1.2.3.4
#    user: root
#    port: 22
#    identity: ~/.ssh/id_ed25519
#    proxy: myproxy
# }

"""

PROXY_CONFIG_HEADER = """\
# SSH OGM Proxy Configuration
# Syntax: Alias { host: ... port: ... type: ... }
# Types: socks5, http
# Example:
# myproxy {
#    host: proxy.example.com
#    port: 1080
#    type: socks5
#    user: user
#    password: pass
# }

"""

SERVER_TEMPLATE = "\n{alias} {{\n    host: 1.2.3.4\n    user: root\n    port: 22\n}}\n"
PROXY_TEMPLATE = (
    "\n{alias} {{\n    host: proxy.example.com\n    port: 1080\n    type: socks5\n}}\n"
)


class ConfigManager:
    """Owns the config directory and its two files."""

    def __init__(self, base_dir: Path | str):
        """Initialize config manager.

        Args:
            base_dir: Config directory (usually ~/.ssh-ogm)
        """
        self.base_dir = Path(base_dir)

    @property
    def config_path(self) -> Path:
        """Path of the server config file."""
        return self.base_dir / CONFIG_NAME

    @property
    def proxies_path(self) -> Path:
        """Path of the proxies config file."""
        return self.base_dir / PROXIES_NAME

    def path_for(self, collection: Collection) -> Path:
        """Get the file backing a collection."""
        if collection is Collection.PROXIES:
            return self.proxies_path
        return self.config_path

    def initialize(self) -> bool:
        """Create the config directory and files if missing.

        Returns:
            True if the server config was just created (first run)

        Raises:
            ConfigError: If the directory or files cannot be created
        """
        try:
            self.base_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Failed to create config directory {self.base_dir}: {e}") from e

        first_run = self._ensure_file(self.config_path, SERVER_CONFIG_HEADER)
        self._ensure_file(self.proxies_path, PROXY_CONFIG_HEADER)
        return first_run

    def _ensure_file(self, path: Path, header: str) -> bool:
        """Make sure a config file exists and starts with its header.

        Returns:
            True if the file was created (or was empty) and got the header
        """
        try:
            if not path.exists() or path.stat().st_size == 0:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w") as f:
                    f.write(header)
                logger.info("Created %s", path)
                return True

            content = path.read_text()
            expected_first = header.split("\n", 1)[0]
            if content.split("\n", 1)[0] != expected_first:
                path.write_text(header + content)
                logger.info("Prepended header to %s", path)
        except OSError as e:
            raise ConfigError(f"Failed to prepare {path.name}: {e}") from e
        return False

    def append_template(self, collection: Collection, alias: str) -> Path:
        """Append a placeholder entry for the user to fill in.

        When the alias is already taken in the file a numeric suffix is
        added (new_server_2, new_server_3, ...) so the file stays parseable.

        Args:
            collection: Which file to append to
            alias: Preferred alias of the new block

        Returns:
            Path of the file that was modified

        Raises:
            ConfigError: If the file cannot be written
        """
        path = self.path_for(collection)
        template = PROXY_TEMPLATE if collection is Collection.PROXIES else SERVER_TEMPLATE
        try:
            alias = _free_alias(alias, _existing_aliases(path))
            with path.open("a") as f:
                f.write(template.format(alias=alias))
        except OSError as e:
            raise ConfigError(f"Failed to append template to {path}: {e}") from e
        logger.info("Appended %s template '%s' to %s", collection.value, alias, path)
        return path


def _existing_aliases(path: Path) -> set[str]:
    """Collect block aliases already present in a config file."""
    aliases: set[str] = set()
    if not path.exists():
        return aliases
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        head, brace, _ = line.partition("{")
        if brace and ":" not in head and head.strip():
            aliases.add(head.strip())
    return aliases


def _free_alias(alias: str, taken: set[str]) -> str:
    if alias not in taken:
        return alias
    n = 2
    while f"{alias}_{n}" in taken:
        n += 1
    return f"{alias}_{n}"
