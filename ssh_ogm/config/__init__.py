"""Configuration module for SSH OGM.

- ConfigManager: Creates ~/.ssh-ogm and appends entry templates
- parse_servers / parse_proxies: Block grammar parser
- Settings: Environment variable configuration
"""

from ssh_ogm.config.manager import ConfigManager
from ssh_ogm.config.parser import (
    load_proxies,
    load_servers,
    parse_proxies,
    parse_servers,
)
from ssh_ogm.config.settings import Settings

__all__ = [
    "ConfigManager",
    "Settings",
    "load_proxies",
    "load_servers",
    "parse_proxies",
    "parse_servers",
]
