"""Data models for SSH OGM."""

from ssh_ogm.models.entry import (
    Collection,
    Entry,
    ProxyEntry,
    ProxyType,
    ServerEntry,
)
from ssh_ogm.models.status import ProbeResult, ProbeStatus

__all__ = [
    "Collection",
    "Entry",
    "ProbeResult",
    "ProbeStatus",
    "ProxyEntry",
    "ProxyType",
    "ServerEntry",
]
