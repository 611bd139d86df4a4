"""Probe status models."""

from dataclasses import dataclass
from enum import Enum

from ssh_ogm.models.entry import Collection


class ProbeStatus(Enum):
    """Reachability of one entry."""

    CHECKING = "checking"
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one probe, delivered to the dashboard as a message."""

    alias: str
    status: ProbeStatus
    generation: int = 0
    # Collection the probed entry belongs to; None routes by alias alone
    collection: Collection | None = None
