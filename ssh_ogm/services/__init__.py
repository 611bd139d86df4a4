"""Services for SSH OGM."""

from ssh_ogm.services.deps import NetcatDependency
from ssh_ogm.services.editor import EditorMode, open_editor
from ssh_ogm.services.launcher import build_ssh_args, connect, resolve_proxy
from ssh_ogm.services.orchestrator import ProbeOrchestrator
from ssh_ogm.services.prober import Prober

__all__ = [
    "EditorMode",
    "NetcatDependency",
    "ProbeOrchestrator",
    "Prober",
    "build_ssh_args",
    "connect",
    "open_editor",
    "resolve_proxy",
]
