"""Terminal dashboard for SSH OGM."""

from ssh_ogm.tui.app import DashboardApp, DashboardResult
from ssh_ogm.tui.controller import DashboardController
from ssh_ogm.tui.first_run import FirstRunPrompt, run_first_run
from ssh_ogm.tui.keys import TerminalKeySource, decode_keys
from ssh_ogm.tui.state import DashboardState, Outcome, View

__all__ = [
    "DashboardApp",
    "DashboardController",
    "DashboardResult",
    "DashboardState",
    "FirstRunPrompt",
    "Outcome",
    "TerminalKeySource",
    "View",
    "decode_keys",
    "run_first_run",
]
