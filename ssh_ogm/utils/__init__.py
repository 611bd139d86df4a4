"""Utilities for SSH OGM."""

from ssh_ogm.utils.console import ColorfulFormatter

__all__ = ["ColorfulFormatter"]
