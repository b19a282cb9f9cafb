"""CLI commands for projget."""

from __future__ import annotations

from projget.cli.commands.get import get

__all__ = ["get"]
