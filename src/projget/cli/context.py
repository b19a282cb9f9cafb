"""CLI context and exit codes for projget."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from projget.config import ProjgetConfig

__all__ = [
    "CLIContext",
    "ExitCode",
]


class ExitCode(IntEnum):
    """Standard exit codes for the projget CLI.

    - 0 for success
    - 1 for failure
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded projget configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
        no_interaction: Never prompt, even on a TTY.
    """

    config: ProjgetConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
    no_interaction: bool = False

    @property
    def interactive(self) -> bool:
        """Whether the user may be asked questions (considers TTY detection)."""
        if self.no_interaction:
            return False
        return sys.stdin.isatty() and sys.stdout.isatty()
