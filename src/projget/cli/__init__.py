"""CLI utilities for projget.

This module provides CLI-specific utilities including context management,
output formatting, prompts and dependency validation.
"""

from __future__ import annotations

from projget.cli.context import CLIContext, ExitCode
from projget.cli.validators import DependencyStatus, check_dependencies

__all__ = [
    "CLIContext",
    "DependencyStatus",
    "ExitCode",
    "check_dependencies",
]
