from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass

__all__ = ["DependencyStatus", "check_dependencies"]

#: Where to send users who lack a required tool.
INSTALL_URLS = {
    "git": "https://git-scm.com/downloads",
}


@dataclass(frozen=True, slots=True)
class DependencyStatus:
    """Status of a required CLI dependency.

    Attributes:
        name: Dependency name (e.g., "git").
        available: Whether the dependency is installed and accessible.
        version: Version string if available.
        path: Path to executable if found.
        error: Error message if not available.
        install_url: URL for installation instructions.
    """

    name: str
    available: bool
    version: str | None = None
    path: str | None = None
    error: str | None = None
    install_url: str | None = None


def check_dependencies(required: list[str] | None = None) -> list[DependencyStatus]:
    """Check for required CLI tools and return their status.

    For each tool found on PATH, ``<tool> --version`` is run to record its
    version. A failing version check does not make the tool unavailable.

    Args:
        required: List of tool names to check. Defaults to ["git"].

    Returns:
        List of DependencyStatus objects, one per required tool.

    Example:
        >>> statuses = check_dependencies(["git"])
        >>> [s.name for s in statuses if not s.available]
        []
    """
    if required is None:
        required = ["git"]

    statuses: list[DependencyStatus] = []

    for tool_name in required:
        tool_path = shutil.which(tool_name)

        if tool_path is None:
            statuses.append(
                DependencyStatus(
                    name=tool_name,
                    available=False,
                    error=f"{tool_name} is not installed or not in PATH",
                    install_url=INSTALL_URLS.get(tool_name),
                )
            )
            continue

        version: str | None = None
        error: str | None = None

        try:
            result = subprocess.run(
                [tool_name, "--version"],
                capture_output=True,
                text=True,
                timeout=5,
            )

            if result.returncode == 0:
                version = result.stdout.strip().split("\n")[0]
            else:
                error = f"Failed to get version: {result.stderr.strip()}"

        except subprocess.TimeoutExpired:
            error = "Version check timed out"
        except OSError as e:
            error = f"Error checking version: {e!s}"

        statuses.append(
            DependencyStatus(
                name=tool_name,
                available=True,
                version=version,
                path=tool_path,
                error=error,
                install_url=INSTALL_URLS.get(tool_name),
            )
        )

    return statuses
